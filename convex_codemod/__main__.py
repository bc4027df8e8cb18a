from convex_codemod.cli import main

main()
