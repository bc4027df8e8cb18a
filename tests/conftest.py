import json
import shutil
import subprocess

import pytest

PROJECT_FILES = {
    "convex/messages.ts": (
        'import { mutation, query } from "./_generated/server";\n'
        "\n"
        "export const list = query(async (ctx) => []);\n"
        "export const send = mutation(async (ctx) => {\n"
        '  await ctx.scheduler.runAfter(0, "messages:list", {});\n'
        "});\n"
    ),
    "convex/users/get.ts": "export default 1;\n",
    "convex/_generated/api.d.ts": "export declare const api: any;\n",
    "convex/_generated/react.js": 'export const useQuery = "messages:list";\n',
    "convex/_generated/server.js": "export const query = 1;\n",
    "src/App.tsx": (
        'import { useQuery } from "../convex/_generated/react";\n'
        "\n"
        "export function App() {\n"
        '  const messages = useQuery("messages:list");\n'
        "  return <div>{messages.length}</div>;\n"
        "}\n"
    ),
    "src/client.ts": (
        "export async function load(client) {\n"
        '  return client.runQuery("users/get");\n'
        "}\n"
    ),
    "src/readme.md": 'Call "messages:list" from the client.\n',
}


@pytest.fixture
def convex_project(tmp_path):
    """A small Convex project checked into a fresh git repository."""
    project = tmp_path / "app"
    project.mkdir()
    (project / "package.json").write_text(
        json.dumps({"dependencies": {"convex": "^1.0.0"}})
    )
    for name, content in PROJECT_FILES.items():
        path = project / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    if shutil.which("git") is not None:
        subprocess.run(["git", "init", "-q"], cwd=project, check=True)
        subprocess.run(["git", "add", "-A"], cwd=project, check=True)
    return project
