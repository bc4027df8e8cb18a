"""Tests for the function reference catalog."""

import pytest

from convex_codemod.catalog import build_catalog, is_entry_point, reference_prefix
from convex_codemod.errors import ProjectError


@pytest.fixture
def functions_dir(tmp_path):
    root = tmp_path / "convex"
    files = [
        "messages.ts",
        "crons.ts",
        "users/get.ts",
        "users/admin/ban.js",
        "_generated/api.d.ts",
        "_generated/server.js",
        "schema.ts",
        "README.md",
        "tsconfig.json",
        ".eslintrc.js",
        ".cache/stale.ts",
        "messages.test.ts",
        "types.d.ts",
        "prettier.config.js",
        "my file.ts",
    ]
    for name in files:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("export {};\n")
    return root


class TestBuildCatalog:
    def given_functions_dir(self, functions_dir):
        self.root = functions_dir

    def when_catalog_is_built(self):
        self.catalog = build_catalog(self.root)

    def then_prefixes_are(self, *expected):
        assert list(self.catalog) == list(expected)

    def test_lists_function_modules(self, functions_dir):
        """Every function file becomes an extension-free prefix."""
        self.given_functions_dir(functions_dir)
        self.when_catalog_is_built()
        self.then_prefixes_are("crons", "messages", "users/admin/ban", "users/get")

    def test_missing_directory_raises(self, tmp_path):
        self.given_functions_dir(tmp_path / "nope")
        with pytest.raises(ProjectError):
            self.when_catalog_is_built()


class TestIsEntryPoint:
    @pytest.mark.parametrize(
        "rel_path",
        ["messages.ts", "nested/dir/file.tsx", "http.js", "_generatedStuff.ts"],
    )
    def test_accepts_function_files(self, rel_path):
        assert is_entry_point(rel_path)

    @pytest.mark.parametrize(
        "rel_path",
        [
            "_generated/api.js",
            ".hidden.ts",
            "README.md",
            "_generated.ts",
            "schema.ts",
            "foo.test.ts",
            "tsconfig.json",
            "babel.config.js",
            "with space.ts",
            "types.d.ts",
            "types.d.mts",
        ],
    )
    def test_rejects_non_function_files(self, rel_path):
        assert not is_entry_point(rel_path)


def test_reference_prefix_strips_extension():
    assert reference_prefix("users/get.ts") == "users/get"
    assert reference_prefix("a.b.js") == "a.b"
