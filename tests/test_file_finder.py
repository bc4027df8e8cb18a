"""Tests for candidate file selection."""

import shutil

import pytest

from convex_codemod.file_finder import (
    find_other_files,
    find_react_files,
    find_server_files,
    git_grep,
    should_transform,
)

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


class TestShouldTransform:
    def given_file(self, tmp_path, name):
        self.functions_dir = tmp_path / "convex"
        self.path = tmp_path / name
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")

    def then_transformed(self, expected):
        assert should_transform(self.path, self.functions_dir) is expected

    @pytest.mark.parametrize(
        "name", ["src/App.tsx", "convex/messages.ts", "lib/util.mjs", "convex/a/b.js"]
    )
    def test_accepts_source_files(self, tmp_path, name):
        self.given_file(tmp_path, name)
        self.then_transformed(True)

    @pytest.mark.parametrize(
        "name",
        [
            "convex/_generated/api.js",
            "convex/schema.ts",
            "src/.hidden.ts",
            "README.md",
            "tsconfig.json",
            "babel.config.js",
            "src/env.d.ts",
            "node_modules/convex/index.js",
        ],
    )
    def test_rejects_other_files(self, tmp_path, name):
        self.given_file(tmp_path, name)
        self.then_transformed(False)

    def test_rejects_missing_files(self, tmp_path):
        assert should_transform(tmp_path / "gone.ts", tmp_path / "convex") is False


@requires_git
class TestGitGrep:
    def test_finds_files_by_kind(self, convex_project):
        functions_dir = convex_project / "convex"
        react_files = find_react_files(convex_project, functions_dir)
        server_files = find_server_files(convex_project, functions_dir)

        assert react_files == [convex_project / "src" / "App.tsx"]
        assert server_files == [convex_project / "convex" / "messages.ts"]

    def test_finds_other_files(self, convex_project):
        """Other files mention a function prefix in a string."""
        functions_dir = convex_project / "convex"
        files = find_other_files(
            convex_project,
            functions_dir,
            ["messages", "users/get"],
            exclude=[convex_project / "src" / "App.tsx", functions_dir / "messages.ts"],
        )
        assert files == [convex_project / "src" / "client.ts"]

    def test_no_matches_is_empty(self, convex_project):
        assert git_grep(convex_project, ["definitely-not-present"]) == []

    def test_no_patterns_is_empty(self, convex_project):
        assert git_grep(convex_project, []) == []
