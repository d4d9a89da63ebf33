"""Tests for declared path expansion."""

from __future__ import annotations

from pathlib import Path

from tests.utils import symlink_or_skip
from velocity_cli.upgrade.paths import expand_paths, is_directory_entry, walk_files


def _touch(root: Path, rel: str, content: str = "x") -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class TestWalkFiles:
    def test_missing_directory_yields_nothing(self, tmp_path: Path) -> None:
        assert walk_files(tmp_path / "nope", tmp_path) == []

    def test_recurses_without_depth_limit(self, tmp_path: Path) -> None:
        _touch(tmp_path, "a/b/c/d/e.txt")
        _touch(tmp_path, "a/top.txt")

        assert sorted(walk_files(tmp_path / "a", tmp_path)) == ["a/b/c/d/e.txt", "a/top.txt"]

    def test_skip_dirs_are_not_entered(self, tmp_path: Path) -> None:
        _touch(tmp_path, "src/app.ts")
        _touch(tmp_path, "src/node_modules/pkg/index.js")
        _touch(tmp_path, "src/.git/HEAD")

        files = walk_files(tmp_path / "src", tmp_path, {"node_modules", ".git"})

        assert files == ["src/app.ts"]

    def test_plain_file_yields_itself(self, tmp_path: Path) -> None:
        _touch(tmp_path, "tsconfig.json")

        assert walk_files(tmp_path / "tsconfig.json", tmp_path) == ["tsconfig.json"]

    def test_directory_symlinks_are_listed_not_followed(self, tmp_path: Path) -> None:
        _touch(tmp_path, "src/a.ts")
        symlink_or_skip(tmp_path / "src" / "self", tmp_path / "src")

        assert walk_files(tmp_path / "src", tmp_path) == ["src/a.ts", "src/self"]


class TestExpandPaths:
    def test_trailing_separator_marks_directory(self, tmp_path: Path) -> None:
        assert is_directory_entry("src/missing/", tmp_path)
        assert not is_directory_entry("src/missing", tmp_path)

    def test_existing_directory_without_separator(self, tmp_path: Path) -> None:
        _touch(tmp_path, "src/lib/a.ts")

        assert is_directory_entry("src/lib", tmp_path)

    def test_directory_notation_is_equivalent(self, tmp_path: Path) -> None:
        _touch(tmp_path, "src/lib/a.ts")
        _touch(tmp_path, "src/lib/nested/b.ts")

        with_slash = expand_paths(["src/lib/"], tmp_path)
        without_slash = expand_paths(["src/lib"], tmp_path)

        assert set(with_slash) == set(without_slash) == {"src/lib/a.ts", "src/lib/nested/b.ts"}

    def test_overlapping_entries_collapse(self, tmp_path: Path) -> None:
        _touch(tmp_path, "src/lib/a.ts")
        _touch(tmp_path, "src/lib/utils/b.ts")

        files = expand_paths(["src/lib/", "src/lib/utils/", "src/lib/a.ts"], tmp_path)

        assert sorted(files) == ["src/lib/a.ts", "src/lib/utils/b.ts"]
        assert len(files) == len(set(files))

    def test_literal_files_are_kept_even_if_missing(self, tmp_path: Path) -> None:
        assert expand_paths(["tsconfig.json", ".prettierrc"], tmp_path) == [
            "tsconfig.json",
            ".prettierrc",
        ]

    def test_missing_directory_entry_expands_to_nothing(self, tmp_path: Path) -> None:
        assert expand_paths(["src/gone/"], tmp_path) == []
