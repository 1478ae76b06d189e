from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from scan.files import _build_ignore_matcher, find_source_files

if TYPE_CHECKING:
    from pathlib import Path


def _relative(repo_root: Path, **kwargs: object) -> list[str]:
    return [
        path.relative_to(repo_root).as_posix()
        for path in find_source_files(repo_root, **kwargs)  # type: ignore[arg-type]
    ]


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_source_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "pkg").mkdir()
    (repo_root / "pkg" / "module.go").write_text("package pkg\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "leak.go").write_text("package leak\n", encoding="utf-8")

    symlink_dir = repo_root / "linked"
    symlink_dir.symlink_to(external_root, target_is_directory=True)

    results = _relative(repo_root)

    assert "pkg/module.go" in results
    assert "linked/leak.go" not in results


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_nested_gitignore_skips_symlinked_gitignore(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "pkg").mkdir()
    (repo_root / "pkg" / "module.py").write_text("print('ok')\n", encoding="utf-8")
    (repo_root / ".gitignore").write_text("*.bin\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "outside.gitignore").write_text(
        "pkg/module.py\n", encoding="utf-8"
    )

    symlink_gitignore = repo_root / "linked.gitignore"
    symlink_gitignore.symlink_to(external_root / "outside.gitignore")

    matcher = _build_ignore_matcher(repo_root, nested_gitignore=True)
    assert matcher is not None
    assert matcher(str(repo_root / "pkg" / "module.py")) is False


def test_find_source_files_is_sorted_and_skips_vendored_dirs(tmp_path: Path) -> None:
    for rel_path in (
        "web/z.ts",
        "web/a.ts",
        "lib/lib.go",
        "node_modules/dep/index.js",
        "vendor/mod/mod.go",
        ".git/config",
        "pkg/__pycache__/mod.cpython-312.pyc",
    ):
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x\n", encoding="utf-8")

    assert _relative(tmp_path) == ["lib/lib.go", "web/a.ts", "web/z.ts"]


def test_gitignore_and_project_ignore_file_compose(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("*.log\n", encoding="utf-8")
    (tmp_path / ".refmapignore").write_text("generated/\n", encoding="utf-8")
    for rel_path in ("main.go", "debug.log", "generated/api.go"):
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x\n", encoding="utf-8")

    results = _relative(
        tmp_path, ignore_file=".refmapignore", extensions=[".go", ".log"]
    )

    assert results == ["main.go"]


def test_include_exclude_and_extension_filters(tmp_path: Path) -> None:
    for rel_path in ("src/a.py", "src/b.go", "src/gen/c.py", "docs/readme.md"):
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x\n", encoding="utf-8")

    assert _relative(
        tmp_path,
        include_patterns=["src/*"],
        exclude_patterns=["src/gen/*"],
    ) == ["src/a.py", "src/b.go"]
    assert _relative(tmp_path, extensions=[".py"]) == ["src/a.py", "src/gen/c.py"]
