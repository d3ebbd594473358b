from pathlib import Path

import pytest

from gitconductor.exceptions import ValidationError
from gitconductor.utils import (
    ensure_rel_path_safe,
    get_default_log_file,
    join_repo_path,
    normalize_repo_path,
    repo_lock_key,
    require_text,
)


class TestNormalizeRepoPath:
    def test_strips_trailing_slashes(self) -> None:
        assert normalize_repo_path("/srv/repo///") == "/srv/repo"

    def test_converts_backslashes(self) -> None:
        assert normalize_repo_path("C:\\work\\repo\\") == "C:/work/repo"

    def test_trims_whitespace(self) -> None:
        assert normalize_repo_path("  /srv/repo  ") == "/srv/repo"

    def test_keeps_filesystem_root(self) -> None:
        assert normalize_repo_path("/") == "/"

    def test_accepts_path_objects(self) -> None:
        assert normalize_repo_path(Path("/srv/repo")) == "/srv/repo"


class TestRepoLockKey:
    def test_case_folds_on_case_insensitive_platforms(self) -> None:
        assert repo_lock_key("C:\\Work\\Repo", platform="win32") == "c:/work/repo"
        assert repo_lock_key("/Users/Dev/Repo", platform="darwin") == "/users/dev/repo"

    def test_preserves_case_on_linux(self) -> None:
        assert repo_lock_key("/srv/Repo/", platform="linux") == "/srv/Repo"


class TestEnsureRelPathSafe:
    @pytest.mark.parametrize(
        "path",
        ["src/app.py", "README.md", "a/b/c.txt", "dir with spaces/file"],
    )
    def test_accepts_relative_paths(self, path: str) -> None:
        assert ensure_rel_path_safe(path) == path

    def test_normalizes_backslashes(self) -> None:
        assert ensure_rel_path_safe("src\\app.py") == "src/app.py"

    @pytest.mark.parametrize(
        "path",
        [
            "",
            "   ",
            "/etc/passwd",
            "C:/Windows",
            "../outside",
            "src/../../outside",
            "./file",
            "a//b",
            "a\x00b",
        ],
    )
    def test_rejects_unsafe_paths(self, path: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _ = ensure_rel_path_safe(path)
        assert exc_info.value.field == "path"


class TestJoinRepoPath:
    def test_joins_components(self, tmp_path: Path) -> None:
        assert join_repo_path(tmp_path, "a/b.txt") == tmp_path / "a" / "b.txt"

    def test_rejects_traversal(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            _ = join_repo_path(tmp_path, "../b.txt")


class TestRequireText:
    def test_returns_stripped_value(self) -> None:
        assert require_text("  main ", "onto") == "main"

    @pytest.mark.parametrize("value", [None, "", "  \t"])
    def test_rejects_blank(self, value: str | None) -> None:
        with pytest.raises(ValidationError, match="onto is required") as exc_info:
            _ = require_text(value, "onto")
        assert exc_info.value.field == "onto"


class TestGetDefaultLogFile:
    def test_named_after_project(self) -> None:
        assert get_default_log_file().name == "gitconductor.log"
