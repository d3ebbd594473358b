"""Integration tests for patch export, prediction and application."""

import pytest

from gitconductor.conductor import Conductor
from gitconductor.enums import ConflictOperationKind, PatchApplyStatus, PatchMethod
from gitconductor.exceptions import ValidationError


@pytest.fixture
def exported(repo, conductor: Conductor, tmp_path):
    """A commit exported as a mailbox patch, then removed from the branch."""
    _ = repo.commit("Initial commit", **{"a.txt": "one\ntwo\nthree\n"})
    commit = repo.commit("Change line two", **{"a.txt": "one\npatched\nthree\n"})
    patch = conductor.format_patch_to_file(
        repo.path, commit, tmp_path / "out" / "change.patch"
    )
    repo.git("reset", "-q", "--hard", "HEAD~1")
    return repo, patch


class TestFormatPatch:
    def test_writes_mailbox(self, exported) -> None:
        _, patch = exported

        text = patch.read_text()
        assert text.startswith("From ")
        assert "Subject: [PATCH] Change line two" in text
        assert "+patched" in text


class TestPredictPatch:
    def test_clean_mailbox(self, exported, conductor: Conductor) -> None:
        repo, patch = exported

        prediction = conductor.predict_patch(repo.path, patch, PatchMethod.MAILBOX)

        assert prediction.ok
        assert prediction.files == ("a.txt",)
        assert prediction.subject == "Change line two"
        assert repo.git("status", "--porcelain") == ""

    def test_conflicting_plain_apply(self, exported, conductor: Conductor) -> None:
        repo, patch = exported
        _ = repo.commit("Diverge", **{"a.txt": "one\nlocal\nthree\n"})

        prediction = conductor.predict_patch(repo.path, patch, "apply")

        assert not prediction.ok
        assert prediction.conflict_files == ("a.txt",)

    def test_unknown_method(self, exported, conductor: Conductor) -> None:
        repo, patch = exported

        with pytest.raises(ValidationError):
            _ = conductor.predict_patch(repo.path, patch, "bogus")


class TestApplyPatch:
    def test_plain_apply_changes_working_tree(
        self, exported, conductor: Conductor
    ) -> None:
        repo, patch = exported
        head = repo.head()

        result = conductor.apply_patch(repo.path, patch, PatchMethod.APPLY)

        assert result.status is PatchApplyStatus.APPLIED
        assert repo.head() == head
        assert (repo.path / "a.txt").read_text() == "one\npatched\nthree\n"

    def test_mailbox_apply_creates_commit(self, exported, conductor: Conductor) -> None:
        repo, patch = exported

        result = conductor.apply_patch(repo.path, patch, PatchMethod.MAILBOX)

        assert result.status is PatchApplyStatus.APPLIED
        assert repo.subject() == "Change line two"

    def test_mailbox_conflicts_can_be_aborted(
        self, exported, conductor: Conductor
    ) -> None:
        repo, patch = exported
        head = repo.commit("Diverge", **{"a.txt": "one\nlocal\nthree\n"})

        result = conductor.apply_patch(repo.path, patch, PatchMethod.MAILBOX)

        assert result.status is PatchApplyStatus.CONFLICTS
        assert result.conflict_files == ("a.txt",)
        state = conductor.get_conflict_state(repo.path)
        assert state.operation is ConflictOperationKind.MAILBOX_APPLY

        state = conductor.abort_operation(repo.path)
        assert not state.in_progress
        assert repo.head() == head

    def test_missing_patch_file(self, repo, conductor: Conductor, tmp_path) -> None:
        _ = repo.commit("Initial commit", **{"a.txt": "one\n"})

        with pytest.raises(ValidationError):
            _ = conductor.apply_patch(repo.path, tmp_path / "missing.patch")
