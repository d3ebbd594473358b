from pathlib import Path

import pytest

from gitconductor.conflicts import (
    NO_OPERATION_MESSAGE,
    abort_operation,
    continue_operation,
    skip_operation,
)
from gitconductor.enums import ConflictOperationKind
from gitconductor.exceptions import (
    GitCommandError,
    NoOperationInProgressError,
    ValidationError,
)


def _with_ref(make_result, ref: str, extra: dict[tuple[str, ...], object]) -> dict:
    return {("rev-parse", "--verify", "-q", ref): make_result(), **extra}


class TestContinueOperation:
    def test_nothing_in_progress(self, scripted_runner, tmp_path: Path) -> None:
        with pytest.raises(NoOperationInProgressError, match=NO_OPERATION_MESSAGE):
            _ = continue_operation(scripted_runner({}), tmp_path)

    def test_cherry_pick_runs_continue_without_editor(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            _with_ref(
                make_result,
                "CHERRY_PICK_HEAD",
                {("cherry-pick", "--continue"): make_result()},
            )
        )

        state = continue_operation(runner, tmp_path)

        assert runner.called("cherry-pick", "--continue")
        index = runner.calls.index(("cherry-pick", "--continue"))
        assert runner.envs[index]["GIT_EDITOR"] == "true"
        assert state.operation is ConflictOperationKind.CHERRY_PICK

    def test_merge_falls_back_to_commit(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            _with_ref(
                make_result,
                "MERGE_HEAD",
                {
                    ("merge", "--continue"): make_result(
                        returncode=129, stderr="error: unknown option `continue'"
                    ),
                    ("commit", "--no-edit"): make_result(),
                },
            )
        )

        _ = continue_operation(runner, tmp_path)

        assert runner.called("commit", "--no-edit")

    def test_refusal_raises(self, scripted_runner, make_result, tmp_path: Path) -> None:
        runner = scripted_runner(
            _with_ref(
                make_result,
                "CHERRY_PICK_HEAD",
                {
                    ("cherry-pick", "--continue"): make_result(
                        returncode=1, stderr="error: unmerged files"
                    )
                },
            )
        )
        with pytest.raises(GitCommandError, match="unmerged files"):
            _ = continue_operation(runner, tmp_path)


class TestAbortOperation:
    def test_rebase_abort_runs_callback(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            _with_ref(make_result, "REBASE_HEAD", {("rebase", "--abort"): make_result()})
        )
        called: list[bool] = []

        _ = abort_operation(runner, tmp_path, on_rebase_abort=lambda: called.append(True))

        assert called == [True]

    def test_merge_abort_skips_callback(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            _with_ref(make_result, "MERGE_HEAD", {("merge", "--abort"): make_result()})
        )
        called: list[bool] = []

        _ = abort_operation(runner, tmp_path, on_rebase_abort=lambda: called.append(True))

        assert runner.called("merge", "--abort")
        assert called == []


class TestSkipOperation:
    def test_merge_cannot_be_skipped(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner(_with_ref(make_result, "MERGE_HEAD", {}))
        with pytest.raises(ValidationError) as exc_info:
            _ = skip_operation(runner, tmp_path)
        assert exc_info.value.field == "operation"

    def test_skips_rebase_step(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            _with_ref(make_result, "REBASE_HEAD", {("rebase", "--skip"): make_result()})
        )
        _ = skip_operation(runner, tmp_path)
        assert runner.called("rebase", "--skip")
