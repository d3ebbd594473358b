from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from gitconductor.conductor import Conductor
from gitconductor.config import Config
from gitconductor.conflicts import ConflictState
from gitconductor.enums import ConflictOperationKind, RebaseSessionStatus
from gitconductor.exceptions import GitCommandError
from gitconductor.git import TrustRegistry
from gitconductor.locking import RepoLockRegistry
from gitconductor.rebase import RebaseSessionState

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


class TestConductor:
    def test_builds_runner_from_config(self) -> None:
        config = Config.from_dict({"git": {"executable": "git-x", "no_editor_command": ":"}})
        trust = TrustRegistry()

        with Conductor(config=config, trust=trust) as conductor:
            assert conductor.runner.build_argv("/r", [])[0] == "git-x"
            assert conductor.runner.no_editor_env()["EDITOR"] == ":"
            assert conductor.runner.trust is trust
            assert conductor.locks is RepoLockRegistry.get_instance()

    def test_mutations_hold_repository_lock(
        self,
        scripted_runner,
        make_result,
        worktree_responses,
        tmp_path: Path,
        mocker: "MockerFixture",
    ) -> None:
        locks = RepoLockRegistry()
        spy = mocker.spy(RepoLockRegistry, "with_repo_lock")
        runner = scripted_runner(
            {**worktree_responses, ("diff", "--name-only"): make_result()}
        )
        conductor = Conductor(config=Config.from_dict({}), runner=runner, locks=locks)

        _ = conductor.get_conflict_state(tmp_path)

        spy.assert_called_once()
        assert spy.call_args.args[1] == tmp_path

    def test_status_queries_are_not_locked(
        self, scripted_runner, tmp_path: Path, mocker: "MockerFixture"
    ) -> None:
        locks = RepoLockRegistry()
        spy = mocker.spy(RepoLockRegistry, "with_repo_lock")
        conductor = Conductor(
            config=Config.from_dict({}), runner=scripted_runner({}), locks=locks
        )

        info = conductor.get_interactive_rebase_status(tmp_path)

        assert not info.in_progress
        spy.assert_not_called()

    def test_trust_without_persist(self, scripted_runner, tmp_path: Path) -> None:
        runner = scripted_runner({})
        conductor = Conductor(config=Config.from_dict({}), runner=runner)

        conductor.trust_repository(f"{tmp_path}/", persist=False)

        assert conductor.is_trusted(tmp_path)
        assert not runner.called("config")

    def test_trust_persists_to_global_config(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner({("config", "--global", "--add"): make_result()})
        conductor = Conductor(config=Config.from_dict({}), runner=runner)

        conductor.trust_repository(tmp_path)

        assert runner.called(
            "config", "--global", "--add", "safe.directory", str(tmp_path)
        )

    def test_is_trusted_consults_global_list(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {("config", "--global", "--get-all"): make_result(stdout=f"{tmp_path}\n")}
        )
        conductor = Conductor(config=Config.from_dict({}), runner=runner)
        assert conductor.is_trusted(tmp_path)

    def test_background_fetch(
        self, scripted_runner, make_result, worktree_responses, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {**worktree_responses, ("fetch", "origin"): make_result(stdout="done\n")}
        )

        with Conductor(config=Config.from_dict({}), runner=runner) as conductor:
            future = conductor.fetch_in_background(tmp_path)
            assert future.result(timeout=10) == "done"


class TestSequenceRouting:
    @pytest.fixture
    def conductor(self, scripted_runner, worktree_responses) -> Conductor:
        config = Config.from_dict({"git": {"reword_map_filename": "custom-map.json"}})
        return Conductor(config=config, runner=scripted_runner(worktree_responses))

    def _in_operation(
        self, mocker: "MockerFixture", operation: ConflictOperationKind
    ) -> None:
        _ = mocker.patch(
            "gitconductor.conflicts.current_operation", return_value=operation
        )
        _ = mocker.patch(
            "gitconductor.conflicts.get_conflict_state",
            return_value=ConflictState(
                in_progress=False, operation=ConflictOperationKind.NONE
            ),
        )

    @pytest.mark.parametrize(
        ("method", "driver"),
        [
            ("continue_operation", "continue_interactive_rebase"),
            ("skip_operation", "skip_interactive_rebase"),
        ],
    )
    def test_rebase_goes_through_interactive_driver(
        self,
        conductor: Conductor,
        tmp_path: Path,
        mocker: "MockerFixture",
        method: str,
        driver: str,
    ) -> None:
        self._in_operation(mocker, ConflictOperationKind.REBASE)
        rebase_step = mocker.patch(
            f"gitconductor.rebase.{driver}",
            return_value=RebaseSessionState(
                status=RebaseSessionStatus.COMPLETED, message="done"
            ),
        )
        generic = mocker.patch(f"gitconductor.conflicts.{method}")

        state = getattr(conductor, method)(tmp_path)

        assert state.operation is ConflictOperationKind.NONE
        rebase_step.assert_called_once_with(
            conductor.runner, tmp_path, reword_map_filename="custom-map.json"
        )
        generic.assert_not_called()

    def test_rebase_error_raises(
        self, conductor: Conductor, tmp_path: Path, mocker: "MockerFixture"
    ) -> None:
        self._in_operation(mocker, ConflictOperationKind.REBASE)
        _ = mocker.patch(
            "gitconductor.rebase.skip_interactive_rebase",
            return_value=RebaseSessionState(
                status=RebaseSessionStatus.ERROR, message="could not skip"
            ),
        )

        with pytest.raises(GitCommandError) as exc_info:
            _ = conductor.skip_operation(tmp_path)

        assert str(exc_info.value) == "could not skip"
        assert exc_info.value.args_ == ("rebase", "--skip")

    def test_merge_uses_generic_sequence(
        self, conductor: Conductor, tmp_path: Path, mocker: "MockerFixture"
    ) -> None:
        self._in_operation(mocker, ConflictOperationKind.MERGE)
        expected = ConflictState(in_progress=False, operation=ConflictOperationKind.NONE)
        generic = mocker.patch(
            "gitconductor.conflicts.continue_operation", return_value=expected
        )
        rebase_step = mocker.patch("gitconductor.rebase.continue_interactive_rebase")

        assert conductor.continue_operation(tmp_path) is expected
        generic.assert_called_once_with(conductor.runner, tmp_path)
        rebase_step.assert_not_called()
