from pathlib import Path

import orjson
import pytest

from gitconductor.cli._commands._rebase._plan import load_plan
from gitconductor.enums import RebaseAction
from gitconductor.exceptions import ValidationError


class TestLoadPlan:
    def test_reads_list_of_entries(self, tmp_path: Path) -> None:
        plan = tmp_path / "plan.json"
        _ = plan.write_bytes(
            orjson.dumps(
                [
                    {"action": "reword", "hash": "abc1234", "subject": "Old", "new_message": "New"},
                    {"action": "pick", "hash": "def5678", "subject": "Keep"},
                ]
            )
        )

        entries = load_plan(plan)

        assert [entry.action for entry in entries] == [
            RebaseAction.REWORD,
            RebaseAction.PICK,
        ]
        assert entries[0].new_message == "New"
        assert entries[1].hash == "def5678"

    def test_reads_object_with_entries(self, tmp_path: Path) -> None:
        plan = tmp_path / "plan.json"
        _ = plan.write_bytes(
            orjson.dumps({"entries": [{"action": "drop", "hash": "abc1234"}]})
        )

        assert load_plan(plan)[0].action is RebaseAction.DROP

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="Cannot read plan file") as exc_info:
            _ = load_plan(tmp_path / "missing.json")
        assert exc_info.value.field == "plan"

    def test_invalid_json(self, tmp_path: Path) -> None:
        plan = tmp_path / "plan.json"
        _ = plan.write_text("{not json")

        with pytest.raises(ValidationError, match="not valid JSON"):
            _ = load_plan(plan)

    @pytest.mark.parametrize("payload", [b'"text"', b"[1, 2]", b'{"other": []}'])
    def test_rejects_wrong_shape(self, tmp_path: Path, payload: bytes) -> None:
        plan = tmp_path / "plan.json"
        _ = plan.write_bytes(payload)

        with pytest.raises(ValidationError, match="list of entry objects"):
            _ = load_plan(plan)

    def test_entry_without_hash(self, tmp_path: Path) -> None:
        plan = tmp_path / "plan.json"
        _ = plan.write_bytes(orjson.dumps([{"action": "pick"}]))

        with pytest.raises(ValidationError) as exc_info:
            _ = load_plan(plan)
        assert exc_info.value.field == "hash"
