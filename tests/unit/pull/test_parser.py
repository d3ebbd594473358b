import pytest

from gitconductor.pull import (
    parse_conflict_messages,
    parse_left_right_count,
    parse_merge_tree_conflicts,
)


class TestParseLeftRightCount:
    @pytest.mark.parametrize(
        ("output", "expected"),
        [
            ("3\t1\n", (3, 1)),
            ("0 0", (0, 0)),
            ("7", (7, 0)),
            ("x\ty", (0, 0)),
            ("-2\t4", (0, 4)),
            ("", (0, 0)),
        ],
    )
    def test_counts(self, output: str, expected: tuple[int, int]) -> None:
        assert parse_left_right_count(output) == expected


class TestParseConflictMessages:
    def test_kinds(self) -> None:
        text = (
            "Auto-merging a.txt\n"
            "CONFLICT (content): Merge conflict in a.txt\n"
            "CONFLICT (modify/delete): b.txt deleted in HEAD and modified in 1a2b3c.\n"
            "CONFLICT (rename/delete): c.txt renamed to d.txt in HEAD, but deleted in x.\n"
            "CONFLICT (content): Merge conflict in a.txt\n"
        )
        assert parse_conflict_messages(text) == ["a.txt", "b.txt", "c.txt"]

    def test_no_conflicts(self) -> None:
        assert parse_conflict_messages("Fast-forward\n a.txt | 1 +\n") == []


class TestParseMergeTreeConflicts:
    def test_stage_records_and_messages(self) -> None:
        output = (
            "4b825dc642cb6eb9a060e54bf8d69288fbee4904\n"
            "100644 e69de29bb2d1d6434b8b29ae775ad8c2e48c5391 1\tz.txt\n"
            "100644 e69de29bb2d1d6434b8b29ae775ad8c2e48c5391 2\tz.txt\n"
            "100644 e69de29bb2d1d6434b8b29ae775ad8c2e48c5391 3\tdir/a b.txt\n"
            "\n"
            "Auto-merging z.txt\n"
            "CONFLICT (content): Merge conflict in z.txt\n"
            "CONFLICT (modify/delete): gone.txt deleted in HEAD and modified in x.\n"
        )
        assert parse_merge_tree_conflicts(output) == ["dir/a b.txt", "gone.txt", "z.txt"]

    def test_clean_merge(self) -> None:
        assert parse_merge_tree_conflicts("4b825dc642cb6eb9a060e54bf8d69288fbee4904\n") == []
