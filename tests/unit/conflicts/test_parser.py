from gitconductor.conflicts import (
    NameStatusEntry,
    find_rename_target,
    parse_ls_files_unmerged,
    parse_name_status_z,
    parse_null_separated,
    parse_unmerged_names,
)

_BLOB = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"


class TestParseNullSeparated:
    def test_drops_blank_items(self) -> None:
        assert parse_null_separated("a\0\0 \0b\0") == ["a", "b"]


class TestParseUnmergedNames:
    def test_sorted_and_unique(self) -> None:
        assert parse_unmerged_names("z.txt\0a.txt\0z.txt\0") == ["a.txt", "z.txt"]

    def test_empty(self) -> None:
        assert parse_unmerged_names("") == []


class TestParseLsFilesUnmerged:
    def test_collects_stages_per_path(self) -> None:
        output = (
            f"100644 {_BLOB} 1\tboth.txt\0"
            f"100644 {_BLOB} 2\tboth.txt\0"
            f"100644 {_BLOB} 3\tboth.txt\0"
            f"100644 {_BLOB} 1\tgone.txt\0"
            f"100644 {_BLOB} 2\tgone.txt\0"
        )
        assert parse_ls_files_unmerged(output) == {
            "both.txt": frozenset({1, 2, 3}),
            "gone.txt": frozenset({1, 2}),
        }

    def test_paths_with_spaces_and_tabs(self) -> None:
        output = f"100644 {_BLOB} 3\tdir/a file\twith tab\0"
        assert parse_ls_files_unmerged(output) == {
            "dir/a file\twith tab": frozenset({3})
        }

    def test_ignores_malformed_and_stage_zero(self) -> None:
        output = f"garbage\0100644 {_BLOB} x\tbad\0100644 {_BLOB} 0\tclean\0"
        assert parse_ls_files_unmerged(output) == {}


class TestParseNameStatusZ:
    def test_plain_and_rename_records(self) -> None:
        output = "M\0a.txt\0R087\0old.txt\0new.txt\0D\0gone.txt\0"
        assert parse_name_status_z(output) == [
            NameStatusEntry("M", "a.txt"),
            NameStatusEntry("R087", "new.txt", "old.txt"),
            NameStatusEntry("D", "gone.txt"),
        ]

    def test_truncated_rename_is_dropped(self) -> None:
        assert parse_name_status_z("R100\0old.txt\0") == []

    def test_copy_records_are_not_renames(self) -> None:
        entries = parse_name_status_z("C075\0src.txt\0copy.txt\0")
        assert entries == [NameStatusEntry("C075", "copy.txt", "src.txt")]
        assert not entries[0].is_rename


class TestFindRenameTarget:
    def test_finds_destination(self) -> None:
        entries = [
            NameStatusEntry("M", "other.txt"),
            NameStatusEntry("R090", "docs/new.md", "old.md"),
        ]
        assert find_rename_target(entries, "old.md") == "docs/new.md"

    def test_ignores_copies(self) -> None:
        entries = [NameStatusEntry("C090", "copy.md", "old.md")]
        assert find_rename_target(entries, "old.md") is None
