from gitconductor.status import StatusEntry, parse_hash_object, parse_porcelain_z


class TestParsePorcelainZ:
    def test_plain_records(self) -> None:
        output = b" M src/app.py\0?? new file.txt\0D  gone.txt\0"
        assert parse_porcelain_z(output) == [
            StatusEntry(" M", "src/app.py"),
            StatusEntry("??", "new file.txt"),
            StatusEntry("D ", "gone.txt"),
        ]

    def test_rename_consumes_previous_path(self) -> None:
        output = "R  new.txt\0old.txt\0 M other.txt\0"
        assert parse_porcelain_z(output) == [
            StatusEntry("R ", "new.txt", "old.txt"),
            StatusEntry(" M", "other.txt"),
        ]

    def test_copy_record(self) -> None:
        assert parse_porcelain_z("C  copy.txt\0src.txt\0") == [
            StatusEntry("C ", "copy.txt", "src.txt")
        ]

    def test_skips_short_records(self) -> None:
        assert parse_porcelain_z("M\0\0 M a\0") == [StatusEntry(" M", "a")]

    def test_non_ascii_paths(self) -> None:
        output = "?? café/naïve.txt\0".encode()
        assert parse_porcelain_z(output)[0].path == "café/naïve.txt"

    def test_truncated_rename(self) -> None:
        assert parse_porcelain_z("R  new.txt\0") == [StatusEntry("R ", "new.txt")]


class TestStatusEntry:
    def test_classification(self) -> None:
        assert StatusEntry("UU", "a").is_unmerged
        assert StatusEntry("AA", "a").is_unmerged
        assert StatusEntry("DD", "a").is_unmerged
        assert not StatusEntry("D ", "a").is_unmerged
        assert StatusEntry(" D", "a").is_deletion
        assert StatusEntry("??", "a").is_addition
        assert StatusEntry("A ", "a").is_addition
        assert StatusEntry("AM", "a").is_addition
        assert not StatusEntry("AD", "a").is_addition
        assert StatusEntry("AD", "a").worktree_code == "D"
        assert StatusEntry("RM", "a").is_rename_or_copy


class TestParseHashObject:
    def test_pairs_lines(self) -> None:
        assert parse_hash_object(["a", "b"], "111\n222\n") == {"a": "111", "b": "222"}

    def test_mismatch_is_empty(self) -> None:
        assert parse_hash_object(["a", "b"], "111\n") == {}
