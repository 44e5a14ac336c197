import pytest

from quillmind.editing import classify_replacement, find_all_occurrences, minimize_diff


class TestMinimizeDiff:

    def test_trims_shared_prefix_and_suffix(self):
        diff = minimize_diff("the quick brown fox", "the slow brown fox")
        assert diff.minimized
        assert (diff.old_content, diff.new_content) == ("quick", "slow")
        assert diff.prefix == "the "
        assert diff.suffix == " brown fox"

    def test_pure_insertion_keeps_full_pair(self):
        # prefix "const x = 1" and suffix ";" leave nothing on the old side
        diff = minimize_diff("const x = 1;", "const x = 10;")
        assert not diff.minimized
        assert (diff.old_content, diff.new_content) == ("const x = 1;", "const x = 10;")

    def test_new_containing_old_keeps_full_pair(self):
        # trimmed pair would be "b" -> "[b]"
        diff = minimize_diff("a b c", "a [b] c")
        assert not diff.minimized
        assert (diff.old_content, diff.new_content) == ("a b c", "a [b] c")

    def test_asymmetric_whitespace_keeps_full_pair(self):
        # trimming would turn " 2" into "2" and lose the added space
        diff = minimize_diff("x = 1", "x =  2")
        assert not diff.minimized
        assert diff.new_content == "x =  2"

    def test_deletion_is_minimized(self):
        diff = minimize_diff("keep this, drop this", "keep this")
        assert diff.minimized
        assert diff.old_content == ", drop this"
        assert diff.new_content == ""

    @pytest.mark.parametrize(
        "old,new",
        [
            ("the quick brown fox", "the slow brown fox"),
            ("color: red;\nmargin: 0;", "color: blue;\nmargin: 0;"),
            ("def f(a, b):\n    return a+b\n", "def f(a, c):\n    return a+c\n"),
            ("   indented line   ", "   changed line   "),
            ("keep this, drop this", "keep this"),
            ("abc", "abc"),
            ("x", "y"),
        ],
    )
    def test_round_trip_when_minimized(self, old, new):
        diff = minimize_diff(old, new)
        if diff.minimized:
            assert diff.prefix + diff.old_content + diff.suffix == old
            assert diff.prefix + diff.new_content + diff.suffix == new


def test_find_all_occurrences_counts_overlaps():
    assert find_all_occurrences("foo foo foo", "foo") == [0, 4, 8]
    assert find_all_occurrences("aaaa", "aa") == [0, 1, 2]
    assert find_all_occurrences("abc", "") == []
    assert find_all_occurrences("abc", "z") == []


@pytest.mark.parametrize(
    "length,expected",
    [(1, "word"), (15, "word"), (16, "phrase"), (50, "phrase"), (51, "sentence"), (150, "sentence"), (151, "block")],
)
def test_classify_replacement_buckets(length, expected):
    assert classify_replacement("x" * length) == expected
