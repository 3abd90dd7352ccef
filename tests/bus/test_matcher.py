"""Tests for prefix matching."""

from prefixbus.bus.matcher import NO_MATCH, match


class TestMatch:
    """Test match()."""

    def test_full_prefix_returns_pattern_length(self):
        """A matching pattern reports how many elements it consumed."""
        assert match(["msg"], ["msg"]) == 1
        assert match(["msg", "arg"], ["msg", "arg", 1, 2]) == 2

    def test_empty_pattern_matches_everything(self):
        """The catch-all pattern matches with a count of zero."""
        assert match([], ["anything", 1]) == 0
        assert match((), ["x"]) == 0

    def test_mismatch_returns_no_match(self):
        """Any differing element rejects the message."""
        assert match(["msg"], ["other"]) is NO_MATCH
        assert match(["msg", "arg"], ["msg", 1]) is NO_MATCH

    def test_no_partial_credit(self):
        """A common prefix is not enough when the pattern goes on."""
        assert match(["msg", "arg", "more"], ["msg", "arg", "less"]) is NO_MATCH

    def test_shorter_message_never_matches(self):
        """The message must be at least as long as the pattern."""
        assert match(["msg", "arg"], ["msg"]) is NO_MATCH
        assert match(["msg", None], ["msg"]) is NO_MATCH

    def test_identity_and_value_equality(self):
        """Elements match by identity or by ==."""
        token = object()
        assert match([token], [token, 1]) == 1
        assert match([object()], [token]) is NO_MATCH
        assert match([1, "a"], [1.0, "a"]) == 2
