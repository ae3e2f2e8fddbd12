"""Tests for materialized path helpers."""

import pytest

from docspace.components.namespace import paths
from docspace.components.namespace.paths import PathContractError


class TestJoinAndSplit:
    """join / parent_of / name_of / depth_of."""

    def test_join_root(self):
        """A missing or empty parent yields the bare name."""
        assert paths.join(None, "A") == "A"
        assert paths.join("", "A") == "A"

    def test_join_nested(self):
        """Parent and name are joined with the separator."""
        assert paths.join("A/B", "C") == "A/B/C"

    def test_join_rejects_separator_in_name(self):
        """A name containing the separator is a contract violation."""
        with pytest.raises(PathContractError):
            paths.join("A", "B/C")

    def test_parent_of(self):
        """Parent is every segment but the last."""
        assert paths.parent_of("A/B/C") == "A/B"
        assert paths.parent_of("A") is None

    def test_name_and_depth(self):
        """Last segment and segment count."""
        assert paths.name_of("A/B/C") == "C"
        assert paths.depth_of("A/B/C") == 3
        assert paths.depth_of("A") == 1

    def test_malformed_path(self):
        """Empty segments are rejected."""
        with pytest.raises(PathContractError):
            paths.segments("A//B")
        with pytest.raises(PathContractError):
            paths.depth_of("")


class TestDescendants:
    """is_descendant / rewrite_prefix."""

    def test_strict_descendant(self):
        """Only paths below ancestor + separator qualify."""
        assert paths.is_descendant("A/B", "A")
        assert paths.is_descendant("A/B/C", "A")
        assert not paths.is_descendant("A", "A")
        assert not paths.is_descendant("AB", "A")

    def test_inclusive(self):
        """inclusive accepts the ancestor itself."""
        assert paths.is_descendant("A", "A", inclusive=True)

    def test_rewrite_prefix(self):
        """The leading prefix is swapped, the tail kept."""
        assert paths.rewrite_prefix("A/B/C", "A", "X/Y") == "X/Y/B/C"
        assert paths.rewrite_prefix("A", "A", "A2") == "A2"

    def test_rewrite_prefix_outside(self):
        """A path outside old_prefix is a contract violation."""
        with pytest.raises(PathContractError):
            paths.rewrite_prefix("AB/C", "A", "Z")


class TestValidateSegment:
    """Segment name rules."""

    def test_strips_whitespace(self):
        """Names are stripped before use."""
        assert paths.validate_segment("  Reports ") == "Reports"

    @pytest.mark.parametrize("name", ["", "   ", None, "a/b", ".", ".."])
    def test_rejects_invalid(self, name):
        """Empty, separator-bearing and reserved names are rejected."""
        with pytest.raises(PathContractError):
            paths.validate_segment(name)

    def test_max_length(self):
        """Names longer than max_length are rejected."""
        assert paths.validate_segment("x" * 10, max_length=10) == "x" * 10
        with pytest.raises(PathContractError):
            paths.validate_segment("x" * 11, max_length=10)
