"""
Test Template Processing
========================

Unit tests for word rewriting and reassembly.
"""

import pytest
from pathlib import Path

# Add parent directory to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from rules.templates import rewrite, reassemble
from core.exceptions import GroupReferenceError


class TestRewrite:
    """Tests for word-for-word rewriting."""

    def test_replaces_listed_words(self):
        """Test a single replacement."""
        assert rewrite("testing 123 hello world", {"123": "321"}) == "testing 321 hello world"

    def test_whole_words_only(self):
        """Substrings of a word are not replaced."""
        assert rewrite("item it", {"i": "you"}) == "item it"

    def test_case_sensitive(self):
        """Test lookups are exact."""
        assert rewrite("I am", {"i": "you"}) == "I am"

    def test_single_pass(self):
        """Replacements are not themselves rewritten."""
        assert rewrite("i you", {"i": "you", "you": "me"}) == "you me"

    def test_empty_table(self):
        """Test an empty table leaves text unchanged."""
        assert rewrite("nothing to do", {}) == "nothing to do"


class TestReassemble:
    """Tests for template reassembly."""

    def test_single_group(self):
        """Test one group reference."""
        assert reassemble("test (1)", ["123"], {}) == "test 123"

    def test_groups_rewritten(self):
        """Inserted groups go through the post table."""
        assert reassemble("(1) test (3)", ["123", "", "i"], {"i": "you"}) == "123 test you"

    def test_literal_words_not_rewritten(self):
        """Template words are left alone."""
        assert reassemble("i think (1)", ["i"], {"i": "you"}) == "i think you"

    def test_reference_token_replaced_whole(self):
        """Characters after the digit in the token are dropped."""
        assert reassemble("why (1)?", ["not"], {}) == "why not"

    def test_no_references(self):
        """Test a template without references."""
        assert reassemble("please go on .", [], {}) == "please go on ."

    def test_out_of_range_raises(self):
        """Test a reference past the captured groups."""
        with pytest.raises(GroupReferenceError) as exc_info:
            reassemble("you said (2)", ["one"], {})

        assert exc_info.value.index == 2
        assert exc_info.value.available == 1

    def test_group_zero_raises(self):
        """Group numbers start at 1."""
        with pytest.raises(GroupReferenceError):
            reassemble("(0)", ["one"], {})

    def test_single_digit_only(self):
        """(10) addresses group 1."""
        assert reassemble("(10)", ["a"], {}) == "a"

    def test_non_ascii_digit_is_literal(self):
        """Only ASCII digits form group references."""
        assert reassemble("why (٣)", ["a", "b", "c"], {}) == "why (٣)"
