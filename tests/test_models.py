"""
Test Rule Set Model
===================

Unit tests for parsing, serializing and validating rule sets.
"""

import pytest
from pathlib import Path

# Add parent directory to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from rules.models import Decomposition, Keyword, RuleSet, FALLBACK_KEYWORD
from core.exceptions import InvalidRuleSetError, MissingFallbackError, UnknownSynonymError


DOCUMENT = {
    "initial": ["hello"],
    "final": ["bye now"],
    "quit": ["bye"],
    "pre": [{"in": "dont", "out": "don't"}],
    "post": [{"from": "i", "to": "you"}],
    "synon": [{"label": "@be", "list": ["am", "is"]}],
    "key": [
        {"word": "xnone", "weight": 0, "decomp": [{"pattern": "*", "reasmb": ["go on"]}]},
        {"word": "am", "weight": 2, "decomp": [
            {"pattern": "* i @be *", "reasmb": ["you (3)"]},
        ]},
    ],
}


class TestFromDict:
    """Tests for building a rule set from a document."""

    def test_fields(self):
        """Test every section is read."""
        ruleset = RuleSet.from_dict(DOCUMENT)

        assert ruleset.initial == ("hello",)
        assert ruleset.final == ("bye now",)
        assert ruleset.quit == frozenset(["bye"])
        assert dict(ruleset.pre) == {"dont": "don't"}
        assert dict(ruleset.post) == {"i": "you"}
        assert ruleset.synonyms["@be"] == frozenset(["am", "is"])
        assert [k.word for k in ruleset.keywords] == ["xnone", "am"]

    def test_declared_order_kept(self):
        """Parsing does not sort keywords."""
        ruleset = RuleSet.from_dict(DOCUMENT)

        assert ruleset.keywords[1].weight == 2
        assert ruleset.keywords[1].decompositions[0] == Decomposition("* i @be *", ["you (3)"])

    def test_first_replacement_wins(self):
        """Duplicate rewrite entries keep the first pair."""
        document = dict(DOCUMENT, pre=[{"in": "a", "out": "b"}, {"in": "a", "out": "c"}])

        assert RuleSet.from_dict(document).pre["a"] == "b"

    def test_optional_sections(self):
        """Only 'key' is required."""
        ruleset = RuleSet.from_dict({"key": []})

        assert ruleset.initial == ()
        assert ruleset.keywords == ()

    def test_default_weight(self):
        """Test weight defaults to zero."""
        keyword = Keyword.from_dict({"word": "hi", "decomp": []})

        assert keyword.weight == 0

    @pytest.mark.parametrize("document", [
        [],
        {},
        {"key": "nope"},
        {"key": [{"word": "hi"}]},
        {"key": [{"word": "hi", "weight": "high", "decomp": []}]},
        {"key": [{"word": "hi", "weight": True, "decomp": []}]},
        {"key": [{"word": "hi", "decomp": [{"pattern": "*"}]}]},
        {"key": [], "initial": [1, 2]},
        {"key": [], "pre": [{"in": "a"}]},
        {"key": [], "synon": [{"label": "@x"}]},
    ])
    def test_malformed(self, document):
        """Structural problems raise InvalidRuleSetError."""
        with pytest.raises(InvalidRuleSetError):
            RuleSet.from_dict(document)


class TestToDict:
    """Tests for serializing a rule set."""

    def test_round_trip(self):
        """A serialized rule set parses back to an equal rule set."""
        ruleset = RuleSet.from_dict(DOCUMENT)

        assert RuleSet.from_dict(ruleset.to_dict()) == ruleset

    def test_document_shape(self):
        """Test the serialized field names."""
        data = RuleSet.from_dict(DOCUMENT).to_dict()

        assert data["post"] == [{"in": "i", "out": "you"}]
        assert data["synon"] == [{"label": "@be", "list": ["am", "is"]}]
        assert data["key"][1] == {
            "word": "am", "weight": 2,
            "decomp": [{"pattern": "* i @be *", "reasmb": ["you (3)"]}],
        }


class TestImmutability:
    """Tests for the read-only rule set."""

    def test_frozen(self):
        """Test attributes cannot be reassigned."""
        ruleset = RuleSet.from_dict(DOCUMENT)

        with pytest.raises(AttributeError):
            ruleset.keywords = ()

    def test_tables_read_only(self):
        """Test rewrite tables cannot be mutated."""
        ruleset = RuleSet.from_dict(DOCUMENT)

        with pytest.raises(TypeError):
            ruleset.pre["x"] = "y"

    def test_sorted_copy(self):
        """Sorting returns a new rule set."""
        ruleset = RuleSet.from_dict(DOCUMENT)
        ordered = ruleset.sorted_by_weight()

        assert [k.word for k in ordered.keywords] == ["am", "xnone"]
        assert [k.word for k in ruleset.keywords] == ["xnone", "am"]


class TestValidate:
    """Tests for rule set validation."""

    def test_valid(self):
        """Test a valid rule set passes."""
        RuleSet.from_dict(DOCUMENT).validate()  # Should not raise

    def test_fallback_lookup(self):
        """Test the fallback keyword is found by name."""
        assert RuleSet.from_dict(DOCUMENT).fallback_keyword().word == FALLBACK_KEYWORD

    def test_missing_fallback(self):
        """Test a rule set without 'xnone'."""
        document = dict(DOCUMENT, key=DOCUMENT["key"][1:])

        with pytest.raises(MissingFallbackError):
            RuleSet.from_dict(document).validate()

    def test_unknown_synonym(self):
        """Test a pattern with an undefined class."""
        document = dict(DOCUMENT, synon=[])

        with pytest.raises(UnknownSynonymError) as exc_info:
            RuleSet.from_dict(document).validate()

        assert exc_info.value.label == "@be"

    def test_fallback_must_match_anything(self):
        """Test 'xnone' whose first pattern is not a lone wildcard."""
        ruleset = RuleSet(keywords=[
            Keyword("xnone", 0, [Decomposition("* hello *", ["x"]), Decomposition("*", ["y"])]),
        ])

        with pytest.raises(InvalidRuleSetError):
            ruleset.validate()

    def test_empty_templates(self):
        """Test a decomposition without templates."""
        ruleset = RuleSet(keywords=[Keyword("xnone", 0, [Decomposition("*", [])])])

        with pytest.raises(InvalidRuleSetError):
            ruleset.validate()

    def test_synonym_labels(self):
        """Test labels are listed in pattern order."""
        decomposition = Decomposition("* @a * @b *", ["x"])

        assert decomposition.synonym_labels() == ["@a", "@b"]
