"""
Test Response Engine
====================

Unit tests for keyword selection and the interaction engine.
"""

import pytest
from pathlib import Path

# Add parent directory to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from rules.engine import Engine, Response, select_keyword
from rules.loader import default_rules_path, load_rules
from rules.models import Decomposition, Keyword, RuleSet
from core.exceptions import (
    EmptyPhraseListError, GroupReferenceError, InvalidRuleSetError,
    MissingFallbackError, UnknownSynonymError, RuleSetError
)


def first(options):
    """Deterministic chooser."""
    return options[0]


def xnone(*templates):
    return Keyword("xnone", 0, [Decomposition("*", list(templates) or ["please go on"])])


def make_ruleset(*keywords, **kwargs):
    kwargs.setdefault("initial", ["how do you do"])
    kwargs.setdefault("final", ["goodbye"])
    kwargs.setdefault("quit", ["quit"])
    return RuleSet(keywords=list(keywords), **kwargs)


class TestConstruction:
    """Tests for building an engine."""

    def test_missing_fallback(self):
        """Construction fails without an 'xnone' keyword."""
        ruleset = make_ruleset(Keyword("hello", 1, [Decomposition("*", ["hi"])]))

        with pytest.raises(MissingFallbackError):
            Engine(ruleset)

    def test_missing_fallback_is_ruleset_error(self):
        """Configuration defects share a common base class."""
        with pytest.raises(RuleSetError):
            Engine(make_ruleset())

    def test_sorted_by_weight(self):
        """Keywords are ordered by descending weight."""
        ruleset = make_ruleset(
            xnone(),
            Keyword("low", 1, [Decomposition("*", ["a"])]),
            Keyword("high", 9, [Decomposition("*", ["b"])]),
            Keyword("mid", 5, [Decomposition("*", ["c"])]),
        )

        engine = Engine(ruleset, chooser=first)

        assert [k.word for k in engine.ruleset.keywords] == ["high", "mid", "low", "xnone"]

    def test_sort_is_stable(self):
        """Equal weights keep their declared order."""
        ruleset = make_ruleset(
            Keyword("first", 2, [Decomposition("*", ["a"])]),
            xnone(),
            Keyword("second", 2, [Decomposition("*", ["b"])]),
        )

        engine = Engine(ruleset, chooser=first)

        assert [k.word for k in engine.ruleset.keywords] == ["first", "second", "xnone"]

    def test_source_ruleset_untouched(self):
        """Sorting produces a new rule set."""
        ruleset = make_ruleset(xnone(), Keyword("high", 9, [Decomposition("*", ["b"])]))

        Engine(ruleset, chooser=first)

        assert [k.word for k in ruleset.keywords] == ["xnone", "high"]

    def test_unknown_synonym_rejected(self):
        """Undefined synonym classes are caught at construction."""
        ruleset = make_ruleset(
            xnone(),
            Keyword("feel", 1, [Decomposition("* @mood *", ["(2)"])]),
        )

        with pytest.raises(UnknownSynonymError):
            Engine(ruleset)

    def test_keyword_without_decompositions(self):
        """Test a keyword with nothing to match."""
        ruleset = make_ruleset(xnone(), Keyword("empty", 1, []))

        with pytest.raises(InvalidRuleSetError):
            Engine(ruleset)

    def test_negative_weight(self):
        """Test weights must not be negative."""
        ruleset = make_ruleset(xnone(), Keyword("neg", -1, [Decomposition("*", ["x"])]))

        with pytest.raises(InvalidRuleSetError):
            Engine(ruleset)


class TestKeywordSelection:
    """Tests for weighted keyword selection."""

    def test_higher_weight_wins(self):
        """The heavier keyword is chosen when both occur."""
        ruleset = make_ruleset(
            Keyword("test", 1, [Decomposition("* test", ["testing"])]),
            Keyword("hello", 2, [Decomposition("* hello", ["hello (1)"])]),
            xnone(),
        )
        engine = Engine(ruleset, chooser=first)

        match = engine.select("test hello")

        assert match.keyword.word == "hello"
        assert match.groups == ["test"]

    def test_substring_trigger(self):
        """A keyword is tried when its word occurs anywhere in the input."""
        ruleset = make_ruleset(Keyword("dream", 1, [Decomposition("* dreamed *", ["x"])]))

        match = select_keyword("i dreamed of you", ruleset)

        assert match.keyword.word == "dream"
        assert match.groups == ["i", "of you"]

    def test_first_matching_decomposition(self):
        """Decompositions are tried in declared order."""
        ruleset = make_ruleset(Keyword("am", 1, [
            Decomposition("* i am sad *", ["sad"]),
            Decomposition("* i am *", ["generic"]),
        ]))

        match = select_keyword("so i am tired", ruleset)

        assert match.decomposition.pattern == "* i am *"

    def test_falls_through_to_next_keyword(self):
        """A keyword whose patterns all fail does not stop the search."""
        ruleset = make_ruleset(
            Keyword("you", 5, [Decomposition("you are *", ["x"])]),
            Keyword("like", 1, [Decomposition("* like *", ["(2)"])]),
        )

        match = select_keyword("do you like cats", ruleset)

        assert match.keyword.word == "like"

    def test_no_match(self):
        """Test no keyword occurs in the input."""
        ruleset = make_ruleset(Keyword("hello", 1, [Decomposition("*", ["x"])]))

        assert select_keyword("goodbye", ruleset) is None


class TestInteract:
    """Tests for full conversational turns."""

    def test_reply_from_keyword(self):
        """Test captured groups are reassembled and post-rewritten."""
        ruleset = make_ruleset(
            xnone(),
            Keyword("am", 0, [Decomposition("* i am *", ["why are you (2) ?"])]),
            post={"my": "your"},
        )
        engine = Engine(ruleset, chooser=first)

        response = engine.interact("I am sad about my job")

        assert response == Response(
            message="why are you sad about your job ?", is_farewell=False, keyword="am"
        )

    def test_pre_rewrite_before_matching(self):
        """Pre substitutions apply before keyword selection."""
        ruleset = make_ruleset(
            xnone(),
            Keyword("am", 0, [Decomposition("* i am *", ["you are (2)"])]),
            pre={"i'm": "i am"},
        )
        engine = Engine(ruleset, chooser=first)

        assert engine.interact("i'm tired").message == "you are tired"

    def test_fallback(self):
        """Unmatched input uses xnone's first decomposition."""
        engine = Engine(make_ruleset(xnone("tell me more")), chooser=first)

        response = engine.interact("blah blah")

        assert response.message == "tell me more"
        assert response.keyword == "xnone"
        assert response.is_farewell is False

    def test_quit_exact_match(self):
        """Quit words end the conversation only as the whole input."""
        engine = Engine(make_ruleset(xnone()), chooser=first)

        farewell = engine.interact("quit")
        assert farewell.is_farewell is True
        assert farewell.message == "goodbye"
        assert farewell.keyword is None

        assert engine.interact("hello quit").is_farewell is False

    @pytest.mark.parametrize("text", ["", "   ", "\t"])
    def test_blank_input_uses_fallback(self, text):
        """Input without words gets the fallback reply."""
        engine = Engine(make_ruleset(xnone("go on")), chooser=first)

        response = engine.interact(text)

        assert response.message == "go on"
        assert response.keyword == "xnone"
        assert response.is_farewell is False

    def test_quit_normalized(self):
        """Input is trimmed and lowercased before the quit check."""
        engine = Engine(make_ruleset(xnone()), chooser=first)

        assert engine.interact("  QUIT  ").is_farewell is True

    def test_chooser_receives_all_templates(self):
        """Test the injected chooser picks among every template."""
        seen = []

        def last(options):
            seen.append(tuple(options))
            return options[-1]

        engine = Engine(make_ruleset(xnone("one", "two", "three")), chooser=last)

        assert engine.interact("nothing").message == "three"
        assert seen == [("one", "two", "three")]

    def test_bad_group_reference_raises(self):
        """A template referencing a missing group is a rule set error."""
        ruleset = make_ruleset(
            xnone(),
            Keyword("am", 0, [Decomposition("* i am *", ["(3)"])]),
        )
        engine = Engine(ruleset, chooser=first)

        with pytest.raises(GroupReferenceError):
            engine.interact("i am here")


class TestPhrases:
    """Tests for greetings and farewells."""

    def test_greeting(self):
        """Test greetings come from the initial list."""
        engine = Engine(make_ruleset(xnone(), initial=["hello there", "hi"]), chooser=first)

        assert engine.greeting() == "hello there"

    def test_empty_initial(self):
        """Test an empty initial list fails when a greeting is asked for."""
        engine = Engine(make_ruleset(xnone(), initial=[]), chooser=first)

        with pytest.raises(EmptyPhraseListError):
            engine.greeting()

    def test_empty_final(self):
        """Test an empty final list fails on quit."""
        engine = Engine(make_ruleset(xnone(), final=[]), chooser=first)

        with pytest.raises(EmptyPhraseListError):
            engine.interact("quit")


class TestDoctorScript:
    """Tests against the bundled DOCTOR rule set."""

    @pytest.fixture
    def engine(self):
        return Engine(load_rules(default_rules_path()), chooser=first)

    def test_valid(self, engine):
        """The bundled script builds an engine."""
        assert engine.ruleset.fallback_keyword() is not None

    def test_computer_outranks_others(self, engine):
        """Test the heaviest keyword wins."""
        assert engine.interact("i think my computer hates me").keyword == "computer"

    def test_goodbye(self, engine):
        """Test a quit phrase from the script."""
        assert engine.interact("goodbye").is_farewell is True

    @pytest.mark.parametrize("text", [
        "hello",
        "i am sad",
        "i remember my mother",
        "you are not very helpful",
        "why don't you help me",
        "my family is strange",
        "everyone hates me",
        "i want a holiday",
        "perhaps",
        "xyzzy",
    ])
    def test_every_reply_renders(self, engine, text):
        """Typical inputs produce a non-empty reply."""
        response = engine.interact(text)

        assert response.message
        assert response.is_farewell is False
