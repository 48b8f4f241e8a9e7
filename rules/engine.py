"""
Response Engine - Keyword selection and reply synthesis
=======================================================

This module implements the core engine that turns a line of user text
into a reply:
- normalizes the input and checks it against the quit phrases
- pre-substitutes words and scans keywords in descending weight order
- decomposes the input with the first matching pattern
- reassembles a response template from the captured groups
- falls back to the 'xnone' keyword when nothing matches
"""

import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from core.exceptions import EmptyPhraseListError
from core.logging import get_logger
from .models import Decomposition, Keyword, RuleSet
from .pattern import match_pattern
from .templates import reassemble, rewrite

logger = get_logger("rules.engine")


# Picks one element from a non-empty sequence
Chooser = Callable[[Sequence[str]], str]


@dataclass(frozen=True)
class KeywordMatch:
    """
    Result of keyword selection.

    Attributes:
        keyword (Keyword): The keyword that matched
        decomposition (Decomposition): Its first matching decomposition
        groups (list): Captured groups, in pattern order
    """
    keyword: Keyword
    decomposition: Decomposition
    groups: List[str]


@dataclass(frozen=True)
class Response:
    """
    A reply produced by one turn.

    Attributes:
        message (str): Reply text
        is_farewell (bool): True when the input ended the conversation
        keyword (str): Keyword that produced the reply, None for farewells
    """
    message: str
    is_farewell: bool = False
    keyword: Optional[str] = None


def select_keyword(text: str, ruleset: RuleSet) -> Optional[KeywordMatch]:
    """
    Find the first keyword and decomposition that match the input.

    Keywords are tried in the order they are stored in the rule set; a
    keyword is skipped unless its word occurs somewhere in the input.
    The first decomposition that matches wins.

    Args:
        text: Pre-substituted input
        ruleset: Rule set with keywords already in priority order

    Returns:
        KeywordMatch if found, None otherwise
    """
    for keyword in ruleset.keywords:
        if keyword.word not in text:
            continue

        for decomposition in keyword.decompositions:
            groups = match_pattern(decomposition.pattern, text, ruleset.synonyms)
            if groups is not None:
                return KeywordMatch(keyword=keyword, decomposition=decomposition, groups=groups)

    return None


class Engine:
    """
    ELIZA-style interaction engine.

    Built once from a validated rule set, whose keywords are sorted by
    descending weight at construction. The engine holds no mutable state,
    so one instance can serve any number of conversations and threads.

    Example:
        engine = Engine(RuleSet.from_dict(document))

        print(engine.greeting())
        response = engine.interact("I am feeling sad")
        print(response.message)
    """

    def __init__(self, ruleset: RuleSet, chooser: Optional[Chooser] = None):
        """
        Initialize the engine.

        Args:
            ruleset: Rule set to answer from
            chooser: Picks one phrase or template among candidates
                (defaults to random.choice)

        Raises:
            RuleSetError: If the rule set fails validation
        """
        ruleset.validate()

        self._ruleset = ruleset.sorted_by_weight()
        self._choose = chooser or random.choice
        self._fallback = self._ruleset.fallback_keyword()

        logger.info(
            f"Engine ready with {len(self._ruleset.keywords)} keywords "
            f"and {len(self._ruleset.synonyms)} synonym classes"
        )

    @property
    def ruleset(self) -> RuleSet:
        """The rule set with keywords in priority order."""
        return self._ruleset

    def greeting(self) -> str:
        """
        Pick an opening line.

        Raises:
            EmptyPhraseListError: If the rule set has no initial phrases
        """
        return self._pick(self._ruleset.initial, "initial")

    def interact(self, text: str) -> Response:
        """
        Run one conversational turn.

        Args:
            text: Raw user input

        Returns:
            Response with the reply and the end-of-conversation flag

        Raises:
            RuleSetError: If the rule set cannot produce a correct reply
        """
        text = text.strip().lower()

        if text in self._ruleset.quit:
            logger.debug("Quit phrase received")
            return Response(message=self._pick(self._ruleset.final, "final"), is_farewell=True)

        text = rewrite(text, self._ruleset.pre)

        match = self.select(text)
        if match is None:
            logger.debug("No keyword matched, using fallback")
            return Response(message=self.fallback_response(), keyword=self._fallback.word)

        logger.debug(
            f"Keyword '{match.keyword.word}' matched pattern "
            f"'{match.decomposition.pattern}' with {len(match.groups)} group(s)"
        )
        template = self._choose(match.decomposition.reassembly_templates)
        message = reassemble(template, match.groups, self._ruleset.post)

        return Response(message=message, keyword=match.keyword.word)

    def select(self, text: str) -> Optional[KeywordMatch]:
        """Run keyword selection against this engine's ordered rule set."""
        return select_keyword(text, self._ruleset)

    def fallback_response(self) -> str:
        """Pick a template of the 'xnone' keyword's first decomposition."""
        return self._choose(self._fallback.decompositions[0].reassembly_templates)

    def _pick(self, phrases: Sequence[str], name: str) -> str:
        if not phrases:
            raise EmptyPhraseListError(f"The rule set has no '{name}' phrases")
        return self._choose(phrases)
