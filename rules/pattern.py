"""
Pattern Matcher - Wildcard and synonym decomposition
====================================================

This module matches a decomposition pattern against a line of input and
returns the captured groups.

Patterns are space-delimited tokens:
- ``*`` captures a (possibly empty) run of words
- ``@label`` matches any word of a synonym class and captures that word
- anything else is a literal word

Captures are slices of the original input, so multi-word groups keep
their original spacing.
"""

from typing import FrozenSet, List, Mapping, Optional, Tuple

from core.exceptions import UnknownSynonymError
from .models import SYNONYM_MARKER, WILDCARD


# (word, start offset, end offset) in the original input
Word = Tuple[str, int, int]


def split_words(text: str) -> List[Word]:
    """
    Split input on single spaces, keeping character offsets.

    Consecutive spaces yield empty words, exactly like ``str.split(" ")``.
    """
    words = []
    start = 0
    for word in text.split(" "):
        words.append((word, start, start + len(word)))
        start += len(word) + 1
    return words


def match_pattern(
    pattern: str,
    text: str,
    synonyms: Mapping[str, FrozenSet[str]]
) -> Optional[List[str]]:
    """
    Match a pattern against input and return the captured groups.

    A literal or synonym token right after a ``*`` scans forward for the
    first compatible word; otherwise it must match the very next word.
    Input words after the last pattern token are ignored.

    Args:
        pattern: Decomposition pattern
        text: Normalized input line
        synonyms: Synonym classes keyed by label (including the marker)

    Returns:
        Groups in pattern order, or None if the pattern does not match

    Raises:
        UnknownSynonymError: If the pattern references an undefined class

    Example:
        >>> match_pattern("* i am *", "somehow i am really happy", {})
        ['somehow', 'really happy']
    """
    if pattern == WILDCARD:
        return [text]

    words = split_words(text)
    groups: List[str] = []
    cursor = 0
    pending_wildcard = False

    for token in pattern.split(" "):
        if token == WILDCARD:
            pending_wildcard = True
            continue

        members = _synonym_members(token, synonyms)

        if pending_wildcard:
            position = _scan(words, cursor, token, members)
        elif cursor < len(words) and _is_compatible(words[cursor][0], token, members):
            position = cursor
        else:
            position = None

        if position is None:
            return None

        if pending_wildcard:
            groups.append(_span(text, words, cursor, position))

        if members is not None:
            groups.append(words[position][0])

        cursor = position + 1
        pending_wildcard = False

    if pending_wildcard:
        groups.append(text[words[cursor][1]:] if cursor < len(words) else "")

    return groups


def _synonym_members(
    token: str,
    synonyms: Mapping[str, FrozenSet[str]]
) -> Optional[FrozenSet[str]]:
    """Resolve a synonym token to its word set; None for literals."""
    if not token.startswith(SYNONYM_MARKER):
        return None
    try:
        return synonyms[token]
    except KeyError:
        raise UnknownSynonymError(token)


def _is_compatible(word: str, token: str, members: Optional[FrozenSet[str]]) -> bool:
    if word == token:
        return True
    return members is not None and word in members


def _scan(
    words: List[Word],
    start: int,
    token: str,
    members: Optional[FrozenSet[str]]
) -> Optional[int]:
    """Index of the first compatible word at or after ``start``."""
    for index in range(start, len(words)):
        if _is_compatible(words[index][0], token, members):
            return index
    return None


def _span(text: str, words: List[Word], start: int, stop: int) -> str:
    """Original text covering words[start:stop], empty for no words."""
    if start == stop:
        return ""
    return text[words[start][1]:words[stop - 1][2]]
