"""
Template Processing - Word rewriting and response reassembly
============================================================

This module turns captured groups into a reply:
- rewrite(): word-for-word substitution through a lookup table
- reassemble(): expands ``(N)`` group references in a template

Group references are a ``(`` followed by a single digit, so only
groups 1-9 can be addressed. The whole token is replaced by the group.
"""

import re
from typing import Mapping, Sequence

from core.exceptions import GroupReferenceError


GROUP_REFERENCE = re.compile(r"\(([0-9])")


def rewrite(text: str, table: Mapping[str, str]) -> str:
    """
    Replace each space-separated word found in the table.

    Args:
        text: Text to rewrite
        table: Exact, case-sensitive word replacements

    Returns:
        Rewritten text, rejoined with single spaces

    Example:
        >>> rewrite("testing 123 hello world", {"123": "321"})
        'testing 321 hello world'
    """
    return " ".join(table.get(word, word) for word in text.split(" "))


def reassemble(
    template: str,
    groups: Sequence[str],
    post: Mapping[str, str]
) -> str:
    """
    Expand a reassembly template.

    Args:
        template: Response skeleton, e.g. "why do you say (2) ?"
        groups: Captured groups from the matched pattern
        post: Rewrite table applied to each inserted group

    Returns:
        The response text

    Raises:
        GroupReferenceError: If the template references a missing group
    """
    parts = []

    for token in template.split(" "):
        reference = GROUP_REFERENCE.match(token)
        if reference is None:
            parts.append(token)
            continue

        index = int(reference.group(1))
        if not 1 <= index <= len(groups):
            raise GroupReferenceError(index, len(groups), {"template": template})

        parts.append(rewrite(groups[index - 1], post))

    return " ".join(parts)
