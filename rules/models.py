"""
Rule Set Model - Keywords, decompositions and substitution tables
=================================================================

This module defines the immutable data model the response engine
runs against:
- Decomposition: a pattern plus its reassembly templates
- Keyword: a trigger word with a weight and its decompositions
- RuleSet: keywords, synonym classes, rewrite tables and phrase lists

A RuleSet is built once (from a document or programmatically) and never
mutated afterwards; sorting keywords produces a new RuleSet.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from core.exceptions import InvalidRuleSetError, MissingFallbackError, UnknownSynonymError


FALLBACK_KEYWORD = "xnone"
WILDCARD = "*"
SYNONYM_MARKER = "@"


@dataclass(frozen=True)
class Decomposition:
    """
    A decomposition pattern and the templates used to answer it.

    Attributes:
        pattern (str): Space-delimited literals, ``*`` wildcards and
            ``@label`` synonym references
        reassembly_templates (tuple): Response skeletons with ``(N)``
            group references
    """
    pattern: str
    reassembly_templates: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "reassembly_templates", tuple(self.reassembly_templates))

    def synonym_labels(self) -> List[str]:
        """Synonym labels referenced by the pattern, in pattern order."""
        return [
            token for token in self.pattern.split(" ")
            if token.startswith(SYNONYM_MARKER)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {"pattern": self.pattern, "reasmb": list(self.reassembly_templates)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Decomposition":
        pattern = _require(data, "pattern", str, "decomposition")
        templates = _require(data, "reasmb", list, "decomposition")
        return cls(pattern=pattern, reassembly_templates=_strings(templates, "reasmb"))


@dataclass(frozen=True)
class Keyword:
    """
    A keyword trigger.

    The keyword is considered whenever ``word`` occurs anywhere in the
    (pre-substituted) input. Higher weights are tried first.

    Attributes:
        word (str): Literal substring trigger
        weight (int): Priority, higher is checked first
        decompositions (tuple): Decompositions tried in declared order
    """
    word: str
    weight: int = 0
    decompositions: Tuple[Decomposition, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "decompositions", tuple(self.decompositions))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "weight": self.weight,
            "decomp": [d.to_dict() for d in self.decompositions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Keyword":
        word = _require(data, "word", str, "keyword")
        weight = data.get("weight", 0)
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise InvalidRuleSetError(
                f"Keyword '{word}' has a non-integer weight",
                {"weight": weight}
            )
        decompositions = [
            Decomposition.from_dict(item)
            for item in _require(data, "decomp", list, f"keyword '{word}'")
        ]
        return cls(word=word, weight=weight, decompositions=decompositions)


@dataclass(frozen=True)
class RuleSet:
    """
    Complete, read-only rule set.

    Attributes:
        initial (tuple): Greeting phrases
        final (tuple): Farewell phrases
        quit (frozenset): Exact inputs that end the conversation
        pre (mapping): Word rewrites applied to input before matching
        post (mapping): Word rewrites applied to captured groups
        synonyms (mapping): Label (with its ``@``) to the words it stands for
        keywords (tuple): Keywords, in declared or weight order
    """
    initial: Tuple[str, ...] = ()
    final: Tuple[str, ...] = ()
    quit: FrozenSet[str] = frozenset()
    pre: Mapping[str, str] = field(default_factory=dict)
    post: Mapping[str, str] = field(default_factory=dict)
    synonyms: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    keywords: Tuple[Keyword, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "initial", tuple(self.initial))
        object.__setattr__(self, "final", tuple(self.final))
        object.__setattr__(self, "quit", frozenset(self.quit))
        object.__setattr__(self, "pre", MappingProxyType(dict(self.pre)))
        object.__setattr__(self, "post", MappingProxyType(dict(self.post)))
        object.__setattr__(self, "synonyms", MappingProxyType({
            label: frozenset(words) for label, words in self.synonyms.items()
        }))
        object.__setattr__(self, "keywords", tuple(self.keywords))

    def fallback_keyword(self) -> Optional[Keyword]:
        """Return the first keyword named 'xnone', if any."""
        for keyword in self.keywords:
            if keyword.word == FALLBACK_KEYWORD:
                return keyword
        return None

    def sorted_by_weight(self) -> "RuleSet":
        """
        Return a copy with keywords in descending weight order.

        The sort is stable, so keywords of equal weight keep their
        declared order.
        """
        ordered = sorted(self.keywords, key=lambda k: k.weight, reverse=True)
        return replace(self, keywords=ordered)

    def validate(self) -> None:
        """
        Check the rule set before an engine is built from it.

        Raises:
            InvalidRuleSetError: Structural problems in keywords, or an 'xnone'
                keyword whose first pattern is not '*'
            UnknownSynonymError: A pattern references an undefined class
            MissingFallbackError: No usable 'xnone' keyword
        """
        for keyword in self.keywords:
            if isinstance(keyword.weight, bool) or not isinstance(keyword.weight, int) \
                    or keyword.weight < 0:
                raise InvalidRuleSetError(
                    f"Keyword '{keyword.word}' must have a non-negative integer weight",
                    {"weight": keyword.weight}
                )
            if not keyword.decompositions:
                raise InvalidRuleSetError(f"Keyword '{keyword.word}' has no decompositions")

            for decomposition in keyword.decompositions:
                if not decomposition.reassembly_templates:
                    raise InvalidRuleSetError(
                        f"Decomposition '{decomposition.pattern}' of keyword "
                        f"'{keyword.word}' has no reassembly templates"
                    )
                for label in decomposition.synonym_labels():
                    if label not in self.synonyms:
                        raise UnknownSynonymError(
                            label,
                            {"keyword": keyword.word, "pattern": decomposition.pattern}
                        )

        fallback = self.fallback_keyword()
        if fallback is None:
            raise MissingFallbackError(
                f"The keyword '{FALLBACK_KEYWORD}' was not found"
            )

        # The fallback must match any input
        if fallback.decompositions[0].pattern != WILDCARD:
            raise InvalidRuleSetError(
                f"The first decomposition of '{FALLBACK_KEYWORD}' must use the pattern '{WILDCARD}'",
                {"pattern": fallback.decompositions[0].pattern}
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the serialized rule document."""
        return {
            "initial": list(self.initial),
            "final": list(self.final),
            "quit": sorted(self.quit),
            "pre": [{"in": k, "out": v} for k, v in self.pre.items()],
            "post": [{"in": k, "out": v} for k, v in self.post.items()],
            "synon": [
                {"label": label, "list": sorted(words)}
                for label, words in self.synonyms.items()
            ],
            "key": [k.to_dict() for k in self.keywords],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuleSet":
        """
        Create a rule set from a parsed rule document.

        Args:
            data: Document with initial/final/quit/pre/post/synon/key fields

        Returns:
            RuleSet in declared keyword order

        Raises:
            InvalidRuleSetError: If the document is malformed
        """
        if not isinstance(data, dict):
            raise InvalidRuleSetError("Rule document must be a mapping")

        synonyms = {}
        for item in data.get("synon") or []:
            label = _require(item, "label", str, "synonym")
            words = _require(item, "list", list, f"synonym '{label}'")
            synonyms[label] = _strings(words, label)

        return cls(
            initial=_strings(data.get("initial") or [], "initial"),
            final=_strings(data.get("final") or [], "final"),
            quit=_strings(data.get("quit") or [], "quit"),
            pre=_replacements(data.get("pre") or [], "pre"),
            post=_replacements(data.get("post") or [], "post"),
            synonyms=synonyms,
            keywords=[Keyword.from_dict(item) for item in _require(data, "key", list, "rule document")],
        )


def _require(data: Any, key: str, kind: type, where: str) -> Any:
    if not isinstance(data, dict):
        raise InvalidRuleSetError(f"Expected a mapping for {where}", {"value": data})
    if key not in data:
        raise InvalidRuleSetError(f"Missing '{key}' in {where}")
    value = data[key]
    if not isinstance(value, kind):
        raise InvalidRuleSetError(
            f"'{key}' in {where} must be of type {kind.__name__}",
            {"value": value}
        )
    return value


def _strings(values: Iterable[Any], where: str) -> List[str]:
    if not isinstance(values, list):
        raise InvalidRuleSetError(f"'{where}' must be a list")
    for value in values:
        if not isinstance(value, str):
            raise InvalidRuleSetError(f"'{where}' must only contain strings", {"value": value})
    return list(values)


def _replacements(pairs: Iterable[Any], where: str) -> Dict[str, str]:
    """Build a rewrite table; the first pair for a word wins."""
    table: Dict[str, str] = {}
    for pair in pairs:
        if not isinstance(pair, dict):
            raise InvalidRuleSetError(f"Entries of '{where}' must be mappings", {"value": pair})
        source = pair.get("in", pair.get("from"))
        target = pair.get("out", pair.get("to"))
        if not isinstance(source, str) or not isinstance(target, str):
            raise InvalidRuleSetError(f"Invalid '{where}' entry", {"value": pair})
        table.setdefault(source, target)
    return table
