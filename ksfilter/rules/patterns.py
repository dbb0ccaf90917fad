#!/usr/bin/env python3
r"""Spec grammar and rule matching for keyspace names.

This module provides the building blocks of the keyspace filter:
- The four spec shapes (exact include/exclude, regex include/exclude)
- Spec classification in a fixed priority order
- A tagged Rule type with a uniform matches() operation

Example:
    >>> shape, body = classify_spec("!/.*2/")
    >>> shape
    <SpecShape.REGEX_EXCLUDE: 'regex_exclude'>
    >>> Rule.pattern(RuleAction.EXCLUDE, re.compile(body)).matches("ks2")
    True
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ksfilter.core.constants import RuleAction, RuleKind


class SpecShape(Enum):
    """Syntactic form of a filter spec."""

    EXACT_INCLUDE = "exact_include"  # ks1
    EXACT_EXCLUDE = "exact_exclude"  # !system
    REGEX_INCLUDE = "regex_include"  # /KS.*/
    REGEX_EXCLUDE = "regex_exclude"  # !/.*2/


# Checked in this order; the first full match wins.
SPEC_GRAMMAR: Tuple[Tuple[SpecShape, re.Pattern], ...] = (
    (SpecShape.EXACT_INCLUDE, re.compile(r"(\w+)", re.ASCII)),
    (SpecShape.EXACT_EXCLUDE, re.compile(r"!(\w+)", re.ASCII)),
    (SpecShape.REGEX_INCLUDE, re.compile(r"/(.+)/")),
    (SpecShape.REGEX_EXCLUDE, re.compile(r"!/(.+)/")),
)


def classify_spec(spec: str) -> Tuple[Optional[SpecShape], Optional[str]]:
    """Classify a trimmed spec against the four shapes.

    Args:
        spec: Spec text, already stripped of surrounding whitespace

    Returns:
        (shape, body) where body is the literal name or the inner regex,
        or (None, None) if the spec has no recognized shape
    """
    for shape, grammar in SPEC_GRAMMAR:
        match = grammar.fullmatch(spec)
        if match:
            return shape, match.group(1)
    return None, None


@dataclass(frozen=True)
class Rule:
    """A compiled filter rule.

    EXACT rules carry the literal name, PATTERN rules the compiled regex.
    """

    action: RuleAction
    kind: RuleKind
    name: Optional[str] = None
    compiled: Optional[re.Pattern] = None

    @classmethod
    def exact(cls, action: RuleAction, name: str) -> "Rule":
        """Build a literal-equality rule."""
        return cls(action=action, kind=RuleKind.EXACT, name=name)

    @classmethod
    def pattern(cls, action: RuleAction, compiled: re.Pattern) -> "Rule":
        """Build a regex-search rule."""
        return cls(action=action, kind=RuleKind.PATTERN, compiled=compiled)

    @property
    def source(self) -> str:
        """Spec-like text of the rule, for display."""
        prefix = "!" if self.action == RuleAction.EXCLUDE else ""
        if self.kind == RuleKind.EXACT:
            return f"{prefix}{self.name}"
        return f"{prefix}/{self.compiled.pattern}/"

    def matches(self, keyspace: str) -> bool:
        """Check if a keyspace name satisfies this rule.

        Args:
            keyspace: Keyspace name to test

        Returns:
            True if the name equals the literal (EXACT) or the regex is
            found anywhere in it (PATTERN)
        """
        if self.kind == RuleKind.EXACT:
            return keyspace == self.name
        elif self.kind == RuleKind.PATTERN:
            return self.compiled.search(keyspace) is not None

        return False


def matches_any(keyspace: str, rules: Tuple[Rule, ...]) -> bool:
    """Return True on the first rule matching the keyspace."""
    for rule in rules:
        if rule.matches(keyspace):
            return True
    return False
