#!/usr/bin/env python3
"""Keyspace filter compilation.

Filters keyspaces during schema metadata refreshes. Depending on the rules,
filtering happens either on the server side with a WHERE IN clause appended
to every schema query, or on the client side with a predicate applied to
every fetched row.

Rules are given as spec strings:
- ``ks1``: include the keyspace named ks1
- ``!system``: exclude the keyspace named system
- ``/KS.*/``: include keyspaces matching the regex
- ``!/.*2/``: exclude keyspaces matching the regex

Example:
    >>> result = compile_filter("s0", ["ks1", "ks2", "!/.*2/"])
    >>> result.filter.server_clause()
    " WHERE keyspace_name IN ('ks1','ks2')"
    >>> result.filter.includes("ks2")
    False
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ksfilter.core.constants import (
    DEFAULT_LABEL,
    KEYSPACE_NAME_COLUMN,
    TEST_LABEL,
    ConfigKey,
    DiagnosticKind,
    RuleAction,
)
from ksfilter.infrastructure.config_manager import ConfigManager
from ksfilter.infrastructure.logger import Logger, get_logger
from ksfilter.rules.patterns import Rule, SpecShape, classify_spec, matches_any


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem found while compiling a spec list."""

    kind: DiagnosticKind
    label: str
    spec: str
    reason: Optional[str] = None
    option: str = ConfigKey.REFRESHED_KEYSPACES

    @property
    def message(self) -> str:
        """Human-readable description, without the structured fields."""
        if self.kind == DiagnosticKind.UNRECOGNIZED_SPEC_SHAPE:
            return f"Error while parsing {self.option}: invalid element, skipping"
        elif self.kind == DiagnosticKind.INVALID_REGEX_SYNTAX:
            return f"Error while parsing {self.option}: syntax error in regex, skipping"
        return (
            f"{self.option} only includes explicit keyspace names, but also defines "
            "exclusions. This can probably be simplified."
        )


@dataclass(frozen=True)
class KeyspaceFilter:
    """Compiled keyspace filter.

    When ``where_clause`` is non-empty the exact-name inclusions were moved
    into it and ``inclusions`` is empty. Exclusions are always evaluated
    client-side.
    """

    label: str = DEFAULT_LABEL
    inclusions: Tuple[Rule, ...] = ()
    exclusions: Tuple[Rule, ...] = ()
    where_clause: str = ""

    def __post_init__(self):
        if self.where_clause and self.inclusions:
            raise ValueError("A filter with a server-side clause cannot keep client-side inclusions")

    @classmethod
    def from_specs(
        cls, label: str, specs: Iterable[str], logger: Optional[Logger] = None
    ) -> "KeyspaceFilter":
        """Compile specs and log every diagnostic as a warning.

        Args:
            label: Identifies the owner of the filter in log messages
            specs: Raw spec strings, in order
            logger: Logger receiving diagnostics (defaults to the global one)

        Returns:
            Compiled filter
        """
        result = compile_filter(label, specs)
        log_diagnostics(result.diagnostics, logger or get_logger())
        return result.filter

    @classmethod
    def from_config(
        cls,
        config: ConfigManager,
        label: str = DEFAULT_LABEL,
        logger: Optional[Logger] = None,
    ) -> "KeyspaceFilter":
        """Compile the spec list configured under metadata.schema.refreshed-keyspaces.

        Raises:
            ConfigError: If the configured value is a mapping or holds nested values
        """
        return cls.from_specs(label, config.get_refreshed_keyspaces(), logger)

    @classmethod
    def of(cls, *specs: str) -> "KeyspaceFilter":
        """Compile specs under the test label, discarding diagnostics."""
        return compile_filter(TEST_LABEL, specs).filter

    def server_clause(self) -> str:
        """The WHERE IN clause, or the empty string if there is no server-side filtering."""
        return self.where_clause

    def includes(self, keyspace: str) -> bool:
        """The predicate invoked for client-side filtering.

        Exclusions win over inclusions; with no inclusions every name not
        excluded is kept.
        """
        return (not self.inclusions or matches_any(keyspace, self.inclusions)) and not matches_any(
            keyspace, self.exclusions
        )

    def filter(self, keyspaces: Iterable[str]) -> List[str]:
        """Keep the keyspaces accepted by includes(), preserving order."""
        return [keyspace for keyspace in keyspaces if self.includes(keyspace)]


@dataclass(frozen=True)
class CompileResult:
    """Compiled filter plus the diagnostics produced on the way."""

    filter: KeyspaceFilter
    diagnostics: Tuple[Diagnostic, ...] = ()


def compile_filter(label: str, specs: Iterable[str]) -> CompileResult:
    """Compile a spec list into a keyspace filter.

    Invalid specs are skipped and reported in the result's diagnostics;
    this function never raises on bad input.

    Args:
        label: Identifies the owner of the filter in diagnostics
        specs: Raw spec strings, in order

    Returns:
        CompileResult with the filter and the diagnostics, in input order
    """
    inclusions: List[Rule] = []
    exclusions: List[Rule] = []
    exact_names: List[str] = []
    diagnostics: List[Diagnostic] = []

    for spec in specs:
        spec = spec.strip()
        shape, body = classify_spec(spec)

        if shape == SpecShape.EXACT_INCLUDE:
            exact_names.append(body)
            inclusions.append(Rule.exact(RuleAction.INCLUDE, body))
        elif shape == SpecShape.EXACT_EXCLUDE:
            exclusions.append(Rule.exact(RuleAction.EXCLUDE, body))
        elif shape in (SpecShape.REGEX_INCLUDE, SpecShape.REGEX_EXCLUDE):
            try:
                compiled = re.compile(body)
            except re.error as e:
                diagnostics.append(
                    Diagnostic(DiagnosticKind.INVALID_REGEX_SYNTAX, label, spec, reason=e.msg)
                )
                continue
            if shape == SpecShape.REGEX_INCLUDE:
                inclusions.append(Rule.pattern(RuleAction.INCLUDE, compiled))
            else:
                exclusions.append(Rule.pattern(RuleAction.EXCLUDE, compiled))
        else:
            diagnostics.append(Diagnostic(DiagnosticKind.UNRECOGNIZED_SPEC_SHAPE, label, spec))

    where_clause = ""
    if inclusions and len(exact_names) == len(inclusions):
        # All inclusions are exact names, filter on the server
        inclusions.clear()
        where_clause = build_where_clause(exact_names)
        if exclusions:
            diagnostics.append(
                Diagnostic(DiagnosticKind.EXCLUSIONS_WITH_EXACT_INCLUSIONS, label, spec="")
            )

    keyspace_filter = KeyspaceFilter(
        label=label,
        inclusions=tuple(inclusions),
        exclusions=tuple(exclusions),
        where_clause=where_clause,
    )
    return CompileResult(filter=keyspace_filter, diagnostics=tuple(diagnostics))


def build_where_clause(keyspaces: List[str]) -> str:
    """Build `` WHERE keyspace_name IN ('a','b')`` from literal names, in order."""
    quoted = ",".join(f"'{keyspace}'" for keyspace in keyspaces)
    return f" WHERE {KEYSPACE_NAME_COLUMN} IN ({quoted})"


def log_diagnostics(diagnostics: Iterable[Diagnostic], logger: Logger) -> None:
    """Route diagnostics to a structured logger as warnings."""
    for diagnostic in diagnostics:
        context = {"label": diagnostic.label, "option": diagnostic.option}
        if diagnostic.spec:
            context["spec"] = diagnostic.spec
        if diagnostic.reason:
            context["reason"] = diagnostic.reason
        logger.warning(diagnostic.message, **context)
