"""ksfilter Rules System.

This module provides keyspace filter rules and their compilation:
- patterns: spec grammar and the Rule type
- compiler: compile a spec list into a KeyspaceFilter

A KeyspaceFilter exposes a server-side WHERE IN clause (when every inclusion
is an exact name) and a client-side includes() predicate.
"""

from .compiler import (
    CompileResult,
    Diagnostic,
    KeyspaceFilter,
    build_where_clause,
    compile_filter,
    log_diagnostics,
)
from .patterns import SPEC_GRAMMAR, Rule, SpecShape, classify_spec, matches_any

__all__ = [
    # Spec grammar and rules
    "SpecShape",
    "SPEC_GRAMMAR",
    "Rule",
    "classify_spec",
    "matches_any",
    # Compilation
    "Diagnostic",
    "CompileResult",
    "KeyspaceFilter",
    "compile_filter",
    "build_where_clause",
    "log_diagnostics",
]
