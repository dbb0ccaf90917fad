"""ksfilter - Keyspace filtering for schema metadata refreshes."""

from ksfilter.core.constants import KSFILTER_VERSION as __version__
from ksfilter.rules.compiler import CompileResult, Diagnostic, KeyspaceFilter, compile_filter

__all__ = [
    "__version__",
    "KeyspaceFilter",
    "CompileResult",
    "Diagnostic",
    "compile_filter",
]
