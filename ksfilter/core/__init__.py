"""ksfilter Core - Shared constants and type definitions.

Import specific names from submodules:
    from ksfilter.core.constants import ErrorCode, ConfigKey
"""

from ksfilter.core import constants

__all__ = [
    "constants",
]
