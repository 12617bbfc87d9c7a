"""
Resolvers subpackage.

This subpackage contains the individual resolver implementations and the
chain that composes them.
"""

from .base import SecretResolver
from .chain import ChainResolver
from .env import EnvResolver
from .openbao import OpenBAOResolver
from .override_file import OverrideFileResolver

__all__ = [
    "SecretResolver",
    "ChainResolver",
    "EnvResolver",
    "OverrideFileResolver",
    "OpenBAOResolver",
]
