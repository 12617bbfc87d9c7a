"""
Environment variable resolver.

This module provides the EnvResolver class for resolving secret references
from variables named ``FOUNDRY_SECRET_<INSTANCE>_<PATH>_<KEY>``.
"""

import logging
import os
from typing import Mapping, Optional

from ..context import ResolutionContext
from ..errors import BackendNotFoundError
from ..parser import SecretRef
from .base import SecretResolver

logger = logging.getLogger(__name__)


class EnvResolver(SecretResolver):
    """Resolver for secrets exported as environment variables."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        # None means os.environ, looked up at call time
        self._environ = environ

    @property
    def name(self) -> str:
        return "env"

    def resolve(self, context: ResolutionContext, ref: SecretRef) -> str:
        var_name = context.env_var_name(ref)
        environ = os.environ if self._environ is None else self._environ

        value = environ.get(var_name)
        if not value:
            raise BackendNotFoundError(f"environment variable {var_name} not set")

        logger.debug(f"Resolved {context.full_key(ref)} from environment variable {var_name}")
        return value
