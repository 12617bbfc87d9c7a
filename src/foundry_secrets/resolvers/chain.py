"""
Chain resolver.

Composes several resolvers behind the same interface. Resolvers are tried in
construction order and the first value found wins::

    chain = ChainResolver([EnvResolver(), OverrideFileResolver.default()])
    value = chain.resolve(ResolutionContext("myapp-prod"), ref)

If every resolver fails, a single ChainExhaustedError lists each attempt with
its 1-based position in the chain.
"""

import logging
from typing import Any, Iterable, List, Tuple

from ..context import ResolutionContext
from ..errors import ChainExhaustedError, NoResolversConfiguredError, ResolverError
from ..parser import SecretRef
from .base import SecretResolver

logger = logging.getLogger(__name__)


class ChainResolver(SecretResolver):
    """First-success-wins composition of resolvers."""

    def __init__(self, resolvers: Iterable[SecretResolver] = ()):
        self._resolvers: Tuple[SecretResolver, ...] = tuple(resolvers)

    @property
    def name(self) -> str:
        return "chain"

    @property
    def resolvers(self) -> Tuple[SecretResolver, ...]:
        return self._resolvers

    def resolver_names(self) -> List[str]:
        return [resolver.name for resolver in self._resolvers]

    def __len__(self) -> int:
        return len(self._resolvers)

    def resolve(self, context: ResolutionContext, ref: SecretRef) -> str:
        if not self._resolvers:
            raise NoResolversConfiguredError("no resolvers configured")

        failures: List[Tuple[int, str, ResolverError]] = []

        for position, resolver in enumerate(self._resolvers, start=1):
            try:
                value = resolver.resolve(context, ref)
            except ResolverError as e:
                logger.debug(f"Resolver {position} ({resolver.name}) missed {ref}: {e}")
                failures.append((position, resolver.name, e))
                continue

            return value

        raise ChainExhaustedError(context.full_key(ref), failures)

    def cleanup(self) -> None:
        """Clean up every member resolver."""
        for resolver in self._resolvers:
            try:
                resolver.cleanup()
            except Exception as e:
                logger.warning(f"Error cleaning up resolver {resolver.name}: {e}")

    def __enter__(self) -> "ChainResolver":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cleanup()
