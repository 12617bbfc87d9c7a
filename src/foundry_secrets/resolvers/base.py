"""
Base class for secret resolvers.

A resolver answers one question: "what is the value of this reference in this
context?" Resolvers are constructed once (at startup or per command) and must
not mutate shared state while resolving, so a single instance can be used from
several threads.

## Implementation Example

```python
from foundry_secrets import ResolutionContext, SecretRef
from foundry_secrets.errors import BackendNotFoundError
from foundry_secrets.resolvers import SecretResolver


class StaticResolver(SecretResolver):
    '''Resolver backed by an in-memory mapping of full keys.'''

    def __init__(self, values: dict[str, str]):
        self._values = dict(values)

    @property
    def name(self) -> str:
        return "static"

    def resolve(self, context: ResolutionContext, ref: SecretRef) -> str:
        full_key = context.full_key(ref)
        try:
            return self._values[full_key]
        except KeyError:
            raise BackendNotFoundError(f"secret not found in static table: {full_key}") from None
```

## Error Handling

Failures must be reported as :class:`~foundry_secrets.errors.ResolverError`
subclasses:

- ``BackendNotFoundError`` when the backend answered but holds no value
- ``BackendUnavailableError`` when the backend could not be queried

Both let a chain move on to its next resolver. Any other exception is treated
as a bug and propagates through the chain unchanged.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..context import ResolutionContext
from ..parser import SecretRef


class SecretResolver(ABC):
    """Abstract base class for secret resolvers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short label used in logs and aggregate errors."""

    @abstractmethod
    def resolve(self, context: ResolutionContext, ref: SecretRef) -> str:
        """Resolve the reference to its value or raise a ResolverError."""

    def cleanup(self) -> None:
        """
        Release clients or connections held by the resolver.
        Must be idempotent.
        """

    def __enter__(self) -> "SecretResolver":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cleanup()
