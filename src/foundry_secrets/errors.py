"""Error hierarchy for secret resolution.

Every error raised by this package derives from :class:`SecretsError`.

Resolver failures (:class:`ResolverError` and its subclasses) are "soft":
a :class:`~foundry_secrets.resolvers.chain.ChainResolver` records them and
moves on to the next resolver. Everything else (malformed references, bad
override files, bad resolver configuration) is a hard fault surfaced directly
to the caller.
"""

from __future__ import annotations


class SecretsError(Exception):
    """Base class for all foundry-secrets errors."""


class MalformedReferenceError(SecretsError, ValueError):
    """A value looks like a secret reference but violates the grammar."""

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


class ResolverError(SecretsError):
    """A single resolver failed to produce a value."""


class BackendNotFoundError(ResolverError):
    """The backend was reachable but has no value for the reference."""


class BackendUnavailableError(ResolverError):
    """The backend could not be queried (transport, auth, bad response)."""


class SecretTypeError(BackendUnavailableError):
    """The backend returned a value that is not a string."""


class ChainExhaustedError(ResolverError):
    """Every resolver in a chain failed.

    An enclosing chain treats this like any other resolver miss.

    Attributes:
        full_key: Canonical ``instance/path:key`` being resolved
        failures: ``(position, resolver name, error)`` per attempt, 1-based
    """

    def __init__(self, full_key: str, failures: list[tuple[int, str, ResolverError]]) -> None:
        self.full_key = full_key
        self.failures = failures
        lines = [f"resolver {position} ({name}): {error}" for position, name, error in failures]
        super().__init__(
            f"failed to resolve secret {full_key} after trying {len(failures)} resolver(s):\n  "
            + "\n  ".join(lines)
        )


class NoResolversConfiguredError(SecretsError):
    """A chain was asked to resolve something but holds no resolvers."""


class OverrideFileError(SecretsError, ValueError):
    """The override file exists but cannot be read or parsed."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class ResolverConfigError(SecretsError, ValueError):
    """A resolver was constructed with invalid settings."""


class SecretsConfigError(SecretsError, ValueError):
    """The secrets configuration file is unparseable or invalid."""


class TokenStoreError(SecretsError):
    """Base class for auth token store failures."""


class TokenNotFoundError(TokenStoreError):
    """No auth token is stored. Expected on first use."""


class TokenStoreUnavailableError(TokenStoreError):
    """Neither the OS keyring nor the fallback file could be used."""


class InvalidTokenError(TokenStoreError, ValueError):
    """The token passed to the store is unusable (e.g. empty)."""
