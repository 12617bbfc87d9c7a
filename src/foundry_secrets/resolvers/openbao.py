"""
OpenBAO resolver.

This module provides the OpenBAOResolver class for resolving secret
references against an OpenBAO (or HashiCorp Vault) KV v2 secrets engine.
A reference ``${secret:database/main:password}`` resolved under instance
``myapp-prod`` reads ``GET /v1/<mount>/data/myapp-prod/database/main`` and
returns the ``password`` field of the secret.
"""

import logging
from typing import Any, Dict, Optional

import hvac
import requests
from hvac.exceptions import InvalidPath, VaultError

from ..context import ResolutionContext
from ..errors import (
    BackendNotFoundError,
    BackendUnavailableError,
    ResolverConfigError,
    SecretTypeError,
)
from ..models import DEFAULT_MOUNT, DEFAULT_READ_PATH, DEFAULT_TIMEOUT_SECONDS, OpenBAOConfigModel
from ..parser import SecretRef
from .base import SecretResolver

logger = logging.getLogger(__name__)


class OpenBAOResolver(SecretResolver):
    """Resolver for secrets stored in an OpenBAO KV v2 mount."""

    def __init__(
        self,
        address: str,
        token: str,
        mount: str = DEFAULT_MOUNT,
        *,
        read_path: str = DEFAULT_READ_PATH,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        verify: bool = True,
    ):
        if not address:
            raise ResolverConfigError("OpenBAO address is required")
        if not token:
            raise ResolverConfigError("OpenBAO token is required")
        if not mount:
            raise ResolverConfigError("OpenBAO mount point is required")
        if "{path}" not in read_path:
            raise ResolverConfigError(
                f"OpenBAO read path template must contain '{{path}}': {read_path!r}"
            )
        try:
            read_path.format(mount=mount, path="x")
        except (AttributeError, KeyError, IndexError, ValueError) as e:
            raise ResolverConfigError(
                f"invalid OpenBAO read path template {read_path!r}: only {{mount}} and "
                f"{{path}} placeholders are allowed ({e})"
            ) from e

        self.address = address.rstrip("/")
        self.mount = mount
        self.read_path = read_path
        self.timeout = timeout
        self._client: Optional[hvac.Client] = hvac.Client(
            url=self.address, token=token, timeout=timeout, verify=verify
        )

    @classmethod
    def from_config(cls, config: OpenBAOConfigModel, token: str) -> "OpenBAOResolver":
        """Build a resolver from configuration and an already-loaded token."""
        return cls(
            config.address or "",
            token,
            config.mount,
            read_path=config.read_path,
            timeout=config.timeout,
            verify=config.verify,
        )

    @property
    def name(self) -> str:
        return "openbao"

    def resolve(self, context: ResolutionContext, ref: SecretRef) -> str:
        return self.read_secret(context.namespaced_path(ref), ref.key)

    def read_secret(self, path: str, key: str) -> str:
        """Read one key of the secret stored at ``path`` (no instance scoping).

        Raises:
            BackendNotFoundError: If the secret or the key does not exist
            SecretTypeError: If the value is not a string
            BackendUnavailableError: On transport, auth or response-shape errors
        """
        data = self._read_secret_data(path)

        if key not in data:
            raise BackendNotFoundError(f"key {key} not found in secret at path {path}")

        value = data[key]
        if not isinstance(value, str):
            raise SecretTypeError(
                f"value for key {key} in secret at path {path} is not a string "
                f"(got {type(value).__name__})"
            )

        logger.debug(f"Resolved {path}:{key} from OpenBAO mount {self.mount}")
        return value

    def _read_secret_data(self, path: str) -> Dict[str, Any]:
        if self._client is None:
            raise BackendUnavailableError("OpenBAO client has been closed")

        api_path = self.read_path.format(mount=self.mount, path=path)
        try:
            response = self._client.read(api_path)
        except InvalidPath:
            response = None
        except (VaultError, requests.exceptions.RequestException) as e:
            raise BackendUnavailableError(
                f"failed to read secret from OpenBAO at path {path}: {e}"
            ) from e

        if response is None:
            raise BackendNotFoundError(
                f"failed to read secret from OpenBAO: secret not found at path {path}"
            )

        if not isinstance(response, dict):
            raise BackendUnavailableError(
                f"failed to read secret from OpenBAO at path {path}: unexpected response"
            )

        envelope = response.get("data")
        data = envelope.get("data") if isinstance(envelope, dict) else None
        if data is None:
            raise BackendNotFoundError(
                f"failed to read secret from OpenBAO: secret not found at path {path}"
            )
        if not isinstance(data, dict):
            raise BackendUnavailableError(
                f"failed to read secret from OpenBAO at path {path}: "
                "response data is not a key/value map"
            )

        return data

    def cleanup(self) -> None:
        """Drop the client and its HTTP session."""
        if self._client is not None:
            session = getattr(self._client.adapter, "session", None)
            if session is not None:
                session.close()
            self._client = None
