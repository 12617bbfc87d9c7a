"""Operator auth token storage.

The OpenBAO resolver needs a token. It is kept in a single slot, outside any
instance scoping:

1. the OS keyring (service ``foundry``, account ``openbao-token``), or
2. when the keyring is unusable, ``<config dir>/.foundry-token`` written with
   mode 0600 inside a 0700 directory.

``<config dir>`` is ``$FOUNDRY_CONFIG_DIR`` when set, else ``~/.foundry``.

Writers in different processes are not coordinated; the last ``store`` or
``clear`` wins.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Literal, Protocol

import keyring
from keyring.errors import PasswordDeleteError

from .errors import InvalidTokenError, TokenNotFoundError, TokenStoreUnavailableError

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "foundry"
KEYRING_USER = "openbao-token"
FALLBACK_FILE_NAME = ".foundry-token"
CONFIG_DIR_ENV = "FOUNDRY_CONFIG_DIR"

TokenLocation = Literal["keyring", "file"]


def get_config_dir() -> Path:
    """Return the foundry configuration directory."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".foundry"


class TokenVault(Protocol):
    """Narrow interface over the OS secret vault."""

    def get_password(self) -> str | None: ...

    def set_password(self, token: str) -> None: ...

    def delete_password(self) -> bool:
        """Delete the entry. Returns False when there was nothing to delete."""
        ...


class KeyringVault:
    """TokenVault backed by the ``keyring`` package."""

    def __init__(self, service: str = KEYRING_SERVICE, username: str = KEYRING_USER) -> None:
        self.service = service
        self.username = username

    def get_password(self) -> str | None:
        return keyring.get_password(self.service, self.username)

    def set_password(self, token: str) -> None:
        keyring.set_password(self.service, self.username, token)

    def delete_password(self) -> bool:
        try:
            keyring.delete_password(self.service, self.username)
        except PasswordDeleteError:
            return False
        return True


class AuthTokenStore:
    """Store, load and clear the operator's OpenBAO token."""

    def __init__(self, vault: TokenVault | None = None, config_dir: Path | None = None) -> None:
        self.vault = vault if vault is not None else KeyringVault()
        self._config_dir = config_dir

    @property
    def config_dir(self) -> Path:
        return self._config_dir if self._config_dir is not None else get_config_dir()

    @property
    def token_file(self) -> Path:
        return self.config_dir / FALLBACK_FILE_NAME

    def store(self, token: str) -> TokenLocation:
        """Store a token, replacing any existing one.

        Returns:
            Where the token ended up ("keyring" or "file")

        Raises:
            InvalidTokenError: If the token is empty
            TokenStoreUnavailableError: If the keyring and the fallback file both fail
        """
        if not token:
            raise InvalidTokenError("token cannot be empty")

        try:
            self.vault.set_password(token)
        except Exception as e:
            logger.info(f"OS keyring unavailable ({e}), storing token in {self.token_file}")
        else:
            self._discard_stale_file()
            logger.debug("Stored auth token in OS keyring")
            return "keyring"

        try:
            self._write_token_file(token)
        except OSError as e:
            raise TokenStoreUnavailableError(
                f"failed to store token: keyring unavailable and writing {self.token_file} failed: {e}"
            ) from e

        return "file"

    def load(self) -> str:
        """Load the stored token.

        Raises:
            TokenNotFoundError: If neither the keyring nor the fallback file holds a token
        """
        try:
            token = self.vault.get_password()
        except Exception as e:
            logger.debug(f"OS keyring lookup failed ({e}), trying {self.token_file}")
            token = None

        if token:
            return token

        try:
            token = self.token_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            token = ""
        except (OSError, UnicodeDecodeError) as e:
            raise TokenNotFoundError(
                f"no auth token found in keyring or file storage (reading {self.token_file} failed: {e})"
            ) from e

        if not token:
            raise TokenNotFoundError("no auth token found in keyring or file storage")

        return token

    def clear(self) -> None:
        """Remove the token from the keyring and the fallback file.

        Raises:
            TokenStoreUnavailableError: Only if both deletions fail
        """
        keyring_error: Exception | None = None
        file_error: OSError | None = None

        try:
            if self.vault.delete_password():
                logger.debug("Removed auth token from OS keyring")
        except Exception as e:
            keyring_error = e

        try:
            self.token_file.unlink()
            logger.debug(f"Removed auth token file {self.token_file}")
        except FileNotFoundError:
            pass
        except OSError as e:
            file_error = e

        if keyring_error is not None and file_error is not None:
            raise TokenStoreUnavailableError(
                f"failed to clear token from keyring ({keyring_error}) and file ({file_error})"
            )

    def location(self) -> TokenLocation | None:
        """Report where a token is currently stored, without returning it."""
        try:
            if self.vault.get_password():
                return "keyring"
        except Exception as e:
            logger.debug(f"OS keyring lookup failed: {e}")

        try:
            if self.token_file.read_text(encoding="utf-8"):
                return "file"
        except (OSError, UnicodeDecodeError):
            return None
        return None

    def _write_token_file(self, token: str) -> None:
        _make_private_dirs(self.config_dir)

        path = self.token_file
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            # The file may predate us with looser permissions
            os.fchmod(f.fileno(), stat.S_IRUSR | stat.S_IWUSR)
            f.write(token)

        logger.debug(f"Stored auth token in {path}")

    def _discard_stale_file(self) -> None:
        try:
            self.token_file.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove stale token file {self.token_file}: {e}")


def _make_private_dirs(directory: Path) -> None:
    """Create ``directory`` and any missing parents with mode 0700."""
    missing = []
    current = directory
    while not current.exists():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent

    for path in reversed(missing):
        # exist_ok covers a concurrent creator
        path.mkdir(mode=0o700, exist_ok=True)
