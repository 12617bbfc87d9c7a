"""
Global pytest configuration and fixtures.
"""

import os

import pytest

from foundry_secrets import token_store
from foundry_secrets.token_store import AuthTokenStore


class MemoryVault:
    """In-memory stand-in for the OS keyring."""

    def __init__(self):
        self.token = None

    def get_password(self):
        return self.token

    def set_password(self, token):
        self.token = token

    def delete_password(self):
        existed = self.token is not None
        self.token = None
        return existed


class BrokenVault:
    """Vault whose every operation fails, like a headless box without a keyring."""

    def get_password(self):
        raise RuntimeError("no keyring backend available")

    def set_password(self, token):
        raise RuntimeError("no keyring backend available")

    def delete_password(self):
        raise RuntimeError("no keyring backend available")


@pytest.fixture
def memory_vault() -> MemoryVault:
    return MemoryVault()


@pytest.fixture
def broken_vault() -> BrokenVault:
    return BrokenVault()


@pytest.fixture
def config_dir(tmp_path):
    """Config directory that does not exist yet."""
    return tmp_path / "foundry-config"


@pytest.fixture
def file_store(broken_vault, config_dir) -> AuthTokenStore:
    """Token store that can only use the fallback file."""
    return AuthTokenStore(vault=broken_vault, config_dir=config_dir)


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Keep tests away from the developer's real secrets and keyring.

    - FOUNDRY_SECRET_* and OpenBAO variables are removed
    - HOME and FOUNDRY_CONFIG_DIR point into tmp_path
    - keyring calls made through foundry_secrets.token_store hit a memory vault
    """
    for name in list(os.environ):
        if name.startswith("FOUNDRY_SECRET") or name.startswith("OPENBAO_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("FOUNDRY_DEBUG", raising=False)

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("FOUNDRY_CONFIG_DIR", str(home / ".foundry"))

    fake = {}

    def get_password(service, username):
        return fake.get((service, username))

    def set_password(service, username, password):
        fake[(service, username)] = password

    def delete_password(service, username):
        if (service, username) not in fake:
            raise token_store.PasswordDeleteError("Password not found")
        del fake[(service, username)]

    monkeypatch.setattr(token_store.keyring, "get_password", get_password)
    monkeypatch.setattr(token_store.keyring, "set_password", set_password)
    monkeypatch.setattr(token_store.keyring, "delete_password", delete_password)
    yield fake
