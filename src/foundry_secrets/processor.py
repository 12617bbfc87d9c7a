"""
Secret reference processing for configuration trees.

This module provides:
1. Scanning nested configuration data for ``${secret:...}`` references
2. Validating reference syntax without resolving anything
3. Resolving every reference through a resolver (usually a chain)
4. Building the standard resolver chain from a SecretsConfigModel

Only whole values are treated as references; a reference embedded in a
longer string is left untouched.
"""

import logging
import os
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple, Union

from .context import ResolutionContext
from .errors import MalformedReferenceError, TokenStoreError
from .models import SecretsConfigModel
from .parser import SecretRef, is_secret_ref, parse_secret_ref
from .resolvers import (
    ChainResolver,
    EnvResolver,
    OpenBAOResolver,
    OverrideFileResolver,
    SecretResolver,
)
from .resolvers.override_file import default_override_path
from .token_store import AuthTokenStore

logger = logging.getLogger(__name__)

ConfigPath = List[Union[str, int]]


def format_config_path(path: ConfigPath) -> str:
    """Render ``['dns', 'servers', 0, 'key']`` as ``dns.servers[0].key``."""
    rendered = ""
    for part in path:
        if isinstance(part, int):
            rendered += f"[{part}]"
        else:
            rendered += f".{part}" if rendered else str(part)
    return rendered or "<root>"


def find_secret_refs(config: Any, path: Optional[ConfigPath] = None) -> List[Tuple[ConfigPath, str]]:
    """Find every value that looks like a secret reference.

    Args:
        config: Configuration to scan (dict, list or scalar)
        path: Current path in the configuration (for internal use)

    Returns:
        List of (path, value) tuples in traversal order
    """
    refs: List[Tuple[ConfigPath, str]] = []
    path = path or []

    if isinstance(config, str) and is_secret_ref(config):
        refs.append((path, config))
    elif isinstance(config, dict):
        for key, value in config.items():
            refs.extend(find_secret_refs(value, path + [key]))
    elif isinstance(config, list):
        for i, item in enumerate(config):
            refs.extend(find_secret_refs(item, path + [i]))

    return refs


def validate_secret_refs(config: Any) -> List[Tuple[ConfigPath, SecretRef]]:
    """Parse every reference in a configuration without resolving it.

    Returns:
        List of (path, parsed reference) tuples

    Raises:
        MalformedReferenceError: For the first malformed reference, with its
            location in the configuration
    """
    parsed: List[Tuple[ConfigPath, SecretRef]] = []

    for path, value in find_secret_refs(config):
        ref = _parse_at(path, value)
        parsed.append((path, ref))

    return parsed


def resolve_secret_refs(config: Any, context: ResolutionContext, resolver: SecretResolver) -> Any:
    """Return a copy of ``config`` with every secret reference resolved.

    Raises:
        MalformedReferenceError: If a reference is malformed
        ChainExhaustedError: If a chain cannot resolve a reference
    """
    return _resolve(config, context, resolver, [])


def _resolve(config: Any, context: ResolutionContext, resolver: SecretResolver, path: ConfigPath) -> Any:
    if isinstance(config, str):
        if not is_secret_ref(config):
            return config
        ref = _parse_at(path, config)
        logger.debug(f"Resolving {ref} at {format_config_path(path)}")
        return resolver.resolve(context, ref)
    elif isinstance(config, dict):
        return {key: _resolve(value, context, resolver, path + [key]) for key, value in config.items()}
    elif isinstance(config, list):
        return [_resolve(item, context, resolver, path + [i]) for i, item in enumerate(config)]
    else:
        return config


def _parse_at(path: ConfigPath, value: str) -> SecretRef:
    try:
        ref = parse_secret_ref(value)
    except MalformedReferenceError as e:
        raise MalformedReferenceError(
            f"invalid secret reference at {format_config_path(path)}: {e}", raw=e.raw
        ) from e
    # is_secret_ref was true, so parse_secret_ref either returns or raises
    assert ref is not None
    return ref


def context_from_config(
    config: SecretsConfigModel, instance: Optional[str] = None, namespace: Optional[str] = None
) -> ResolutionContext:
    """Build a ResolutionContext; explicit arguments win over configuration."""
    return ResolutionContext(
        instance=config.instance if instance is None else instance,
        namespace=config.namespace if namespace is None else namespace,
    )


def build_resolver_chain(
    config: SecretsConfigModel,
    token_store: Optional[AuthTokenStore] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ChainResolver:
    """Build the standard chain: environment, override file, then OpenBAO.

    OpenBAO joins only when it is enabled, has an address and a token can be
    found (``token_env`` first, then the auth token store). Otherwise it is
    skipped and the reason is logged.

    Raises:
        OverrideFileError: If the override file exists but is malformed
        ResolverConfigError: If the OpenBAO settings are unusable
    """
    resolvers: List[SecretResolver] = []

    if config.use_env:
        resolvers.append(EnvResolver(environ))

    override_path = Path(config.override_file) if config.override_file else default_override_path()
    resolvers.append(OverrideFileResolver(override_path))

    openbao = _build_openbao_resolver(config, token_store, environ)
    if openbao is not None:
        resolvers.append(openbao)

    chain = ChainResolver(resolvers)
    logger.debug(f"Built resolver chain: {' -> '.join(chain.resolver_names())}")
    return chain


def _build_openbao_resolver(
    config: SecretsConfigModel,
    token_store: Optional[AuthTokenStore],
    environ: Optional[Mapping[str, str]],
) -> Optional[OpenBAOResolver]:
    openbao = config.openbao
    if openbao is None or not openbao.enabled:
        return None

    if not openbao.address:
        logger.warning("OpenBAO is enabled but no address is configured, skipping it")
        return None

    env = os.environ if environ is None else environ
    token = env.get(openbao.token_env)
    if not token:
        store = token_store or AuthTokenStore()
        try:
            token = store.load()
        except TokenStoreError as e:
            logger.info(f"OpenBAO skipped: {e}")
            return None

    return OpenBAOResolver.from_config(openbao, token)
