"""foundry-secrets - instance-scoped secret reference resolution.

Configuration values of the form ``${secret:<path>:<key>}`` are resolved by
trying an ordered chain of backends, each scoped by a deployment instance.

## Key Modules

- `parser`: `SecretRef`, `is_secret_ref`, `parse_secret_ref`
- `context`: `ResolutionContext` (namespaced path, full key, env var name)
- `resolvers`: `EnvResolver`, `OverrideFileResolver`, `OpenBAOResolver`, `ChainResolver`
- `token_store`: `AuthTokenStore` (OS keyring with a 0600 file fallback)
- `processor`: scan, validate and resolve references in configuration trees

## Quick Example

```python
from foundry_secrets import (
    ChainResolver,
    EnvResolver,
    OverrideFileResolver,
    ResolutionContext,
    parse_secret_ref,
)

ref = parse_secret_ref("${secret:database/prod:password}")
chain = ChainResolver([EnvResolver(), OverrideFileResolver.default()])
password = chain.resolve(ResolutionContext(instance="myapp-prod"), ref)
```
"""

from .context import ResolutionContext
from .errors import (
    BackendNotFoundError,
    BackendUnavailableError,
    ChainExhaustedError,
    InvalidTokenError,
    MalformedReferenceError,
    NoResolversConfiguredError,
    OverrideFileError,
    ResolverConfigError,
    ResolverError,
    SecretsConfigError,
    SecretsError,
    SecretTypeError,
    TokenNotFoundError,
    TokenStoreError,
    TokenStoreUnavailableError,
)
from .loader import load_secrets_config
from .models import OpenBAOConfigModel, SecretsConfigModel
from .parser import SecretRef, is_secret_ref, parse_secret_ref
from .processor import (
    build_resolver_chain,
    find_secret_refs,
    resolve_secret_refs,
    validate_secret_refs,
)
from .resolvers import (
    ChainResolver,
    EnvResolver,
    OpenBAOResolver,
    OverrideFileResolver,
    SecretResolver,
)
from .token_store import AuthTokenStore, KeyringVault
from .version import PACKAGE_NAME, PACKAGE_VERSION

__all__ = [
    # References
    "SecretRef",
    "is_secret_ref",
    "parse_secret_ref",
    "ResolutionContext",
    # Resolvers
    "SecretResolver",
    "EnvResolver",
    "OverrideFileResolver",
    "OpenBAOResolver",
    "ChainResolver",
    # Token store
    "AuthTokenStore",
    "KeyringVault",
    # Configuration
    "OpenBAOConfigModel",
    "SecretsConfigModel",
    "load_secrets_config",
    "build_resolver_chain",
    "find_secret_refs",
    "validate_secret_refs",
    "resolve_secret_refs",
    # Errors
    "SecretsError",
    "MalformedReferenceError",
    "ResolverError",
    "BackendNotFoundError",
    "BackendUnavailableError",
    "SecretTypeError",
    "ChainExhaustedError",
    "NoResolversConfiguredError",
    "OverrideFileError",
    "ResolverConfigError",
    "SecretsConfigError",
    "TokenStoreError",
    "TokenNotFoundError",
    "TokenStoreUnavailableError",
    "InvalidTokenError",
    # Version
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
]
