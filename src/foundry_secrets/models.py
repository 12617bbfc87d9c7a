"""Pydantic models for secrets configuration.

The configuration is read from a YAML file with a top-level ``secrets``
section:

```yaml
secrets:
  instance: myapp-prod
  override_file: ~/.foundryvars
  openbao:
    enabled: true
    address: "https://openbao.example.com:8200"
    token_env: "OPENBAO_TOKEN"
    mount: "secret"
```
"""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MOUNT = "secret"
DEFAULT_READ_PATH = "{mount}/data/{path}"
DEFAULT_TIMEOUT_SECONDS = 30.0


class FoundryBaseModel(BaseModel):
    """Base model for all foundry-secrets Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable for thread safety
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


class OpenBAOConfigModel(FoundryBaseModel):
    """Configuration for the OpenBAO (Vault KV v2) resolver.

    Attributes:
        enabled: Whether the remote resolver joins the chain
        address: Server address (e.g., https://openbao.example.com:8200)
        token_env: Environment variable holding the token; the auth token
            store is consulted when it is unset
        mount: KV v2 mount point
        read_path: Template for the read endpoint below ``/v1/``; receives
            ``mount`` and ``path``
        timeout: Request timeout in seconds
        verify: Whether to verify the server's TLS certificate

    Example:
        >>> config = OpenBAOConfigModel(
        ...     enabled=True,
        ...     address="https://openbao.example.com:8200",
        ...     mount="foundry-core",
        ... )
    """

    enabled: bool = False
    address: str | None = None
    token_env: str = "OPENBAO_TOKEN"
    mount: str = Field(default=DEFAULT_MOUNT, min_length=1)
    read_path: str = Field(default=DEFAULT_READ_PATH, min_length=1)
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    verify: bool = True


class SecretsConfigModel(FoundryBaseModel):
    """Root secrets configuration.

    Attributes:
        instance: Default deployment instance used to scope references
        namespace: Optional namespace carried in the resolution context
        use_env: Whether the environment resolver heads the chain
        override_file: Override file path; None means ~/.foundryvars
        openbao: Remote resolver settings
    """

    instance: str = ""
    namespace: str = ""
    use_env: bool = True
    override_file: str | None = None
    openbao: OpenBAOConfigModel | None = None
