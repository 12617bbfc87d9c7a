"""Instance-scoped resolution context.

The same configuration template can serve many deployments because every
reference is namespaced by the deployment *instance* before it reaches a
backend::

    ctx = ResolutionContext(instance="myapp-prod")
    ref = SecretRef(path="database/main", key="password")

    ctx.namespaced_path(ref)  # "myapp-prod/database/main"
    ctx.full_key(ref)         # "myapp-prod/database/main:password"
    ctx.env_var_name(ref)     # "FOUNDRY_SECRET_MYAPP_PROD_DATABASE_MAIN_PASSWORD"

Names that differ only by separator versus underscore (``a-b`` and ``a_b``)
map to the same environment variable.
"""

from dataclasses import dataclass

from .parser import SecretRef

ENV_VAR_PREFIX = "FOUNDRY_SECRET_"

_ENV_SEPARATORS = str.maketrans({"/": "_", "-": "_", ":": "_"})


@dataclass(frozen=True)
class ResolutionContext:
    """Instance (and optional namespace) a resolution runs under."""

    instance: str = ""
    namespace: str = ""

    def namespaced_path(self, ref: SecretRef) -> str:
        if not self.instance:
            return ref.path
        return f"{self.instance.rstrip('/')}/{ref.path}"

    def full_key(self, ref: SecretRef) -> str:
        """Canonical lookup identity: ``<namespaced path>:<key>``."""
        return f"{self.namespaced_path(ref)}:{ref.key}"

    def env_var_name(self, ref: SecretRef) -> str:
        full_path = f"{self.namespaced_path(ref)}_{ref.key}"
        return ENV_VAR_PREFIX + full_path.translate(_ENV_SEPARATORS).upper()
