"""
Override file resolver.

This module provides the OverrideFileResolver class, which serves secrets from
a local developer file (``~/.foundryvars`` by default) in the format::

    # comment
    myapp-prod/database/main:password=s3cr3t

The file is parsed once, at construction. Values are kept exactly as written
after the first ``=``; only the line terminator is dropped.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Union

from ..context import ResolutionContext
from ..errors import BackendNotFoundError, OverrideFileError
from ..parser import SecretRef
from .base import SecretResolver

logger = logging.getLogger(__name__)

DEFAULT_OVERRIDE_FILE_NAME = ".foundryvars"


def default_override_path() -> Path:
    return Path.home() / DEFAULT_OVERRIDE_FILE_NAME


def parse_override_lines(lines: List[str]) -> Dict[str, str]:
    """Parse override file lines into a ``full key -> value`` table.

    Args:
        lines: Raw file lines (with or without line terminators)

    Returns:
        Mapping of full key to value; later duplicates win

    Raises:
        OverrideFileError: If a line has no ``=`` or an empty key
    """
    table: Dict[str, str] = {}

    for line_number, line in enumerate(lines, start=1):
        content = line.rstrip("\r\n")
        stripped = content.strip()

        if not stripped or stripped.startswith("#"):
            continue

        if "=" not in content:
            raise OverrideFileError(
                f"invalid format at line {line_number}: expected key=value, got: {stripped}",
                line_number=line_number,
            )

        key, value = content.split("=", 1)
        key = key.strip()
        if not key:
            raise OverrideFileError(f"empty key at line {line_number}", line_number=line_number)

        if key in table:
            logger.debug(f"Override key {key} redefined at line {line_number}")
        table[key] = value

    return table


class OverrideFileResolver(SecretResolver):
    """Resolver for secrets listed in a local override file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self._values: Mapping[str, str] = MappingProxyType(self._load())

    @classmethod
    def default(cls) -> "OverrideFileResolver":
        """Load the override file from its default location in the home directory."""
        return cls(default_override_path())

    @property
    def name(self) -> str:
        return "override-file"

    def _load(self) -> Dict[str, str]:
        try:
            with open(self.path, encoding="utf-8") as f:
                lines = f.readlines()
        except FileNotFoundError:
            logger.debug(f"Override file {self.path} not found, using empty table")
            return {}
        except (OSError, UnicodeDecodeError) as e:
            raise OverrideFileError(f"failed to read override file {self.path}: {e}") from e

        try:
            table = parse_override_lines(lines)
        except OverrideFileError as e:
            raise OverrideFileError(f"{self.path}: {e}", line_number=e.line_number) from e

        logger.debug(f"Loaded {len(table)} override(s) from {self.path}")
        return table

    def keys(self) -> List[str]:
        """List the loaded full keys. Values are never exposed here."""
        return sorted(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def resolve(self, context: ResolutionContext, ref: SecretRef) -> str:
        full_key = context.full_key(ref)

        try:
            value = self._values[full_key]
        except KeyError:
            raise BackendNotFoundError(f"secret not found in override file: {full_key}") from None

        logger.debug(f"Resolved {full_key} from override file {self.path}")
        return value
