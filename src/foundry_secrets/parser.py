"""
Secret reference grammar.

A secret reference is a configuration value of the form::

    ${secret:<path>:<key>}

where ``<path>`` is one or more ``/``-joined segments of ``[A-Za-z0-9_-]+``
and ``<key>`` is a single such segment. Surrounding whitespace is ignored.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import MalformedReferenceError

SECRET_REF_PREFIX = "${secret:"
SECRET_REF_SUFFIX = "}"

PATH_PATTERN = re.compile(r"[A-Za-z0-9_-]+(?:/[A-Za-z0-9_-]+)*")
KEY_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
_INVALID_PATH_CHAR = re.compile(r"[^A-Za-z0-9_/-]")
_INVALID_KEY_CHAR = re.compile(r"[^A-Za-z0-9_-]")

EXPECTED_FORMAT = "${secret:path:key}"


@dataclass(frozen=True)
class SecretRef:
    """A parsed secret reference.

    Identity is ``(path, key)``; ``raw`` is only kept so the reference can be
    displayed exactly as it was written.
    """

    path: str
    key: str
    raw: str = field(default="", compare=False)

    def canonical(self) -> str:
        return f"{SECRET_REF_PREFIX}{self.path}:{self.key}{SECRET_REF_SUFFIX}"

    def __str__(self) -> str:
        return self.raw or self.canonical()


def is_secret_ref(value: Any) -> bool:
    """Cheap check for reference intent. Use parse_secret_ref for validation."""
    if not isinstance(value, str):
        return False
    value = value.strip()
    return value.startswith(SECRET_REF_PREFIX) and value.endswith(SECRET_REF_SUFFIX)


def parse_secret_ref(value: str) -> Optional[SecretRef]:
    """Parse a secret reference.

    Args:
        value: Candidate configuration value

    Returns:
        The parsed SecretRef, or None when the value is not a reference at all

    Raises:
        MalformedReferenceError: If the value has the reference prefix/suffix
            but violates the grammar
    """
    if not is_secret_ref(value):
        return None

    raw = value.strip()
    body = raw[len(SECRET_REF_PREFIX) : -len(SECRET_REF_SUFFIX)]
    segments = body.split(":")

    if len(segments) != 2:
        raise MalformedReferenceError(
            f"invalid secret reference format: {raw} (expected: {EXPECTED_FORMAT}, "
            f"got {len(segments)} ':'-separated segment(s))",
            raw=raw,
        )

    path, key = segments

    if not path:
        raise MalformedReferenceError(f"secret path cannot be empty in: {raw}", raw=raw)
    if not key:
        raise MalformedReferenceError(f"secret key cannot be empty in: {raw}", raw=raw)

    if not PATH_PATTERN.fullmatch(path):
        match = _INVALID_PATH_CHAR.search(path)
        detail = f"illegal character {match.group(0)!r}" if match else "empty path segment"
        raise MalformedReferenceError(
            f"invalid secret path {path!r} in: {raw} ({detail})", raw=raw
        )
    if not KEY_PATTERN.fullmatch(key):
        match = _INVALID_KEY_CHAR.search(key)
        detail = f"illegal character {match.group(0)!r}" if match else "invalid key"
        raise MalformedReferenceError(f"invalid secret key {key!r} in: {raw} ({detail})", raw=raw)

    return SecretRef(path=path, key=key, raw=raw)
