"""
Settings sources consumed by the adapter factories and resolver.

A source answers typed key lookups (``awsS3Key``, ``imgurClientId``, ...)
and lists the configured mime type -> adapter bindings in order.
"""

import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Any, Iterable, Mapping, Protocol

from upload_api.config import Settings


@dataclass(frozen=True)
class MimeTypeBinding:
    """A mime type (exact or glob pattern such as ``image/*``) bound to an adapter."""

    pattern: str
    adapter: str

    @property
    def is_pattern(self) -> bool:
        return any(char in self.pattern for char in "*?[")

    def matches(self, mime_type: str) -> bool:
        if self.is_pattern:
            return fnmatchcase(mime_type, self.pattern.lower())
        return mime_type == self.pattern.lower()


class SettingsSource(Protocol):
    """Read-only key/value configuration consumed by the storage layer."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def mime_type_bindings(self) -> list[MimeTypeBinding]:
        ...


def parse_mime_types(mime_types: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> list[MimeTypeBinding]:
    """
    Build bindings from configuration entries, keeping their order.

    An entry's value is either the adapter identity or a mapping with an
    ``adapter`` key; a mapping without one binds the pattern to itself.
    """
    items = mime_types.items() if isinstance(mime_types, Mapping) else mime_types
    bindings = []
    for pattern, value in items:
        if isinstance(value, Mapping):
            adapter = value.get("adapter", pattern)
        else:
            adapter = value
        bindings.append(MimeTypeBinding(pattern=pattern.strip(), adapter=str(adapter).strip()))
    return bindings


_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def setting_field_name(key: str) -> str:
    """Map a setting key like ``awsS3Key`` to its Settings field ``AWS_S3_KEY``."""
    return _CAMEL_BOUNDARY.sub("_", key).upper()


class AppSettingsSource:
    """Settings source backed by the application's pydantic Settings."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def get(self, key: str, default: Any = None) -> Any:
        value = getattr(self.settings, setting_field_name(key), None)
        return default if value is None else value

    def mime_type_bindings(self) -> list[MimeTypeBinding]:
        return parse_mime_types(self.settings.MIME_TYPES)


class DictSettingsSource:
    """In-memory settings source, keyed by setting name."""

    def __init__(
        self,
        values: Mapping[str, Any] | None = None,
        mime_types: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
    ):
        self.values = dict(values or {})
        self._bindings = parse_mime_types(mime_types or {})

    def get(self, key: str, default: Any = None) -> Any:
        value = self.values.get(key)
        return default if value is None else value

    def mime_type_bindings(self) -> list[MimeTypeBinding]:
        return list(self._bindings)
