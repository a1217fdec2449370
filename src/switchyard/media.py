"""Media types for format-aware routing.

Routes may declare the formats they produce; requests carry the format
negotiated from their ``Accept`` header. ``MediaType.includes`` decides
whether one is acceptable for the other.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from functools import lru_cache

from switchyard.errors import ConfigurationError

# Short names mimetypes does not know or maps ambiguously
_SHORT_NAMES: dict[str, str] = {
    "html": "text/html",
    "json": "application/json",
    "xml": "application/xml",
    "txt": "text/plain",
    "text": "text/plain",
    "csv": "text/csv",
    "atom": "application/atom+xml",
    "rss": "application/rss+xml",
}


@dataclass(frozen=True, slots=True)
class MediaType:
    """A ``type/subtype`` pair. Parameters such as ``charset`` are dropped."""

    type: str
    subtype: str

    @classmethod
    def parse(cls, text: str) -> MediaType:
        """Parse ``"text/html; charset=utf-8"`` into ``MediaType("text", "html")``.

        A lone ``*`` is shorthand for ``*/*``.
        """
        value = text.split(";", 1)[0].strip().lower()
        if value == "*":
            return ALL
        kind, sep, subtype = value.partition("/")
        if not sep or not kind or not subtype:
            msg = f"Invalid media type {text!r}"
            raise ConfigurationError(msg)
        return cls(kind, subtype)

    @property
    def is_wildcard_type(self) -> bool:
        return self.type == "*"

    @property
    def is_wildcard_subtype(self) -> bool:
        return self.subtype == "*" or self.subtype.startswith("*+")

    def includes(self, other: MediaType) -> bool:
        """True if *other* falls within this media type.

        ``*/*`` includes everything, ``text/*`` includes ``text/html``,
        ``application/*+json`` includes ``application/vnd.api+json``.
        """
        if self.is_wildcard_type:
            return True
        if self.type != other.type:
            return False
        if self.subtype == other.subtype:
            return True
        if not self.is_wildcard_subtype:
            return False
        plus = self.subtype.find("+")
        if plus == -1:
            return True
        other_plus = other.subtype.find("+")
        if other_plus == -1:
            return False
        return self.subtype[plus + 1 :] == other.subtype[other_plus + 1 :]

    def is_compatible_with(self, other: MediaType) -> bool:
        """True if either media type includes the other."""
        return self.includes(other) or other.includes(self)

    def __str__(self) -> str:
        return f"{self.type}/{self.subtype}"


ALL = MediaType("*", "*")


@lru_cache(maxsize=128)
def find_format(name: str) -> MediaType | None:
    """Look up a short format name (``json``) or parse a full media type.

    Returns ``None`` when the name is unknown or malformed.
    """
    if "/" in name or name.strip() == "*":
        try:
            return MediaType.parse(name)
        except ConfigurationError:
            return None
    key = name.strip().lower().lstrip(".")
    if key in _SHORT_NAMES:
        return MediaType.parse(_SHORT_NAMES[key])
    guessed, _ = mimetypes.guess_type(f"file.{key}", strict=False)
    if guessed is None:
        return None
    return MediaType.parse(guessed)


def resolve_format(name: str) -> MediaType:
    """Like ``find_format`` but raises ``ConfigurationError`` for unknown names."""
    media_type = find_format(name)
    if media_type is None:
        msg = f"Unknown format {name!r}"
        raise ConfigurationError(msg)
    return media_type


def format_list(formats: tuple[MediaType, ...]) -> str:
    """Comma-join media types the way route listings display them."""
    return ", ".join(str(mt) for mt in formats)
