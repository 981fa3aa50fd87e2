"""Multipart form assembly for create-with-form requests."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from apimanager.transport.client import FormFiles


def _as_part(value: object) -> object:
    # (filename, content[, content_type]) tuples and file objects are uploads;
    # everything else is sent as a plain text field without a filename.
    if isinstance(value, tuple) or hasattr(value, "read"):
        return value
    if isinstance(value, str | bytes):
        return (None, value)
    return (None, str(value))


class MultipartForm:
    """Ordered ``multipart/form-data`` fields, built fresh for each call."""

    __slots__ = ("_entries",)

    def __init__(self, entries: cabc.Iterable[tuple[str, object]] = ()) -> None:
        """Initialise the form with optional ``(name, value)`` entries."""
        self._entries: list[tuple[str, object]] = list(entries)

    def append(self, name: str, value: object) -> None:
        """Append a field; repeated names are kept as separate parts."""
        self._entries.append((name, value))

    @property
    def entries(self) -> list[tuple[str, object]]:
        """Return a copy of the ``(name, value)`` pairs in insertion order."""
        return list(self._entries)

    def to_files(self) -> FormFiles:
        """Return the fields in the shape httpx expects for ``files=``."""
        return [(name, _as_part(value)) for name, value in self._entries]

    def __bool__(self) -> bool:
        """Return whether the form holds at least one field."""
        return bool(self._entries)

    def __len__(self) -> int:
        """Return the number of fields."""
        return len(self._entries)

    def __repr__(self) -> str:
        """Return a debug representation listing field names."""
        names = ", ".join(name for name, _ in self._entries)
        return f"MultipartForm([{names}])"


__all__ = ["MultipartForm"]
