"""
Header handling on top of httpx.Headers.

Specs and the defaults store keep their headers in ``httpx.Headers``, which
is case-insensitive and, on overwrite, keeps the position but takes the
casing of the latest write. ``FrozenHeaders`` is the read-only snapshot a
ResolvedRequest carries.
"""
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import httpx

HeadersInput = Union[Mapping, httpx.Headers, None]


def header_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


def set_header(headers: httpx.Headers, key: Any, value: Any) -> None:
    """Set one header, rejecting empty names and ``None`` values."""
    if not isinstance(key, str) or not key:
        raise ValueError(f"Header name must be a non-empty string, got {key!r}")
    if value is None:
        raise ValueError(f"Missing value for header '{key}'")
    headers[key] = header_value(value)


def header_items(headers: httpx.Headers) -> List[Tuple[str, str]]:
    """``(name, value)`` pairs with the names as they were written."""
    encoding = headers.encoding
    return [(k.decode(encoding), v.decode(encoding)) for k, v in headers.raw]


def to_headers(headers: HeadersInput) -> httpx.Headers:
    """Copy ``headers`` into a new httpx.Headers, validating every entry."""
    result = httpx.Headers()
    if headers is None:
        return result
    items = header_items(headers) if isinstance(headers, httpx.Headers) else headers.items()
    for key, value in items:
        set_header(result, key, value)
    return result


def merge_headers(base: httpx.Headers, overlay: HeadersInput) -> httpx.Headers:
    """Return a copy of ``base`` with ``overlay`` written on top."""
    merged = base.copy()
    for key, value in header_items(to_headers(overlay)):
        merged[key] = value
    return merged


class FrozenHeaders(Mapping):
    """Read-only, case-insensitive snapshot of request headers."""

    def __init__(self, headers: HeadersInput = None):
        self._headers = to_headers(headers)

    def __getitem__(self, key: str) -> str:
        return self._headers[key]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._headers

    def __iter__(self) -> Iterator[str]:
        for key, _ in header_items(self._headers):
            yield key

    def __len__(self) -> int:
        return len(self._headers)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FrozenHeaders):
            other = other._headers
        return self._headers == other

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._headers.multi_items())))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()})"

    def get_key(self, key: str) -> Optional[str]:
        """Return the name as written for ``key``, or None."""
        lookup = key.lower()
        for name, _ in header_items(self._headers):
            if name.lower() == lookup:
                return name
        return None

    def to_dict(self) -> Dict[str, str]:
        return dict(header_items(self._headers))

    def to_httpx(self) -> httpx.Headers:
        return self._headers.copy()
