"""
Module-level entry points that create a RequestSpec.

Keyword arguments (``defaults``, ``registry``, ``body_conflict_policy``)
are passed through to :class:`RequestSpec`.
"""
from typing import Any, Optional

from .builder import RequestSpec


def spec(handler: Optional[str] = None, data: Any = None, **kwargs: Any) -> RequestSpec:
    """Create a spec, optionally seeded from a registered handler."""
    return RequestSpec(handler, data, **kwargs)


def request(method: str, path: str, **kwargs: Any) -> RequestSpec:
    return RequestSpec(**kwargs).with_request(method, path)


def get(path: str, **kwargs: Any) -> RequestSpec:
    return request("GET", path, **kwargs)


def post(path: str, **kwargs: Any) -> RequestSpec:
    return request("POST", path, **kwargs)


def put(path: str, **kwargs: Any) -> RequestSpec:
    return request("PUT", path, **kwargs)


def patch(path: str, **kwargs: Any) -> RequestSpec:
    return request("PATCH", path, **kwargs)


def delete(path: str, **kwargs: Any) -> RequestSpec:
    return request("DELETE", path, **kwargs)


def head(path: str, **kwargs: Any) -> RequestSpec:
    return request("HEAD", path, **kwargs)


def options(path: str, **kwargs: Any) -> RequestSpec:
    return request("OPTIONS", path, **kwargs)


def trace(path: str, **kwargs: Any) -> RequestSpec:
    return request("TRACE", path, **kwargs)
