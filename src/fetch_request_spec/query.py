"""
Query and form parameters on top of httpx.QueryParams.

``httpx.QueryParams`` is immutable, so the helpers here return a new
instance. Values are coerced to strings on the way in; list and tuple
values expand into one pair per item.
"""
from collections.abc import Mapping
from typing import Any, Iterable, Tuple, Union
from urllib.parse import urlencode

import httpx

from .coercion import coerce_to_string

QueryInput = Union[Mapping, Iterable[Tuple[str, Any]], httpx.QueryParams, None]


def add_param(params: httpx.QueryParams, key: Any, value: Any) -> httpx.QueryParams:
    if not isinstance(key, str) or not key:
        raise ValueError(f"Query param name must be a non-empty string, got {key!r}")
    values = value if isinstance(value, (list, tuple)) else [value]
    for item in values:
        params = params.add(key, coerce_to_string(item))
    return params


def to_query_params(params: QueryInput) -> httpx.QueryParams:
    if params is None:
        return httpx.QueryParams()
    if isinstance(params, httpx.QueryParams):
        return params
    result = httpx.QueryParams()
    pairs = params.items() if isinstance(params, Mapping) else params
    for key, value in pairs:
        result = add_param(result, key, value)
    return result


def encode_form(params: QueryInput) -> bytes:
    """
    Encode ``params`` as an application/x-www-form-urlencoded body.

    >>> encode_form([("user", "a b"), ("n", 1)])
    b'user=a+b&n=1'
    """
    return urlencode(to_query_params(params).multi_items()).encode("ascii")


def merge_query(url: str, params: QueryInput) -> str:
    """
    Append ``params`` to the query of ``url``.

    Pairs already in ``url`` are kept ahead of the new ones and any
    fragment stays at the end.
    """
    params = to_query_params(params)
    if not params:
        return url
    parsed = httpx.URL(url)
    merged = parsed.params
    for key, value in params.multi_items():
        merged = merged.add(key, value)
    return str(parsed.copy_with(params=merged))
