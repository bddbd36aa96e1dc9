"""
Process-wide request defaults.

Defaults are read by ``RequestSpec.resolve()`` only, so changes made after a
spec was configured but before it is resolved still apply to it. The store
has no locking: configure it once during test setup, before any concurrent
work starts.
"""
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .headers import header_items, set_header, to_headers

logger = logging.getLogger(__name__)

LOG_PREFIX = "[RequestDefaults]"

# Constants
DEFAULT_TIMEOUT_MS = 3000
DEFAULT_FOLLOW_REDIRECTS = True


class DefaultsConfig(BaseModel):
    """Default values applied to every resolved request."""
    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    base_url: Optional[str] = None
    headers: httpx.Headers = Field(default_factory=httpx.Headers)
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0, strict=True)
    follow_redirects: bool = Field(default=DEFAULT_FOLLOW_REDIRECTS, strict=True)

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("headers", mode="before")
    @classmethod
    def coerce_headers(cls, v: Any) -> httpx.Headers:
        if v is None:
            return httpx.Headers()
        if isinstance(v, (Mapping, httpx.Headers)):
            return to_headers(v)
        raise ValueError("headers must be a mapping")


class DefaultsStore:
    """
    Mutable holder for a DefaultsConfig.

    Setters validate through the pydantic model, so an invalid value raises
    ``pydantic.ValidationError`` and leaves the store unchanged.
    """

    def __init__(self, config: Optional[DefaultsConfig] = None):
        self._config = config or DefaultsConfig()

    @property
    def config(self) -> DefaultsConfig:
        return self._config

    @property
    def base_url(self) -> Optional[str]:
        return self._config.base_url

    @property
    def headers(self) -> httpx.Headers:
        return self._config.headers

    @property
    def timeout_ms(self) -> int:
        return self._config.timeout_ms

    @property
    def follow_redirects(self) -> bool:
        return self._config.follow_redirects

    def set_base_url(self, url: Optional[str]) -> "DefaultsStore":
        self._config.base_url = url
        logger.debug(f"{LOG_PREFIX} base_url set to {self._config.base_url}")
        return self

    def set_default_timeout(self, timeout_ms: int) -> "DefaultsStore":
        self._config.timeout_ms = timeout_ms
        logger.debug(f"{LOG_PREFIX} timeout_ms set to {timeout_ms}")
        return self

    def set_follow_redirects(self, follow: bool) -> "DefaultsStore":
        self._config.follow_redirects = follow
        logger.debug(f"{LOG_PREFIX} follow_redirects set to {follow}")
        return self

    def set_default_headers(
        self, key: Union[str, Mapping], value: Optional[Any] = None
    ) -> "DefaultsStore":
        """
        Set one default header, or every entry of a mapping.

        Every entry is checked before any is applied; a ``None`` value raises
        ValueError in both forms.
        """
        incoming = httpx.Headers()
        if isinstance(key, Mapping):
            for k, v in key.items():
                set_header(incoming, k, v)
        else:
            set_header(incoming, key, value)
        for k, v in header_items(incoming):
            self._config.headers[k] = v
        logger.debug(f"{LOG_PREFIX} default headers: {[k for k, _ in header_items(self._config.headers)]}")
        return self

    def remove_default_header(self, key: str) -> "DefaultsStore":
        self._config.headers.pop(key, None)
        return self

    def remove_default_headers(self) -> "DefaultsStore":
        self._config.headers = httpx.Headers()
        return self

    def snapshot(self) -> DefaultsConfig:
        """Deep copy of the current config, safe to hold across later setter calls."""
        return self._config.model_copy(update={"headers": self._config.headers.copy()})

    def reset(self) -> "DefaultsStore":
        """Restore built-in defaults. Intended for test setup."""
        self._config = DefaultsConfig()
        return self


_default_store = DefaultsStore()


def get_default_store() -> DefaultsStore:
    return _default_store


def set_base_url(url: Optional[str]) -> DefaultsStore:
    return _default_store.set_base_url(url)


def set_default_timeout(timeout_ms: int) -> DefaultsStore:
    return _default_store.set_default_timeout(timeout_ms)


def set_default_headers(key: Union[str, Mapping], value: Optional[Any] = None) -> DefaultsStore:
    return _default_store.set_default_headers(key, value)


def remove_default_header(key: str) -> DefaultsStore:
    return _default_store.remove_default_header(key)


def remove_default_headers() -> DefaultsStore:
    return _default_store.remove_default_headers()


def set_follow_redirects(follow: bool) -> DefaultsStore:
    return _default_store.set_follow_redirects(follow)
