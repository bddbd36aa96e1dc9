"""
Seed the defaults store from environment variables or a YAML file.
"""
import logging
import os
from typing import Any, Mapping, Optional

import yaml
from dotenv import load_dotenv

from .defaults import DefaultsStore, get_default_store

logger = logging.getLogger(__name__)

LOG_PREFIX = "[RequestDefaults]"

ENV_BASE_URL = "FETCH_REQUEST_SPEC_BASE_URL"
ENV_TIMEOUT_MS = "FETCH_REQUEST_SPEC_TIMEOUT_MS"
ENV_FOLLOW_REDIRECTS = "FETCH_REQUEST_SPEC_FOLLOW_REDIRECTS"

YAML_ROOT_KEY = "request_defaults"

_TRUE = ("true", "1", "yes", "on")
_FALSE = ("false", "0", "no", "off")


def parse_timeout(value: Any, source: str) -> Optional[int]:
    """Timeout in ms from an env string or YAML scalar; None (logged) if unusable."""
    if isinstance(value, bool):
        value = None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"{LOG_PREFIX} Ignoring timeout {value!r} from {source}")
        return None


def parse_flag(value: Any, source: str) -> Optional[bool]:
    """Redirect flag from an env string or YAML scalar; None (logged) if unusable."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    logger.warning(f"{LOG_PREFIX} Ignoring follow_redirects {value!r} from {source}")
    return None


def _apply(store: DefaultsStore, values: Mapping[str, Any], source: str) -> None:
    if values.get("base_url"):
        store.set_base_url(values["base_url"])
    if values.get("timeout_ms") is not None:
        timeout_ms = parse_timeout(values["timeout_ms"], source)
        if timeout_ms is not None:
            store.set_default_timeout(timeout_ms)
    if values.get("follow_redirects") is not None:
        follow = parse_flag(values["follow_redirects"], source)
        if follow is not None:
            store.set_follow_redirects(follow)
    if values.get("headers"):
        store.set_default_headers(values["headers"])


def load_defaults_from_env(
    store: Optional[DefaultsStore] = None,
    env_file: Optional[str] = None,
) -> DefaultsStore:
    """
    Apply ``FETCH_REQUEST_SPEC_*`` environment variables to ``store``.

    If ``env_file`` exists it is loaded first; variables already present in
    the environment win over the file.
    """
    store = store or get_default_store()

    if env_file and os.path.exists(env_file):
        load_dotenv(env_file)
        logger.debug(f"{LOG_PREFIX} Loaded env file {env_file}")

    _apply(
        store,
        {
            "base_url": os.getenv(ENV_BASE_URL),
            "timeout_ms": os.getenv(ENV_TIMEOUT_MS),
            "follow_redirects": os.getenv(ENV_FOLLOW_REDIRECTS),
        },
        "environment",
    )
    return store


def load_defaults_from_yaml(path: str, store: Optional[DefaultsStore] = None) -> DefaultsStore:
    """
    Apply defaults from a YAML document.

    The values may sit at the top level or under a ``request_defaults`` key::

        request_defaults:
          base_url: http://localhost:3000
          timeout_ms: 5000
          follow_redirects: false
          headers:
            Accept: application/json
    """
    store = store or get_default_store()

    if not os.path.exists(path):
        msg = f"Config file not found: {path}"
        logger.error(f"{LOG_PREFIX} {msg}")
        raise FileNotFoundError(msg)

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {path}")

    section = data.get(YAML_ROOT_KEY, data)
    if not isinstance(section, dict):
        raise ValueError(f"Expected '{YAML_ROOT_KEY}' in {path} to be a mapping")

    _apply(store, section, path)

    logger.info(f"{LOG_PREFIX} Loaded defaults from {path}")
    return store
