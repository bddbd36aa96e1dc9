import pytest

from fetch_request_spec.defaults import DefaultsStore, get_default_store
from fetch_request_spec.handlers import HandlerRegistry, get_default_registry


@pytest.fixture(autouse=True)
def reset_process_state():
    """Keep the process-wide store and registry clean between tests."""
    get_default_store().reset()
    get_default_registry().clear()
    yield
    get_default_store().reset()
    get_default_registry().clear()


@pytest.fixture
def defaults():
    store = DefaultsStore()
    store.set_base_url("http://localhost:3000")
    return store


@pytest.fixture
def registry():
    return HandlerRegistry()
