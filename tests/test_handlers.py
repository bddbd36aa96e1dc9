import pytest
from fetch_request_spec import RequestSpec
from fetch_request_spec.errors import DuplicateHandlerError, UnknownHandlerError
from fetch_request_spec.handlers import HandlerContext, get_default_registry, handler, register_handler

class TestHandlerRegistry:
    def test_register_and_invoke(self, registry, defaults):
        seen = []
        registry.register("record", lambda ctx: seen.append(ctx))
        spec = RequestSpec(defaults=defaults, registry=registry)
        registry.invoke("record", spec, {"k": 1})
        assert len(seen) == 1
        assert isinstance(seen[0], HandlerContext)
        assert seen[0].spec is spec
        assert seen[0].data == {"k": 1}

    def test_fresh_context_per_call(self, registry, defaults):
        seen = []
        registry.register("record", seen.append)
        spec = RequestSpec(defaults=defaults, registry=registry)
        registry.invoke("record", spec)
        registry.invoke("record", spec)
        assert seen[0] is not seen[1]

    def test_unknown(self, registry, defaults):
        with pytest.raises(UnknownHandlerError) as exc:
            registry.invoke("missing-handler", RequestSpec(defaults=defaults, registry=registry))
        assert exc.value.name == "missing-handler"

    def test_duplicate_rejected(self, registry):
        registry.register("h", lambda ctx: None)
        with pytest.raises(DuplicateHandlerError):
            registry.register("h", lambda ctx: None)

    def test_replace(self, registry):
        first = registry.register("h", lambda ctx: "first")
        second = registry.register("h", lambda ctx: "second", replace=True)
        assert registry.get("h") is second
        assert registry.get("h") is not first

    @pytest.mark.parametrize("name", ["", None, 3])
    def test_invalid_name(self, registry, name):
        with pytest.raises(ValueError):
            registry.register(name, lambda ctx: None)

    def test_callback_must_be_callable(self, registry):
        with pytest.raises(TypeError):
            registry.register("h", "not callable")

    def test_decorator(self, registry):
        @registry.handler("json-accept")
        def json_accept(ctx):
            ctx.spec.with_headers("Accept", "application/json")

        assert "json-accept" in registry
        assert registry.names() == ["json-accept"]

    def test_unregister_and_clear(self, registry):
        registry.register("a", lambda ctx: None)
        registry.register("b", lambda ctx: None)
        assert registry.unregister("a") is not None
        assert registry.unregister("a") is None
        assert not registry.has("a")
        registry.clear()
        assert len(registry) == 0

    def test_callback_error_propagates(self, registry, defaults):
        def boom(ctx):
            raise RuntimeError("boom")

        registry.register("boom", boom)
        with pytest.raises(RuntimeError, match="boom"):
            RequestSpec("boom", defaults=defaults, registry=registry)

def test_module_level_registration():
    @handler("module-handler")
    def module_handler(ctx):
        ctx.spec.with_headers("X-From", ctx.data)

    register_handler("other", lambda ctx: None)
    registry = get_default_registry()
    assert registry.has("module-handler")
    assert registry.has("other")
