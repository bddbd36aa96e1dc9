import pytest
import fetch_request_spec as frs

def test_module_entry_points_use_process_defaults():
    frs.set_base_url("http://localhost:3000")
    frs.set_default_headers("Authorization", "Basic xxxxx")
    request = frs.get("/api/projects").with_headers("Authorization", "Basic abc").resolve()
    assert request.url == "http://localhost:3000/api/projects"
    assert request.headers["authorization"] == "Basic abc"

@pytest.mark.parametrize("name", ["get", "post", "put", "patch", "delete", "head", "options", "trace"])
def test_method_shortcuts(name):
    spec = getattr(frs, name)("http://h/x")
    assert spec.method == name.upper()
    assert spec.path == "http://h/x"

def test_request_generic_verb():
    assert frs.request("LINK", "http://h/x").resolve().method == "LINK"

def test_spec_with_handler():
    @frs.handler("health")
    def health(ctx):
        ctx.spec.get("http://h/health").with_timeout(ctx.data or 100)

    request = frs.spec("health", 250).resolve()
    assert request.timeout_ms == 250

def test_spec_unknown_handler():
    with pytest.raises(frs.UnknownHandlerError):
        frs.spec("missing-handler")

def test_kwargs_pass_through(defaults, registry):
    registry.register("h", lambda ctx: ctx.spec.with_headers("X", "1"))
    request = frs.spec("h", defaults=defaults, registry=registry).get("/a").resolve()
    assert request.url == "http://localhost:3000/a"
    assert request.headers["x"] == "1"

def test_errors_share_base():
    for err in (
        frs.IncompleteSpecError,
        frs.MissingPathParamError,
        frs.MissingBaseUrlError,
        frs.ConflictingBodyError,
        frs.UnsupportedMethodError,
        frs.UnknownHandlerError,
        frs.DuplicateHandlerError,
        frs.InvalidSpecValueError,
    ):
        assert issubclass(err, frs.RequestSpecError)
