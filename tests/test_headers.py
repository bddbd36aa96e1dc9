import httpx
import pytest
from fetch_request_spec.headers import FrozenHeaders, header_items, merge_headers, set_header, to_headers

class TestHeaderHelpers:
    def test_case_insensitive_lookup(self):
        headers = to_headers({"Content-Type": "text/plain"})
        assert headers["content-type"] == "text/plain"
        assert "CONTENT-TYPE" in headers

    def test_last_write_wins_and_keeps_casing(self):
        headers = to_headers({"authorization": "Basic xxxxx"})
        set_header(headers, "Authorization", "Basic abc")
        assert header_items(headers) == [("Authorization", "Basic abc")]
        assert len(headers) == 1

    def test_merge_does_not_mutate(self):
        base = to_headers({"Accept": "text/html"})
        merged = merge_headers(base, {"accept": "application/json", "X-Id": "1"})
        assert base["Accept"] == "text/html"
        assert merged["Accept"] == "application/json"
        assert merged["x-id"] == "1"

    def test_values_coerced(self):
        headers = to_headers({"X-Count": 3, "X-Flag": True})
        assert headers["x-count"] == "3"
        assert headers["x-flag"] == "true"

    @pytest.mark.parametrize("entry", [{"": "x"}, {"X-Opt": None}])
    def test_rejects_bad_entries(self, entry):
        with pytest.raises(ValueError):
            to_headers(entry)

class TestFrozenHeaders:
    def test_read_only(self):
        frozen = FrozenHeaders({"Accept": "*/*"})
        assert frozen["accept"] == "*/*"
        with pytest.raises(TypeError):
            frozen["accept"] = "x"  # type: ignore[index]

    def test_snapshot_independent(self):
        headers = httpx.Headers({"A": "1"})
        frozen = FrozenHeaders(headers)
        headers["A"] = "2"
        assert frozen["A"] == "1"
        assert frozen.to_dict() == {"A": "1"}

    def test_keys_keep_casing(self):
        frozen = FrozenHeaders({"X-Trace": "t"})
        assert list(frozen) == ["X-Trace"]
        assert frozen.get_key("x-trace") == "X-Trace"
        assert frozen.get_key("missing") is None

    def test_equality(self):
        assert FrozenHeaders({"A": "1"}) == {"a": "1"}
        assert FrozenHeaders({"A": "1"}) != {"a": "2"}
        assert hash(FrozenHeaders({"A": "1"})) == hash(FrozenHeaders({"a": "1"}))
