"""
Fluent request specification builder.
"""
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Dict, Literal, Optional, Union
from urllib.parse import urlparse

import httpx

from .body import (
    BodyVariant,
    FormBody,
    GraphQLBody,
    JsonBody,
    MultipartBody,
    RawBody,
    encode_body,
    fold_file_upload,
)
from .defaults import DefaultsStore, get_default_store
from .errors import (
    ConflictingBodyError,
    IncompleteSpecError,
    InvalidSpecValueError,
    MissingBaseUrlError,
)
from .handlers import HandlerRegistry, get_default_registry
from .headers import FrozenHeaders, merge_headers, set_header
from .path_template import resolve_path_template
from .query import add_param, merge_query
from .coercion import coerce_to_string
from .types import (
    Auth,
    FileUpload,
    FileUploadOptions,
    MultipartPart,
    ResolvedRequest,
    is_positive_int,
)

logger = logging.getLogger(__name__)

LOG_PREFIX = "[RequestSpec]"

BodyConflictPolicy = Literal["last_wins", "error"]
DEFAULT_BODY_CONFLICT_POLICY: BodyConflictPolicy = "last_wins"

# RFC 7230 token
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

_MISSING: Any = object()

OptionsInput = Union[FileUploadOptions, Mapping, None]


def _read_option(options: OptionsInput, *names: str) -> Optional[Any]:
    if options is None:
        return None
    if isinstance(options, FileUploadOptions):
        return getattr(options, names[0])
    for name in names:
        if options.get(name) is not None:
            return options[name]
    return None


def _is_absolute_url(path: str) -> bool:
    parsed = urlparse(path)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _join_url(base_url: str, path: str) -> str:
    base_url = base_url.rstrip("/")
    if not path:
        return base_url
    if path.startswith(("/", "?")):
        return f"{base_url}{path}"
    return f"{base_url}/{path}"


class RequestSpec:
    """
    Accumulates request configuration and resolves it into a ResolvedRequest.

    Every ``with_*`` call returns the spec, so calls chain::

        request = (
            RequestSpec()
            .get("/api/project/{project}")
            .with_path_params("project", "x")
            .with_query_params({"page": 2})
            .resolve()
        )

    Defaults (base url, headers, timeout, redirects) are read from the
    DefaultsStore in :meth:`resolve`, not when the spec is built.
    """

    def __init__(
        self,
        handler: Optional[str] = None,
        data: Any = None,
        *,
        defaults: Optional[DefaultsStore] = None,
        registry: Optional[HandlerRegistry] = None,
        body_conflict_policy: BodyConflictPolicy = DEFAULT_BODY_CONFLICT_POLICY,
    ):
        if body_conflict_policy not in ("last_wins", "error"):
            raise InvalidSpecValueError("body_conflict_policy", body_conflict_policy)

        self._defaults = defaults if defaults is not None else get_default_store()
        self._registry = registry if registry is not None else get_default_registry()
        self._body_conflict_policy = body_conflict_policy

        self._method: Optional[str] = None
        self._path: Optional[str] = None
        self._base_url: Optional[str] = None
        self._path_params: Dict[str, Any] = {}
        self._query = httpx.QueryParams()
        self._headers = httpx.Headers()
        self._cookies: Dict[str, str] = {}
        self._body: Optional[BodyVariant] = None
        self._file: Optional[FileUpload] = None
        self._timeout_ms: Optional[int] = None
        self._follow_redirects: Optional[bool] = None
        self._auth: Optional[Auth] = None

        if handler is not None:
            self.use(handler, data)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def method(self) -> Optional[str]:
        return self._method

    @property
    def path(self) -> Optional[str]:
        return self._path

    @property
    def body(self) -> Optional[BodyVariant]:
        """The active body variant, if any."""
        return self._body

    @property
    def file_upload(self) -> Optional[FileUpload]:
        return self._file

    @property
    def headers(self) -> httpx.Headers:
        return self._headers.copy()

    @property
    def path_params(self) -> Dict[str, Any]:
        return dict(self._path_params)

    @property
    def query_params(self) -> httpx.QueryParams:
        return self._query

    # ------------------------------------------------------------------
    # Method and path
    # ------------------------------------------------------------------

    def with_method(self, method: str) -> "RequestSpec":
        if not isinstance(method, str) or not _METHOD_TOKEN.fullmatch(method):
            raise InvalidSpecValueError("method", method, "expected an HTTP method token")
        self._method = method.upper()
        return self

    def with_path(self, path: str) -> "RequestSpec":
        if not isinstance(path, str) or not path:
            raise InvalidSpecValueError("path", path, "expected a non-empty string")
        self._path = path
        return self

    def with_request(self, method: str, path: str) -> "RequestSpec":
        """Set method and path in one call; works for any verb."""
        return self.with_method(method).with_path(path)

    def get(self, path: str) -> "RequestSpec":
        return self.with_request("GET", path)

    def post(self, path: str) -> "RequestSpec":
        return self.with_request("POST", path)

    def put(self, path: str) -> "RequestSpec":
        return self.with_request("PUT", path)

    def patch(self, path: str) -> "RequestSpec":
        return self.with_request("PATCH", path)

    def delete(self, path: str) -> "RequestSpec":
        return self.with_request("DELETE", path)

    def head(self, path: str) -> "RequestSpec":
        return self.with_request("HEAD", path)

    def options(self, path: str) -> "RequestSpec":
        return self.with_request("OPTIONS", path)

    def trace(self, path: str) -> "RequestSpec":
        return self.with_request("TRACE", path)

    def with_base_url(self, base_url: str) -> "RequestSpec":
        if not isinstance(base_url, str) or not base_url.startswith(("http://", "https://")):
            raise InvalidSpecValueError("base_url", base_url, "must start with http:// or https://")
        self._base_url = base_url.rstrip("/")
        return self

    # ------------------------------------------------------------------
    # Key/value collections
    # ------------------------------------------------------------------

    def _apply(
        self,
        field: str,
        key: Any,
        value: Any,
        setter: Callable[[str, Any], None],
    ) -> "RequestSpec":
        if isinstance(key, Mapping):
            if value is not _MISSING:
                raise InvalidSpecValueError(field, value, "unexpected value with a mapping")
            for k, v in key.items():
                self._apply(field, k, v, setter)
            return self

        if not isinstance(key, str) or not key:
            raise InvalidSpecValueError(field, key, "expected a non-empty string key or a mapping")
        if value is _MISSING or value is None:
            raise InvalidSpecValueError(field, value, f"missing value for '{key}'")
        setter(key, value)
        return self

    def with_path_params(self, key: Union[str, Mapping], value: Any = _MISSING) -> "RequestSpec":
        return self._apply("path_params", key, value, self._path_params.__setitem__)

    def with_query_params(self, key: Union[str, Mapping], value: Any = _MISSING) -> "RequestSpec":
        """Add query params; repeated keys are kept, in insertion order."""
        def add_query(name: str, param_value: Any) -> None:
            self._query = add_param(self._query, name, param_value)

        return self._apply("query_params", key, value, add_query)

    def with_headers(self, key: Union[str, Mapping], value: Any = _MISSING) -> "RequestSpec":
        return self._apply("headers", key, value, lambda name, v: set_header(self._headers, name, v))

    def with_cookies(self, key: Union[str, Mapping], value: Any = _MISSING) -> "RequestSpec":
        """
        Add cookies, sent as a ``Cookie`` header unless one is set explicitly.

        Accepts a name and value, a mapping, or a raw ``"a=1; b=2"`` string.
        """
        if isinstance(key, str) and value is _MISSING and "=" in key:
            for pair in key.split(";"):
                name, _, cookie_value = pair.strip().partition("=")
                if name:
                    self._cookies[name] = cookie_value
            return self

        def set_cookie(name: str, cookie_value: Any) -> None:
            self._cookies[name] = coerce_to_string(cookie_value)

        return self._apply("cookies", key, value, set_cookie)

    # ------------------------------------------------------------------
    # Body variants
    # ------------------------------------------------------------------

    def _set_body(self, body: BodyVariant) -> None:
        current = self._body
        if current is not None and current.kind != body.kind:
            if self._body_conflict_policy == "error":
                raise ConflictingBodyError(current.kind, body.kind)
            logger.debug(f"{LOG_PREFIX} Replacing {current.kind} body with {body.kind} body")
        self._body = body

    def _body_of(self, variant: type) -> Any:
        """The active body if it is a ``variant``, else a fresh one made active."""
        if isinstance(self._body, variant):
            return self._body
        body = variant()
        self._set_body(body)
        return body

    def with_body(self, body: Any) -> "RequestSpec":
        """
        Set a raw body, sent as-is.

        Dicts and lists are not raw content; they are sent as JSON.
        """
        if isinstance(body, (dict, list)):
            return self.with_json(body)
        if isinstance(body, bytearray):
            body = bytes(body)
        if not isinstance(body, (str, bytes)):
            raise InvalidSpecValueError("body", body, "expected str or bytes")
        self._set_body(RawBody(body))
        return self

    def with_json(self, data: Any) -> "RequestSpec":
        self._set_body(JsonBody(data))
        return self

    def with_form(self, key: Union[str, Mapping], value: Any = _MISSING) -> "RequestSpec":
        """Add url-encoded form fields; successive calls accumulate."""
        if isinstance(key, Mapping) and not key:
            self._body_of(FormBody)
            return self
        # Validate before switching the active body
        pending = FormBody()

        def add_field(name: str, field_value: Any) -> None:
            pending.fields = add_param(pending.fields, name, field_value)

        self._apply("form", key, value, add_field)
        form = self._body_of(FormBody)
        for name, field_value in pending.fields.multi_items():
            form.fields = form.fields.add(name, field_value)
        return self

    def with_multipart_form_data(
        self,
        name: Union[str, Mapping],
        value: Any = _MISSING,
        options: OptionsInput = None,
    ) -> "RequestSpec":
        """
        Add multipart parts; successive calls accumulate.

        ``value`` may be text, bytes or a :class:`pathlib.Path` read at
        resolve time. ``options`` may carry ``filename`` and ``content_type``.
        """
        filename = _read_option(options, "filename")
        content_type = _read_option(options, "content_type", "contentType")

        parts = []

        def add_part(part_name: str, payload: Any) -> None:
            if not isinstance(payload, (str, bytes, bytearray, Path)):
                payload = coerce_to_string(payload)
            if isinstance(payload, bytearray):
                payload = bytes(payload)
            parts.append(MultipartPart(part_name, payload, filename, content_type))

        self._apply("multipart", name, value, add_part)
        multipart = self._body_of(MultipartBody)
        multipart.parts.extend(parts)
        return self

    def with_graphql_query(self, query: str) -> "RequestSpec":
        if not isinstance(query, str) or not query.strip():
            raise InvalidSpecValueError("graphql_query", query, "expected a non-empty string")
        self._body_of(GraphQLBody).query = query
        return self

    def with_graphql_variables(self, variables: Mapping) -> "RequestSpec":
        if not isinstance(variables, Mapping):
            raise InvalidSpecValueError("graphql_variables", variables, "expected a mapping")
        self._body_of(GraphQLBody).variables = dict(variables)
        return self

    def with_file(
        self,
        key_or_path: str,
        file_path: Union[str, Path, OptionsInput] = None,
        options: OptionsInput = None,
    ) -> "RequestSpec":
        """
        Attach a file as a multipart part.

        ``with_file(path)`` sends it under the part name ``"file"``;
        ``with_file(key, path)`` names the part. Options may set ``key``,
        ``content_type`` and ``filename`` (defaults to the path's last segment).
        """
        if isinstance(file_path, (FileUploadOptions, Mapping)):
            options, file_path = file_path, None

        if file_path is None:
            key = _read_option(options, "key") or "file"
            path = key_or_path
        else:
            key = key_or_path
            path = file_path

        if not isinstance(key, str) or not key:
            raise InvalidSpecValueError("file.key", key, "expected a non-empty string")
        if not isinstance(path, (str, Path)) or not str(path):
            raise InvalidSpecValueError("file.path", path, "expected a file path")

        self._file = FileUpload(
            file_path=str(path),
            key=key,
            content_type=_read_option(options, "content_type", "contentType"),
            filename=_read_option(options, "filename"),
        )
        return self

    # ------------------------------------------------------------------
    # Transport settings
    # ------------------------------------------------------------------

    def with_timeout(self, timeout_ms: int) -> "RequestSpec":
        if not is_positive_int(timeout_ms):
            raise InvalidSpecValueError("timeout_ms", timeout_ms, "expected a positive integer")
        self._timeout_ms = int(timeout_ms)
        return self

    def with_follow_redirects(self, follow: bool = True) -> "RequestSpec":
        if not isinstance(follow, bool):
            raise InvalidSpecValueError("follow_redirects", follow, "expected a bool")
        self._follow_redirects = follow
        return self

    def with_auth(self, user: str, password: str = "") -> "RequestSpec":
        if not isinstance(user, str) or not user:
            raise InvalidSpecValueError("auth.user", user, "expected a non-empty string")
        self._auth = Auth(user=user, password=password)
        return self

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def use(self, name: str, data: Any = None) -> "RequestSpec":
        """Apply registered handler ``name`` to this spec."""
        self._registry.invoke(name, self, data)
        return self

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _resolve_url(self, path: str) -> str:
        resolved_path = resolve_path_template(path, self._path_params)

        if _is_absolute_url(resolved_path):
            url = resolved_path
        else:
            base_url = self._base_url or self._defaults.base_url
            if not base_url:
                raise MissingBaseUrlError(path)
            url = _join_url(base_url, resolved_path)

        try:
            return merge_query(url, self._query)
        except httpx.InvalidURL as e:
            raise InvalidSpecValueError("url", url, str(e)) from e

    def _resolve_headers(self) -> httpx.Headers:
        headers = merge_headers(self._defaults.headers, self._headers)
        if self._cookies:
            if "Cookie" in self._headers:
                logger.debug(f"{LOG_PREFIX} Explicit Cookie header set; ignoring with_cookies values")
            else:
                headers["Cookie"] = "; ".join(f"{k}={v}" for k, v in self._cookies.items())
        return headers

    def resolve(self) -> ResolvedRequest:
        """
        Merge this spec with the defaults into an immutable ResolvedRequest.

        Raises:
            IncompleteSpecError: method or path not set.
            MissingPathParamError: a path token has no value.
            MissingBaseUrlError: relative path and no base url.
            UnsupportedMethodError: GraphQL body on a non-POST request.
            ConflictingBodyError: a file upload next to a raw, JSON or GraphQL body.
        """
        if not self._method:
            raise IncompleteSpecError("method")
        if not self._path:
            raise IncompleteSpecError("path")

        url = self._resolve_url(self._path)
        headers = self._resolve_headers()

        body = self._body
        if self._file is not None:
            body = fold_file_upload(body, self._file)

        encoded = encode_body(body, self._method, headers)
        if encoded is not None and encoded.content_type:
            if headers.get("Content-Type") != encoded.content_type:
                headers["Content-Type"] = encoded.content_type

        request = ResolvedRequest(
            method=self._method,
            url=url,
            headers=FrozenHeaders(headers),
            body=encoded,
            timeout_ms=self._timeout_ms if self._timeout_ms is not None else self._defaults.timeout_ms,
            follow_redirects=(
                self._follow_redirects
                if self._follow_redirects is not None
                else self._defaults.follow_redirects
            ),
            auth=self._auth,
        )
        logger.debug(f"{LOG_PREFIX} Resolved: {request.to_dict()}")
        return request

    def __repr__(self) -> str:
        body = self._body.kind if self._body else None
        return f"RequestSpec(method={self._method!r}, path={self._path!r}, body={body!r})"
