"""
Fetch Request Spec - declarative HTTP request specifications
"""

from .builder import RequestSpec
from .defaults import (
    DefaultsConfig,
    DefaultsStore,
    get_default_store,
    remove_default_header,
    remove_default_headers,
    set_base_url,
    set_default_headers,
    set_default_timeout,
    set_follow_redirects,
)
from .config_loader import load_defaults_from_env, load_defaults_from_yaml
from .errors import (
    ConflictingBodyError,
    DuplicateHandlerError,
    IncompleteSpecError,
    InvalidSpecValueError,
    MissingBaseUrlError,
    MissingPathParamError,
    RequestSpecError,
    UnknownHandlerError,
    UnsupportedMethodError,
)
from .handlers import HandlerContext, HandlerRegistry, get_default_registry, handler, register_handler
from .headers import FrozenHeaders
from .path_template import extract_path_params, resolve_path_template
from .query import encode_form, merge_query
from .shortcuts import delete, get, head, options, patch, post, put, request, spec, trace
from .transport import HttpxTransport, Transport, TransportResponse
from .types import Auth, EncodedBody, FileUpload, FileUploadOptions, MultipartPart, ResolvedRequest

__version__ = "0.1.0"

__all__ = [
    "RequestSpec",
    "ResolvedRequest",
    "EncodedBody",
    "Auth",
    "FileUpload",
    "FileUploadOptions",
    "MultipartPart",
    "DefaultsConfig",
    "DefaultsStore",
    "get_default_store",
    "set_base_url",
    "set_default_headers",
    "set_default_timeout",
    "set_follow_redirects",
    "remove_default_header",
    "remove_default_headers",
    "load_defaults_from_env",
    "load_defaults_from_yaml",
    "HandlerContext",
    "HandlerRegistry",
    "get_default_registry",
    "handler",
    "register_handler",
    "FrozenHeaders",
    "encode_form",
    "merge_query",
    "extract_path_params",
    "resolve_path_template",
    "spec",
    "request",
    "get",
    "post",
    "put",
    "patch",
    "delete",
    "head",
    "options",
    "trace",
    "Transport",
    "HttpxTransport",
    "TransportResponse",
    "RequestSpecError",
    "IncompleteSpecError",
    "MissingPathParamError",
    "MissingBaseUrlError",
    "ConflictingBodyError",
    "UnsupportedMethodError",
    "UnknownHandlerError",
    "DuplicateHandlerError",
    "InvalidSpecValueError",
]
