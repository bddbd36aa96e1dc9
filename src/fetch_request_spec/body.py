"""
Body variants and their encoding.

A spec carries at most one body variant. Each variant knows its ``kind``;
``encode_body`` turns the active variant into bytes plus a content type.
Multipart bodies are rendered by urllib3's form-data encoder.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Union

import httpx
from urllib3 import encode_multipart_formdata
from urllib3.fields import RequestField, guess_content_type

from .coercion import coerce_to_string
from .errors import ConflictingBodyError, IncompleteSpecError, UnsupportedMethodError
from .query import encode_form
from .types import EncodedBody, FileUpload, MultipartPart

logger = logging.getLogger(__name__)

LOG_PREFIX = "[RequestBody]"

# Constants
JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass
class RawBody:
    kind: ClassVar[str] = "raw"
    content: Union[str, bytes]


@dataclass
class JsonBody:
    kind: ClassVar[str] = "json"
    data: Any


@dataclass
class FormBody:
    kind: ClassVar[str] = "form"
    fields: httpx.QueryParams = field(default_factory=httpx.QueryParams)


@dataclass
class MultipartBody:
    kind: ClassVar[str] = "multipart"
    parts: List[MultipartPart] = field(default_factory=list)


@dataclass
class GraphQLBody:
    kind: ClassVar[str] = "graphql"
    query: Optional[str] = None
    variables: Optional[Dict[str, Any]] = None


BodyVariant = Union[RawBody, JsonBody, FormBody, MultipartBody, GraphQLBody]


def dumps_json(data: Any) -> bytes:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def file_part(upload: FileUpload) -> MultipartPart:
    return MultipartPart(
        name=upload.key,
        payload=Path(upload.file_path),
        filename=upload.resolved_filename,
        content_type=upload.content_type,
    )


def fold_file_upload(body: Optional[BodyVariant], upload: FileUpload) -> MultipartBody:
    """
    Merge a file upload into the active body.

    No body or a multipart body gains the file as a further part; form
    fields become text parts next to it. Any other body cannot carry a file.
    """
    if body is None:
        return MultipartBody([file_part(upload)])
    if isinstance(body, MultipartBody):
        return MultipartBody(list(body.parts) + [file_part(upload)])
    if isinstance(body, FormBody):
        parts = [MultipartPart(name=k, payload=v) for k, v in body.fields.multi_items()]
        return MultipartBody(parts + [file_part(upload)])
    raise ConflictingBodyError(body.kind, "file upload")


def request_field(part: MultipartPart) -> RequestField:
    """
    Build the urllib3 field for one part.

    Path payloads are read here. A part with a filename but no explicit
    content type gets one guessed from the filename.
    """
    data = part.payload.read_bytes() if isinstance(part.payload, Path) else part.payload
    if not isinstance(data, (str, bytes)):
        data = coerce_to_string(data)
    content_type = part.content_type
    if content_type is None and part.filename is not None:
        content_type = guess_content_type(part.filename)

    request_param = RequestField(part.name, data, filename=part.filename)
    request_param.make_multipart(content_type=content_type)
    return request_param


def encode_body(
    body: Optional[BodyVariant],
    method: str,
    headers: httpx.Headers,
    boundary: Optional[str] = None,
) -> Optional[EncodedBody]:
    """
    Encode the active body variant.

    ``headers`` are the merged request headers; an explicit Content-Type
    there wins for every variant except multipart, whose content type must
    carry the generated boundary.
    """
    if body is None:
        return None

    explicit = headers.get("Content-Type")

    if isinstance(body, RawBody):
        content = body.content.encode("utf-8") if isinstance(body.content, str) else bytes(body.content)
        return EncodedBody(content, explicit)

    if isinstance(body, JsonBody):
        return EncodedBody(dumps_json(body.data), explicit or JSON_CONTENT_TYPE)

    if isinstance(body, FormBody):
        return EncodedBody(encode_form(body.fields), explicit or FORM_CONTENT_TYPE)

    if isinstance(body, MultipartBody):
        content, content_type = encode_multipart_formdata(
            [request_field(part) for part in body.parts], boundary=boundary
        )
        if explicit and explicit != content_type:
            logger.debug(f"{LOG_PREFIX} Replacing explicit content type '{explicit}' for multipart body")
        return EncodedBody(content, content_type)

    if isinstance(body, GraphQLBody):
        if method != "POST":
            raise UnsupportedMethodError(method, body.kind)
        if not body.query:
            raise IncompleteSpecError("graphql query")
        payload = {"query": body.query, "variables": body.variables or {}}
        return EncodedBody(dumps_json(payload), explicit or JSON_CONTENT_TYPE)

    raise TypeError(f"Unknown body variant: {type(body).__name__}")
