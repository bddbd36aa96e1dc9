"""
Core type definitions for fetch-request-spec.
"""
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .headers import FrozenHeaders

FilePayload = Union[str, bytes, Path]

SENSITIVE_HEADERS = ("authorization", "cookie", "proxy-authorization", "x-api-key")
REDACTED = "<redacted>"


@dataclass(frozen=True)
class Auth:
    """Basic auth credentials."""
    user: str
    password: str = ""

    def __repr__(self) -> str:
        return f"Auth(user={self.user!r}, password={REDACTED!r})"


@dataclass(frozen=True)
class FileUploadOptions:
    key: Optional[str] = None
    content_type: Optional[str] = None
    filename: Optional[str] = None


@dataclass(frozen=True)
class FileUpload:
    """A local file to send as a multipart part."""
    file_path: str
    key: str = "file"
    content_type: Optional[str] = None
    filename: Optional[str] = None

    @property
    def resolved_filename(self) -> str:
        return self.filename or Path(self.file_path).name


@dataclass(frozen=True)
class MultipartPart:
    """A single multipart/form-data part."""
    name: str
    payload: FilePayload
    filename: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class EncodedBody:
    content: bytes
    content_type: Optional[str] = None

    def __len__(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ResolvedRequest:
    """Fully resolved request, ready to hand to a transport."""
    method: str
    url: str
    headers: FrozenHeaders = field(default_factory=FrozenHeaders)
    body: Optional[EncodedBody] = None
    timeout_ms: int = 3000
    follow_redirects: bool = True
    auth: Optional[Auth] = None

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def content(self) -> Optional[bytes]:
        return self.body.content if self.body else None

    def to_dict(self, redact: bool = True) -> Dict[str, Any]:
        """Plain dict view, with credentials redacted for logging."""
        headers = self.headers.to_dict()
        if redact:
            headers = {
                k: (REDACTED if k.lower() in SENSITIVE_HEADERS else v)
                for k, v in headers.items()
            }
        body: Any = None
        if self.body is not None:
            body = {
                "content_type": self.body.content_type,
                "length": len(self.body),
            }
        return {
            "method": self.method,
            "url": self.url,
            "headers": headers,
            "body": body,
            "timeout_ms": self.timeout_ms,
            "follow_redirects": self.follow_redirects,
            "auth": None if self.auth is None else (
                self.auth.user if redact else (self.auth.user, self.auth.password)
            ),
        }


def is_positive_int(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        return False
    return value > 0
