from typing import Any, Optional


class RequestSpecError(Exception):
    """Base exception for request specification errors."""
    pass


class IncompleteSpecError(RequestSpecError):
    def __init__(self, missing: str):
        msg = f"Request spec is incomplete: '{missing}' is not set"
        super().__init__(msg)
        self.missing = missing


class MissingPathParamError(RequestSpecError):
    def __init__(self, param: str, template: Optional[str] = None):
        msg = f"Missing value for path param '{param}'"
        if template:
            msg += f" in '{template}'"
        super().__init__(msg)
        self.param = param
        self.template = template


class MissingBaseUrlError(RequestSpecError):
    def __init__(self, path: str):
        msg = f"Path '{path}' is relative and no base url is configured"
        super().__init__(msg)
        self.path = path


class ConflictingBodyError(RequestSpecError):
    def __init__(self, existing: str, incoming: str):
        msg = f"Cannot set a {incoming} body: a {existing} body is already set"
        super().__init__(msg)
        self.existing = existing
        self.incoming = incoming


class UnsupportedMethodError(RequestSpecError):
    def __init__(self, method: str, body_kind: str):
        msg = f"A {body_kind} body is not supported for method '{method}'"
        super().__init__(msg)
        self.method = method
        self.body_kind = body_kind


class UnknownHandlerError(RequestSpecError):
    def __init__(self, name: str):
        msg = f"No handler registered under '{name}'"
        super().__init__(msg)
        self.name = name


class DuplicateHandlerError(RequestSpecError):
    def __init__(self, name: str):
        msg = f"A handler is already registered under '{name}'"
        super().__init__(msg)
        self.name = name


class InvalidSpecValueError(RequestSpecError, ValueError):
    """Raised by a configuration call given a value it cannot accept."""

    def __init__(self, field: str, value: Any, reason: str = ""):
        msg = f"Invalid value for '{field}': {value!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.field = field
        self.value = value
