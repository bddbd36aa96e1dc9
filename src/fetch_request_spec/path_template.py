"""
Path template resolution: ``/api/project/{project}`` -> ``/api/project/x``.
"""
import re
from typing import Any, List, Mapping

from .coercion import coerce_to_string
from .errors import MissingPathParamError

PATTERNS = {
    # {name} with no nested braces
    "PATH_PARAM": re.compile(r"\{([A-Za-z_][A-Za-z0-9_\-]*)\}"),
}


def extract_path_params(template: str) -> List[str]:
    """Token names in order of first appearance."""
    names: List[str] = []
    for match in PATTERNS["PATH_PARAM"].finditer(template or ""):
        if match.group(1) not in names:
            names.append(match.group(1))
    return names


def resolve_path_template(template: str, params: Mapping[str, Any]) -> str:
    """
    Substitute every ``{key}`` token in ``template`` from ``params``.

    Values are inserted verbatim, without URL-encoding, so a value may
    deliberately carry slashes. Params with no matching token are ignored.

    Raises:
        MissingPathParamError: naming the first token without a value.
    """
    if not template:
        return ""

    for name in extract_path_params(template):
        if name not in params:
            raise MissingPathParamError(name, template)

    def replace(match: "re.Match[str]") -> str:
        return coerce_to_string(params[match.group(1)])

    return PATTERNS["PATH_PARAM"].sub(replace, template)
