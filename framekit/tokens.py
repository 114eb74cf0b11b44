"""Template substitution for component parameters and effect values.

Two token forms exist:

- ``{{name}}`` anywhere inside a string is replaced by ``str(params[name])``
  and the surrounding text is kept.
- ``{name}`` as the *entire* string value is replaced by the parameter value
  itself, so a number stays a number.

Unknown names are left untouched.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

TEMPLATE_RE = re.compile(r"\{\{(\w+)\}\}")
WHOLE_TOKEN_RE = re.compile(r"^\{(\w+)\}$")

# Static defaults used when an effect token names a property the target lacks.
IDENTITY_ONE_PROPERTIES = {"scale", "scaleX", "scaleY", "opacity"}


def substitute_templates(text: str, params: Mapping[str, Any]) -> str:
    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name in params:
            return str(params[name])
        return match.group(0)

    return TEMPLATE_RE.sub(_replace, text)


def whole_token(value: Any) -> Optional[str]:
    """Return the token name when ``value`` is exactly ``{name}``."""
    if isinstance(value, str):
        match = WHOLE_TOKEN_RE.match(value)
        if match:
            return match.group(1)
    return None


def substitute_params(payload: Any, params: Mapping[str, Any]) -> Any:
    """Recursively substitute parameters inside a parsed JSON structure.

    Returns a new structure; ``payload`` is not modified.
    """
    if isinstance(payload, str):
        name = whole_token(payload)
        if name is not None and name in params:
            return params[name]
        return substitute_templates(payload, params)
    if isinstance(payload, list):
        return [substitute_params(item, params) for item in payload]
    if isinstance(payload, dict):
        return {key: substitute_params(value, params) for key, value in payload.items()}
    return payload


def default_for_property(prop: str) -> float:
    return 1.0 if prop in IDENTITY_ONE_PROPERTIES else 0.0


def substitute_effect_value(value: Any, static_props: Optional[Dict[str, Any]]) -> Any:
    """Replace a ``{prop}`` effect value with the target's static property value."""
    name = whole_token(value)
    if name is None:
        return value
    if static_props is not None and static_props.get(name) is not None:
        return static_props[name]
    return default_for_property(name)
