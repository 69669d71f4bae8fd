"""Binding of urlencoded form bodies and query strings to form DTOs."""

import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)

# Checkbox pairs post "permissions[<code>]" twice: hidden "false", then "true" if checked.
_PERMISSION_FIELD = re.compile(r"^permissions\[(.+)\]$")
_TRUTHY = frozenset({"true", "on", "1", "yes"})
_ROLE_FIELDS = ("role_code", "role_name", "version")


def _last(value: Any) -> Any:
    return value[-1] if isinstance(value, list) else value


def role_form_data(media: dict[str, Any]) -> dict[str, Any]:
    """Normalize a posted role form into RoleForm input."""
    data: dict[str, Any] = {"permissions": {}}
    for key, value in media.items():
        value = _last(value)
        m = _PERMISSION_FIELD.match(key)
        if m:
            data["permissions"][m.group(1)] = str(value).strip().lower() in _TRUTHY
        elif key in _ROLE_FIELDS:
            data[key] = value
    if data.get("version") == "":
        data["version"] = None
    return data


def search_form_data(source: dict[str, Any]) -> dict[str, Any]:
    """Pick non-empty search fields from query params or a posted body."""
    data = {}
    for key in ("role_code", "role_name"):
        value = _last(source.get(key))
        if value:
            data[key] = value
    return data


def field_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by top-level field name."""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        key = str(err["loc"][0]) if err["loc"] else "form"
        errors.setdefault(key, []).append(err["msg"])
    return errors


def bind(model: type[M], data: dict[str, Any]) -> tuple[M | None, dict[str, list[str]]]:
    """Validate data into model; returns (form, {}) or (None, errors)."""
    try:
        return model.model_validate(data), {}
    except ValidationError as e:
        return None, field_errors(e)
