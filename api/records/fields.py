"""
Turning submitted values into column values.

Validation covers presence of required fields, numeric parsing, accepted
checkboxes and a few closed choices.
"""

from __future__ import annotations

import json
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from core.errors import ValidationError

from .resources import Field, Resource

TRUE_VALUES = {"true", "1", "yes", "on", "y"}
FALSE_VALUES = {"false", "0", "no", "off", "n", ""}

_LIST_SPLIT = re.compile(r"\r?\n|,")
_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def raw_value(field: Field, raw: Mapping[str, Any]) -> Any:
    if field.name in raw:
        return raw[field.name]
    if field.alias and field.alias in raw:
        return raw[field.alias]
    return None


def parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValidationError(f"'{name}' must be true or false.")


def parse_list(value: Any, name: str) -> list[Any]:
    """
    Accept a JSON array, a real list, or newline/comma separated text.
    Real lists are kept item for item; only text is split.
    """
    if isinstance(value, (list, tuple)):
        return [v.strip() if isinstance(v, str) else v for v in value if not is_blank(v)]

    text = str(value).strip()
    if text.startswith("["):
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"'{name}' must be a JSON array or a comma/newline separated list.") from exc
        if not isinstance(decoded, list):
            raise ValidationError(f"'{name}' must be a JSON array.")
        return decoded
    return [part.strip() for part in _LIST_SPLIT.split(text) if part.strip()]


def coerce(field: Field, value: Any) -> Any:
    name = field.name
    if field.kind == "int":
        try:
            return int(str(value).strip())
        except ValueError as exc:
            raise ValidationError(f"'{name}' must be an integer.") from exc
    if field.kind == "number":
        try:
            number = Decimal(str(value).strip().replace(",", ""))
        except InvalidOperation as exc:
            raise ValidationError(f"'{name}' must be a number.") from exc
        if not number.is_finite():
            raise ValidationError(f"'{name}' must be a number.")
        return number
    if field.kind == "bool":
        return parse_bool(value, name)
    if field.kind == "list":
        return parse_list(value, name)

    text = value if isinstance(value, str) else str(value)
    if field.choices and text not in field.choices:
        raise ValidationError(f"'{name}' must be one of: {', '.join(field.choices)}.")
    return text


def _default(field: Field) -> Any:
    if field.kind == "list" and field.default is None:
        return []
    return field.default


def _check_required(field: Field, value: Any) -> None:
    if field.kind == "bool":
        if value is not True:
            raise ValidationError(f"'{field.name}' must be accepted.")
    elif value is None or value == []:
        raise ValidationError(f"'{field.name}' is required.")


def build_values(resource: Resource, raw: Mapping[str, Any], *, updating: bool = False) -> dict[str, Any]:
    """
    Column values for the scalar fields of a create/update.

    - create / replace-update: every field gets a value; omitted ones fall
      back to their default and required ones must be present.
    - merge-update: only submitted fields are returned; the rest keep
      their stored value.
    """
    merge = updating and resource.update_mode == "merge"
    values: dict[str, Any] = {}
    missing: list[str] = []

    for field in resource.fields:
        submitted = raw_value(field, raw)
        if is_blank(submitted):
            if merge:
                continue
            if field.required and field.kind != "bool":
                missing.append(field.name)
                continue
            value = _default(field)
        else:
            value = coerce(field, submitted)

        if field.required:
            _check_required(field, value)
        values[field.name] = value

    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}.")
    return values


def slugify(text: str) -> str:
    return _SLUG_STRIP.sub("-", text.strip().lower()).strip("-")
