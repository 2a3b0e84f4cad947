from __future__ import annotations

import re
from datetime import date
from typing import Any, Iterable, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_MISSING = object()


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def normalize_email(value: str) -> str:
    return value.strip().lower()


class FieldValidator:
    """Collects field-level errors over a JSON body.

    Each check returns the cleaned value (or None when the field is optional
    and absent); call ``raise_if_errors`` once all fields have been read.
    """

    def __init__(self, data: Optional[dict]):
        if data is not None and not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        self._data = data or {}
        self.errors: list[dict] = []

    def _get(self, field: str) -> Any:
        return self._data.get(field, _MISSING)

    def has(self, field: str) -> bool:
        return field in self._data

    def fail(self, field: str, message: str) -> None:
        self.errors.append({"field": field, "message": message})

    def string(self, field: str, *, optional: bool = False, min_len: int = 1) -> Optional[str]:
        value = self._get(field)
        if value is _MISSING or value is None:
            if not optional:
                self.fail(field, f"{field} is required")
            return None
        if not isinstance(value, str):
            self.fail(field, f"{field} must be a string")
            return None
        stripped = value.strip()
        if len(stripped) < min_len:
            self.fail(field, f"{field} is required" if min_len == 1 else f"{field} must be at least {min_len} characters")
            return None
        return stripped

    def password(self, field: str, *, min_len: int) -> Optional[str]:
        value = self._get(field)
        if value is _MISSING or value is None or value == "":
            self.fail(field, f"{field} is required")
            return None
        try:
            return require_min_length(value, field, min_len)
        except ValidationError as e:
            self.fail(field, str(e))
            return None

    def email(self, field: str = "email", *, optional: bool = False) -> Optional[str]:
        value = self.string(field, optional=optional)
        if value is None:
            return None
        if not _EMAIL_RE.match(value):
            self.fail(field, "A valid email is required")
            return None
        return normalize_email(value)

    def choice(self, field: str, choices: Iterable[Any], *, optional: bool = True):
        """Validate membership in an Enum (or any iterable of str-valued items)."""
        value = self._get(field)
        if value is _MISSING or value is None:
            if not optional:
                self.fail(field, f"{field} is required")
            return None
        choices = list(choices)
        for c in choices:
            if value == getattr(c, "value", c):
                return c
        allowed = ", ".join(str(getattr(c, "value", c)) for c in choices)
        self.fail(field, f"{field} must be one of: {allowed}")
        return None

    def iso_date(self, field: str, *, optional: bool = True) -> Optional[date]:
        value = self._get(field)
        if value is _MISSING or value is None:
            if not optional:
                self.fail(field, f"{field} is required")
            return None
        if not isinstance(value, str):
            self.fail(field, f"{field} must be an ISO 8601 date")
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            self.fail(field, f"{field} must be an ISO 8601 date")
            return None

    def boolean(self, field: str, *, optional: bool = False) -> Optional[bool]:
        value = self._get(field)
        if value is _MISSING or value is None:
            if not optional:
                self.fail(field, f"{field} is required")
            return None
        if not isinstance(value, bool):
            self.fail(field, f"{field} must be a boolean")
            return None
        return value

    def integer(self, field: str, *, optional: bool = True) -> Optional[int]:
        value = self._get(field)
        if value is _MISSING or value is None:
            if not optional:
                self.fail(field, f"{field} is required")
            return None
        if isinstance(value, bool):
            self.fail(field, f"{field} must be an integer id")
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            self.fail(field, f"{field} must be an integer id")
            return None

    def coordinates(self, field: str = "coordinates") -> Optional[tuple[float, float]]:
        value = self._get(field)
        if value is _MISSING or value is None:
            return None
        if (
            not isinstance(value, (list, tuple))
            or len(value) != 2
            or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)
        ):
            self.fail(field, f"{field} must be a pair of numbers")
            return None
        return float(value[0]), float(value[1])

    def raise_if_errors(self) -> None:
        if self.errors:
            raise ValidationError("Validation failed", errors=self.errors)


def parse_query_date(args, field: str) -> Optional[date]:
    """Optional ISO date from query-string args."""
    raw = args.get(field)
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError("Validation failed", errors=[{"field": field, "message": f"{field} must be an ISO 8601 date"}])


def parse_query_int(args, field: str) -> Optional[int]:
    """Optional integer id from query-string args."""
    raw = args.get(field)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("Validation failed", errors=[{"field": field, "message": f"{field} must be an integer id"}])


def parse_query_bool(args, field: str) -> Optional[bool]:
    raw = args.get(field)
    if raw is None or raw == "":
        return None
    return raw.strip().lower() == "true"
