"""Default display formats, configurable system-wide and per user."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Optional

from ..date_time import PersianDateTime
from ..errors import FormatError
from ..logs import get_logger

try:  # pragma: no cover - frappe is unavailable during tests
    import frappe  # type: ignore
except Exception:  # pragma: no cover - handled via fallback store
    frappe = None  # type: ignore

__all__ = [
    "DEFAULT_FORMATS",
    "FormatSelection",
    "get_format_preference",
    "get_preference_context",
    "get_system_format",
    "get_user_format",
    "resolve_format",
    "set_format_preference",
    "set_system_format",
    "set_user_format",
]

logger = get_logger(__name__)

FormatTarget = Literal["datetime", "month"]
FormatSource = Literal["default", "system", "user"]

DEFAULT_FORMATS: Dict[str, str] = {
    "datetime": "F",
    "month": "yyyy/mm",
}
# sample instant used to reject unusable datetime patterns
_SAMPLE_MOMENT = PersianDateTime(1400, 1, 1, 12, 30)

_PREFERENCE_KEYS = {
    "datetime": "persian_datetime_format",
    "month": "persian_month_format",
}


@dataclass(frozen=True)
class FormatSelection:
    """Resolved format pattern and metadata about its origin."""

    value: str
    source: FormatSource


_FALLBACK_STORE: Dict[str, Dict[Optional[str], Optional[str]]] = {
    "system": {},
    "user": {},
}


def _require_target(target: str) -> str:
    if target not in _PREFERENCE_KEYS:
        raise ValueError("target must be one of: {}".format(", ".join(sorted(_PREFERENCE_KEYS))))
    return target


def _normalize_format(target: str, value: Optional[str]) -> Optional[str]:
    if not isinstance(value, str) or not value:
        return None
    if target == "datetime":
        try:
            _SAMPLE_MOMENT.to_string(value)
        except FormatError:
            return None
    return value


def _require_format(target: str, value: Optional[str]) -> str:
    normalized = _normalize_format(target, value)
    if not normalized:
        raise ValueError(f"{value!r} is not a valid {target} format")
    return normalized


def _store_key(target: str, user: Optional[str]) -> str:
    return f"{_PREFERENCE_KEYS[target]}:{user or ''}"


def _session_user(user: Optional[str]) -> Optional[str]:
    if user:
        return user
    return getattr(getattr(frappe, "session", None), "user", None)  # type: ignore[attr-defined]


def _read_system_value(target: str) -> Optional[str]:
    if frappe:
        stored = frappe.db.get_default(_PREFERENCE_KEYS[target])  # type: ignore[attr-defined]
        return _normalize_format(target, stored)
    return _FALLBACK_STORE["system"].get(_store_key(target, None))


def _write_system_value(target: str, value: str) -> None:
    logger.info("system %s format set to %r", target, value)
    if frappe:
        frappe.db.set_default(_PREFERENCE_KEYS[target], value)  # type: ignore[attr-defined]
        if hasattr(frappe, "clear_cache"):
            frappe.clear_cache()
        return
    _FALLBACK_STORE["system"][_store_key(target, None)] = value


def _read_user_value(target: str, user: Optional[str]) -> Optional[str]:
    if frappe:
        user = _session_user(user)
        if not user or user == "Guest":
            return None
        stored = frappe.db.get_default(_PREFERENCE_KEYS[target], user=user)  # type: ignore[attr-defined]
        return _normalize_format(target, stored)
    if user is None:
        return None
    return _FALLBACK_STORE["user"].get(_store_key(target, user))


def _write_user_value(target: str, value: str, user: Optional[str]) -> None:
    if frappe:
        user = _session_user(user)
        if not user or user == "Guest":  # pragma: no cover - depends on Frappe session
            raise ValueError("Cannot store format preference for anonymous sessions")
        logger.info("%s format for %s set to %r", target, user, value)
        frappe.db.set_default(_PREFERENCE_KEYS[target], value, user=user)  # type: ignore[attr-defined]
        if hasattr(frappe, "defaults") and hasattr(frappe.defaults, "clear_cache"):
            frappe.defaults.clear_cache(user=user)  # type: ignore[attr-defined]
        return
    if user is None:
        raise RuntimeError("user must be provided when frappe is unavailable")
    logger.info("%s format for %s set to %r", target, user, value)
    _FALLBACK_STORE["user"][_store_key(target, user)] = value


def get_system_format(target: FormatTarget, *, raw: bool = False) -> str:
    """Return the system-wide format for ``"datetime"`` or ``"month"`` values."""

    stored = _read_system_value(_require_target(target))
    if raw:
        return stored or ""
    return stored or DEFAULT_FORMATS[target]


def set_system_format(target: FormatTarget, value: str) -> FormatSelection:
    _require_target(target)
    _write_system_value(target, _require_format(target, value))
    return resolve_format(target)


def get_user_format(target: FormatTarget, user: Optional[str] = None) -> Optional[str]:
    return _read_user_value(_require_target(target), user)


def set_user_format(target: FormatTarget, value: str, user: Optional[str] = None) -> FormatSelection:
    _require_target(target)
    _write_user_value(target, _require_format(target, value), user)
    return resolve_format(target, user)


def resolve_format(target: FormatTarget, user: Optional[str] = None) -> FormatSelection:
    """Resolve the active format taking user and system overrides into account."""

    user_value = get_user_format(target, user)
    if user_value:
        return FormatSelection(user_value, "user")

    system_raw = get_system_format(target, raw=True)
    if system_raw:
        return FormatSelection(system_raw, "system")

    return FormatSelection(DEFAULT_FORMATS[_require_target(target)], "default")


def get_preference_context(user: Optional[str] = None) -> Dict[str, object]:
    """Return a serialisable representation of every resolved format."""

    context: Dict[str, object] = {}
    for target in sorted(_PREFERENCE_KEYS):
        resolved = resolve_format(target, user)  # type: ignore[arg-type]
        context[f"{target}_format"] = resolved.value
        context[f"{target}_source"] = resolved.source
    return context


def set_format_preference(
    scope: str,
    target: str,
    value: str,
    user: Optional[str] = None,
) -> Dict[str, object]:
    """Update a format preference and return the resulting context."""

    normalized_scope = (scope or "user").strip().lower()
    if normalized_scope == "system":
        set_system_format(target, value)  # type: ignore[arg-type]
        return get_preference_context()
    if normalized_scope == "user":
        set_user_format(target, value, user)  # type: ignore[arg-type]
        return get_preference_context(user)
    raise ValueError("scope must be either 'system' or 'user'")


def get_format_preference(user: Optional[str] = None) -> Dict[str, object]:
    """Return the currently resolved preference context."""

    return get_preference_context(user)


def _maybe_whitelist(func):  # pragma: no cover - exercised in Frappe environments
    if frappe and hasattr(frappe, "whitelist"):
        return frappe.whitelist()(func)  # type: ignore[attr-defined]
    return func


get_format_preference = _maybe_whitelist(get_format_preference)
set_format_preference = _maybe_whitelist(set_format_preference)
