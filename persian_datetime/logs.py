"""Logger factory that prefers Frappe's site logger when running inside Frappe."""
from __future__ import annotations

import logging

try:  # pragma: no cover - frappe is unavailable during tests
    import frappe  # type: ignore
except Exception:  # pragma: no cover - handled via the standard library
    frappe = None  # type: ignore

__all__ = ["get_logger"]


def get_logger(name: str):
    if frappe and hasattr(frappe, "logger"):  # pragma: no cover - Frappe runtime
        return frappe.logger(name)  # type: ignore[attr-defined]
    return logging.getLogger(name)
