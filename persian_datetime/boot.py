"""Hook implementations that integrate Persian dates with Frappe."""
from __future__ import annotations

from .api import endpoints, preferences


def boot_session(bootinfo):
    """Inject name tables and the resolved formats into the boot payload."""

    context = preferences.get_preference_context()
    context["names"] = endpoints.get_name_tables()
    if isinstance(bootinfo, dict):
        bootinfo.setdefault("persian_datetime", context)
    else:  # ``bootinfo`` is typically a ``frappe._dict``
        setattr(bootinfo, "persian_datetime", context)
