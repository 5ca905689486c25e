"""Static presentation metadata for feature modules.

Non-authoritative: which modules a tenant may use is decided by the
tenant_modules table, this only supplies display names and icons.
"""

from typing import Final

DEFAULT_MODULE_ICON: Final[str] = "circle"

MODULE_METADATA: Final[dict[str, dict[str, str]]] = {
    "ADMIN": {"name": "Administration", "icon": "settings"},
    "HR": {"name": "Human Resources", "icon": "users"},
    "COMPANIES": {"name": "Companies", "icon": "building"},
    "CONTENT": {"name": "Content", "icon": "file-text"},
    "VEHICLES": {"name": "Vehicles", "icon": "truck"},
    "SUPPORT": {"name": "Support", "icon": "life-buoy"},
    "REPORTS": {"name": "Reports", "icon": "bar-chart"},
}


def module_name(code: str) -> str:
    """Display name for a module code; unknown codes fall back to the code itself."""
    meta = MODULE_METADATA.get(code)
    return meta["name"] if meta else code


def module_icon(code: str) -> str:
    meta = MODULE_METADATA.get(code)
    return meta["icon"] if meta else DEFAULT_MODULE_ICON
