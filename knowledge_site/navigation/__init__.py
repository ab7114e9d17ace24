"""Navbar, sidebar, and footer composition for the knowledge site."""

from .composer import (
    HOME_ROUTE,
    NavigationComposer,
    is_external,
    normalize_route,
    split_target,
    static_file_exists,
)
from .models import (
    FooterColumn,
    NavigationModel,
    NavLink,
    SidebarCategory,
    SidebarDoc,
    SidebarItem,
    flatten_sidebar,
)

__all__ = [
    "HOME_ROUTE",
    "FooterColumn",
    "NavLink",
    "NavigationComposer",
    "NavigationModel",
    "SidebarCategory",
    "SidebarDoc",
    "SidebarItem",
    "flatten_sidebar",
    "is_external",
    "normalize_route",
    "split_target",
    "static_file_exists",
]
