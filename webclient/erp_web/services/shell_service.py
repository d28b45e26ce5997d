# Overview: Interaction logic of the responsive navigation shell (sidebar, bottom bar, overflow).

"""
Responsive Navigation Shell

Consumes the resolver output plus the current location and produces the view
model the layout renders:

- desktop sidebar: top-level items, nested children shown when the parent is
  expanded, collapsible as a whole
- mobile bottom bar: at most MOBILE_TAB_LIMIT items, the rest in an overflow
  ("More") menu; Store and PPC expose a curated set of their own sub-views
- user badge and breadcrumb

Expansion state is per parent and toggled independently. Being inside a
parent's module expands it automatically; it is never collapsed
automatically. The state lives in the client-only storage domain.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from flask import current_app

from ..permissions import PrincipalType, path_matches_prefix
from .navigation_service import (
    PPC_SUB_ITEMS,
    STORE_SUB_ITEMS,
    NavItem,
    resolve_nav_items,
)
from .storage_service import client_storage


MOBILE_TAB_LIMIT = 4
DEFAULT_VIEW = "home"

SHELL_EXPANDED_KEY = "shell.expanded"
SHELL_COLLAPSED_KEY = "shell.sidebarCollapsed"
SHELL_KEYS = (SHELL_EXPANDED_KEY, SHELL_COLLAPSED_KEY)

# Module prefix -> (bottom bar, overflow) on mobile
MOBILE_MODULE_TABS = {
    "/dashboard/store": (
        (STORE_SUB_ITEMS[0], STORE_SUB_ITEMS[1], STORE_SUB_ITEMS[2]),  # Home, Material Issue, Bills
        (STORE_SUB_ITEMS[3],),  # Masters
    ),
    "/dashboard/ppc": (
        PPC_SUB_ITEMS[:4],
        PPC_SUB_ITEMS[4:],
    ),
}


@dataclass(frozen=True)
class MobileBuckets:
    visible: tuple[NavItem, ...]
    overflow: tuple[NavItem, ...]


def mobile_buckets(nav_items, current_path) -> MobileBuckets:
    """Split navigation into bottom-bar items and overflow items."""
    for prefix, (visible, overflow) in MOBILE_MODULE_TABS.items():
        if path_matches_prefix(current_path, prefix):
            return MobileBuckets(tuple(visible), tuple(overflow))

    items = tuple(nav_items)
    return MobileBuckets(items[:MOBILE_TAB_LIMIT], items[MOBILE_TAB_LIMIT:])


def is_active(item: NavItem, current_path, current_view=None) -> bool:
    """
    Whether an item matches the current location.

    Items carrying a view selector match on base path plus view (the current
    view defaults to DEFAULT_VIEW). Plain items match exactly or as a path
    prefix.
    """
    if not isinstance(current_path, str):
        return False
    current_path = urlsplit(current_path).path

    item_view = item.view
    if item_view is not None:
        return current_path == item.base_path and item_view == (current_view or DEFAULT_VIEW)

    return current_path == item.path or current_path.startswith(item.path + "/")


@dataclass
class ShellState:
    expanded: set[str] = field(default_factory=set)
    sidebar_collapsed: bool = False

    def is_expanded(self, item: NavItem) -> bool:
        return item.base_path in self.expanded

    def toggle(self, parent_path: str) -> bool:
        """Flip one parent's expansion. Returns the new state."""
        base = urlsplit(parent_path).path
        if base in self.expanded:
            self.expanded.discard(base)
            return False
        self.expanded.add(base)
        return True

    def auto_expand(self, nav_items, current_path) -> bool:
        """Expand every parent whose module contains current_path. Returns True if anything changed."""
        changed = False
        for item in nav_items:
            if item.has_children and path_matches_prefix(current_path, item.base_path):
                if item.base_path not in self.expanded:
                    self.expanded.add(item.base_path)
                    changed = True
        return changed

    def toggle_sidebar(self) -> bool:
        self.sidebar_collapsed = not self.sidebar_collapsed
        return self.sidebar_collapsed

    def to_dict(self) -> dict:
        return {
            "expanded": sorted(self.expanded),
            "sidebar_collapsed": self.sidebar_collapsed,
        }


def load_state() -> ShellState:
    values = client_storage().get_many(SHELL_KEYS)
    state = ShellState()

    raw_expanded = values.get(SHELL_EXPANDED_KEY)
    if raw_expanded:
        try:
            expanded = json.loads(raw_expanded)
        except ValueError:
            expanded = None
        if isinstance(expanded, list):
            state.expanded = {path for path in expanded if isinstance(path, str)}
        else:
            current_app.logger.warning("Discarding malformed shell expansion state")

    state.sidebar_collapsed = values.get(SHELL_COLLAPSED_KEY) == "1"
    return state


def save_state(state: ShellState) -> None:
    client_storage().write({
        SHELL_EXPANDED_KEY: json.dumps(sorted(state.expanded)),
        SHELL_COLLAPSED_KEY: "1" if state.sidebar_collapsed else "0",
    })


def breadcrumb(current_path) -> str:
    if not isinstance(current_path, str):
        return ""
    segments = [segment for segment in urlsplit(current_path).path.split("/") if segment]
    return " / ".join(segment[:1].upper() + segment[1:] for segment in segments)


def _user_badge(session, app_name: str) -> dict:
    name = (session.display_name if session else None) or app_name
    if session and session.department:
        subtitle = session.department
    elif session and session.principal_type is PrincipalType.COMPANY:
        subtitle = "Company Admin"
    else:
        subtitle = "Dashboard"
    return {"name": name, "subtitle": subtitle, "initial": name[:1].upper()}


def _link(item: NavItem, current_path, current_view) -> dict:
    return {
        "path": item.path,
        "label": item.label,
        "icon": item.icon,
        "active": is_active(item, current_path, current_view),
    }


def build_shell(session, current_path, current_view, state: ShellState, *, app_name: str = "BinsAnalytics") -> dict:
    """
    Compose the shell view model.

    Runs auto-expansion on `state` (callers persist it if they want the
    expansion to stick).
    """
    principal = session.principal_type if session else None
    department = session.department if session else None
    nav_items = resolve_nav_items(principal, department)

    state.auto_expand(nav_items, current_path)

    sidebar_items = []
    for item in nav_items:
        entry = _link(item, current_path, current_view)
        entry["has_children"] = item.has_children
        entry["expanded"] = item.has_children and state.is_expanded(item)
        entry["children"] = [
            _link(child, current_path, current_view) for child in item.children
        ] if entry["expanded"] else []
        sidebar_items.append(entry)

    buckets = mobile_buckets(nav_items, current_path)

    return {
        "user": _user_badge(session, app_name),
        "sidebar": {
            "collapsed": state.sidebar_collapsed,
            "items": sidebar_items,
        },
        "mobile": {
            "visible": [_link(item, current_path, current_view) for item in buckets.visible],
            "overflow": [_link(item, current_path, current_view) for item in buckets.overflow],
        },
        "breadcrumb": breadcrumb(current_path),
    }
