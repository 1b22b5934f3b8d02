# -*- coding: utf-8 -*-
"""Navigation chrome: routes, nav item sets and active-entry matching."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel

# Tailwind ``md`` breakpoint: at or above it the sidebar is shown.
SIDEBAR_MIN_WIDTH = 768


class Route(str, Enum):
    daily = "/daily"
    calories = "/calories"
    injections = "/injections"
    nirvana = "/nirvana"
    winners_bible = "/winners-bible"
    analytics = "/analytics"
    settings = "/settings"
    bmr_calculator = "/bmr-calculator"
    onboarding = "/onboarding"
    profile_setup = "/onboarding/profile-setup"
    login = "/auth/login"
    signup = "/auth/signup"

    @property
    def href(self) -> str:
        return self.value


class NavVariant(str, Enum):
    sidebar = "sidebar"
    bottom_bar = "bottom_bar"


@dataclass(frozen=True)
class NavItem:
    label: str
    route: Route
    icon: str


SIDEBAR_ITEMS: Tuple[NavItem, ...] = (
    NavItem("Daily", Route.daily, "home"),
    NavItem("Calories", Route.calories, "scale"),
    NavItem("Injections", Route.injections, "beaker"),
    NavItem("Nirvana", Route.nirvana, "sparkles"),
    NavItem("Winners Bible", Route.winners_bible, "book-open"),
    NavItem("Analytics", Route.analytics, "chart-bar"),
    NavItem("Settings", Route.settings, "cog-6-tooth"),
)

# Bottom bar shows the primary items; the rest go in the overflow drawer.
PRIMARY_ROUTES = (Route.daily, Route.calories, Route.injections, Route.analytics)
BOTTOM_BAR_ITEMS: Tuple[NavItem, ...] = tuple(i for i in SIDEBAR_ITEMS if i.route in PRIMARY_ROUTES)
OVERFLOW_ITEMS: Tuple[NavItem, ...] = tuple(i for i in SIDEBAR_ITEMS if i.route not in PRIMARY_ROUTES)


class NavEntry(BaseModel):
    label: str
    href: str
    icon: str
    active: bool


class NavigationResponse(BaseModel):
    variant: NavVariant
    path: str
    items: List[NavEntry]
    overflow: List[NavEntry]


def is_active(route: Route, path: str) -> bool:
    return path == route.href or path.startswith(route.href + "/")


def match_route(path: str) -> Optional[Route]:
    """Most specific route that ``path`` is, or is under."""
    best: Optional[Route] = None
    for route in Route:
        if is_active(route, path) and (best is None or len(route.href) > len(best.href)):
            best = route
    return best


def variant_for_width(width: Optional[int]) -> NavVariant:
    if width is None or width >= SIDEBAR_MIN_WIDTH:
        return NavVariant.sidebar
    return NavVariant.bottom_bar


def _entries(items: Tuple[NavItem, ...], path: str) -> List[NavEntry]:
    return [
        NavEntry(label=i.label, href=i.route.href, icon=i.icon, active=is_active(i.route, path))
        for i in items
    ]


_LAYOUTS: Dict[NavVariant, Tuple[Tuple[NavItem, ...], Tuple[NavItem, ...]]] = {
    NavVariant.sidebar: (SIDEBAR_ITEMS, ()),
    NavVariant.bottom_bar: (BOTTOM_BAR_ITEMS, OVERFLOW_ITEMS),
}


def build_navigation(path: str, variant: NavVariant = NavVariant.sidebar) -> NavigationResponse:
    items, overflow = _LAYOUTS[variant]
    return NavigationResponse(
        variant=variant,
        path=path,
        items=_entries(items, path),
        overflow=_entries(overflow, path),
    )


class DrawerState:
    """Open/closed state of the bottom bar's overflow drawer."""

    def __init__(self) -> None:
        self.is_open = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def navigate(self, route: Route) -> Route:
        # Following any link closes the drawer.
        self.close()
        return route
