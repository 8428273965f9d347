"""Page route guard - which pages need a session or the admin role"""

import re
from enum import Enum
from typing import Optional

from jeeforces.core.session import SessionIdentity

SIGN_IN_PATH = "/sign-in"
DASHBOARD_PATH = "/dashboard"

AUTH_PAGE_PREFIXES = ("/sign-in", "/sign-up")
ADMIN_PREFIXES = ("/admin", "/contests/create", "/problems/create")
AUTHENTICATED_PREFIXES = ("/dashboard", "/practice", "/agent", "/revise")

# Paths the guard middleware runs on; ":path*" segments match zero or more levels.
GUARDED_PATH_PATTERNS = (
    re.compile(r"^/dashboard(/.*)?$"),
    re.compile(r"^/sign-in$"),
    re.compile(r"^/sign-up$"),
    re.compile(r"^/revise$"),
    re.compile(r"^/practice$"),
    re.compile(r"^/admin(/.*)?$"),
    re.compile(r"^/contests/create$"),
    re.compile(r"^/problems/create$"),
    re.compile(r"^/agent(/.*)?$"),
)


class GuardDecision(str, Enum):
    ALLOW = "allow"
    REDIRECT_SIGN_IN = "redirect_sign_in"
    REDIRECT_DASHBOARD = "redirect_dashboard"

    @property
    def location(self) -> Optional[str]:
        if self is GuardDecision.REDIRECT_SIGN_IN:
            return SIGN_IN_PATH
        if self is GuardDecision.REDIRECT_DASHBOARD:
            return DASHBOARD_PATH
        return None


def is_guarded(path: str) -> bool:
    return any(pattern.match(path) for pattern in GUARDED_PATH_PATTERNS)


def evaluate(path: str, identity: Optional[SessionIdentity]) -> GuardDecision:
    """
    Decide what happens to a page request

    Rules, first match wins:
      1. signed-in users never see the sign-in/sign-up pages
      2. admin pages send anyone without the admin role to the dashboard,
         anonymous visitors included
      3. member pages send anonymous visitors to sign-in
    """
    if identity is not None and path.startswith(AUTH_PAGE_PREFIXES):
        return GuardDecision.REDIRECT_DASHBOARD

    if path.startswith(ADMIN_PREFIXES):
        if identity is None or identity.role != "admin":
            return GuardDecision.REDIRECT_DASHBOARD

    if identity is None and path.startswith(AUTHENTICATED_PREFIXES):
        return GuardDecision.REDIRECT_SIGN_IN

    return GuardDecision.ALLOW
