# navigation.py
from __future__ import annotations
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

LOGIN = "login"
SIGNUP = "signup"
DASHBOARD = "dashboard"
CHALLENGES = "challenges"
COMPILER = "compiler"
SCORE = "score"
ADMIN = "admin"
ACCESS_DENIED = "access_denied"

PAGES = (LOGIN, SIGNUP, DASHBOARD, CHALLENGES, COMPILER, SCORE, ADMIN, ACCESS_DENIED)
PUBLIC_PAGES = (LOGIN, SIGNUP)

ADMIN_TABS = ("challenges", "users", "reports", "analytics")


@dataclass
class Navigator:
    """Current page plus the chrome visibility that goes with it."""
    current_page: str = LOGIN
    navbar_visible: bool = False
    admin_link_visible: bool = False
    admin_card_visible: bool = False
    admin_tab: str = "challenges"

    def show_page(self, name: str, authenticated: bool, is_admin: bool = False) -> bool:
        logger.debug("Navigating to page: %s", name)
        if name not in PAGES:
            logger.error("Page not found: %s", name)
            return False

        if name in PUBLIC_PAGES:
            self.navbar_visible = False
            self.current_page = name
            return True

        if not authenticated:
            self.navbar_visible = False
            logger.info("Redirecting unauthenticated user to login")
            self.current_page = LOGIN
            return False

        self.navbar_visible = True
        self.update_for_role(is_admin)
        self.current_page = name
        return True

    def update_for_role(self, is_admin: bool) -> None:
        self.admin_link_visible = is_admin
        self.admin_card_visible = is_admin

    def reset(self) -> None:
        self.navbar_visible = False
        self.admin_link_visible = False
        self.admin_card_visible = False
        self.admin_tab = "challenges"
