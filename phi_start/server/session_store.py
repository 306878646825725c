# server/session_store.py
# ---------------------------------------------------------
# Session / quota store for the Phi app.
#
# One SessionStore instance owns:
#   - the single session slot (language, current user,
#     requested section)
#   - the user roster with usage ledgers
#   - admin-editable config (logos, plans, subscription URL)
#
# app.py creates one instance and hands it to routes through
# a FastAPI dependency; tests build their own.
# ---------------------------------------------------------

from __future__ import annotations

import base64
import logging
import uuid
from typing import Dict, List, Optional

from . import config
from .account_models import (
    Feature,
    Language,
    LocalizedList,
    LocalizedText,
    Plan,
    PlanDetails,
    Section,
    UsageEntry,
    User,
)

logger = logging.getLogger(__name__)


class UserNotFound(KeyError):
    """Raised when an update targets an id that is not in the roster."""


# Allotments given to a newly created user, per tier.
PLAN_ALLOTMENTS: Dict[Plan, Dict[Feature, int]] = {
    Plan.FREE: {
        Feature.CV: 3,
        Feature.SOP: 3,
        Feature.BOOKING: 0,
        Feature.APPLICATION_REVIEW: 0,
    },
    Plan.PRO: {
        Feature.CV: 15,
        Feature.SOP: 15,
        Feature.BOOKING: 1,
        Feature.APPLICATION_REVIEW: 1,
    },
    Plan.PREMIUM: {
        Feature.CV: 100,
        Feature.SOP: 100,
        Feature.BOOKING: 3,
        Feature.APPLICATION_REVIEW: 3,
    },
}


def usage_for_plan(plan: Plan) -> Dict[Feature, UsageEntry]:
    return {
        feature: UsageEntry(used=0, total=total)
        for feature, total in PLAN_ALLOTMENTS[plan].items()
    }


def _svg_data_uri(svg: str) -> str:
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


DEFAULT_COLOR_LOGO = _svg_data_uri(
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">'
    '<circle cx="50" cy="50" r="40" fill="#FFC700"/>'
    '<path d="M50 30 v40 M35 50 h30" stroke="#110E24" stroke-width="8" '
    'stroke-linecap="round"/></svg>'
)
DEFAULT_WHITE_LOGO = _svg_data_uri(
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">'
    '<circle cx="50" cy="50" r="40" fill="none" stroke="#F0E8FF" stroke-width="8"/>'
    '<path d="M50 30 v40 M35 50 h30" stroke="#F0E8FF" stroke-width="8" '
    'stroke-linecap="round"/></svg>'
)


def default_plans() -> List[PlanDetails]:
    return [
        PlanDetails(
            id=Plan.FREE,
            name=LocalizedText(en="Explorer", ar="المستكشف"),
            price="$0",
            features=LocalizedList(
                en=["3 CV Analyses", "3 SOP Analyses"],
                ar=["3 تحليلات للسيرة الذاتية", "3 تحليلات لخطاب الدافع"],
            ),
        ),
        PlanDetails(
            id=Plan.PRO,
            name=LocalizedText(en="Navigator", ar="الملاح"),
            price="$20",
            features=LocalizedList(
                en=[
                    "15 CV Analyses",
                    "15 SOP Analyses",
                    "1 Expert Consultation",
                    "1 Full Application Review",
                ],
                ar=[
                    "15 تحليل للسيرة الذاتية",
                    "15 تحليل لخطاب الدافع",
                    "1 استشارة مع خبير",
                    "1 تقييم كامل لملف التقديم",
                ],
            ),
            is_popular=True,
        ),
        PlanDetails(
            id=Plan.PREMIUM,
            name=LocalizedText(en="Stellar", ar="النجمي"),
            price="$50",
            features=LocalizedList(
                en=[
                    "100 CV Analyses",
                    "100 SOP Analyses",
                    "3 Expert Consultations",
                    "3 Full Application Reviews",
                ],
                ar=[
                    "100 تحليل للسيرة الذاتية",
                    "100 تحليل لخطاب الدافع",
                    "3 استشارات مع خبير",
                    "3 تقييمات كاملة لملفات التقديم",
                ],
            ),
        ),
    ]


def _ledger(cv: tuple, sop: tuple, booking: tuple, review: tuple) -> Dict[Feature, UsageEntry]:
    return {
        Feature.CV: UsageEntry(used=cv[0], total=cv[1]),
        Feature.SOP: UsageEntry(used=sop[0], total=sop[1]),
        Feature.BOOKING: UsageEntry(used=booking[0], total=booking[1]),
        Feature.APPLICATION_REVIEW: UsageEntry(used=review[0], total=review[1]),
    }


def default_users() -> List[User]:
    return [
        User(
            id="1",
            name="Ahmed",
            email="ahmed@example.com",
            password="password123",
            plan=Plan.PRO,
            usage=_ledger((1, 15), (3, 15), (0, 1), (0, 1)),
        ),
        User(
            id="2",
            name="Fatima",
            email="fatima@example.com",
            password="password123",
            plan=Plan.FREE,
            usage=_ledger((1, 3), (1, 3), (0, 0), (0, 0)),
        ),
        User(
            id="3",
            name="Admin User",
            email="admin@phi.com",
            password="admin123",
            plan=Plan.PREMIUM,
            is_admin=True,
            usage=_ledger((0, 999), (0, 999), (0, 999), (0, 999)),
        ),
    ]


# Presentation hints that follow the locale
TEXT_DIRECTION = {Language.AR: "rtl", Language.EN: "ltr"}
FONT_CLASS = {Language.AR: "font-cairo", Language.EN: "font-sans"}


class SessionStore:
    """
    Single-slot session plus the in-memory roster and config.

    Nothing here touches disk or network; every mutation is a plain
    attribute or list replacement.
    """

    def __init__(
        self,
        users: Optional[List[User]] = None,
        plans: Optional[List[PlanDetails]] = None,
        language: Optional[Language] = None,
        subscription_url: str = config.SUBSCRIPTION_URL,
    ):
        self.language: Language = (
            Language(language) if language is not None else Language(config.DEFAULT_LANGUAGE)
        )
        self.user: Optional[User] = None
        self.active_section: Section = Section.HOME
        self.users: List[User] = list(users) if users is not None else default_users()
        self.plans: List[PlanDetails] = list(plans) if plans is not None else default_plans()
        self.logo_url: str = DEFAULT_COLOR_LOGO
        self.white_logo_url: str = DEFAULT_WHITE_LOGO
        self.subscription_url: str = subscription_url

    # -----------------------------------------------------
    # Session
    # -----------------------------------------------------

    def set_language(self, language: Language) -> None:
        self.language = Language(language)

    def set_active_section(self, section: Section) -> None:
        self.active_section = section

    @property
    def text_direction(self) -> str:
        return TEXT_DIRECTION[self.language]

    @property
    def font_class(self) -> str:
        return FONT_CLASS[self.language]

    def login(self, email: str, password: str) -> bool:
        """
        Match email case-insensitively and password exactly.

        On success the session jumps to the admin dashboard for
        admins and to the dashboard for everyone else.
        """
        email_key = email.lower()
        for u in self.users:
            if u.email.lower() == email_key and u.password == password:
                self.user = u
                self.active_section = (
                    Section.ADMIN_DASHBOARD if u.is_admin else Section.DASHBOARD
                )
                logger.info("login ok: user_id=%s admin=%s", u.id, u.is_admin)
                return True
        logger.info("login failed for %s", email)
        return False

    def logout(self) -> None:
        self.user = None
        self.active_section = Section.HOME

    # -----------------------------------------------------
    # Roster
    # -----------------------------------------------------

    def get_user(self, user_id: str) -> Optional[User]:
        for u in self.users:
            if u.id == user_id:
                return u
        return None

    def members(self) -> List[User]:
        """Roster without administrators."""
        return [u for u in self.users if not u.is_admin]

    def search_users(self, term: str = "") -> List[User]:
        """Members whose name or email contains `term`, ignoring case."""
        needle = term.lower()
        return [
            u
            for u in self.members()
            if needle in u.name.lower() or needle in u.email.lower()
        ]

    def plan_counts(self) -> Dict[str, int]:
        """
        Members per plan, keyed by the plan's name in the session language.

        A plan id missing from the plan list is counted under the id itself.
        """
        names = {p.id: getattr(p.name, self.language.value) for p in self.plans}
        counts: Dict[str, int] = {}
        for u in self.members():
            key = names.get(u.plan, u.plan.value)
            counts[key] = counts.get(key, 0) + 1
        return counts

    def add_user(
        self,
        name: str,
        email: str,
        password: str,
        plan: Plan,
        is_admin: bool = False,
    ) -> User:
        """Append a user with a fresh id and the tier's default allotments."""
        new_user = User(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            password=password,
            plan=plan,
            is_admin=is_admin,
            usage=usage_for_plan(plan),
        )
        self.users.append(new_user)
        logger.info("user created: id=%s plan=%s", new_user.id, plan.value)
        return new_user

    def update_user(self, updated: User) -> None:
        """Replace the roster entry (and the session copy) with `updated`."""
        for idx, u in enumerate(self.users):
            if u.id == updated.id:
                self.users[idx] = updated
                break
        else:
            raise UserNotFound(updated.id)

        if self.user is not None and self.user.id == updated.id:
            self.user = updated
        logger.info("user updated: id=%s", updated.id)

    def delete_user(self, user_id: str) -> None:
        # The active session is left alone even if it belongs to user_id.
        self.users = [u for u in self.users if u.id != user_id]
        logger.info("user deleted: id=%s", user_id)

    # -----------------------------------------------------
    # Admin config
    # -----------------------------------------------------

    def update_logos(self, color_logo: str, white_logo: str) -> None:
        self.logo_url = color_logo
        self.white_logo_url = white_logo
        logger.info("branding updated")

    def update_subscription_url(self, url: str) -> None:
        self.subscription_url = url
        logger.info("subscription url updated: %s", url)

    def update_plans(self, plans: List[PlanDetails]) -> None:
        self.plans = list(plans)
        logger.info("plans replaced: %s", [p.id.value for p in self.plans])
