# server/account_models.py

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Language(str, Enum):
    EN = "en"
    AR = "ar"


class Section(str, Enum):
    """Logical views of the app. PUBLIC_SECTIONS in views.py marks the public ones."""

    HOME = "home"
    CV = "cv"
    SOP = "sop"
    CERTIFICATES = "certificates"
    INTERVIEW = "interview"
    TOOLS = "tools"
    FAQ = "faq"
    BOOKING = "booking"
    PRICING = "pricing"
    LOGIN = "login"
    DASHBOARD = "dashboard"
    ADMIN_DASHBOARD = "admin_dashboard"
    APPLICATION_REVIEW = "application_review"


class Feature(str, Enum):
    """Keys of a user's usage ledger."""

    CV = "cv"
    SOP = "sop"
    CERTIFICATES = "certificates"
    INTERVIEW = "interview"
    BOOKING = "booking"
    APPLICATION_REVIEW = "application_review"


class Plan(str, Enum):
    FREE = "FREE"
    PRO = "PRO"
    PREMIUM = "PREMIUM"


class LocalizedText(BaseModel):
    en: str
    ar: str


class LocalizedList(BaseModel):
    en: List[str] = Field(default_factory=list)
    ar: List[str] = Field(default_factory=list)


class PlanDetails(BaseModel):
    id: Plan
    name: LocalizedText
    price: str = Field(..., description="Display label, e.g. '$20'")
    features: LocalizedList
    is_popular: bool = Field(default=False, alias="isPopular")

    model_config = {"populate_by_name": True}


class UsageEntry(BaseModel):
    used: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class User(BaseModel):
    id: str
    name: str
    email: str = Field(..., description="Login key, compared case-insensitively")
    # Plaintext, demo roster only. Never serialized.
    password: Optional[str] = Field(default=None, exclude=True)
    plan: Plan
    is_admin: bool = Field(default=False, alias="isAdmin")
    usage: Dict[Feature, UsageEntry] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}

    def usage_for(self, feature: Feature, fallback_total: int = 0) -> UsageEntry:
        """Ledger entry for a feature, or 0 of `fallback_total` when there is none."""
        return self.usage.get(feature) or UsageEntry(used=0, total=fallback_total)


# Features listed on the user dashboard; missing entries show 0 of 0.
DASHBOARD_FEATURES = (Feature.CV, Feature.SOP, Feature.CERTIFICATES, Feature.INTERVIEW)

# Allotment each tool screen shows when the ledger has no entry for it.
TOOL_USAGE_FALLBACK = {
    Feature.CV: 5,
    Feature.SOP: 5,
    Feature.CERTIFICATES: 10,
    Feature.INTERVIEW: 3,
}
