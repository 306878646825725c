# server/schemas.py
"""
Pydantic schemas for the Phi backend.

This file defines the request/response payloads used by:
- /session*             (LoginIn, LanguageIn, SectionIn, SessionOut, ViewOut)
- /dashboard, /pricing  (DashboardOut, PricingOut, BrandingOut)
- /cv, /sop             (CvIn, SopIn, TextOut)
- /interview/*          (InterviewFeedbackIn, TextOut)
- /certificates/*       (CertificateIn)
- /booking              (BookingIn, BookingOut)
- /scholarships/*       (SearchParams, FiltersOut)
- /admin/*              (UserCreateIn, UserEditIn, BrandingIn, SubscriptionUrlIn,
                         AdminStatsOut)
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .account_models import Feature, Language, Plan, PlanDetails, Section, UsageEntry, User


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class LoginIn(BaseModel):
    email: str
    password: str


class LanguageIn(BaseModel):
    language: Language


class SectionIn(BaseModel):
    # raw value; unknown sections resolve to home instead of failing validation
    section: str


class ViewOut(BaseModel):
    requested: Section
    view: Section


class SessionOut(BaseModel):
    language: Language
    direction: Literal["ltr", "rtl"]
    font: str
    active_section: Section
    view: Section
    user: Optional[User] = None


# ---------------------------------------------------------------------------
# Dashboard / pricing / branding
# ---------------------------------------------------------------------------

class DashboardOut(BaseModel):
    user: User
    usage: Dict[Feature, UsageEntry]


class PricingOut(BaseModel):
    plans: List[PlanDetails]
    subscription_url: str


class BrandingOut(BaseModel):
    logo_url: str
    white_logo_url: str


# ---------------------------------------------------------------------------
# AI tools
# ---------------------------------------------------------------------------

class CvIn(BaseModel):
    action: Literal["evaluate", "rewrite"] = "evaluate"
    text: str = Field(..., min_length=1)


class SopIn(BaseModel):
    action: Literal["evaluate", "rewrite"] = "evaluate"
    text: str = Field(..., min_length=1)
    # e.g. "academic", "creative", "formal"
    style: str = "academic"


class InterviewFeedbackIn(BaseModel):
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)


class CertificateIn(BaseModel):
    name: str = Field(..., min_length=1)
    issuer: str = ""
    duration: str = ""
    description: str = ""


class TextOut(BaseModel):
    result: str


class FiltersOut(BaseModel):
    specialties: List[str]
    levels: List[str]


# ---------------------------------------------------------------------------
# Booking
# ---------------------------------------------------------------------------

class BookingIn(BaseModel):
    """Consultation request form. Acknowledged only; nothing is scheduled."""
    name: str
    email: str
    date: Optional[str] = None
    message: str = ""


class BookingOut(BaseModel):
    submitted: bool = True


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

class UserCreateIn(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    plan: Plan = Plan.FREE
    is_admin: bool = Field(default=False, alias="isAdmin")

    model_config = {"populate_by_name": True}


class UserEditIn(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    plan: Plan


class BrandingIn(BaseModel):
    color_logo: str = Field(..., alias="colorLogo")
    white_logo: str = Field(..., alias="whiteLogo")

    model_config = {"populate_by_name": True}


class SubscriptionUrlIn(BaseModel):
    url: str = Field(..., min_length=1)


class AdminStatsOut(BaseModel):
    total_users: int
    plan_counts: Dict[str, int]
