# server/app.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import llm, prompts
from .account_models import (
    DASHBOARD_FEATURES,
    TOOL_USAGE_FALLBACK,
    Feature,
    PlanDetails,
    Section,
    UsageEntry,
    User,
)
from .llm import AssistantUnavailable
from .scholarship_cache import ScholarshipCache
from .scholarship_models import (
    LEVEL_OPTIONS,
    SPECIALTY_OPTIONS,
    CertificateDescription,
    Scholarship,
    SearchParams,
)
from .schemas import (
    AdminStatsOut,
    BookingIn,
    BookingOut,
    BrandingIn,
    BrandingOut,
    CertificateIn,
    CvIn,
    DashboardOut,
    FiltersOut,
    InterviewFeedbackIn,
    LanguageIn,
    LoginIn,
    PricingOut,
    SectionIn,
    SessionOut,
    SopIn,
    SubscriptionUrlIn,
    TextOut,
    UserCreateIn,
    UserEditIn,
    ViewOut,
)
from .session_store import SessionStore
from .views import parse_section, resolve_view

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Phi Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One session slot per process; tests swap these via dependency_overrides.
_store = SessionStore()
_cache = ScholarshipCache()


def get_store() -> SessionStore:
    return _store


def get_cache() -> ScholarshipCache:
    return _cache


def _require_view(store: SessionStore, section: Section) -> None:
    """Reject the request unless `section` would render as itself."""
    view = resolve_view(store.user, section)
    if view is section:
        return
    if view is Section.LOGIN:
        raise HTTPException(status_code=401, detail="login_required")
    raise HTTPException(status_code=403, detail="admin_required")


def _session_out(store: SessionStore) -> SessionOut:
    return SessionOut(
        language=store.language,
        direction=store.text_direction,
        font=store.font_class,
        active_section=store.active_section,
        view=resolve_view(store.user, store.active_section),
        user=store.user,
    )


@app.exception_handler(AssistantUnavailable)
async def assistant_unavailable_handler(request: Request, exc: AssistantUnavailable) -> JSONResponse:
    logger.warning("assistant unavailable on %s", request.url.path)
    return JSONResponse(status_code=503, content={"detail": "assistant_unavailable"})


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"ok": True, "ts": datetime.now(timezone.utc).isoformat()}


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


@app.get("/session", response_model=SessionOut)
def session(store: SessionStore = Depends(get_store)) -> SessionOut:
    return _session_out(store)


@app.post("/session/login", response_model=SessionOut)
def login(payload: LoginIn, store: SessionStore = Depends(get_store)) -> SessionOut:
    if not store.login(payload.email, payload.password):
        raise HTTPException(status_code=401, detail="invalid_credentials")
    return _session_out(store)


@app.post("/session/logout", response_model=SessionOut)
def logout(store: SessionStore = Depends(get_store)) -> SessionOut:
    store.logout()
    return _session_out(store)


@app.post("/session/language", response_model=SessionOut)
def set_language(payload: LanguageIn, store: SessionStore = Depends(get_store)) -> SessionOut:
    store.set_language(payload.language)
    return _session_out(store)


@app.post("/session/section", response_model=ViewOut)
def set_section(payload: SectionIn, store: SessionStore = Depends(get_store)) -> ViewOut:
    section = parse_section(payload.section) or Section.HOME
    store.set_active_section(section)
    return ViewOut(requested=section, view=resolve_view(store.user, section))


@app.get("/view", response_model=ViewOut)
def view(store: SessionStore = Depends(get_store)) -> ViewOut:
    return ViewOut(
        requested=store.active_section,
        view=resolve_view(store.user, store.active_section),
    )


# ---------------------------------------------------------------------------
# Public pages
# ---------------------------------------------------------------------------


@app.get("/pricing", response_model=PricingOut)
def pricing(store: SessionStore = Depends(get_store)) -> PricingOut:
    return PricingOut(plans=store.plans, subscription_url=store.subscription_url)


@app.get("/branding", response_model=BrandingOut)
def branding(store: SessionStore = Depends(get_store)) -> BrandingOut:
    return BrandingOut(logo_url=store.logo_url, white_logo_url=store.white_logo_url)


@app.get("/scholarships/top", response_model=List[Scholarship])
def top_scholarships(
    store: SessionStore = Depends(get_store),
    cache: ScholarshipCache = Depends(get_cache),
) -> List[Scholarship]:
    return cache.top_scholarships(store.language, llm.fetch_homepage_scholarships)


@app.post("/scholarships/search", response_model=List[Scholarship])
def search_scholarships(
    payload: SearchParams, store: SessionStore = Depends(get_store)
) -> List[Scholarship]:
    return llm.search_scholarships(payload, store.language)


@app.get("/scholarships/filters", response_model=FiltersOut)
def scholarship_filters() -> FiltersOut:
    return FiltersOut(specialties=SPECIALTY_OPTIONS, levels=LEVEL_OPTIONS)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@app.get("/dashboard", response_model=DashboardOut)
def dashboard(store: SessionStore = Depends(get_store)) -> DashboardOut:
    _require_view(store, Section.DASHBOARD)
    user = store.user
    return DashboardOut(user=user, usage={f: user.usage_for(f) for f in DASHBOARD_FEATURES})


@app.get("/usage/{tool}", response_model=UsageEntry)
def tool_usage(
    tool: Literal["cv", "sop", "certificates", "interview"],
    store: SessionStore = Depends(get_store),
) -> UsageEntry:
    """Usage counter shown on a tool screen."""
    _require_view(store, Section(tool))
    feature = Feature(tool)
    return store.user.usage_for(feature, TOOL_USAGE_FALLBACK[feature])


# ---------------------------------------------------------------------------
# AI tools
# ---------------------------------------------------------------------------


@app.post("/cv", response_model=TextOut)
def cv(payload: CvIn, store: SessionStore = Depends(get_store)) -> TextOut:
    _require_view(store, Section.CV)
    prompt = prompts.cv_prompt(payload.action, payload.text, store.language)
    return TextOut(result=llm.generate_content(prompt))


@app.post("/sop", response_model=TextOut)
def sop(payload: SopIn, store: SessionStore = Depends(get_store)) -> TextOut:
    _require_view(store, Section.SOP)
    prompt = prompts.sop_prompt(payload.action, payload.text, store.language, payload.style)
    return TextOut(result=llm.generate_content(prompt))


@app.get("/interview/question", response_model=TextOut)
def interview_question(store: SessionStore = Depends(get_store)) -> TextOut:
    _require_view(store, Section.INTERVIEW)
    return TextOut(result=llm.get_interview_question(store.language))


@app.post("/interview/feedback", response_model=TextOut)
def interview_feedback(
    payload: InterviewFeedbackIn, store: SessionStore = Depends(get_store)
) -> TextOut:
    _require_view(store, Section.INTERVIEW)
    prompt = prompts.interview_feedback_prompt(
        payload.question, payload.answer, store.language
    )
    return TextOut(result=llm.generate_content(prompt))


@app.post("/certificates/description", response_model=CertificateDescription)
def certificate_description(
    payload: CertificateIn, store: SessionStore = Depends(get_store)
) -> CertificateDescription:
    _require_view(store, Section.CERTIFICATES)
    return llm.get_certificate_description(
        payload.name,
        payload.issuer,
        payload.duration,
        payload.description,
        store.language,
    )


# ---------------------------------------------------------------------------
# Booking
# ---------------------------------------------------------------------------


@app.post("/booking", response_model=BookingOut)
def booking(payload: BookingIn, store: SessionStore = Depends(get_store)) -> BookingOut:
    _require_view(store, Section.BOOKING)
    logger.info("booking request from user_id=%s for %s", store.user.id, payload.date)
    return BookingOut(submitted=True)


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


def require_admin(store: SessionStore = Depends(get_store)) -> SessionStore:
    _require_view(store, Section.ADMIN_DASHBOARD)
    return store


@app.get("/admin/users", response_model=List[User])
def admin_list_users(q: str = "", store: SessionStore = Depends(require_admin)) -> List[User]:
    return store.search_users(q)


@app.get("/admin/stats", response_model=AdminStatsOut)
def admin_stats(store: SessionStore = Depends(require_admin)) -> AdminStatsOut:
    return AdminStatsOut(
        total_users=len(store.members()),
        plan_counts=store.plan_counts(),
    )


@app.post("/admin/users", response_model=User, status_code=201)
def admin_create_user(
    payload: UserCreateIn, store: SessionStore = Depends(require_admin)
) -> User:
    return store.add_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        plan=payload.plan,
        is_admin=payload.is_admin,
    )


@app.put("/admin/users/{user_id}", response_model=User)
def admin_edit_user(
    user_id: str, payload: UserEditIn, store: SessionStore = Depends(require_admin)
) -> User:
    current = store.get_user(user_id)
    if current is None:
        raise HTTPException(status_code=404, detail="user_not_found")
    updated = current.model_copy(
        update={"name": payload.name, "email": payload.email, "plan": payload.plan}
    )
    store.update_user(updated)
    return updated


@app.delete("/admin/users/{user_id}")
def admin_delete_user(user_id: str, store: SessionStore = Depends(require_admin)) -> Dict[str, Any]:
    store.delete_user(user_id)
    return {"ok": True}


@app.put("/admin/branding", response_model=BrandingOut)
def admin_branding(payload: BrandingIn, store: SessionStore = Depends(require_admin)) -> BrandingOut:
    store.update_logos(payload.color_logo, payload.white_logo)
    return BrandingOut(logo_url=store.logo_url, white_logo_url=store.white_logo_url)


@app.put("/admin/subscription-url", response_model=PricingOut)
def admin_subscription_url(
    payload: SubscriptionUrlIn, store: SessionStore = Depends(require_admin)
) -> PricingOut:
    store.update_subscription_url(payload.url)
    return PricingOut(plans=store.plans, subscription_url=store.subscription_url)


@app.put("/admin/plans", response_model=PricingOut)
def admin_plans(
    payload: List[PlanDetails], store: SessionStore = Depends(require_admin)
) -> PricingOut:
    ids = [p.id for p in payload]
    if len(ids) != len(set(ids)):
        raise HTTPException(status_code=422, detail="duplicate_plan")
    store.update_plans(payload)
    return PricingOut(plans=store.plans, subscription_url=store.subscription_url)


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run("phi_start.server.app:app", host="127.0.0.1", port=8000, reload=True)
