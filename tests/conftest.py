"""
Pytest fixtures: a fresh session store, a tmp-dir cache and a fake
completion client standing in for the Anthropic SDK.
"""
import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from phi_start.server import app as app_module
from phi_start.server import llm
from phi_start.server.account_models import Language
from phi_start.server.scholarship_cache import ScholarshipCache
from phi_start.server.session_store import SessionStore


class FakeMessages:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=reply)])


class FakeClient:
    """Mimics `Anthropic().messages.create` with canned replies or errors."""

    def __init__(self, *replies):
        self.messages = FakeMessages(replies or [""])

    @property
    def calls(self):
        return self.messages.calls


SCHOLARSHIP = {
    "id": 1,
    "title": {"en": "Chevening Scholarship", "ar": "منحة تشيفنينغ"},
    "university": "University of Edinburgh",
    "country": {"en": "United Kingdom", "ar": "المملكة المتحدة"},
    "countryCode": "GB",
    "deadline": "2026-11-05",
    "level": {"en": "Masters", "ar": "ماجستير"},
    "specialty": {"en": "All Fields", "ar": "جميع المجالات"},
    "isOpen": True,
    "isOpeningSoon": False,
    "summary": {"en": "Fully funded one-year master's.", "ar": "ماجستير ممول بالكامل لمدة سنة."},
    "requirements": {"en": ["Bachelor's degree", "Two years of work"], "ar": ["درجة البكالوريوس", "سنتان من الخبرة"]},
    "benefits": {"en": ["Tuition", "Stipend"], "ar": ["الرسوم الدراسية", "راتب شهري"]},
    "applyLink": "https://www.chevening.org/apply",
}


@pytest.fixture
def scholarship_record():
    return json.loads(json.dumps(SCHOLARSHIP))


@pytest.fixture
def scholarship_json():
    return json.dumps([SCHOLARSHIP], ensure_ascii=False)


@pytest.fixture
def store():
    return SessionStore(language=Language.EN)


@pytest.fixture
def cache(tmp_path):
    return ScholarshipCache(store_dir=tmp_path, ttl_hours=12)


@pytest.fixture
def fake_llm(monkeypatch):
    """Install a FakeClient built from the given replies; returns it."""

    def install(*replies):
        fake = FakeClient(*replies)
        monkeypatch.setattr(llm, "client", fake)
        return fake

    return install


@pytest.fixture
def client(store, cache):
    app_module.app.dependency_overrides[app_module.get_store] = lambda: store
    app_module.app.dependency_overrides[app_module.get_cache] = lambda: cache
    with TestClient(app_module.app) as c:
        yield c
    app_module.app.dependency_overrides.clear()


@pytest.fixture
def login_as(client):
    def _login(email="ahmed@example.com", password="password123"):
        resp = client.post("/session/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _login
