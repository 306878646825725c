"""
Tests for the file-backed top-scholarships cache.
"""
from phi_start.server.account_models import Language
from phi_start.server.scholarship_cache import HOUR_MS, top_scholarships_key
from phi_start.server.scholarship_models import Scholarship


class CountingFetch:
    def __init__(self, items):
        self.items = items
        self.calls = []

    def __call__(self, lang):
        self.calls.append(lang)
        return list(self.items)


def test_key_format():
    assert top_scholarships_key(Language.AR) == "topScholarships_ar"
    assert top_scholarships_key("en") == "topScholarships_en"


def test_get_missing_key_is_none(cache):
    assert cache.get("topScholarships_en") is None


def test_put_then_get_returns_value_and_timestamp(cache, scholarship_record):
    cache.put("topScholarships_en", [scholarship_record], 1_700_000_000_000)
    assert cache.get("topScholarships_en") == ([scholarship_record], 1_700_000_000_000)


def test_fresh_entry_is_reused(cache, scholarship_record):
    fetch = CountingFetch([Scholarship.model_validate(scholarship_record)])
    t0 = 1_700_000_000_000

    first = cache.top_scholarships(Language.EN, fetch, now=t0)
    second = cache.top_scholarships(Language.EN, fetch, now=t0 + 11 * HOUR_MS)

    assert len(fetch.calls) == 1
    assert first == second
    assert second[0].apply_link == "https://www.chevening.org/apply"


def test_stale_entry_is_refetched(cache, scholarship_record):
    fetch = CountingFetch([Scholarship.model_validate(scholarship_record)])
    t0 = 1_700_000_000_000

    cache.top_scholarships(Language.EN, fetch, now=t0)
    cache.top_scholarships(Language.EN, fetch, now=t0 + 12 * HOUR_MS)

    assert len(fetch.calls) == 2
    assert cache.get("topScholarships_en")[1] == t0 + 12 * HOUR_MS


def test_languages_are_cached_separately(cache):
    fetch = CountingFetch([])
    cache.top_scholarships(Language.EN, fetch, now=0)
    cache.top_scholarships(Language.AR, fetch, now=0)
    assert fetch.calls == [Language.EN, Language.AR]


def test_unreadable_entry_counts_as_miss(cache, tmp_path):
    path = tmp_path / "cache" / "topScholarships_en.json"
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")

    assert cache.get("topScholarships_en") is None

    fetch = CountingFetch([])
    assert cache.top_scholarships(Language.EN, fetch, now=0) == []
    assert len(fetch.calls) == 1
