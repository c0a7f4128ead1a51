import json
from datetime import timedelta
from unittest.mock import patch

import pytest

from config import settings
from database.cache import get_cache_entry
from database.models import JobScrapeCache, utcnow
from scrapers import browse_ai
from scrapers.http import ScraperError, ScraperConfigError
from tests.helpers import make_response

JOB_URL = "https://www.linkedin.com/jobs/view/4012345678/"
TASKS_URL = f"{settings.BROWSEAI_BASE_URL}/robots/{settings.BROWSEAI_ROBOT_ID}/tasks"
TASK_URL = f"{TASKS_URL}/task-1"

CAPTURED = {
    "Job Title": "Data Engineer",
    "Employment Type": "Full-time",
    "Company Name": "Globex",
    "Location": "Remote",
    "Description": "Pipelines all day.",
}


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("BROWSEAI_API_KEY", "bai-key")
    return "bai-key"


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("scrapers.browse_ai.time.sleep") as sleep:
        yield sleep


def task(status, captured=None):
    result = {"id": "task-1", "status": status}
    if captured is not None:
        result["capturedTexts"] = captured
    return make_response(200, {"result": result})


def test_map_captured_texts():
    imported = browse_ai.map_captured_texts(CAPTURED, JOB_URL)

    assert imported.title == "Data Engineer"
    assert imported.type == "Full-time"
    assert imported.company == "Globex"
    assert imported.location == "Remote"
    assert imported.job_description == "Pipelines all day."
    assert imported.source == "LinkedIn"
    assert imported.status == "To apply"
    assert imported.applied is False
    assert imported.job_url == JOB_URL


def test_start_task_and_poll_until_successful(session, fake_api, api_key, no_sleep):
    fake_api.add("POST", TASKS_URL, make_response(200, {"result": {"id": "task-1"}}))
    fake_api.add("GET", TASK_URL, task("in-progress"), task("in-progress"), task("successful", CAPTURED))

    imported = browse_ai.fetch_linkedin_job_details(JOB_URL, session=session)

    assert imported.title == "Data Engineer"
    _, _, kwargs = fake_api.called("POST", TASKS_URL)[0]
    assert kwargs["headers"]["Authorization"] == "Bearer bai-key"
    assert kwargs["json"] == {"recordVideo": False, "inputParameters": {"linkedin_url": JOB_URL}}
    assert len(fake_api.called("GET", TASK_URL)) == 3
    assert no_sleep.call_count == 2

    row = get_cache_entry(session, JOB_URL)
    assert row.provider == browse_ai.BROWSEAI_PROVIDER
    assert row.run_id == "task-1"
    assert json.loads(row.response_json) == CAPTURED


def test_failed_task_raises(session, fake_api, api_key):
    fake_api.add("POST", TASKS_URL, make_response(200, {"result": {"id": "task-1"}}))
    fake_api.add("GET", TASK_URL, task("failed"))

    with pytest.raises(ScraperError, match="failed with status: failed"):
        browse_ai.fetch_linkedin_job_details(JOB_URL, session=session)


def test_polling_gives_up_after_max_attempts(fake_api, no_sleep):
    fake_api.add("GET", TASK_URL, task("in-progress"))

    with pytest.raises(ScraperError, match="timeout"):
        browse_ai.wait_for_result("task-1", "bai-key", max_attempts=4, delay=0)
    assert len(fake_api.called("GET", TASK_URL)) == 4


def test_start_error_includes_status(session, fake_api, api_key):
    fake_api.add("POST", TASKS_URL, make_response(401, {"message": "bad key"}))

    with pytest.raises(ScraperError, match="Browse AI start error: 401"):
        browse_ai.fetch_linkedin_job_details(JOB_URL, session=session)


def test_missing_api_key_fails_before_any_request(session, fake_api):
    with pytest.raises(ScraperConfigError, match="BROWSEAI_API_KEY"):
        browse_ai.fetch_linkedin_job_details(JOB_URL, session=session)
    assert fake_api.calls == []


def test_cache_hit_skips_browse_ai(session, fake_api):
    session.add(JobScrapeCache(
        url=JOB_URL,
        provider=browse_ai.BROWSEAI_PROVIDER,
        response_json=json.dumps(CAPTURED),
        run_id="task-1",
        expires_at=utcnow() + timedelta(days=2),
    ))
    session.commit()

    imported = browse_ai.fetch_linkedin_job_details(JOB_URL, session=session)

    assert imported.company == "Globex"
    assert fake_api.calls == []


def test_expired_row_reuses_finished_task(session, fake_api, api_key):
    session.add(JobScrapeCache(
        url=JOB_URL,
        provider=browse_ai.BROWSEAI_PROVIDER,
        response_json=json.dumps({"Job Title": "Old"}),
        run_id="task-1",
        expires_at=utcnow() - timedelta(days=1),
    ))
    session.commit()
    fake_api.add("GET", TASK_URL, task("successful", CAPTURED))

    imported = browse_ai.fetch_linkedin_job_details(JOB_URL, session=session)

    assert imported.title == "Data Engineer"
    assert fake_api.called("POST", TASKS_URL) == []
    assert get_cache_entry(session, JOB_URL).expires_at > utcnow()


OLD_TASK_URL = f"{TASKS_URL}/task-0"


def add_stale_row(session, provider=browse_ai.BROWSEAI_PROVIDER, run_id="task-0"):
    session.add(JobScrapeCache(
        url=JOB_URL,
        provider=provider,
        response_json=json.dumps({"Job Title": "Old"}),
        run_id=run_id,
        expires_at=utcnow() - timedelta(days=1),
    ))
    session.commit()


def queue_new_task(fake_api):
    fake_api.add("POST", TASKS_URL, make_response(200, {"result": {"id": "task-1"}}))
    fake_api.add("GET", TASK_URL, task("successful", CAPTURED))


def old_task(status, captured=None):
    result = {"id": "task-0", "status": status}
    if captured is not None:
        result["capturedTexts"] = captured
    return make_response(200, {"result": result})


def test_unfinished_old_task_falls_back_to_new_task(session, fake_api, api_key):
    add_stale_row(session)
    fake_api.add("GET", OLD_TASK_URL, old_task("failed"))
    queue_new_task(fake_api)

    imported = browse_ai.fetch_linkedin_job_details(JOB_URL, session=session)

    assert imported.title == "Data Engineer"
    assert len(fake_api.called("POST", TASKS_URL)) == 1
    assert get_cache_entry(session, JOB_URL).run_id == "task-1"


def test_unreadable_old_task_falls_back_to_new_task(session, fake_api, api_key):
    add_stale_row(session)
    fake_api.add("GET", OLD_TASK_URL, make_response(404, {"message": "task not found"}))
    queue_new_task(fake_api)

    imported = browse_ai.fetch_linkedin_job_details(JOB_URL, session=session)

    assert imported.company == "Globex"
    assert len(fake_api.called("POST", TASKS_URL)) == 1


def test_old_task_without_job_title_is_not_cached(session, fake_api, api_key):
    add_stale_row(session)
    fake_api.add("GET", OLD_TASK_URL, old_task("successful", {"Company Name": "Globex"}))
    queue_new_task(fake_api)

    imported = browse_ai.fetch_linkedin_job_details(JOB_URL, session=session)

    assert imported.title == "Data Engineer"
    assert len(fake_api.called("POST", TASKS_URL)) == 1
    assert json.loads(get_cache_entry(session, JOB_URL).response_json) == CAPTURED


def test_stale_apify_row_is_not_rehydrated(session, fake_api, api_key):
    add_stale_row(session, provider="apify-linkedin-job-details", run_id="run-1")
    queue_new_task(fake_api)

    browse_ai.fetch_linkedin_job_details(JOB_URL, session=session)

    assert [c for c in fake_api.calls if c[1].endswith("/run-1")] == []
    row = get_cache_entry(session, JOB_URL)
    assert row.provider == browse_ai.BROWSEAI_PROVIDER
    assert row.run_id == "task-1"
