import logging
import time

from config import settings
from config.secrets import get_browseai_api_key
from database.db import session_scope
from database.cache import get_cache_entry, is_fresh, load_payload, upsert_cache_entry
from jobs.forms import ImportedJob
from scrapers.http import fetch_json, ScraperError, ScraperConfigError, ScraperHTTPError

logger = logging.getLogger(__name__)

BROWSEAI_PROVIDER = 'browseai-linkedin-job-details'

FAILED_STATUSES = ("failed", "aborted")


def get_api_key():
    api_key = get_browseai_api_key()
    if not api_key:
        logger.error("Missing BROWSEAI_API_KEY")
        raise ScraperConfigError("Missing BROWSEAI_API_KEY")
    return api_key


def _tasks_url():
    return f"{settings.BROWSEAI_BASE_URL}/robots/{settings.BROWSEAI_ROBOT_ID}/tasks"


def _headers(api_key):
    return {"Authorization": f"Bearer {api_key}"}


def start_task(job_url, api_key):
    logger.debug(f"Starting Browse AI task for {job_url}")
    try:
        resp = fetch_json(
            _tasks_url(),
            method="POST",
            headers=_headers(api_key),
            json={"recordVideo": False, "inputParameters": {"linkedin_url": job_url}},
        )
    except ScraperHTTPError as e:
        raise ScraperError(f"Browse AI start error: {e.status} {e.text}") from e

    task_id = (resp.get("result") or {}).get("id")
    if not task_id:
        raise ScraperError("Browse AI start error: no task id in response")
    logger.info(f"Browse AI task started: {task_id}")
    return task_id


def get_task(task_id, api_key):
    try:
        resp = fetch_json(f"{_tasks_url()}/{task_id}", headers=_headers(api_key))
    except ScraperHTTPError as e:
        raise ScraperError(f"Browse AI poll error: {e.status} {e.text}") from e
    return resp.get("result") or {}


def wait_for_result(task_id, api_key, max_attempts=None, delay=None):
    max_attempts = settings.BROWSEAI_MAX_ATTEMPTS if max_attempts is None else max_attempts
    delay = settings.BROWSEAI_POLL_DELAY if delay is None else delay

    for attempt in range(max_attempts):
        logger.debug(f"Polling Browse AI task {task_id} (attempt {attempt + 1}/{max_attempts})")
        result = get_task(task_id, api_key)
        status = result.get("status")

        if status == "successful":
            logger.info(f"Browse AI task {task_id} successful")
            return result

        if status in FAILED_STATUSES:
            logger.error(f"Browse AI task {task_id} failed with status {status}")
            raise ScraperError(f"Browse AI task failed with status: {status}")

        time.sleep(delay)

    logger.error(f"Browse AI task {task_id} timeout")
    raise ScraperError("Browse AI task timeout")


def map_captured_texts(captured, job_url):
    captured = captured or {}
    return ImportedJob(
        title=captured.get("Job Title") or "",
        type=captured.get("Employment Type") or "",
        company=captured.get("Company Name") or "",
        location=captured.get("Location") or "",
        job_description=captured.get("Description") or "",
        job_url=job_url,
    )


def _rehydrate_task(session, job_url, task_id, api_key):
    try:
        result = get_task(task_id, api_key)
    except ScraperError as e:
        logger.warning(f"Could not read Browse AI task {task_id}: {e}")
        return None

    captured = result.get("capturedTexts")
    if result.get("status") != "successful" or not captured or not captured.get("Job Title"):
        logger.info(f"Browse AI task {task_id} not reusable (status {result.get('status')})")
        return None

    upsert_cache_entry(session, job_url, BROWSEAI_PROVIDER, captured, settings.SCRAPE_CACHE_TTL_DAYS)
    logger.info(f"Cache hydrated from existing Browse AI task {task_id} for {job_url}")
    return captured


def fetch_linkedin_job_details(job_url, session=None):
    if not job_url:
        logger.error("Missing jobUrl")
        raise ValueError("Missing jobUrl")

    with session_scope(session) as session:
        cached = get_cache_entry(session, job_url)
        if is_fresh(cached, BROWSEAI_PROVIDER):
            logger.info(f"Cache hit for {job_url}")
            return map_captured_texts(load_payload(cached), job_url)

        api_key = get_api_key()

        captured = None
        if cached and cached.provider == BROWSEAI_PROVIDER and cached.run_id:
            captured = _rehydrate_task(session, job_url, cached.run_id, api_key)

        if captured is None:
            task_id = start_task(job_url, api_key)
            result = wait_for_result(task_id, api_key)
            captured = result.get("capturedTexts")
            if not captured or not captured.get("Job Title"):
                logger.warning(f"No useful data returned from Browse AI for {job_url}")
                raise ScraperError("No data from Browse AI")
            upsert_cache_entry(
                session, job_url, BROWSEAI_PROVIDER, captured, settings.SCRAPE_CACHE_TTL_DAYS,
                run_id=task_id,
            )

        return map_captured_texts(captured, job_url)
