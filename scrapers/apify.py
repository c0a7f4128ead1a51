"""LinkedIn job details through the Apify ``linkedin-job-details-scraper`` actor.

A finished import is cached per URL for ``SCRAPE_CACHE_TTL_DAYS``. When the
cached row has gone stale but still remembers its run and dataset, the
finished run is read back before a new (paid) run is started.
"""

import logging

from config import settings
from config.secrets import get_apify_token
from database.db import session_scope
from database.cache import get_cache_entry, is_fresh, load_payload, upsert_cache_entry
from jobs.forms import LinkedinFormData
from scrapers.http import fetch_json, ScraperError, ScraperConfigError, ScraperHTTPError

logger = logging.getLogger(__name__)

APIFY_PROVIDER = 'apify-linkedin-job-details'


def get_token():
    token = get_apify_token()
    if not token:
        logger.error("Missing APIFY_TOKEN")
        raise ScraperConfigError("APIFY_TOKEN not configured")
    return token


def map_item_to_form(item, url):
    return LinkedinFormData(
        title=item.get("jobTitle") or "",
        company=item.get("companyName") or "",
        location=item.get("jobLocation") or "",
        description=item.get("description") or "",
        job_url=url,
    )


def start_run(job_url, token):
    resp = fetch_json(
        f"{settings.APIFY_BASE_URL}/acts/{settings.APIFY_ACTOR_ID}/runs",
        method="POST",
        params={"token": token, "waitForFinish": settings.APIFY_WAIT_FOR_FINISH},
        json={"searchUrls": [job_url]},
    )
    return resp.get("data") or {}


def get_run(run_id, token):
    resp = fetch_json(f"{settings.APIFY_BASE_URL}/runs/{run_id}", params={"token": token})
    return (resp or {}).get("data")


def get_dataset_items(dataset_id, token):
    items = fetch_json(f"{settings.APIFY_BASE_URL}/datasets/{dataset_id}/items", params={"token": token})
    return items if isinstance(items, list) else []


def first_usable_item(items):
    item = items[0] if items else None
    if not isinstance(item, dict) or not item.get("jobTitle"):
        return None
    return item


def hydrate_from_existing_run(session, url, run_id, dataset_id):
    """Reuse a finished run instead of scraping again. Returns None if it can't."""
    if not run_id or not dataset_id:
        return None

    token = get_token()
    logger.info(f"Checking existing Apify run {run_id} (dataset {dataset_id}) for {url}")

    try:
        run = get_run(run_id, token)
    except ScraperHTTPError as e:
        # Apify forgets runs after its retention period
        logger.warning(f"Could not read Apify run {run_id}: {e}")
        return None

    if not run:
        logger.warning(f"Run {run_id} not found on Apify")
        return None

    if run.get("status") != "SUCCEEDED":
        logger.info(f"Apify run {run_id} not finished yet (status {run.get('status')})")
        return None

    item = first_usable_item(get_dataset_items(dataset_id, token))
    if item is None:
        logger.warning(f"Dataset {dataset_id} empty or unusable for completed run {run_id}")
        return None

    upsert_cache_entry(session, url, APIFY_PROVIDER, item, settings.SCRAPE_CACHE_TTL_DAYS)
    logger.info(f"Cache hydrated from existing run {run_id} for {url}")
    return map_item_to_form(item, url)


def fetch_linkedin_job_details(job_url, session=None):
    if not job_url:
        logger.warning("Missing jobUrl")
        raise ValueError("Missing jobUrl")

    with session_scope(session) as session:
        # 1) Cache lookup
        cached = get_cache_entry(session, job_url)
        if is_fresh(cached, APIFY_PROVIDER):
            logger.info(f"Cache hit for {job_url}")
            return map_item_to_form(load_payload(cached), job_url)

        logger.info(f"Cache miss/expired for {job_url} (cached row: {cached is not None})")

        # 2) Reuse the previous run if we still know it
        if cached and cached.provider == APIFY_PROVIDER and (cached.run_id or cached.dataset_id):
            hydrated = hydrate_from_existing_run(session, job_url, cached.run_id, cached.dataset_id)
            if hydrated:
                return hydrated

        # 3) New run, waiting for it to finish
        token = get_token()
        logger.info(f"Starting new Apify run for {job_url}")
        run = start_run(job_url, token)
        run_id = run.get("id")
        dataset_id = run.get("defaultDatasetId")
        logger.info(f"Apify run {run_id} for {job_url}: status={run.get('status')} dataset={dataset_id}")

        if not dataset_id:
            logger.error(f"Missing defaultDatasetId in Apify run {run_id}")
            raise ScraperError("Apify run missing dataset")

        items = get_dataset_items(dataset_id, token)
        logger.debug(f"Apify run {run_id} returned {len(items)} item(s)")

        item = first_usable_item(items)
        if item is None:
            logger.warning(f"No useful data returned from Apify for {job_url}")
            raise ScraperError("No data from Apify")

        upsert_cache_entry(
            session, job_url, APIFY_PROVIDER, item, settings.SCRAPE_CACHE_TTL_DAYS,
            run_id=run_id, dataset_id=dataset_id,
        )
        logger.info(f"Cache updated after new run {run_id} for {job_url}")
        return map_item_to_form(item, job_url)
