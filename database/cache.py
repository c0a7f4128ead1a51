"""Single-row TTL cache of scraper results keyed by job URL."""

import json
import logging
from datetime import timedelta

from database.models import JobScrapeCache, utcnow

logger = logging.getLogger(__name__)


def compute_expires_at(days, now=None):
    return (now or utcnow()) + timedelta(days=days)


def get_cache_entry(session, url):
    return session.query(JobScrapeCache).filter_by(url=url).first()


def is_fresh(entry, provider, now=None):
    """True when the row exists, was written by ``provider`` and has not expired."""
    if entry is None or entry.provider != provider:
        return False
    return entry.expires_at > (now or utcnow())


def load_payload(entry):
    return json.loads(entry.response_json)


def upsert_cache_entry(session, url, provider, item, ttl_days, run_id=None, dataset_id=None):
    """Insert or refresh the cache row for ``url``.

    Identifiers left as None keep whatever the existing row already holds.
    """
    expires_at = compute_expires_at(ttl_days)
    payload = json.dumps(item)

    entry = get_cache_entry(session, url)
    if entry:
        entry.provider = provider
        entry.response_json = payload
        entry.expires_at = expires_at
        if run_id is not None:
            entry.run_id = run_id
        if dataset_id is not None:
            entry.dataset_id = dataset_id
        logger.info(f"Updated scrape cache for {url}")
    else:
        entry = JobScrapeCache(
            url=url,
            provider=provider,
            response_json=payload,
            run_id=run_id,
            dataset_id=dataset_id,
            expires_at=expires_at,
        )
        session.add(entry)
        logger.info(f"Added scrape cache for {url}")

    session.commit()
    return entry
