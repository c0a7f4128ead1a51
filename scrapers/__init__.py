import logging

from config import settings
from jobs.forms import ImportedJob
from scrapers import apify, browse_ai
from scrapers.http import ScraperError, ScraperConfigError, ScraperHTTPError

logger = logging.getLogger(__name__)

PROVIDERS = ("apify", "browseai")


def import_job_from_url(job_url, provider=None, session=None):
    """Scrape ``job_url`` with the configured provider and return an ImportedJob."""
    provider = (provider or settings.IMPORT_PROVIDER).lower()
    logger.info(f"Importing {job_url} with provider {provider}")

    if provider == "apify":
        return ImportedJob.from_linkedin(apify.fetch_linkedin_job_details(job_url, session=session))
    if provider == "browseai":
        return browse_ai.fetch_linkedin_job_details(job_url, session=session)

    raise ScraperConfigError(f"Unknown import provider: {provider}")


__all__ = [
    "PROVIDERS",
    "import_job_from_url",
    "ScraperError",
    "ScraperConfigError",
    "ScraperHTTPError",
]
