import os
from dotenv import load_dotenv

load_dotenv()


def _get_int(name, default):
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


def _get_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_ECHO = _get_bool("DATABASE_ECHO")

# Import from URL
IMPORT_PROVIDER = os.getenv("IMPORT_PROVIDER", "apify").lower()
SCRAPE_CACHE_TTL_DAYS = _get_int("SCRAPE_CACHE_TTL_DAYS", 7)
HTTP_TIMEOUT = _get_int("HTTP_TIMEOUT", 180)

# Apify
APIFY_BASE_URL = "https://api.apify.com/v2"
APIFY_ACTOR_ID = os.getenv("APIFY_ACTOR_ID", "piotrv1001~linkedin-job-details-scraper")
APIFY_WAIT_FOR_FINISH = _get_int("APIFY_WAIT_FOR_FINISH", 120)

# Browse AI
BROWSEAI_BASE_URL = "https://api.browse.ai/v2"
BROWSEAI_ROBOT_ID = os.getenv("BROWSEAI_ROBOT_ID", "019b7ef5-6721-73c4-baf5-1e2278f73073")
BROWSEAI_MAX_ATTEMPTS = _get_int("BROWSEAI_MAX_ATTEMPTS", 10)
BROWSEAI_POLL_DELAY = _get_int("BROWSEAI_POLL_DELAY", 5)
