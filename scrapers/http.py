import logging
import requests
from config.settings import HTTP_TIMEOUT

logger = logging.getLogger(__name__)


class ScraperError(Exception):
    """An import from a scraping provider failed."""


class ScraperConfigError(ScraperError):
    """The provider is not configured (missing token, unknown provider)."""


class ScraperHTTPError(ScraperError):
    def __init__(self, status, text=""):
        self.status = status
        self.text = text
        super().__init__(f"HTTP error {status}")


def fetch_json(url, method="GET", **kwargs):
    """Issue one request and return the decoded JSON body.

    Query-string credentials belong in ``params`` so they never reach the logs.
    """
    kwargs.setdefault("timeout", HTTP_TIMEOUT)
    try:
        res = requests.request(method, url, **kwargs)
    except requests.RequestException as e:
        # The exception text repeats the query string, credentials included
        logger.error(f"Request to {url} failed: {type(e).__name__}")
        raise ScraperError(f"Request to {url} failed: {type(e).__name__}") from None

    if not res.ok:
        text = res.text or ""
        logger.error(f"HTTP error from {url}: status={res.status_code} body={text[:500]}")
        raise ScraperHTTPError(res.status_code, text)

    try:
        return res.json()
    except ValueError as e:
        logger.error(f"Invalid JSON from {url}: {e}")
        raise ScraperError(f"Invalid JSON from {url}") from e
