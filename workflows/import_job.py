import argparse
import json
import logging
import sys

from config.settings import LOG_LEVEL
from database import init_db
from scrapers import PROVIDERS, import_job_from_url


def main(argv=None):
    parser = argparse.ArgumentParser(description="Import job details from a LinkedIn job URL")
    parser.add_argument("url", help="LinkedIn job URL")
    parser.add_argument("--provider", choices=PROVIDERS, default=None,
                        help="Scraping provider (defaults to IMPORT_PROVIDER)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL)
    logger = logging.getLogger(__name__)

    init_db()
    try:
        job_form = import_job_from_url(args.url, provider=args.provider)
    except Exception as e:
        logger.error(f"An error occurred: {e}")
        return 1

    print(json.dumps({"jobForm": job_form.to_json()}, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
