import argparse
import logging

from config.settings import LOG_LEVEL
from database import SessionLocal, init_db, seed_defaults


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create the job tracker tables")
    parser.add_argument("--seed", action="store_true", help="Insert default job statuses and sources")
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL)
    logger = logging.getLogger(__name__)

    init_db()
    logger.info("Database tables created")

    if args.seed:
        session = SessionLocal()
        try:
            added = seed_defaults(session)
            logger.info(f"Seeded {added} default rows")
        finally:
            session.close()
    return 0


if __name__ == '__main__':
    main()
