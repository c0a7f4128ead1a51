import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///jobs.db")


# Tokens are looked up on every call so a missing key is caught before any request goes out
def get_apify_token():
    return os.getenv("APIFY_TOKEN")


def get_browseai_api_key():
    return os.getenv("BROWSEAI_API_KEY")
