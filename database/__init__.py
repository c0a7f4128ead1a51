from .db import engine, SessionLocal, session_scope
from .models import Base, JobSource, JobStatus

DEFAULT_STATUSES = ["Draft", "Applied", "Interview", "Offer", "Rejected", "Expired", "Archived"]
DEFAULT_SOURCES = ["LinkedIn", "Indeed", "Company site", "Referral", "Other"]


# Create all tables in the database (useful during development)
def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)


def seed_defaults(session):
    """Insert the default job statuses and sources if their tables are empty."""
    added = 0
    for model, labels in ((JobStatus, DEFAULT_STATUSES), (JobSource, DEFAULT_SOURCES)):
        if session.query(model.id).first():
            continue
        for label in labels:
            session.add(model(label=label, value=label.lower()))
            added += 1
    session.commit()
    return added
