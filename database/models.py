from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

JOB_TYPES = {
    "FT": "Full-time",
    "PT": "Part-time",
    "C": "Contract",
}


def utcnow():
    # Naive UTC, SQLite drops tzinfo on the way back
    return datetime.now(timezone.utc).replace(tzinfo=None)


class JobScrapeCache(Base):
    __tablename__ = 'job_scrape_cache'

    url = Column(String, primary_key=True)
    provider = Column(String, nullable=False)
    response_json = Column(Text, nullable=False)
    run_id = Column(String, nullable=True)
    dataset_id = Column(String, nullable=True)
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class OptionMixin:
    """Lookup rows rendered as {id, label, value} options in the job form."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String, nullable=False)
    value = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    def to_option(self):
        return {"id": self.id, "label": self.label, "value": self.value}


class JobTitle(OptionMixin, Base):
    __tablename__ = 'job_titles'


class Company(OptionMixin, Base):
    __tablename__ = 'companies'

    logo_url = Column(String, nullable=True)


class JobLocation(OptionMixin, Base):
    __tablename__ = 'job_locations'


class JobSource(OptionMixin, Base):
    __tablename__ = 'job_sources'


class JobStatus(OptionMixin, Base):
    __tablename__ = 'job_statuses'


class Job(Base):
    __tablename__ = 'jobs'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title_id = Column(Integer, ForeignKey('job_titles.id'), nullable=False)
    company_id = Column(Integer, ForeignKey('companies.id'), nullable=False)
    location_id = Column(Integer, ForeignKey('job_locations.id'), nullable=False)
    source_id = Column(Integer, ForeignKey('job_sources.id'), nullable=False)
    status_id = Column(Integer, ForeignKey('job_statuses.id'), nullable=False)
    job_type = Column(String, nullable=False, default="FT")
    due_date = Column(DateTime, nullable=False)
    applied = Column(Boolean, nullable=False, default=False)
    applied_date = Column(DateTime, nullable=True)
    salary_range = Column(String, nullable=True)
    description = Column(Text, nullable=False, default="")
    job_url = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    title = relationship(JobTitle)
    company = relationship(Company)
    location = relationship(JobLocation)
    source = relationship(JobSource)
    status = relationship(JobStatus)
