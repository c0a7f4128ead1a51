"""Form-shaped models exchanged with the job dialog and the import endpoint."""

from datetime import datetime, timedelta
from typing import Optional, Dict

from pydantic import BaseModel, ConfigDict, Field

from database.models import JOB_TYPES

DEFAULT_DUE_DAYS = 3
DEFAULT_SALARY_RANGE = "1"


class JobFormError(ValueError):
    """Raised when a job form cannot be saved. ``errors`` maps field -> message."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))


class JobForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    title: Optional[int] = None
    company: Optional[int] = None
    location: Optional[int] = None
    type: str = Field(default_factory=lambda: next(iter(JOB_TYPES)))
    source: Optional[int] = None
    status: Optional[int] = None
    due_date: datetime = Field(
        default_factory=lambda: datetime.now() + timedelta(days=DEFAULT_DUE_DAYS),
        alias="dueDate",
    )
    date_applied: Optional[datetime] = Field(default=None, alias="dateApplied")
    salary_range: Optional[str] = Field(default=DEFAULT_SALARY_RANGE, alias="salaryRange")
    job_description: str = Field(default="", alias="jobDescription")
    job_url: Optional[str] = Field(default=None, alias="jobUrl")
    applied: bool = False
    resume: Optional[str] = None

    def validate_for_save(self):
        errors = {}
        for field in ("title", "company", "location", "source", "status"):
            if getattr(self, field) is None:
                errors[field] = "Required"
        if self.type not in JOB_TYPES:
            errors["type"] = f"Must be one of {', '.join(JOB_TYPES)}"
        if not self.job_description.strip():
            errors["jobDescription"] = "Job description is required"
        if self.applied and self.date_applied is None:
            errors["dateApplied"] = "Date applied is required for an applied job"
        if errors:
            raise JobFormError(errors)
        return self

    def to_json(self):
        return self.model_dump(mode="json", by_alias=True)


class LinkedinFormData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
    job_url: str = Field(alias="jobUrl")


class ImportedJob(BaseModel):
    """What the import endpoint hands back to the form as ``jobForm``."""

    model_config = ConfigDict(populate_by_name=True)

    source: str = "LinkedIn"
    title: str = ""
    type: str = ""
    company: str = ""
    location: str = ""
    status: str = "To apply"
    due_date: str = Field(default_factory=lambda: datetime.now().isoformat(), alias="dueDate")
    date_applied: Optional[str] = Field(default=None, alias="dateApplied")
    salary_range: str = Field(default="", alias="salaryRange")
    job_description: str = Field(default="", alias="jobDescription")
    job_url: str = Field(alias="jobUrl")
    applied: bool = False

    @classmethod
    def from_linkedin(cls, data: LinkedinFormData):
        return cls(
            title=data.title,
            company=data.company,
            location=data.location,
            job_description=data.description,
            job_url=data.job_url,
        )

    def to_json(self):
        return self.model_dump(mode="json", by_alias=True)
