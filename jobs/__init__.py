from jobs.forms import JobForm, JobFormError, ImportedJob, LinkedinFormData
from jobs.service import (
    add_job,
    update_job,
    get_job,
    list_jobs,
    delete_job,
    new_job_form,
    set_applied,
    apply_import,
    find_or_create_option,
    list_options,
)

__all__ = [
    "JobForm",
    "JobFormError",
    "ImportedJob",
    "LinkedinFormData",
    "add_job",
    "update_job",
    "get_job",
    "list_jobs",
    "delete_job",
    "new_job_form",
    "set_applied",
    "apply_import",
    "find_or_create_option",
    "list_options",
]
