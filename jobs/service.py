import logging
from datetime import datetime

from database.models import Job, JobTitle, Company, JobLocation, JobSource, JobStatus
from jobs.forms import JobForm, JobFormError, ImportedJob
from jobs.matching import find_option, find_linkedin_source, map_employment_type

logger = logging.getLogger(__name__)


def list_options(session, model):
    return [row.to_option() for row in session.query(model).order_by(model.id).all()]


def find_or_create_option(session, model, label):
    """Return the id of the row matching ``label``, creating the row if nothing matches."""
    label = (label or "").strip()
    if not label:
        return None

    rows = session.query(model).order_by(model.id).all()
    found = find_option(rows, label)
    if found:
        return found.id

    row = model(label=label, value=label.lower())
    session.add(row)
    session.commit()
    logger.info(f"Created {model.__tablename__} entry '{label}' ({row.id})")
    return row.id


def _statuses(session):
    return session.query(JobStatus).order_by(JobStatus.id).all()


def new_job_form(session):
    statuses = _statuses(session)
    return JobForm(status=statuses[0].id if statuses else None)


def set_applied(session, form, applied):
    """Mirror the "Applied" switch: moves status off/onto the first status."""
    statuses = _statuses(session)
    form.applied = applied
    if applied:
        if len(statuses) > 1 and form.status == statuses[0].id:
            form.status = statuses[1].id
        form.date_applied = datetime.now()
    else:
        form.date_applied = None
        if statuses:
            form.status = statuses[0].id
    return form


def _job_to_form(job):
    return JobForm(
        id=job.id,
        title=job.title_id,
        company=job.company_id,
        location=job.location_id,
        type=job.job_type,
        source=job.source_id,
        status=job.status_id,
        due_date=job.due_date,
        date_applied=job.applied_date,
        salary_range=job.salary_range,
        job_description=job.description,
        job_url=job.job_url,
        applied=job.applied,
    )


def job_to_dict(job):
    data = _job_to_form(job).to_json()
    data.update({
        "jobTitle": job.title.to_option() if job.title else None,
        "companyName": job.company.to_option() if job.company else None,
        "jobLocation": job.location.to_option() if job.location else None,
        "jobSource": job.source.to_option() if job.source else None,
        "jobStatus": job.status.to_option() if job.status else None,
        "createdAt": job.created_at.isoformat() if job.created_at else None,
    })
    return data


def _check_references(session, form):
    errors = {}
    refs = (
        ("title", JobTitle),
        ("company", Company),
        ("location", JobLocation),
        ("source", JobSource),
        ("status", JobStatus),
    )
    for field, model in refs:
        if session.get(model, getattr(form, field)) is None:
            errors[field] = f"Unknown {field} id {getattr(form, field)}"
    if errors:
        raise JobFormError(errors)


def _fill_job(job, form):
    job.title_id = form.title
    job.company_id = form.company
    job.location_id = form.location
    job.source_id = form.source
    job.status_id = form.status
    job.job_type = form.type
    job.due_date = form.due_date
    job.applied = form.applied
    job.applied_date = form.date_applied if form.applied else None
    job.salary_range = form.salary_range
    job.description = form.job_description
    job.job_url = form.job_url or None


def add_job(session, form):
    try:
        form.validate_for_save()
        _check_references(session, form)
    except JobFormError as e:
        logger.warning(f"Rejected new job: {e}")
        return {"success": False, "message": str(e), "errors": e.errors}

    job = Job()
    _fill_job(job, form)
    session.add(job)
    session.commit()
    logger.info(f"Added job {job.id}")
    return {"success": True, "message": "Job has been created successfully", "data": job_to_dict(job)}


def update_job(session, form):
    if form.id is None:
        return {"success": False, "message": "Missing job id", "errors": {"id": "Required"}}

    job = session.get(Job, form.id)
    if job is None:
        return {"success": False, "message": f"Job {form.id} not found", "errors": {}}

    try:
        form.validate_for_save()
        _check_references(session, form)
    except JobFormError as e:
        logger.warning(f"Rejected update of job {form.id}: {e}")
        return {"success": False, "message": str(e), "errors": e.errors}

    _fill_job(job, form)
    session.commit()
    logger.info(f"Updated job {job.id}")
    return {"success": True, "message": "Job has been updated successfully", "data": job_to_dict(job)}


def get_job(session, job_id):
    return session.get(Job, job_id)


def list_jobs(session):
    return session.query(Job).order_by(Job.created_at.desc(), Job.id.desc()).all()


def delete_job(session, job_id):
    job = session.get(Job, job_id)
    if job is None:
        return False
    session.delete(job)
    session.commit()
    logger.info(f"Deleted job {job_id}")
    return True


def apply_import(session, form, imported: ImportedJob):
    """Copy an imported job onto ``form``, resolving free text to option ids.

    Fields the import left blank keep their current form value.
    """
    if imported.title:
        form.title = find_or_create_option(session, JobTitle, imported.title)
    if imported.company:
        form.company = find_or_create_option(session, Company, imported.company)
    if imported.location:
        form.location = find_or_create_option(session, JobLocation, imported.location)
    if imported.job_description:
        form.job_description = imported.job_description
    if imported.job_url:
        form.job_url = imported.job_url

    source = find_linkedin_source(session.query(JobSource).order_by(JobSource.id).all())
    if source:
        form.source = source.id

    job_type = map_employment_type(imported.type)
    if job_type:
        form.type = job_type
    elif imported.type:
        logger.warning(f"Unrecognised employment type '{imported.type}', keeping {form.type}")

    if imported.due_date:
        try:
            due_date = datetime.fromisoformat(imported.due_date.replace("Z", "+00:00"))
            if due_date.tzinfo is not None:
                due_date = due_date.astimezone().replace(tzinfo=None)
            form.due_date = due_date
        except ValueError:
            logger.warning(f"Ignoring unparseable due date '{imported.due_date}'")

    logger.info(f"Applied import from {imported.job_url} to job form")
    return form
