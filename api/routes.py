"""HTTP endpoints for the job tracker."""

import logging
from contextlib import contextmanager

from flask import current_app, jsonify, request
from pydantic import ValidationError

from database.models import JobTitle, Company, JobLocation, JobSource, JobStatus
from jobs import service
from jobs.forms import JobForm, ImportedJob
from scrapers import import_job_from_url

logger = logging.getLogger(__name__)

OPTION_MODELS = {
    "titles": JobTitle,
    "companies": Company,
    "locations": JobLocation,
    "sources": JobSource,
    "statuses": JobStatus,
}


@contextmanager
def db_session():
    session = current_app.config["SESSION_FACTORY"]()
    try:
        yield session
    finally:
        session.close()


def _json_body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _validation_message(e):
    return "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())


def register_routes(app):

    @app.route('/api/jobs/import-from-url', methods=['POST'])
    def import_from_url():
        body = _json_body()
        job_url = body.get('jobUrl')

        if not job_url:
            logger.error("Missing jobUrl")
            return jsonify({'error': 'Missing jobUrl'}), 400

        try:
            with db_session() as session:
                job_form = import_job_from_url(job_url, provider=body.get('provider'), session=session)
        except Exception as e:
            logger.exception(f"Import job error for {job_url}")
            return jsonify({'error': str(e) or 'Server error'}), 500

        return jsonify({'jobForm': job_form.to_json()}), 200

    @app.route('/api/jobs/apply-import', methods=['POST'])
    def apply_import():
        body = _json_body()
        try:
            imported = ImportedJob.model_validate(body.get('jobForm') or {})
            with db_session() as session:
                form = JobForm.model_validate(body['form']) if body.get('form') else service.new_job_form(session)
                form = service.apply_import(session, form, imported)
        except ValidationError as e:
            return jsonify({'error': _validation_message(e)}), 400
        return jsonify({'form': form.to_json()}), 200

    @app.route('/api/jobs/new', methods=['GET'])
    def new_job():
        with db_session() as session:
            return jsonify({'form': service.new_job_form(session).to_json()})

    @app.route('/api/options/<kind>', methods=['GET'])
    def list_options(kind):
        model = OPTION_MODELS.get(kind)
        if model is None:
            return jsonify({'error': f'Unknown option list: {kind}'}), 404
        with db_session() as session:
            return jsonify({'data': service.list_options(session, model)})

    @app.route('/api/options/<kind>', methods=['POST'])
    def create_option(kind):
        model = OPTION_MODELS.get(kind)
        if model is None:
            return jsonify({'error': f'Unknown option list: {kind}'}), 404
        label = _json_body().get('label')
        if not isinstance(label, str) or not label.strip():
            return jsonify({'error': 'Missing label'}), 400
        with db_session() as session:
            option_id = service.find_or_create_option(session, model, label)
            return jsonify({'success': True, 'data': session.get(model, option_id).to_option()}), 201

    @app.route('/api/jobs', methods=['GET'])
    def list_jobs():
        with db_session() as session:
            return jsonify({'data': [service.job_to_dict(job) for job in service.list_jobs(session)]})

    @app.route('/api/jobs/<int:job_id>', methods=['GET'])
    def get_job(job_id):
        with db_session() as session:
            job = service.get_job(session, job_id)
            if job is None:
                return jsonify({'error': 'Job not found'}), 404
            return jsonify({'data': service.job_to_dict(job)})

    @app.route('/api/jobs', methods=['POST'])
    def add_job():
        try:
            form = JobForm.model_validate(request.get_json(silent=True) or {})
        except ValidationError as e:
            return jsonify({'success': False, 'message': _validation_message(e)}), 400

        with db_session() as session:
            result = service.add_job(session, form)
        return jsonify(result), 201 if result['success'] else 400

    @app.route('/api/jobs/<int:job_id>', methods=['PUT'])
    def update_job(job_id):
        try:
            form = JobForm.model_validate(request.get_json(silent=True) or {})
        except ValidationError as e:
            return jsonify({'success': False, 'message': _validation_message(e)}), 400
        form.id = job_id

        with db_session() as session:
            if service.get_job(session, job_id) is None:
                return jsonify({'success': False, 'message': 'Job not found'}), 404
            result = service.update_job(session, form)
        return jsonify(result), 200 if result['success'] else 400

    @app.route('/api/jobs/<int:job_id>', methods=['DELETE'])
    def delete_job(job_id):
        with db_session() as session:
            if not service.delete_job(session, job_id):
                return jsonify({'success': False, 'message': 'Job not found'}), 404
        return jsonify({'success': True})
