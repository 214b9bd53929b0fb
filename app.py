from flask import Flask, request, jsonify, make_response
import os
import time
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_talisman import Talisman

from config import get_config
from logging_config import setup_logging
from metrics import init_metrics, app_metrics
from exceptions import ScoringServiceError, RequestValidationError
from resume_schema import normalize_resume, parse_career_keywords
from resume_templates import list_templates, resolve_template
from ats_engine import get_resume_scorer
from content_services import generate_content, analyze_feedback
from exporters import export_resume

# Exported HTML carries its own inline styles; the print view an inline script
csp = {
    'default-src': "'self'",
    'script-src': ["'self'", "'unsafe-inline'"],
    'style-src': ["'self'", "'unsafe-inline'"],
    'img-src': ["'self'", "data:", "https:"],
}


def create_app(config_class=None, scorer=None):
    """Build the Flask application; `scorer` overrides the configured strategy"""
    app = Flask(__name__)
    app.config.from_object(config_class or get_config())
    app.json.sort_keys = False

    # Setup logging (must be done early)
    setup_logging(app)

    Talisman(
        app,
        force_https=app.config.get('FORCE_HTTPS', False),
        strict_transport_security=app.config.get('FORCE_HTTPS', False),
        content_security_policy=csp,
    )

    # Limits, storage and the on/off switch come from RATELIMIT_* settings
    app.limiter = Limiter(key_func=get_remote_address, app=app)

    if app.config.get('METRICS_ENABLED'):
        if init_metrics(app) is not None:
            app.logger.info("Prometheus metrics enabled")

    app.extensions['resume_scorer'] = scorer or get_resume_scorer(app.config)
    app.logger.info(f"Resume scorer initialized: {app.extensions['resume_scorer'].strategy}")

    register_error_handlers(app)
    register_routes(app)
    return app


def get_json_body():
    try:
        data = request.get_json(silent=True)
    except RecursionError:
        raise RequestValidationError('Request body is nested too deeply')
    if not isinstance(data, dict):
        raise RequestValidationError('Request body must be a JSON object')
    return data


def require_fields(data, *fields):
    """400 when any field is absent, null or a blank string"""
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise RequestValidationError(f'{field} is required')


def require_present(data, *fields):
    """400 when any field is absent or null; blank strings are accepted"""
    for field in fields:
        if data.get(field) is None:
            raise RequestValidationError(f'{field} is required')


def text_field(data, field, default=''):
    value = data.get(field)
    return value if isinstance(value, str) else default


def register_error_handlers(app):
    @app.errorhandler(413)
    def request_too_large(e):
        return jsonify({'error': 'Request body too large'}), 413

    @app.errorhandler(429)
    def rate_limit_exceeded(e):
        app.logger.warning(f"Rate limit exceeded for {get_remote_address()}: {e.description}")
        return jsonify({'error': 'Rate limit exceeded. Please try again later.'}), 429


def register_routes(app):

    def handle_failure(endpoint, e, message):
        """Map a failed request to its status code; details stay in the logs"""
        if isinstance(e, ScoringServiceError):
            status = e.status_code
            app_metrics.record_analysis(endpoint, 'invalid' if status == 400 else 'error')
            if status == 400:
                return jsonify(e.to_dict()), 400
            app.logger.error(f"{endpoint} upstream failure: {e.message}")
            return jsonify({'error': message}), status

        app_metrics.record_analysis(endpoint, 'error')
        app_metrics.record_error(type(e).__name__, endpoint)
        app.logger.exception(f"{endpoint} error: {str(e)}")
        return jsonify({'error': message}), 500

    def scorer():
        return app.extensions['resume_scorer']

    @app.route('/api/ai/ats-analysis', methods=['POST'])
    def ats_analysis():
        """ATS compatibility analysis of a structured resume"""
        try:
            data = get_json_body()
            require_fields(data, 'resumeData')

            record = normalize_resume(data['resumeData'])
            result = scorer().analyze_ats(
                record,
                template=text_field(data, 'template', None),
                career_keywords=parse_career_keywords(data.get('careerKeywords')),
            )

            app_metrics.record_analysis('ats-analysis', 'success', {'ats': result['atsScore']})
            return jsonify(result)

        except Exception as e:
            return handle_failure('ats-analysis', e, 'Failed to analyze resume')

    @app.route('/api/ai/match-job', methods=['POST'])
    def match_job():
        """Match a resume (structured or plain text) against a job description"""
        try:
            data = get_json_body()
            require_fields(data, 'jobDescription')
            if data.get('resumeData') is None and not text_field(data, 'resumeContent').strip():
                raise RequestValidationError('resumeData or resumeContent is required')

            record = normalize_resume(data['resumeData']) if data.get('resumeData') is not None else None
            result = scorer().match_job(
                text_field(data, 'jobDescription'),
                record=record,
                resume_text=text_field(data, 'resumeContent'),
                career_keywords=parse_career_keywords(data.get('careerKeywords')),
            )

            app_metrics.record_analysis('match-job', 'success', {'match': result['matchPercentage']})
            return jsonify(result)

        except Exception as e:
            return handle_failure('match-job', e, 'Failed to analyze job match')

    @app.route('/api/ai/optimize-keywords', methods=['POST'])
    def optimize_keywords():
        """Industry keyword optimization of free-text resume content"""
        try:
            data = get_json_body()
            require_fields(data, 'content', 'industry')

            result = scorer().optimize_keywords(
                text_field(data, 'content'),
                text_field(data, 'industry'),
                job_description=text_field(data, 'jobDescription'),
            )

            app_metrics.record_analysis('optimize-keywords', 'success', {'keywords': result['atsScore'] * 10})
            return jsonify(result)

        except Exception as e:
            return handle_failure('optimize-keywords', e, 'Failed to analyze keywords')

    @app.route('/api/ai/industry-optimization', methods=['POST'])
    def industry_optimization():
        """Industry and role optimization plan"""
        try:
            data = get_json_body()
            require_fields(data, 'resumeData', 'targetIndustry', 'targetRole')

            result = scorer().optimize_industry(
                normalize_resume(data['resumeData']),
                text_field(data, 'targetIndustry'),
                text_field(data, 'targetRole'),
                career_keywords=parse_career_keywords(data.get('careerKeywords')),
            )

            app_metrics.record_analysis('industry-optimization', 'success')
            return jsonify(result)

        except Exception as e:
            return handle_failure('industry-optimization', e, 'Failed to generate industry optimization')

    @app.route('/api/ai/generate-content', methods=['POST'])
    def generate_section_content():
        """Template content for one resume section"""
        try:
            data = get_json_body()
            require_fields(data, 'section', 'jobTitle', 'industry')
            require_present(data, 'userInput')

            content = generate_content(
                text_field(data, 'section'),
                job_title=text_field(data, 'jobTitle'),
                industry=text_field(data, 'industry'),
            )

            app_metrics.record_analysis('generate-content', 'success')
            return jsonify({'content': content})

        except Exception as e:
            return handle_failure('generate-content', e, 'Failed to generate content')

    @app.route('/api/ai/feedback-analysis', methods=['POST'])
    def feedback_analysis():
        """Analyze how a user edited generated content"""
        try:
            data = get_json_body()
            require_fields(data, 'editedContent')

            result = analyze_feedback(
                text_field(data, 'editedContent'),
                original_content=text_field(data, 'originalContent'),
                edit_type=text_field(data, 'editType', None),
            )

            app_metrics.record_analysis('feedback-analysis', 'success')
            return jsonify(result)

        except Exception as e:
            return handle_failure('feedback-analysis', e, 'Failed to analyze feedback')

    @app.route('/api/export/<export_format>', methods=['POST'])
    def export(export_format):
        """Export the resume as DOCX, standalone HTML or print-ready HTML"""
        if export_format not in ('docx', 'html', 'pdf'):
            return jsonify({'error': f'Unsupported export format: {export_format}'}), 404

        try:
            data = get_json_body()
            require_fields(data, 'resumeData')

            template = text_field(data, 'template', None)
            custom_colors = data.get('customColors')
            document = export_resume(normalize_resume(data['resumeData']), export_format,
                                     template=template, custom_colors=custom_colors)

            app_metrics.record_export(export_format, resolve_template(template))

            response = make_response(document.body)
            response.headers['Content-Type'] = document.mimetype
            response.headers['Content-Disposition'] = document.content_disposition
            return response

        except Exception as e:
            return handle_failure(f'export-{export_format}', e, f'Failed to generate {export_format.upper()}')

    @app.route('/api/templates')
    def templates():
        return jsonify({'templates': list_templates()})

    @app.route('/health')
    def health():
        """Health check endpoint for monitoring and load balancers"""
        start_time = time.time()
        strategy = app.extensions['resume_scorer'].strategy

        health_status = {
            'status': 'healthy',
            'timestamp': time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime()),
            'environment': os.environ.get('FLASK_ENV', 'development'),
            'scorer': strategy,
            'llm_configured': bool(app.config.get('OPENAI_API_KEY')),
            'metrics_enabled': bool(app.config.get('METRICS_ENABLED')),
        }
        if strategy == 'llm' and not health_status['llm_configured']:
            health_status['status'] = 'degraded'

        health_status['response_time_ms'] = round((time.time() - start_time) * 1000, 2)
        return jsonify(health_status), 200


if __name__ == '__main__':
    # Development server only - use wsgi.py for production
    print("🚀 Starting Resume Builder scoring API (Development Mode)...")
    print("📝 API available at: http://localhost:5000/api/ai/")
    print("⚠️  For production, use: gunicorn wsgi:app")

    app = create_app()
    env = os.environ.get('FLASK_ENV', 'development')
    app.run(debug=env == 'development', host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
