"""
Endpoint tests for the scoring API using the Flask test client
"""

import pytest

from app import create_app
from ats_engine import LLMResumeScorer
from config import TestingConfig
from exceptions import UpstreamServiceError
from llm_client import LLMClient

RESUME = {
    'personalInfo': {'fullName': 'Jane Doe', 'email': 'jane@example.com', 'phone': '555-123-4567',
                     'careerKeywords': 'python, cloud'},
    'experience': [{'jobTitle': 'Software Engineer', 'company': 'Acme Corp',
                    'description': 'Developed Python APIs serving 2 million requests per day on AWS cloud.'}],
    'education': [{'institution': 'State University', 'degree': 'BS', 'field': 'Computer Science'}],
    'skills': {'technical': ['Python', 'SQL', 'Docker', 'AWS', 'Cloud Architecture']},
}


class FailingLLMClient(LLMClient):
    def chat_json(self, system_prompt, user_prompt, operation='chat', temperature=None):
        raise UpstreamServiceError("Failed to get analysis from LLM.")


class NoKeyConfig(TestingConfig):
    OPENAI_API_KEY = None


class RateLimitedConfig(TestingConfig):
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT = '2 per minute'


@pytest.fixture
def client():
    app = create_app(TestingConfig)
    return app.test_client()


@pytest.fixture
def llm_client():
    app = create_app(NoKeyConfig, scorer=LLMResumeScorer(FailingLLMClient()))
    return app.test_client()


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    data = response.get_json()
    assert data['status'] == 'healthy'
    assert data['scorer'] == 'heuristic'


def test_templates(client):
    response = client.get('/api/templates')
    assert response.status_code == 200
    assert [t['id'] for t in response.get_json()['templates']] == ['modern', 'classic', 'creative', 'minimal']


def test_ats_analysis(client):
    response = client.post('/api/ai/ats-analysis', json={'resumeData': RESUME, 'template': 'modern'})

    assert response.status_code == 200
    data = response.get_json()
    assert 0 <= data['atsScore'] <= 100
    assert list(data) == ['atsScore', 'sectionAnalysis', 'formattingIssues', 'missingSections',
                          'keywordAnalysis', 'recommendations', 'criticalIssues']
    assert data['keywordAnalysis']['matched'] == ['python', 'cloud']


def test_ats_analysis_merges_request_career_keywords(client):
    response = client.post('/api/ai/ats-analysis',
                           json={'resumeData': RESUME, 'careerKeywords': 'kubernetes'})
    assert response.get_json()['keywordAnalysis']['missing'] == ['kubernetes']


def test_ats_analysis_absorbs_malformed_sections(client):
    response = client.post('/api/ai/ats-analysis',
                           json={'resumeData': {'personalInfo': [], 'experience': 'lots', 'skills': None}})
    assert response.status_code == 200
    assert response.get_json()['missingSections'] == ['personalInfo', 'experience', 'education', 'skills']


@pytest.mark.parametrize('path, payload', [
    ('/api/ai/ats-analysis', {}),
    ('/api/ai/ats-analysis', {'resumeData': None}),
    ('/api/ai/match-job', {'resumeData': RESUME}),
    ('/api/ai/match-job', {'jobDescription': 'Python developer'}),
    ('/api/ai/optimize-keywords', {'content': 'Python developer'}),
    ('/api/ai/optimize-keywords', {'content': '   ', 'industry': 'technology'}),
    ('/api/ai/industry-optimization', {'resumeData': RESUME, 'targetIndustry': 'technology'}),
    ('/api/ai/generate-content', {'industry': 'technology'}),
    ('/api/ai/generate-content', {'section': 'summary', 'jobTitle': 'Nurse', 'industry': 'healthcare'}),
    ('/api/ai/generate-content', {'section': 'summary', 'userInput': '', 'industry': 'healthcare'}),
    ('/api/ai/generate-content', {'section': 'summary', 'userInput': '', 'jobTitle': 'Nurse'}),
    ('/api/ai/generate-content', {'section': 'hobbies', 'userInput': '', 'jobTitle': 'Nurse',
                                    'industry': 'healthcare'}),
    ('/api/ai/feedback-analysis', {'originalContent': 'text'}),
    ('/api/export/docx', {'template': 'modern'}),
])
def test_missing_required_fields(client, path, payload):
    response = client.post(path, json=payload)
    assert response.status_code == 400
    assert 'error' in response.get_json()


def test_non_json_body(client):
    response = client.post('/api/ai/ats-analysis', data='resume', content_type='text/plain')
    assert response.status_code == 400


def test_deeply_nested_body_is_a_validation_error(client):
    body = '{"resumeData": ' + '[' * 100000 + ']' * 100000 + '}'
    response = client.post('/api/ai/ats-analysis', data=body, content_type='application/json')

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Request body is nested too deeply'}


def test_generate_content_accepts_blank_user_input(client):
    response = client.post('/api/ai/generate-content', json={
        'section': 'skills', 'userInput': '', 'jobTitle': 'Analyst', 'industry': 'finance',
    })
    assert response.status_code == 200
    assert response.get_json()['content'].startswith('Financial Analysis, Excel')


def test_match_job_with_structured_resume(client):
    response = client.post('/api/ai/match-job', json={
        'resumeData': RESUME,
        'jobDescription': 'Python developer with Docker, Kubernetes and AWS experience',
    })
    assert response.status_code == 200
    data = response.get_json()
    assert 0 <= data['matchPercentage'] <= 100
    assert 'kubernetes' in data['missingRequirements']
    assert data['careerKeywordAlignment']['matched'] == ['python', 'cloud']


def test_match_job_with_resume_text(client):
    response = client.post('/api/ai/match-job', json={
        'resumeContent': 'Python developer with Docker and AWS.',
        'jobDescription': 'Looking for a Python developer with Docker, Kubernetes and AWS experience. Agile team.',
    })
    assert response.status_code == 200
    assert response.get_json()['matchPercentage'] == 60


def test_optimize_keywords(client):
    response = client.post('/api/ai/optimize-keywords', json={
        'content': 'Python developer using agile and cloud APIs',
        'industry': 'technology',
    })
    assert response.status_code == 200
    data = response.get_json()
    assert 1 <= data['atsScore'] <= 10
    assert set(data) == {'missingKeywords', 'atsScore', 'suggestions'}


def test_industry_optimization(client):
    response = client.post('/api/ai/industry-optimization', json={
        'resumeData': RESUME, 'targetIndustry': 'healthcare', 'targetRole': 'Clinical Data Analyst',
    })
    assert response.status_code == 200
    data = response.get_json()
    assert len(data['certifications']) == 3
    assert all(gap['importance'] in ('high', 'medium') for gap in data['skillsGaps'])


def test_generate_content(client):
    response = client.post('/api/ai/generate-content', json={
        'section': 'summary', 'userInput': '', 'jobTitle': 'Nurse', 'industry': 'healthcare',
    })
    assert response.status_code == 200
    assert response.get_json()['content'].startswith('Dedicated Nurse')


def test_feedback_analysis(client):
    response = client.post('/api/ai/feedback-analysis', json={
        'originalContent': 'Worked on reports',
        'editedContent': 'Reduced reporting time by 30%',
        'editType': 'experience',
    })
    assert response.status_code == 200
    assert response.get_json()['editQuality'] == 'excellent'


def test_export_docx(client):
    response = client.post('/api/export/docx', json={'resumeData': RESUME, 'template': 'classic'})
    assert response.status_code == 200
    assert response.headers['Content-Type'].startswith('application/vnd.openxmlformats')
    assert response.headers['Content-Disposition'] == 'attachment; filename="Jane Doe.docx"'
    assert response.data[:2] == b'PK'


def test_export_html_and_pdf(client):
    html = client.post('/api/export/html', json={'resumeData': RESUME, 'customColors': {'primary': '#111111'}})
    assert html.status_code == 200
    assert html.headers['Content-Disposition'] == 'attachment; filename="Jane Doe.html"'
    assert b'#111111' in html.data

    pdf = client.post('/api/export/pdf', json={'resumeData': {}})
    assert pdf.status_code == 200
    assert pdf.headers['Content-Disposition'] == 'inline; filename="resume.html"'
    assert b'window.print()' in pdf.data


def test_unknown_export_format(client):
    assert client.post('/api/export/rtf', json={'resumeData': RESUME}).status_code == 404


def test_llm_failure_is_a_500(llm_client):
    response = llm_client.post('/api/ai/ats-analysis', json={'resumeData': RESUME})
    assert response.status_code == 500
    assert response.get_json() == {'error': 'Failed to analyze resume'}

    response = llm_client.post('/api/ai/match-job', json={'resumeContent': 'x', 'jobDescription': 'y'})
    assert response.status_code == 500


def test_llm_scorer_still_validates_input(llm_client):
    assert llm_client.post('/api/ai/optimize-keywords', json={}).status_code == 400


def test_health_reports_llm_strategy(llm_client):
    data = llm_client.get('/health').get_json()
    assert data['scorer'] == 'llm'
    assert data['status'] == 'degraded'


def test_rate_limit():
    client = create_app(RateLimitedConfig).test_client()
    assert client.get('/health').status_code == 200
    assert client.get('/health').status_code == 200

    response = client.get('/health')
    assert response.status_code == 429
    assert 'error' in response.get_json()
