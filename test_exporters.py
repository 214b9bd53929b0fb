"""
Tests for DOCX and HTML resume export
"""

import io

import pytest
from docx import Document
from docx.shared import RGBColor

from exporters import (
    DOCX_MIMETYPE, TEMPLATE_DIRS, env, build_docx, export_filename, export_resume, render_html,
)
from resume_schema import normalize_resume
from resume_templates import list_templates, template_colors

RESUME = {
    'personalInfo': {
        'fullName': 'Jane Doe',
        'email': 'jane@example.com',
        'phone': '555-123-4567',
        'linkedin': 'https://linkedin.com/in/janedoe',
        'website': 'javascript:alert(1)',
        'summary': 'Platform engineer <script>alert("x")</script>',
    },
    'experience': [{'jobTitle': 'Engineer', 'company': 'Acme', 'startDate': '2020', 'current': True,
                    'description': 'Built the billing platform', 'achievements': ['Cut costs 20%']}],
    'education': [{'institution': 'MIT', 'degree': 'BS', 'field': 'Math', 'endDate': '2019', 'gpa': '3.8'}],
    'skills': {'technical': ['Python', 'Go'], 'languages': ['Spanish']},
}


@pytest.fixture
def record():
    return normalize_resume(RESUME)


def docx_text(body):
    return '\n'.join(p.text for p in Document(io.BytesIO(body)).paragraphs)


def test_docx_contains_every_section(record):
    body = build_docx(record)
    text = docx_text(body)

    assert body[:2] == b'PK'
    assert 'Jane Doe' in text
    assert 'jane@example.com | 555-123-4567' in text
    assert 'PROFESSIONAL EXPERIENCE' in text
    assert 'Engineer | Acme\t2020 - Present' in text
    assert '• Cut costs 20%' in text
    assert 'BS in Math | MIT' in text
    assert 'GPA: 3.8' in text
    assert 'Technical Skills: Python, Go' in text
    assert 'Languages: Spanish' in text
    assert 'Soft Skills' not in text


def test_docx_name_uses_template_color(record):
    doc = Document(io.BytesIO(build_docx(record, template='creative')))
    assert doc.paragraphs[0].runs[0].font.color.rgb == RGBColor(0x7C, 0x3A, 0xED)

    doc = Document(io.BytesIO(build_docx(record, custom_colors={'primary': '#f00'})))
    assert doc.paragraphs[0].runs[0].font.color.rgb == RGBColor(0xFF, 0x00, 0x00)


def test_docx_of_empty_resume():
    body = build_docx(normalize_resume({}))
    assert 'PROFESSIONAL EXPERIENCE' not in docx_text(body)


def test_html_is_escaped(record):
    html = render_html(record)

    assert '<h1 class="name">Jane Doe</h1>' in html
    assert '&lt;script&gt;' in html
    assert '<script>alert' not in html
    assert 'href="https://linkedin.com/in/janedoe"' in html
    assert 'href="javascript:' not in html
    assert '<li>Cut costs 20%</li>' in html
    assert 'window.print' not in html


def test_html_colors(record):
    assert '#2563eb' in render_html(record)
    assert '#7c3aed' in render_html(record, template='creative')
    html = render_html(record, custom_colors={'primary': '#123456', 'accent': 'red;}</style>'})
    assert '#123456' in html
    assert 'red;}' not in html


def test_print_view_triggers_print_dialog(record):
    html = render_html(record, print_mode=True)
    assert '@page { size: A4' in html
    assert 'window.print()' in html
    assert '<h1 class="name">Jane Doe</h1>' in html


def test_export_resume_documents(record):
    docx = export_resume(record, 'docx')
    assert docx.mimetype == DOCX_MIMETYPE
    assert docx.content_disposition == 'attachment; filename="Jane Doe.docx"'

    html = export_resume(record, 'html')
    assert html.content_disposition == 'attachment; filename="Jane Doe.html"'

    pdf = export_resume(record, 'pdf')
    assert pdf.content_disposition == 'inline; filename="Jane Doe.html"'
    assert b'window.print()' in pdf.body

    with pytest.raises(ValueError):
        export_resume(record, 'rtf')


def test_export_filename():
    assert export_filename(normalize_resume({}), 'docx') == 'resume.docx'
    assert export_filename(normalize_resume({'personalInfo': {'fullName': 'A "B"\r\nC'}}), 'html') == 'A  B C.html'


def test_non_ascii_filename_is_encoded():
    document = export_resume(normalize_resume({'personalInfo': {'fullName': 'José'}}), 'html')
    assert document.content_disposition == (
        "attachment; filename=\"resume.html\"; filename*=UTF-8''Jos%C3%A9.html")


def test_template_registry():
    ids = [t['id'] for t in list_templates()]
    assert ids == ['modern', 'classic', 'creative', 'minimal']
    assert template_colors('unknown') == template_colors('modern')
    assert template_colors('minimal', {'secondary': '#abc'})['secondary'] == '#abc'


def test_templates_resolve_from_checkout_and_install_prefix():
    assert TEMPLATE_DIRS[0].joinpath('resume.html').is_file()
    assert TEMPLATE_DIRS[1].parts[-3:] == ('share', 'resume-scoring-api', 'templates')
    assert env.loader.searchpath == [str(path) for path in TEMPLATE_DIRS]
