"""
Resume export: DOCX through python-docx, standalone and print-ready HTML
through Jinja2. Every exporter takes a normalized ResumeRecord, so partial
resumes render with the sections they have.
"""

import io
import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, Inches, RGBColor
from jinja2 import Environment, FileSystemLoader

from resume_schema import ResumeRecord
from resume_templates import resolve_template, template_colors

logger = logging.getLogger(__name__)

DOCX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'
HTML_MIMETYPE = 'text/html; charset=utf-8'

SKILL_GROUP_TITLES = (
    ('technical', 'Technical Skills'),
    ('soft', 'Soft Skills'),
    ('languages', 'Languages'),
    ('certifications', 'Certifications'),
)

# Source checkout first, then the data-files location of an installed wheel
TEMPLATE_DIRS = (
    Path(__file__).parent / "templates",
    Path(sys.prefix) / "share" / "resume-scoring-api" / "templates",
)

env = Environment(loader=FileSystemLoader([str(path) for path in TEMPLATE_DIRS]),
                  autoescape=True)

_UNSAFE_FILENAME_CHARS = re.compile(r'["\\/\r\n\t]+')


@dataclass(frozen=True)
class ExportedDocument:
    body: bytes
    mimetype: str
    filename: str
    inline: bool = False

    @property
    def content_disposition(self) -> str:
        disposition = 'inline' if self.inline else 'attachment'
        if self.filename.isascii():
            return f'{disposition}; filename="{self.filename}"'
        # RFC 6266 encoding for non-ASCII names
        extension = self.filename.rsplit('.', 1)[-1]
        return f"{disposition}; filename=\"resume.{extension}\"; filename*=UTF-8''{quote(self.filename)}"


def export_filename(record: ResumeRecord, extension: str) -> str:
    """<fullName or resume>.<ext>, stripped of characters that break the header"""
    name = _UNSAFE_FILENAME_CHARS.sub(' ', record.personal_info.full_name).strip()
    return f"{name or 'resume'}.{extension}"


def skill_groups(record: ResumeRecord) -> List[Tuple[str, Tuple[str, ...]]]:
    return [
        (title, getattr(record.skills, category))
        for category, title in SKILL_GROUP_TITLES
        if getattr(record.skills, category)
    ]


def contact_line(record: ResumeRecord) -> str:
    info = record.personal_info
    return ' | '.join(part for part in (info.email, info.phone, info.location, info.linkedin, info.website) if part)


def render_html(record: ResumeRecord, template: Optional[str] = None, custom_colors: Optional[Dict] = None,
                print_mode: bool = False) -> str:
    """Render the resume as a self-contained HTML page (print_mode adds A4 styling and auto-print)"""
    page = env.get_template("resume_print.html" if print_mode else "resume.html")
    return page.render(
        resume=record,
        info=record.personal_info,
        skill_groups=skill_groups(record),
        colors=template_colors(template, custom_colors),
        template=resolve_template(template),
    )


def _rgb(hex_color: str) -> RGBColor:
    digits = hex_color.lstrip('#')
    if len(digits) == 3:
        digits = ''.join(c * 2 for c in digits)
    return RGBColor.from_string(digits.upper())


def build_docx(record: ResumeRecord, template: Optional[str] = None, custom_colors: Optional[Dict] = None) -> bytes:
    """Build a Word document: name, contact line, then summary/experience/education/skills"""
    colors = template_colors(template, custom_colors)
    primary = _rgb(colors['primary'])
    info = record.personal_info
    doc = Document()

    header = doc.add_paragraph()
    header.alignment = WD_ALIGN_PARAGRAPH.CENTER
    name_run = header.add_run(info.full_name)
    name_run.bold = True
    name_run.font.size = Pt(16)
    name_run.font.color.rgb = primary

    contact = contact_line(record)
    if contact:
        paragraph = doc.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        paragraph.add_run(contact).font.size = Pt(10)

    def section_heading(title):
        heading = doc.add_heading(level=2)
        run = heading.add_run(title)
        run.bold = True
        run.font.size = Pt(12)
        run.font.color.rgb = primary

    if info.summary:
        section_heading("PROFESSIONAL SUMMARY")
        doc.add_paragraph(info.summary)

    if record.experience:
        section_heading("PROFESSIONAL EXPERIENCE")
        for exp in record.experience:
            paragraph = doc.add_paragraph()
            paragraph.add_run(exp.job_title).bold = True
            paragraph.add_run(f" | {exp.company}")
            paragraph.add_run(f"\t{exp.start_date} - {'Present' if exp.current else exp.end_date}").italic = True
            if exp.description:
                doc.add_paragraph(exp.description)
            for achievement in exp.achievements:
                bullet = doc.add_paragraph(f"• {achievement}")
                bullet.paragraph_format.left_indent = Inches(0.25)

    if record.education:
        section_heading("EDUCATION")
        for edu in record.education:
            paragraph = doc.add_paragraph()
            degree = f"{edu.degree} in {edu.field}" if edu.field else edu.degree
            paragraph.add_run(degree).bold = True
            paragraph.add_run(f" | {edu.institution}")
            paragraph.add_run(f"\t{edu.start_date} - {edu.end_date}").italic = True
            if edu.gpa:
                doc.add_paragraph(f"GPA: {edu.gpa}")

    groups = skill_groups(record)
    if groups:
        section_heading("SKILLS")
        for title, skills in groups:
            paragraph = doc.add_paragraph()
            paragraph.add_run(f"{title}: ").bold = True
            paragraph.add_run(', '.join(skills))

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def export_resume(record: ResumeRecord, export_format: str, template: Optional[str] = None,
                  custom_colors: Optional[Dict] = None) -> ExportedDocument:
    """Dispatch on 'docx', 'html' or 'pdf' (print-ready HTML shown inline)"""
    if export_format == 'docx':
        body = build_docx(record, template, custom_colors)
        document = ExportedDocument(body, DOCX_MIMETYPE, export_filename(record, 'docx'))
    elif export_format == 'html':
        body = render_html(record, template, custom_colors).encode('utf-8')
        document = ExportedDocument(body, HTML_MIMETYPE, export_filename(record, 'html'))
    elif export_format == 'pdf':
        body = render_html(record, template, custom_colors, print_mode=True).encode('utf-8')
        document = ExportedDocument(body, HTML_MIMETYPE, export_filename(record, 'html'), inline=True)
    else:
        raise ValueError(f"Unsupported export format: {export_format}")

    logger.info(f"Exported resume as {export_format} ({len(body)} bytes, template={resolve_template(template)})")
    return document
