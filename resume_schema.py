"""
Resume record schema and boundary normalization.

Browser payloads are loosely typed: any field may be missing, null, or of the
wrong JSON type. ``normalize_resume`` turns such a payload into a frozen,
fully-populated ``ResumeRecord`` so the scoring components never need to
guard against malformed input. Sections that are absent, of the wrong type,
or empty are recorded in ``ResumeRecord.missing_sections``.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, ValidationError, field_validator

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ("personalInfo", "experience", "education", "skills")
SKILL_CATEGORIES = ("technical", "soft", "languages", "certifications")

_KEYWORD_SPLIT = re.compile(r"[\W_]+")


def _as_text(value: Any) -> str:
    """Coerce a JSON scalar to a string; containers, booleans and null become ''."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _as_text_list(value: Any) -> Tuple[str, ...]:
    """Coerce a JSON list (or comma-separated string) to a tuple of non-blank strings."""
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return ()
    items = (_as_text(item).strip() for item in value)
    return tuple(item for item in items if item)


class _ResumeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class PersonalInfo(_ResumeModel):
    full_name: str = Field("", validation_alias=AliasChoices("fullName", "full_name", "name"))
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    website: str = ""
    summary: str = ""
    career_keywords: str = Field("", validation_alias=AliasChoices("careerKeywords", "career_keywords"))

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        if isinstance(value, (list, tuple)) and value:
            # careerKeywords is occasionally sent as a list
            return ", ".join(_as_text_list(value))
        return _as_text(value)


class ExperienceEntry(_ResumeModel):
    job_title: str = Field("", validation_alias=AliasChoices("jobTitle", "position", "title", "job_title"))
    company: str = ""
    start_date: str = Field("", validation_alias=AliasChoices("startDate", "start_date"))
    end_date: str = Field("", validation_alias=AliasChoices("endDate", "end_date"))
    current: bool = False
    description: str = ""
    achievements: Tuple[str, ...] = ()

    @field_validator("job_title", "company", "start_date", "end_date", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _as_text(value)

    @field_validator("current", mode="before")
    @classmethod
    def _coerce_flag(cls, value):
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1")
        return value is True

    @field_validator("achievements", mode="before")
    @classmethod
    def _coerce_achievements(cls, value):
        return _as_text_list(value)


class EducationEntry(_ResumeModel):
    institution: str = Field("", validation_alias=AliasChoices("institution", "school"))
    degree: str = ""
    field: str = Field("", validation_alias=AliasChoices("field", "fieldOfStudy"))
    start_date: str = Field("", validation_alias=AliasChoices("startDate", "start_date"))
    end_date: str = Field("", validation_alias=AliasChoices("endDate", "end_date"))
    gpa: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _as_text(value)


class Skills(_ResumeModel):
    technical: Tuple[str, ...] = ()
    soft: Tuple[str, ...] = ()
    languages: Tuple[str, ...] = ()
    certifications: Tuple[str, ...] = ()

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_list(cls, value):
        return _as_text_list(value)

    def all_skills(self) -> Tuple[str, ...]:
        """Every skill name in display order: technical, soft, languages, certifications."""
        return self.technical + self.soft + self.languages + self.certifications

    @property
    def total(self) -> int:
        return len(self.all_skills())


class ResumeRecord(_ResumeModel):
    personal_info: PersonalInfo = PersonalInfo()
    experience: Tuple[ExperienceEntry, ...] = ()
    education: Tuple[EducationEntry, ...] = ()
    skills: Skills = Skills()
    missing_sections: Tuple[str, ...] = ()
    content_length: int = 0

    def is_missing(self, section: str) -> bool:
        return section in self.missing_sections

    @property
    def career_keywords(self) -> Tuple[str, ...]:
        return parse_career_keywords(self.personal_info.career_keywords)


def parse_career_keywords(*sources: Any) -> Tuple[str, ...]:
    """
    Split career keywords into a lowercase, de-duplicated tuple.

    Each source may be a comma-separated string or a list of strings; all are
    split on non-alphanumeric boundaries. First occurrence wins the position.
    """
    keywords: List[str] = []
    for source in sources:
        if isinstance(source, (list, tuple)):
            source = " ".join(_as_text(item) for item in source)
        for token in _KEYWORD_SPLIT.split(_as_text(source).lower()):
            if token and token not in keywords:
                keywords.append(token)
    return tuple(keywords)


def _build(model, data: Mapping):
    """Validate one substructure, absorbing anything the coercions could not fix."""
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        logger.debug(f"Discarding malformed {model.__name__}: {e.error_count()} error(s)")
        return model()


def _entries(value: Any, model) -> Tuple:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(_build(model, item) for item in value if isinstance(item, Mapping))


def serialized_length(payload: Any) -> int:
    """Length of the compact JSON serialization, as the browser would send it."""
    try:
        return len(json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str))
    except (TypeError, ValueError, RecursionError):
        return 0


def normalize_resume(payload: Any) -> ResumeRecord:
    """
    Build a ResumeRecord from a raw request payload.

    Never raises. A required section is missing when it is absent, null, of
    the wrong JSON type, or empty once malformed items are dropped.
    """
    data: Dict[str, Any] = dict(payload) if isinstance(payload, Mapping) else {}

    personal_raw = data.get("personalInfo", data.get("personal_info"))
    personal = _build(PersonalInfo, personal_raw) if isinstance(personal_raw, Mapping) else PersonalInfo()

    experience = _entries(data.get("experience"), ExperienceEntry)
    education = _entries(data.get("education"), EducationEntry)

    skills_raw = data.get("skills")
    if isinstance(skills_raw, (list, tuple)):
        skills_raw = {"technical": skills_raw}
    skills = _build(Skills, skills_raw) if isinstance(skills_raw, Mapping) else Skills()

    present = {
        "personalInfo": isinstance(personal_raw, Mapping) and len(personal_raw) > 0,
        "experience": len(experience) > 0,
        "education": len(education) > 0,
        "skills": skills.total > 0,
    }
    missing = tuple(section for section in REQUIRED_SECTIONS if not present[section])

    return ResumeRecord(
        personal_info=personal,
        experience=experience,
        education=education,
        skills=skills,
        missing_sections=missing,
        content_length=serialized_length(payload),
    )


def resume_to_payload(record: ResumeRecord) -> Dict[str, Any]:
    """Render a record back to the browser's camelCase JSON shape."""
    info = record.personal_info
    return {
        "personalInfo": {
            "fullName": info.full_name,
            "email": info.email,
            "phone": info.phone,
            "location": info.location,
            "linkedin": info.linkedin,
            "website": info.website,
            "summary": info.summary,
            "careerKeywords": info.career_keywords,
        },
        "experience": [
            {
                "jobTitle": exp.job_title,
                "company": exp.company,
                "startDate": exp.start_date,
                "endDate": exp.end_date,
                "current": exp.current,
                "description": exp.description,
                "achievements": list(exp.achievements),
            }
            for exp in record.experience
        ],
        "education": [
            {
                "institution": edu.institution,
                "degree": edu.degree,
                "field": edu.field,
                "startDate": edu.start_date,
                "endDate": edu.end_date,
                "gpa": edu.gpa,
            }
            for edu in record.education
        ],
        "skills": {category: list(getattr(record.skills, category)) for category in SKILL_CATEGORIES},
    }
