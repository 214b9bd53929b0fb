"""
Template-based section content generation and analysis of user edits to
generated content.
"""

import logging
from typing import Dict, Any, Optional

from ats_components import ACTION_VERB_PATTERN, NUMBER_PATTERN
from exceptions import RequestValidationError

logger = logging.getLogger(__name__)

CONTENT_SECTIONS = ('summary', 'experience', 'skills')
DEFAULT_CONTENT_INDUSTRY = 'technology'

CONTENT_TEMPLATES = {
    'technology': {
        'summary': (
            "Experienced {jobTitle} with expertise in modern technologies and agile development practices. "
            "Proven track record of delivering scalable solutions and driving technical innovation. "
            "Strong problem-solving skills and collaborative approach to software development."
        ),
        'experience': [
            "Developed and maintained scalable applications using modern frameworks and technologies",
            "Collaborated with cross-functional teams to deliver high-quality software solutions",
            "Implemented best practices for code quality, testing, and deployment processes",
            "Optimized application performance and resolved complex technical challenges",
            "Mentored junior developers and contributed to technical documentation",
        ],
        'skills': ["JavaScript", "React", "Node.js", "Python", "SQL", "Git", "Agile",
                   "Problem Solving", "Team Collaboration"],
    },
    'healthcare': {
        'summary': (
            "Dedicated {jobTitle} with comprehensive experience in healthcare delivery and patient care. "
            "Committed to maintaining high standards of clinical excellence while ensuring patient safety "
            "and satisfaction. Strong communication and analytical skills."
        ),
        'experience': [
            "Provided exceptional patient care while maintaining strict adherence to safety protocols",
            "Collaborated with multidisciplinary teams to develop comprehensive treatment plans",
            "Maintained accurate patient records and documentation in compliance with regulations",
            "Implemented quality improvement initiatives to enhance patient outcomes",
            "Educated patients and families on treatment procedures and care management",
        ],
        'skills': ["Patient Care", "Clinical Assessment", "Medical Documentation", "HIPAA Compliance",
                   "Team Collaboration", "Critical Thinking", "Communication"],
    },
    'finance': {
        'summary': (
            "Results-driven {jobTitle} with strong analytical skills and expertise in financial analysis and "
            "risk management. Proven ability to drive business growth through data-driven insights and "
            "strategic financial planning."
        ),
        'experience': [
            "Conducted comprehensive financial analysis to support strategic business decisions",
            "Developed and maintained financial models and forecasting tools",
            "Ensured compliance with regulatory requirements and internal policies",
            "Collaborated with stakeholders to optimize financial performance and reduce costs",
            "Prepared detailed reports and presentations for senior management",
        ],
        'skills': ["Financial Analysis", "Excel", "Financial Modeling", "Risk Management",
                   "Regulatory Compliance", "Data Analysis", "Strategic Planning"],
    },
    'marketing': {
        'summary': (
            "Creative and data-driven {jobTitle} with expertise in digital marketing strategies and brand "
            "management. Proven track record of developing successful campaigns that drive engagement and "
            "business growth."
        ),
        'experience': [
            "Developed and executed comprehensive marketing campaigns across multiple channels",
            "Analyzed market trends and consumer behavior to inform strategic decisions",
            "Managed social media presence and created engaging content for target audiences",
            "Collaborated with design and content teams to produce high-quality marketing materials",
            "Tracked campaign performance and optimized strategies based on data insights",
        ],
        'skills': ["Digital Marketing", "Social Media", "Content Creation", "Analytics", "SEO/SEM",
                   "Brand Management", "Campaign Management"],
    },
    'education': {
        'summary': (
            "Passionate {jobTitle} dedicated to fostering student learning and academic excellence. "
            "Experienced in curriculum development and innovative teaching methodologies that engage "
            "diverse learners."
        ),
        'experience': [
            "Designed and implemented engaging lesson plans aligned with curriculum standards",
            "Assessed student progress and provided individualized support and feedback",
            "Collaborated with colleagues and parents to support student success",
            "Integrated technology and innovative teaching methods to enhance learning",
            "Participated in professional development and continuous improvement initiatives",
        ],
        'skills': ["Curriculum Development", "Classroom Management", "Student Assessment",
                   "Educational Technology", "Communication", "Adaptability", "Mentoring"],
    },
}

EDIT_TYPE_PREFERENCES = {
    'summary': ["focuses on personal branding", "values professional positioning"],
    'experience': ["emphasizes achievements", "values quantifiable results"],
    'skills': ["technical accuracy", "industry-specific terminology"],
}

# Length change (characters) beyond which an edit counts as expansion/condensation
SIGNIFICANT_LENGTH_CHANGE = 50


def generate_content(section: str, job_title: Optional[str] = None, industry: Optional[str] = None) -> str:
    """
    Return template content for one resume section.

    Unknown industries use the technology templates; an unknown section is
    a validation error.
    """
    if section not in CONTENT_SECTIONS:
        raise RequestValidationError(f"Invalid section: {section}")

    industry_key = (industry or '').strip().lower() or DEFAULT_CONTENT_INDUSTRY
    template = CONTENT_TEMPLATES.get(industry_key, CONTENT_TEMPLATES[DEFAULT_CONTENT_INDUSTRY])

    if section == 'summary':
        return template['summary'].replace('{jobTitle}', job_title or 'Professional')
    if section == 'experience':
        return '\n• '.join(template['experience'])
    return ', '.join(template['skills'])


def analyze_feedback(edited_content: str, original_content: Optional[str] = None,
                     edit_type: Optional[str] = None) -> Dict[str, Any]:
    """Classify a user's edit of generated content and derive their writing preferences"""
    original = original_content or ''
    edited = edited_content or ''
    length_change = len(edited) - len(original)

    preferences = []
    if length_change > SIGNIFICANT_LENGTH_CHANGE:
        change_analysis = "User expanded content significantly, likely adding more detail or examples"
        edit_quality = 'good'
        preferences += ["prefers detailed descriptions", "values comprehensive information"]
    elif length_change < -SIGNIFICANT_LENGTH_CHANGE:
        change_analysis = "User condensed content, focusing on brevity and key points"
        edit_quality = 'good'
        preferences += ["prefers concise content", "values clarity over detail"]
    else:
        change_analysis = "User made minor refinements, likely improving word choice or structure"
        edit_quality = 'excellent'
        preferences += ["attention to detail", "values precision in language"]

    preferences += EDIT_TYPE_PREFERENCES.get(edit_type, [])

    has_numbers = bool(NUMBER_PATTERN.search(edited))
    has_action_verbs = bool(ACTION_VERB_PATTERN.search(edited))

    if has_numbers and not NUMBER_PATTERN.search(original):
        edit_quality = 'excellent'
        preferences += ["quantifies achievements", "data-driven approach"]
    if has_action_verbs and not ACTION_VERB_PATTERN.search(original):
        edit_quality = 'excellent'
        preferences += ["uses strong action verbs", "results-oriented language"]

    if length_change > 0:
        style = 'expansive'
    elif length_change < 0:
        style = 'concise'
    else:
        style = 'refinement-focused'

    improvement_areas = ('' if has_numbers else 'quantification, ') + (
        'maintain current approach' if has_action_verbs else 'action-oriented language')

    logger.debug(f"Feedback analysis: edit_type={edit_type} length_change={length_change} quality={edit_quality}")

    return {
        'changeAnalysis': change_analysis,
        'userPreferences': list(dict.fromkeys(preferences)),
        'editQuality': edit_quality,
        'futureRecommendations': [
            "Continue with similar editing approach" if edit_quality == 'excellent'
            else "Consider adding more specific details",
            "Balance detail with readability" if length_change > 0
            else "Ensure key information isn't lost in brevity",
            "Maintain quantifiable metrics" if has_numbers else "Consider adding measurable achievements",
            "Keep using strong action verbs" if has_action_verbs
            else "Use more dynamic language to describe accomplishments",
        ],
        'learningPoints': [
            f"User editing style: {style}",
            f"Quality preference: {edit_quality}",
            f"Content focus: {edit_type or 'general'} optimization",
            f"Improvement areas: {improvement_areas}",
        ],
    }
