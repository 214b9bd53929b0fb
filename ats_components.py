"""
ATS Components - heuristic scoring engine for structured resumes
Contains: TextExtractor, KeywordMatcher, SectionScorer, ScoreComposer,
RecommendationGenerator and the ATSScorer that wires them together
"""

import math
import re
from dataclasses import dataclass
from typing import Dict, List, Any, Iterable, Optional, Sequence, Tuple

from resume_schema import ResumeRecord, REQUIRED_SECTIONS, parse_career_keywords
from resume_templates import resolve_template, template_category

ACTION_VERBS = ('achieved', 'managed', 'led', 'developed', 'implemented',
                'created', 'improved', 'increased', 'reduced')
ACTION_VERB_PATTERN = re.compile(r'\b(' + '|'.join(ACTION_VERBS) + r')\b', re.IGNORECASE)
NUMBER_PATTERN = re.compile(r'\d+')
DURATION_PATTERN = re.compile(r'\b\d+\+?\s*(?:years?|yrs?)\b', re.IGNORECASE)

GENERAL_ATS_ADVICE = (
    "Use standard section headings (Experience, Education, Skills)",
    "Save resume in PDF format for best ATS compatibility",
    "Use simple, clean formatting without complex layouts",
    "Include relevant keywords naturally in your content",
)

KEYWORD_SUGGESTIONS = (
    "Include industry-specific keywords throughout your resume",
    "Use keywords from job descriptions you're targeting",
    "Balance keyword usage to avoid over-optimization",
)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (Python's round() is banker's rounding)"""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def match_ratio(candidate: Iterable[str], reference: Iterable[str]) -> float:
    """|candidate ∩ reference| / |reference|; 0.0 when the reference set is empty"""
    reference_set = set(reference)
    if not reference_set:
        return 0.0
    return len(set(candidate) & reference_set) / len(reference_set)


def _unique(items: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


@dataclass(frozen=True)
class ScoringContext:
    """Per-request derived data; never cached across requests"""
    text: str
    career_keywords: Tuple[str, ...] = ()
    target_keywords: Tuple[str, ...] = ()
    template: str = 'modern'


@dataclass(frozen=True)
class SectionScore:
    section: str
    score: int
    issues: Tuple[str, ...] = ()
    suggestions: Tuple[str, ...] = ()
    critical_issues: Tuple[str, ...] = ()
    missing: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'section': self.section,
            'score': self.score,
            'issues': list(self.issues),
            'suggestions': list(self.suggestions),
        }


@dataclass(frozen=True)
class AnalysisResult:
    overall_score: int
    section_scores: Tuple[SectionScore, ...]
    missing_sections: Tuple[str, ...]
    critical_issues: Tuple[str, ...]
    formatting_issues: Tuple[str, ...]
    keyword_analysis: Dict[str, Any]
    recommendations: Tuple[str, ...]

    @property
    def per_section(self) -> Dict[str, SectionScore]:
        return {s.section: s for s in self.section_scores}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'atsScore': self.overall_score,
            'sectionAnalysis': [s.to_dict() for s in self.section_scores],
            'formattingIssues': list(self.formatting_issues),
            'missingSections': list(self.missing_sections),
            'keywordAnalysis': dict(self.keyword_analysis),
            'recommendations': list(self.recommendations),
            'criticalIssues': list(self.critical_issues),
        }


@dataclass(frozen=True)
class Findings:
    """Deficiencies detected in one resume, input to the recommendation generator"""
    missing_sections: Tuple[str, ...] = ()
    has_quantified_achievements: bool = False
    has_action_verbs: bool = False
    keyword_alignment: Optional[float] = None
    career_keyword_density: Optional[float] = None
    missing_career_keywords: Tuple[str, ...] = ()


class TextExtractor:
    """Flatten a resume record into searchable text"""

    def extract_text(self, record: ResumeRecord) -> str:
        """Summary, experience, skills, education, space separated, in that fixed order"""
        parts = [record.personal_info.summary]
        for exp in record.experience:
            parts.extend([exp.job_title, exp.company, exp.description])
        parts.extend(record.skills.all_skills())
        for edu in record.education:
            parts.extend([edu.degree, edu.institution, edu.field])
        return ' '.join(parts)

    def experience_text(self, record: ResumeRecord) -> str:
        """Descriptions and achievement bullets of every experience entry"""
        parts = []
        for exp in record.experience:
            parts.append(exp.description)
            parts.extend(exp.achievements)
        return ' '.join(parts)


class KeywordMatcher:
    """Keyword extraction and set matching"""

    # Substring matching: "java" is found inside "javascript"
    KEYWORD_CATEGORIES = {
        'programming': [
            'javascript', 'typescript', 'python', 'java', 'react', 'angular', 'vue', 'node.js',
            'django', 'flask', 'spring', 'html', 'css', 'sql', 'nosql', 'mongodb', 'postgresql',
            'mysql', 'git', 'docker', 'kubernetes', 'aws', 'azure', 'gcp', 'linux', 'rest api',
            'graphql', 'c++', 'c#', 'ruby', 'php', 'swift', 'kotlin', 'excel', 'tableau',
        ],
        'methodology': [
            'agile', 'scrum', 'kanban', 'devops', 'ci/cd', 'tdd', 'six sigma',
            'project management', 'waterfall', 'design thinking',
        ],
        'soft_skills': [
            'leadership', 'management', 'communication', 'teamwork', 'problem solving',
            'analytical', 'creative', 'detail oriented', 'collaboration', 'mentoring',
            'negotiation', 'time management', 'critical thinking',
        ],
        'domain': [
            'customer service', 'sales', 'marketing', 'finance', 'healthcare', 'education',
            'data analysis', 'machine learning', 'budgeting', 'compliance', 'operations',
            'research', 'security', 'cloud', 'analytics',
        ],
        'credentials': [
            'bachelor', 'master', 'phd', 'mba', 'degree', 'certified', 'certification', 'license',
        ],
    }

    def extract_keywords(self, text: str) -> Tuple[str, ...]:
        """Union of every category match plus experience-duration phrases, first-seen order"""
        text_lower = (text or '').lower()
        found = []
        for terms in self.KEYWORD_CATEGORIES.values():
            found.extend(term for term in terms if term in text_lower)
        found.extend(' '.join(m.group(0).lower().split()) for m in DURATION_PATTERN.finditer(text_lower))
        return tuple(_unique(found))

    def find_present(self, keywords: Sequence[str], text: str) -> List[str]:
        text_lower = (text or '').lower()
        return [k for k in keywords if k.lower() in text_lower]

    def find_absent(self, keywords: Sequence[str], text: str) -> List[str]:
        text_lower = (text or '').lower()
        return [k for k in keywords if k.lower() not in text_lower]

    @staticmethod
    def density(content_length: int) -> int:
        """Keyword density estimate on a 0-100 scale from serialized content length"""
        return round_half_up(min(100, content_length / 50))


class SectionScorer:
    """Rule table evaluated per required section"""

    def __init__(self, matcher: Optional[KeywordMatcher] = None):
        self.matcher = matcher or KeywordMatcher()

    def score_all(self, record: ResumeRecord, context: ScoringContext) -> Tuple[SectionScore, ...]:
        return tuple(self.score_section(section, record, context) for section in REQUIRED_SECTIONS)

    def score_section(self, section: str, record: ResumeRecord, context: ScoringContext) -> SectionScore:
        if record.is_missing(section):
            return SectionScore(
                section=section,
                score=0,
                critical_issues=(f"Missing required section: {section}",),
                missing=True,
            )

        rules = {
            'personalInfo': self._score_personal_info,
            'experience': self._score_experience,
            'education': self._score_education,
            'skills': self._score_skills,
        }
        score, issues, suggestions, critical = rules[section](record, context)

        return SectionScore(
            section=section,
            score=max(0, min(100, score)),
            issues=tuple(_unique(issues)),
            suggestions=tuple(_unique(suggestions)),
            critical_issues=tuple(critical),
        )

    def _score_personal_info(self, record, context):
        info = record.personal_info
        score, issues, suggestions, critical = 100, [], [], []

        if '@' not in info.email:
            issues.append("Missing or invalid email address")
            critical.append("Valid email address is required")
            score -= 20
        if len(info.phone) < 10:
            issues.append("Missing or invalid phone number")
            score -= 15

        return score, issues, suggestions, critical

    def _score_experience(self, record, context):
        score, issues, suggestions = 100, [], []

        for index, exp in enumerate(record.experience, start=1):
            if len(exp.job_title) < 2:
                issues.append(f"Experience {index}: Missing or too short job title")
                score -= 10
            if len(exp.company) < 2:
                issues.append(f"Experience {index}: Missing or too short company name")
                score -= 10
            if len(exp.description) < 50:
                issues.append(f"Experience {index}: Description too short or missing")
                suggestions.append("Add detailed job descriptions with quantifiable achievements")
                score -= 15

            if context.career_keywords and not self.matcher.find_present(context.career_keywords, exp.description):
                suggestions.append(
                    f"Experience {index}: Mention your career focus "
                    f"({', '.join(context.career_keywords[:3])}) in this role's description"
                )
                score -= 5

        return score, issues, suggestions, []

    def _score_education(self, record, context):
        # Presence is the only education rule
        return 100, [], [], []

    def _score_skills(self, record, context):
        score, issues, suggestions = 100, [], []
        skills = record.skills.all_skills()

        if len(skills) < 5:
            issues.append("Too few skills listed")
            suggestions.append("Add more relevant technical and soft skills")
            score -= 10

        if context.career_keywords:
            skill_text = ' '.join(skills)
            matched = self.matcher.find_present(context.career_keywords, skill_text)
            if match_ratio(matched, context.career_keywords) < 0.3:
                missing = self.matcher.find_absent(context.career_keywords, skill_text)
                suggestions.append(f"Add skills that reflect your career keywords: {', '.join(missing[:5])}")
                score -= 10

        return score, issues, suggestions, []


class ScoreComposer:
    """Combine section scores into a single percentage"""

    SECTION_WEIGHT = 0.2
    CREATIVE_TEMPLATE_PENALTY = 10
    SPARSE_CONTENT_PENALTY = 15

    # Job-specific match weights
    MATCH_WEIGHTS = {'skills': 0.60, 'career': 0.25, 'quality': 0.15}
    NEUTRAL_SKILL_SCORE = 50

    def __init__(self, min_content_length: int = 500):
        self.min_content_length = min_content_length

    def formatting_penalties(self, template: Optional[str], content_length: int) -> List[Tuple[str, int]]:
        penalties = []
        if template_category(template) == 'creative':
            penalties.append(("Creative templates may have ATS parsing issues", self.CREATIVE_TEMPLATE_PENALTY))
        if content_length < self.min_content_length:
            penalties.append(("Resume content appears too brief", self.SPARSE_CONTENT_PENALTY))
        return penalties

    def compose_ats(self, section_scores: Sequence[SectionScore],
                    penalties: Sequence[Tuple[str, int]] = ()) -> int:
        """Generic ATS score: 100 minus weighted section shortfalls minus flat formatting penalties"""
        score = 100.0
        for section in section_scores:
            score -= max(0, 100 - section.score) * self.SECTION_WEIGHT
        for _, points in penalties:
            score -= points
        return clamp_score(score)

    def compose_match(self, skill_score: Optional[float], career_score: Optional[float] = None,
                      quality_score: Optional[float] = None) -> int:
        """
        Job-specific score: weighted mean of skill match, career alignment and content quality.

        Terms that are unavailable (no career keywords supplied, no structured
        resume to judge quality) are dropped and the remaining weights
        renormalized. A job description with no recognizable skills scores the
        skill term at the neutral 50.
        """
        terms = {
            'skills': self.NEUTRAL_SKILL_SCORE if skill_score is None else skill_score,
            'career': career_score,
            'quality': quality_score,
        }
        available = {name: value for name, value in terms.items() if value is not None}
        total_weight = sum(self.MATCH_WEIGHTS[name] for name in available)
        weighted = sum(value * self.MATCH_WEIGHTS[name] for name, value in available.items())
        return clamp_score(weighted / total_weight)


class RecommendationGenerator:
    """Map detected deficiencies to ordered, de-duplicated suggestion strings"""

    def __init__(self, limit: int = 6, extractor: Optional[TextExtractor] = None,
                 matcher: Optional[KeywordMatcher] = None):
        self.limit = limit
        self.extractor = extractor or TextExtractor()
        self.matcher = matcher or KeywordMatcher()

    def collect_findings(self, record: ResumeRecord, context: ScoringContext) -> Findings:
        experience_text = self.extractor.experience_text(record)

        keyword_alignment = None
        if context.target_keywords:
            present = self.matcher.find_present(context.target_keywords, context.text)
            keyword_alignment = match_ratio(present, context.target_keywords)

        career_density = None
        missing_career = ()
        if context.career_keywords:
            present = self.matcher.find_present(context.career_keywords, context.text)
            career_density = match_ratio(present, context.career_keywords)
            missing_career = tuple(self.matcher.find_absent(context.career_keywords, context.text))

        return Findings(
            missing_sections=record.missing_sections,
            has_quantified_achievements=bool(NUMBER_PATTERN.search(experience_text)),
            has_action_verbs=bool(ACTION_VERB_PATTERN.search(experience_text)),
            keyword_alignment=keyword_alignment,
            career_keyword_density=career_density,
            missing_career_keywords=missing_career,
        )

    def generate(self, findings: Findings) -> List[str]:
        recommendations = []

        if findings.missing_sections:
            recommendations.append("Add all required resume sections")
        if not findings.has_quantified_achievements:
            recommendations.append("Quantify achievements with specific numbers and metrics")
        if not findings.has_action_verbs:
            recommendations.append("Start bullet points with strong action verbs such as achieved, managed or led")
        if findings.keyword_alignment is not None and findings.keyword_alignment < 0.5:
            recommendations.append("Include more keywords from your target job descriptions")
        if findings.career_keyword_density is not None and findings.career_keyword_density < 0.3:
            missing = ', '.join(findings.missing_career_keywords[:3])
            recommendations.append(f"Work your career keywords into your summary and experience (missing: {missing})")

        recommendations.extend(GENERAL_ATS_ADVICE)
        return _unique(recommendations)[:self.limit]


class ATSScorer:
    """Heuristic ATS analysis and job matching over a normalized resume record"""

    def __init__(self, min_content_length: int = 500, recommendation_limit: int = 6):
        self.extractor = TextExtractor()
        self.matcher = KeywordMatcher()
        self.section_scorer = SectionScorer(self.matcher)
        self.composer = ScoreComposer(min_content_length)
        self.recommender = RecommendationGenerator(recommendation_limit, self.extractor, self.matcher)

    def build_context(self, record: ResumeRecord, career_keywords=(), target_keywords=(),
                      template: Optional[str] = None) -> ScoringContext:
        """Career keywords from the record come first, then any supplied with the request"""
        return ScoringContext(
            text=self.extractor.extract_text(record).lower(),
            career_keywords=parse_career_keywords(record.personal_info.career_keywords, career_keywords),
            target_keywords=tuple(target_keywords),
            template=resolve_template(template),
        )

    def analyze(self, record: ResumeRecord, template: Optional[str] = None,
                career_keywords=()) -> AnalysisResult:
        """Generic ATS compatibility analysis"""
        context = self.build_context(record, career_keywords, template=template)

        sections = self.section_scorer.score_all(record, context)
        penalties = self.composer.formatting_penalties(context.template, record.content_length)
        overall = self.composer.compose_ats(sections, penalties)

        critical_issues = tuple(issue for s in sections for issue in s.critical_issues)
        recommendations = self.recommender.generate(self.recommender.collect_findings(record, context))

        return AnalysisResult(
            overall_score=overall,
            section_scores=sections,
            missing_sections=record.missing_sections,
            critical_issues=critical_issues,
            formatting_issues=tuple(issue for issue, _ in penalties),
            keyword_analysis=self.keyword_analysis(record, context),
            recommendations=tuple(recommendations),
        )

    def keyword_analysis(self, record: ResumeRecord, context: ScoringContext) -> Dict[str, Any]:
        if context.career_keywords:
            matched = self.matcher.find_present(context.career_keywords, context.text)
            missing = self.matcher.find_absent(context.career_keywords, context.text)
        else:
            matched = list(self.matcher.extract_keywords(context.text))[:15]
            missing = []
        return {
            'density': self.matcher.density(record.content_length),
            'matched': matched,
            'missing': missing,
            'suggestions': list(KEYWORD_SUGGESTIONS),
        }

    def match_job(self, job_description: str, record: Optional[ResumeRecord] = None,
                  resume_text: str = '', career_keywords=()) -> Dict[str, Any]:
        """
        Job-specific match. With a structured record the section scores feed
        the content-quality term; with plain resume text only the skill and
        career terms apply.
        """
        job_keywords = self.matcher.extract_keywords(job_description)

        if record is not None:
            context = self.build_context(record, career_keywords, target_keywords=job_keywords)
            sections = self.section_scorer.score_all(record, context)
            quality = sum(s.score for s in sections) / len(sections)
            text = ' '.join([context.text, self.extractor.experience_text(record).lower()])
        else:
            context = ScoringContext(
                text=(resume_text or '').lower(),
                career_keywords=parse_career_keywords(career_keywords),
                target_keywords=job_keywords,
            )
            sections = ()
            quality = None
            text = context.text

        matching = self.matcher.find_present(job_keywords, text)
        missing = self.matcher.find_absent(job_keywords, text)
        skill_score = match_ratio(matching, job_keywords) * 100 if job_keywords else None

        career_matched, career_missing, career_score = [], [], None
        if context.career_keywords:
            career_matched = self.matcher.find_present(context.career_keywords, text)
            career_missing = self.matcher.find_absent(context.career_keywords, text)
            career_score = match_ratio(career_matched, context.career_keywords) * 100

        suggestions = [
            "Highlight relevant experience that matches job requirements",
            "Use keywords from the job description throughout your resume",
            "Quantify your achievements with specific metrics and results",
            "Tailor your professional summary to align with the role",
        ]
        if career_missing:
            suggestions.insert(0, f"Connect your experience to your career goals: {', '.join(career_missing[:3])}")
        if missing:
            suggestions.insert(0, f"Consider adding experience with: {', '.join(missing[:3])}")

        return {
            'matchPercentage': self.composer.compose_match(skill_score, career_score, quality),
            'matchingSkills': matching[:8],
            'missingRequirements': missing[:6],
            'keywordsToAdd': missing[:5],
            'suggestions': suggestions[:5],
            'careerKeywordAlignment': {
                'matched': career_matched,
                'missing': career_missing,
                'ratio': round(match_ratio(career_matched, context.career_keywords), 2),
            },
            'sectionAnalysis': [s.to_dict() for s in sections],
        }
