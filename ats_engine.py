"""
Resume scoring strategies.

Every analysis endpoint talks to a ``ResumeScorer``. Two interchangeable
implementations exist, selected by the SCORER_STRATEGY setting:

- HeuristicResumeScorer: local rule-based scoring. Total: always returns a
  result for any normalized resume.
- LLMResumeScorer: sends the same inputs to an external model and validates
  the JSON it returns. Partial: any upstream failure fails the request.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ats_components import (
    ATSScorer, ACTION_VERB_PATTERN, KEYWORD_SUGGESTIONS, NUMBER_PATTERN,
    match_ratio, round_half_up,
)
from exceptions import UpstreamServiceError
from industry_profiles import INTERVIEW_TIPS, get_industry_profile
from llm_client import LLMClient, get_llm_client
from metrics import track_processing_time
from resume_schema import ResumeRecord, parse_career_keywords, resume_to_payload

logger = logging.getLogger(__name__)


class ResumeScorer(ABC):
    """Common interface of the scoring strategies"""

    strategy = 'abstract'

    @abstractmethod
    def analyze_ats(self, record: ResumeRecord, template: Optional[str] = None,
                    career_keywords: Sequence[str] = ()) -> Dict[str, Any]:
        """ATS compatibility analysis (atsScore 0-100)"""

    @abstractmethod
    def match_job(self, job_description: str, record: Optional[ResumeRecord] = None,
                  resume_text: str = '', career_keywords: Sequence[str] = ()) -> Dict[str, Any]:
        """Job description match (matchPercentage 0-100)"""

    @abstractmethod
    def optimize_keywords(self, content: str, industry: str, job_description: str = '') -> Dict[str, Any]:
        """Industry keyword optimization (atsScore 1-10)"""

    @abstractmethod
    def optimize_industry(self, record: ResumeRecord, target_industry: str, target_role: str,
                          career_keywords: Sequence[str] = ()) -> Dict[str, Any]:
        """Industry and role optimization plan"""


class HeuristicResumeScorer(ResumeScorer):
    """Rule-based scoring; never fails on a normalized record"""

    strategy = 'heuristic'

    def __init__(self, min_content_length: int = 500, recommendation_limit: int = 6):
        self.ats_scorer = ATSScorer(min_content_length, recommendation_limit)
        self.extractor = self.ats_scorer.extractor
        self.matcher = self.ats_scorer.matcher

    @track_processing_time('ats-analysis', 'heuristic')
    def analyze_ats(self, record, template=None, career_keywords=()):
        return self.ats_scorer.analyze(record, template, career_keywords).to_dict()

    @track_processing_time('match-job', 'heuristic')
    def match_job(self, job_description, record=None, resume_text='', career_keywords=()):
        return self.ats_scorer.match_job(job_description, record, resume_text, career_keywords)

    @track_processing_time('optimize-keywords', 'heuristic')
    def optimize_keywords(self, content, industry, job_description=''):
        profile = get_industry_profile(industry)
        job_keywords = list(self.matcher.extract_keywords(job_description)) if job_description else []
        reference = list(dict.fromkeys(job_keywords + profile['keywords']))

        present = self.matcher.find_present(reference, content)
        missing = self.matcher.find_absent(reference, content)
        ats_score = max(1, min(10, round_half_up(match_ratio(present, reference) * 10)))

        suggestions = []
        if missing:
            suggestions.append(f"Add these {industry} keywords where they genuinely apply: {', '.join(missing[:5])}")
        missing_from_job = [k for k in job_keywords if k in missing]
        if missing_from_job:
            suggestions.append(f"Mirror the job description's wording for: {', '.join(missing_from_job[:3])}")
        if not NUMBER_PATTERN.search(content):
            suggestions.append("Quantify achievements with specific numbers and metrics")
        if not ACTION_VERB_PATTERN.search(content):
            suggestions.append("Start bullet points with strong action verbs such as achieved, managed or led")
        for tip in KEYWORD_SUGGESTIONS:
            if len(suggestions) >= 3:
                break
            suggestions.append(tip)

        return {
            'missingKeywords': missing[:8],
            'atsScore': ats_score,
            'suggestions': suggestions[:5],
        }

    @track_processing_time('industry-optimization', 'heuristic')
    def optimize_industry(self, record, target_industry, target_role, career_keywords=()):
        profile = get_industry_profile(target_industry)
        industry_label = (target_industry or '').strip() or 'your target'
        text = ' '.join([self.extractor.extract_text(record), self.extractor.experience_text(record)]).lower()

        career = parse_career_keywords(record.personal_info.career_keywords, career_keywords)
        keywords = self.matcher.find_absent(profile['keywords'], text) or list(profile['keywords'][:5])
        keywords = list(dict.fromkeys(self.matcher.find_absent(career, text) + keywords))[:8]

        missing_skills = self.matcher.find_absent(profile['skills'], text)
        skills_gaps = [
            {
                'skill': skill,
                'importance': 'high' if index < 2 else 'medium',
                'suggestion': f"Show {skill} through a project, course or responsibility relevant to a {target_role} role",
            }
            for index, skill in enumerate(missing_skills[:5])
        ]

        return {
            'industryKeywords': keywords,
            'skillsGaps': skills_gaps,
            'experienceReframing': self._reframe_experience(record, profile, industry_label),
            'industryTrends': list(profile['trends']),
            'certifications': [
                {'name': name, 'provider': provider, 'priority': ('high', 'medium', 'low')[min(index, 2)]}
                for index, (name, provider) in enumerate(profile['certifications'])
            ],
            'networkingSuggestions': list(profile['networking']),
            'portfolioRecommendations': list(profile['portfolio']),
            'interviewTips': [tip.format(role=target_role, industry=industry_label) for tip in INTERVIEW_TIPS],
        }

    def _reframe_experience(self, record, profile, industry_label) -> List[Dict[str, str]]:
        """Up to three entries that lack industry vocabulary or measurable results"""
        reframing = []
        for exp in record.experience:
            current = exp.description or (exp.achievements[0] if exp.achievements else '')
            if not current:
                continue

            present = self.matcher.find_present(profile['keywords'], current)
            has_metrics = bool(NUMBER_PATTERN.search(current))
            if present and has_metrics:
                continue

            reasons = []
            suggested = current.rstrip(' .')
            if not present:
                focus = ' and '.join(profile['keywords'][:2])
                suggested += f", applying {focus}"
                reasons.append(f"uses vocabulary {industry_label} industry screens look for")
            if not has_metrics:
                suggested += ", with a measurable result (for example a percentage or time saved)"
                reasons.append("adds measurable impact")

            reframing.append({
                'section': ' at '.join(part for part in (exp.job_title, exp.company) if part),
                'current': current,
                'suggested': suggested + '.',
                'reason': f"Reframed so it {' and '.join(reasons)}",
            })
            if len(reframing) == 3:
                break
        return reframing


# Response contracts for the LLM strategy. Extra keys are ignored; missing or
# mistyped keys fail the request.

class _LLMResponse(BaseModel):
    model_config = ConfigDict(extra='ignore')


class _SectionAnalysis(_LLMResponse):
    section: str
    score: int = Field(ge=0, le=100)
    issues: List[str] = []
    suggestions: List[str] = []


class _KeywordAnalysis(_LLMResponse):
    density: int = Field(ge=0, le=100)
    matched: List[str] = []
    missing: List[str] = []
    suggestions: List[str] = []


class ATSAnalysisResponse(_LLMResponse):
    atsScore: int = Field(ge=0, le=100)
    sectionAnalysis: List[_SectionAnalysis]
    formattingIssues: List[str]
    missingSections: List[str]
    keywordAnalysis: _KeywordAnalysis
    recommendations: List[str] = Field(max_length=6)
    criticalIssues: List[str]


class _CareerAlignment(_LLMResponse):
    matched: List[str] = []
    missing: List[str] = []
    ratio: float = Field(0.0, ge=0, le=1)


class JobMatchResponse(_LLMResponse):
    matchPercentage: int = Field(ge=0, le=100)
    matchingSkills: List[str]
    missingRequirements: List[str]
    keywordsToAdd: List[str]
    suggestions: List[str]
    careerKeywordAlignment: _CareerAlignment = _CareerAlignment()
    sectionAnalysis: List[_SectionAnalysis] = []


class KeywordOptimizationResponse(_LLMResponse):
    missingKeywords: List[str]
    atsScore: float = Field(ge=1, le=10)
    suggestions: List[str]


class _SkillGap(_LLMResponse):
    skill: str
    importance: str = Field(pattern='^(high|medium|low)$')
    suggestion: str


class _Reframing(_LLMResponse):
    section: str
    current: str
    suggested: str
    reason: str


class _Certification(_LLMResponse):
    name: str
    provider: str
    priority: str = Field(pattern='^(high|medium|low)$')


class IndustryOptimizationResponse(_LLMResponse):
    industryKeywords: List[str]
    skillsGaps: List[_SkillGap]
    experienceReframing: List[_Reframing]
    industryTrends: List[str]
    certifications: List[_Certification]
    networkingSuggestions: List[str]
    portfolioRecommendations: List[str]
    interviewTips: List[str]


def describe_resume(record: ResumeRecord) -> str:
    """Plain-text resume summary used in prompts"""
    lines = []
    if record.personal_info.summary:
        lines += [f"Professional Summary: {record.personal_info.summary}", ""]

    if record.experience:
        lines.append("Experience:")
        for exp in record.experience:
            lines.append(f"- {exp.job_title} at {exp.company}. ({exp.start_date} - {exp.end_date})")
            if exp.description:
                lines.append(f"  {exp.description}")
            lines.extend(f"  • {achievement}" for achievement in exp.achievements)
        lines.append("")

    if record.education:
        lines.append("Education:")
        lines.extend(f"- {edu.degree} in {edu.field} from {edu.institution}." for edu in record.education)
        lines.append("")

    if record.skills.total:
        lines.append(f"Skills: {', '.join(record.skills.all_skills())}")

    return '\n'.join(lines)


class LLMResumeScorer(ResumeScorer):
    """Scoring delegated to an external model with a strict JSON contract"""

    strategy = 'llm'

    def __init__(self, client: LLMClient):
        self.client = client

    def _ask(self, operation: str, response_model, system_prompt: str, user_prompt: str,
             temperature: Optional[float] = None) -> Dict[str, Any]:
        data = self.client.chat_json(system_prompt, user_prompt, operation=operation, temperature=temperature)
        try:
            return response_model.model_validate(data).model_dump()
        except ValidationError as e:
            logger.error(f"LLM {operation} response failed validation: {e.error_count()} error(s)")
            raise UpstreamServiceError("LLM returned content that does not match the expected format.") from e

    @track_processing_time('ats-analysis', 'llm')
    def analyze_ats(self, record, template=None, career_keywords=()):
        career = parse_career_keywords(record.personal_info.career_keywords, career_keywords)
        system_prompt = (
            "You are an Applicant Tracking System (ATS) compatibility auditor. Evaluate the resume JSON for "
            "parseability and completeness. The required sections are personalInfo, experience, education and "
            "skills. Return a JSON object with keys: atsScore (integer 0-100), sectionAnalysis (list of "
            "{section, score 0-100, issues, suggestions}, one per required section), formattingIssues (list), "
            "missingSections (list of required section names that are empty), keywordAnalysis "
            "({density 0-100, matched, missing, suggestions}), recommendations (at most 6 strings) and "
            "criticalIssues (list)."
        )
        user_prompt = (
            f"Visual template: {template or 'modern'}\n"
            f"Career keywords: {', '.join(career) or 'N/A'}\n"
            f"Resume JSON:\n{json.dumps(resume_to_payload(record), ensure_ascii=False)}"
        )
        return self._ask('ats-analysis', ATSAnalysisResponse, system_prompt, user_prompt)

    @track_processing_time('match-job', 'llm')
    def match_job(self, job_description, record=None, resume_text='', career_keywords=()):
        career = parse_career_keywords(record.personal_info.career_keywords if record else '', career_keywords)
        system_prompt = (
            "You are an expert technical recruiter. Compare the resume with the job description. Weigh skill and "
            "requirement match at 60%, alignment with the candidate's career keywords at 25% and content quality "
            "at 15%. Return a JSON object with keys: matchPercentage (integer 0-100), matchingSkills (at most 8), "
            "missingRequirements (at most 6), keywordsToAdd (at most 5), suggestions (at most 5), "
            "careerKeywordAlignment ({matched, missing, ratio 0-1}) and sectionAnalysis (list of "
            "{section, score 0-100, issues, suggestions})."
        )
        resume = describe_resume(record) if record is not None else resume_text
        user_prompt = (
            f"Career keywords: {', '.join(career) or 'N/A'}\n"
            f"Job description:\n---\n{job_description}\n---\n"
            f"Resume:\n---\n{resume}\n---"
        )
        return self._ask('match-job', JobMatchResponse, system_prompt, user_prompt)

    @track_processing_time('optimize-keywords', 'llm')
    def optimize_keywords(self, content, industry, job_description=''):
        system_prompt = (
            "You are an expert Applicant Tracking System (ATS) analyst and career coach. Analyze the resume "
            f"content against the {industry} industry and the job description, if one is given. Return a JSON "
            "object with keys: atsScore (number from 1 to 10 based on keyword density, industry terminology and "
            "clear section headings), missingKeywords (5-8 high-impact keywords absent from the resume) and "
            "suggestions (3-5 actionable improvements)."
        )
        user_prompt = (
            f"Target industry: {industry}\n"
            f"Job description: {job_description or 'N/A'}\n"
            f"Resume content:\n---\n{content}\n---"
        )
        return self._ask('optimize-keywords', KeywordOptimizationResponse, system_prompt, user_prompt, 0.2)

    @track_processing_time('industry-optimization', 'llm')
    def optimize_industry(self, record, target_industry, target_role, career_keywords=()):
        career = parse_career_keywords(record.personal_info.career_keywords, career_keywords)
        system_prompt = (
            f"You are a career strategist for the {target_industry} industry. Build an optimization plan for a "
            f"{target_role} candidate. Return a JSON object with keys: industryKeywords (5-8 strings), skillsGaps "
            "(3-5 of {skill, importance high|medium|low, suggestion}), experienceReframing (2-3 of {section, "
            "current, suggested, reason}), industryTrends (3-5), certifications (2-3 of {name, provider, priority "
            "high|medium|low}), networkingSuggestions (3-5), portfolioRecommendations (3-5) and interviewTips (3-5)."
        )
        user_prompt = (
            f"Career keywords: {', '.join(career) or 'N/A'}\n"
            f"Resume for a {target_role} role in {target_industry}:\n---\n{describe_resume(record)}\n---"
        )
        return self._ask('industry-optimization', IndustryOptimizationResponse, system_prompt, user_prompt, 0.3)


def get_resume_scorer(config, llm_client: Optional[LLMClient] = None) -> ResumeScorer:
    """Select the scoring strategy from configuration"""
    strategy = config.get('SCORER_STRATEGY', 'heuristic')

    if strategy == 'heuristic':
        return HeuristicResumeScorer(
            min_content_length=config.get('MIN_CONTENT_LENGTH', 500),
            recommendation_limit=config.get('RECOMMENDATION_LIMIT', 6),
        )
    if strategy == 'llm':
        return LLMResumeScorer(llm_client or get_llm_client(config))
    raise ValueError(f"Unsupported scorer strategy: {strategy}")
