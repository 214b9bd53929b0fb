"""
Tests for the heuristic scoring engine: section rules, score composition,
recommendations, job matching and the heuristic strategy endpoints
"""

import copy

import pytest

from ats_components import (
    ATSScorer, KeywordMatcher, ScoreComposer, SectionScore, match_ratio, round_half_up,
)
from ats_engine import HeuristicResumeScorer, get_resume_scorer
from resume_schema import normalize_resume

LONG_SUMMARY = (
    "Backend engineer focused on reliable services, clear documentation and careful code review. "
    "Comfortable owning features from design through deployment and on-call support, and happiest "
    "when pairing with product and design partners to ship improvements that users notice."
)

BASE_RESUME = {
    'personalInfo': {
        'fullName': 'Jane Doe',
        'email': 'jane@example.com',
        'phone': '555-123-4567',
        'location': 'Austin, TX',
        'summary': LONG_SUMMARY,
    },
    'experience': [{
        'jobTitle': 'Software Engineer',
        'company': 'Acme Corp',
        'startDate': '2019-01',
        'endDate': '',
        'current': True,
        'description': 'Developed Python APIs serving 2 million requests per day and reduced latency by 40%.',
        'achievements': ['Led migration of batch jobs to Kubernetes'],
    }],
    'education': [{
        'institution': 'State University',
        'degree': 'Bachelor of Science',
        'field': 'Computer Science',
    }],
    'skills': {
        'technical': ['Python', 'SQL', 'Docker', 'AWS'],
        'soft': ['Leadership', 'Communication'],
    },
}

GENERAL_ADVICE = [
    "Use standard section headings (Experience, Education, Skills)",
    "Save resume in PDF format for best ATS compatibility",
    "Use simple, clean formatting without complex layouts",
    "Include relevant keywords naturally in your content",
]


def make_resume(**changes):
    data = copy.deepcopy(BASE_RESUME)
    for key, value in changes.items():
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
    return data


@pytest.fixture
def scorer():
    return ATSScorer()


def section(result, name):
    return result.per_section[name]


def nested_list(depth):
    value = []
    for _ in range(depth):
        value = [value]
    return value


# --- primitives -------------------------------------------------------------

def test_round_half_up_rounds_halves_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_match_ratio_edge_cases():
    assert match_ratio([], []) == 0.0
    assert match_ratio(['python'], []) == 0.0
    assert match_ratio(['a', 'b'], ['a', 'b']) == 1.0
    assert match_ratio(['a', 'b', 'c'], ['a', 'b']) == 1.0
    assert match_ratio(['a'], ['a', 'b']) == 0.5


def test_keyword_extraction_is_substring_based():
    matcher = KeywordMatcher()
    keywords = matcher.extract_keywords("Senior JavaScript engineer, 5+ years, Agile team")
    assert 'javascript' in keywords
    assert 'java' in keywords
    assert 'agile' in keywords
    assert '5+ years' in keywords


def test_keyword_density_scales_with_content_length():
    assert KeywordMatcher.density(0) == 0
    assert KeywordMatcher.density(25) == 1
    assert KeywordMatcher.density(600) == 12
    assert KeywordMatcher.density(50000) == 100


def test_compose_ats_weights_each_section_shortfall_at_twenty_percent():
    composer = ScoreComposer()
    sections = [
        SectionScore('personalInfo', 100),
        SectionScore('experience', 0, missing=True),
        SectionScore('education', 100),
        SectionScore('skills', 50),
    ]
    assert composer.compose_ats(sections) == 70
    assert composer.compose_ats(sections, [("Creative templates may have ATS parsing issues", 10)]) == 60


def test_compose_match_renormalizes_missing_terms():
    composer = ScoreComposer()
    assert composer.compose_match(60) == 60
    assert composer.compose_match(None) == 50
    assert composer.compose_match(60, 50) == 57
    assert composer.compose_match(100, 100, 100) == 100
    assert composer.compose_match(0, 0, 0) == 0


# --- ATS analysis -----------------------------------------------------------

def test_complete_resume_scores_full_marks(scorer):
    record = normalize_resume(make_resume())
    assert record.content_length >= 500

    result = scorer.analyze(record)

    assert result.overall_score == 100
    assert result.missing_sections == ()
    assert result.critical_issues == ()
    assert result.formatting_issues == ()
    assert [s.score for s in result.section_scores] == [100, 100, 100, 100]
    assert list(result.recommendations) == GENERAL_ADVICE


def test_creative_template_costs_ten_points(scorer):
    record = normalize_resume(make_resume())

    modern = scorer.analyze(record, template='modern')
    creative = scorer.analyze(record, template='creative')

    assert modern.overall_score - creative.overall_score == 10
    assert "Creative templates may have ATS parsing issues" in creative.formatting_issues


def test_unknown_template_is_treated_as_modern(scorer):
    record = normalize_resume(make_resume())
    assert scorer.analyze(record, template='neon').overall_score == scorer.analyze(record).overall_score


def test_brief_resume_gets_sparse_content_penalty(scorer):
    data = {
        'personalInfo': {'fullName': 'J', 'email': 'j@x.io', 'phone': '5551234567'},
        'experience': [{'jobTitle': 'Dev', 'company': 'Acme',
                        'description': 'Developed 3 internal services for the billing team.'}],
        'education': [{'institution': 'MIT', 'degree': 'BS'}],
        'skills': ['Python', 'SQL', 'Go', 'Git', 'Bash'],
    }
    record = normalize_resume(data)
    assert record.content_length < 500

    result = scorer.analyze(record)

    assert "Resume content appears too brief" in result.formatting_issues
    assert result.overall_score == 85


def test_missing_experience_costs_its_full_weight(scorer):
    record = normalize_resume(make_resume(experience=[]))

    result = scorer.analyze(record)

    expected = 80 - (15 if record.content_length < 500 else 0)
    assert result.overall_score == expected
    assert 'experience' in result.missing_sections
    assert result.critical_issues == ("Missing required section: experience",)
    assert result.recommendations[0] == "Add all required resume sections"
    assert len(result.recommendations) == 6


def test_empty_experience_with_six_skills_and_no_summary(scorer):
    data = {
        'personalInfo': {'fullName': 'Jane Doe', 'email': 'jane@example.com', 'phone': '555-123-4567'},
        'experience': [],
        'education': [{'institution': 'State University', 'degree': 'BS', 'field': 'Biology'}],
        'skills': {'technical': ['Python', 'SQL', 'Docker', 'AWS', 'Git', 'Linux']},
    }
    record = normalize_resume(data)
    assert record.content_length < 500

    result = scorer.analyze(record)

    assert 'experience' in result.missing_sections
    assert section(result, 'experience').score == 0
    assert section(result, 'skills').score == 100
    assert result.overall_score == 100 - 20 - 15
    assert result.recommendations[0] == "Add all required resume sections"


def test_every_missing_section_yields_one_critical_issue(scorer):
    result = scorer.analyze(normalize_resume({}))

    assert result.missing_sections == ('personalInfo', 'experience', 'education', 'skills')
    assert list(result.critical_issues) == [
        f"Missing required section: {name}" for name in result.missing_sections
    ]
    assert all(s.score == 0 for s in result.section_scores)
    assert result.overall_score == 5


def test_invalid_email_is_critical(scorer):
    info = dict(BASE_RESUME['personalInfo'], email='jane.example.com', phone='123')
    result = scorer.analyze(normalize_resume(make_resume(personalInfo=info)))

    personal = section(result, 'personalInfo')
    assert personal.score == 65
    assert "Valid email address is required" in result.critical_issues


def test_description_of_49_characters_is_flagged(scorer):
    experience = [dict(BASE_RESUME['experience'][0], description='y' * 49, achievements=[])]
    result = scorer.analyze(normalize_resume(make_resume(experience=experience)))

    exp = section(result, 'experience')
    assert "Experience 1: Description too short or missing" in exp.issues
    assert exp.score == 85
    assert "Quantify achievements with specific numbers and metrics" in result.recommendations


def test_description_of_50_characters_with_digit_is_accepted(scorer):
    description = ('Developed 3 reporting services ' + 'x' * 50)[:50]
    assert len(description) == 50
    experience = [dict(BASE_RESUME['experience'][0], description=description, achievements=[])]

    result = scorer.analyze(normalize_resume(make_resume(experience=experience)))

    exp = section(result, 'experience')
    assert exp.issues == ()
    assert exp.score == 100
    assert "Quantify achievements with specific numbers and metrics" not in result.recommendations


def test_missing_action_verbs_are_recommended(scorer):
    experience = [dict(BASE_RESUME['experience'][0],
                       description='Responsible for 12 internal dashboards used by finance teams',
                       achievements=[])]
    result = scorer.analyze(normalize_resume(make_resume(experience=experience)))

    assert any(r.startswith("Start bullet points with strong action verbs") for r in result.recommendations)


def test_too_few_skills(scorer):
    result = scorer.analyze(normalize_resume(make_resume(skills={'technical': ['Python', 'SQL']})))

    skills = section(result, 'skills')
    assert skills.score == 90
    assert "Too few skills listed" in skills.issues


def test_career_keywords_half_matched(scorer):
    record = normalize_resume(make_resume())

    result = scorer.analyze(record, career_keywords=('python', 'golang'))

    assert result.keyword_analysis['matched'] == ['python']
    assert result.keyword_analysis['missing'] == ['golang']
    assert section(result, 'experience').score == 100
    assert section(result, 'skills').score == 100
    assert result.overall_score == 100


def test_career_keywords_absent_everywhere(scorer):
    info = dict(BASE_RESUME['personalInfo'], careerKeywords='golang, haskell')
    result = scorer.analyze(normalize_resume(make_resume(personalInfo=info)))

    assert section(result, 'experience').score == 95
    assert section(result, 'skills').score == 90
    assert result.keyword_analysis['missing'] == ['golang', 'haskell']
    assert any('golang' in r for r in result.recommendations)


def test_analysis_is_deterministic_and_bounded(scorer):
    payloads = [
        {},
        make_resume(),
        make_resume(experience=[], skills=None),
        make_resume(personalInfo={'email': 'nope'}),
        {'personalInfo': 'garbage', 'experience': 'nope', 'education': [1, 2], 'skills': 42},
        {'experience': [{'jobTitle': 'x', 'description': 'short'}] * 10000, 'skills': ['Python'] * 10000},
        {'personalInfo': {'summary': 'x' * 100000}, 'extra': nested_list(3000)},
    ]
    for payload in payloads:
        first = scorer.analyze(normalize_resume(payload), template='creative').to_dict()
        second = scorer.analyze(normalize_resume(payload), template='creative').to_dict()
        assert first == second
        assert 0 <= first['atsScore'] <= 100
        assert len(first['recommendations']) <= 6
        assert len(first['recommendations']) == len(set(first['recommendations']))


def test_analysis_dict_shape(scorer):
    data = scorer.analyze(normalize_resume(make_resume())).to_dict()
    assert list(data) == ['atsScore', 'sectionAnalysis', 'formattingIssues', 'missingSections',
                          'keywordAnalysis', 'recommendations', 'criticalIssues']
    assert set(data['keywordAnalysis']) == {'density', 'matched', 'missing', 'suggestions'}


# --- job matching -----------------------------------------------------------

JOB_DESCRIPTION = "Looking for a Python developer with Docker, Kubernetes and AWS experience. Agile team."


def test_match_job_against_plain_text(scorer):
    result = scorer.match_job(JOB_DESCRIPTION, resume_text="Python developer with Docker and AWS.")

    assert result['matchPercentage'] == 60
    assert result['matchingSkills'] == ['python', 'docker', 'aws']
    assert result['missingRequirements'] == ['kubernetes', 'agile']
    assert result['sectionAnalysis'] == []


def test_match_job_weights_career_alignment(scorer):
    result = scorer.match_job(JOB_DESCRIPTION, resume_text="Python developer with Docker and AWS.",
                              career_keywords=['python', 'golang'])

    assert result['matchPercentage'] == 57
    assert result['careerKeywordAlignment'] == {'matched': ['python'], 'missing': ['golang'], 'ratio': 0.5}


def test_match_job_without_recognizable_skills_is_neutral(scorer):
    result = scorer.match_job("We need a friendly person.", resume_text="Python developer")
    assert result['matchPercentage'] == 50


def test_match_job_with_structured_resume(scorer):
    result = scorer.match_job(JOB_DESCRIPTION, record=normalize_resume(make_resume()))

    assert 0 <= result['matchPercentage'] <= 100
    assert 'kubernetes' in result['matchingSkills']
    assert [s['section'] for s in result['sectionAnalysis']] == ['personalInfo', 'experience', 'education', 'skills']
    assert len(result['suggestions']) <= 5


# --- heuristic strategy -----------------------------------------------------

def test_get_resume_scorer_selects_heuristic():
    scorer = get_resume_scorer({'SCORER_STRATEGY': 'heuristic'})
    assert isinstance(scorer, HeuristicResumeScorer)


def test_get_resume_scorer_rejects_unknown_strategy():
    with pytest.raises(ValueError):
        get_resume_scorer({'SCORER_STRATEGY': 'magic'})


def test_optimize_keywords_scores_on_ten_point_scale():
    result = HeuristicResumeScorer().optimize_keywords("Python developer using agile and cloud APIs", 'technology')

    assert result['atsScore'] == 3
    assert 'agile' not in result['missingKeywords']
    assert len(result['missingKeywords']) <= 8
    assert 3 <= len(result['suggestions']) <= 5


def test_optimize_keywords_score_never_below_one():
    result = HeuristicResumeScorer().optimize_keywords("hello", 'healthcare')
    assert result['atsScore'] == 1


def test_optimize_keywords_includes_job_description_terms():
    result = HeuristicResumeScorer().optimize_keywords(
        "Agile cloud engineer", 'tech', job_description="Kubernetes and Terraform on AWS")
    assert 'kubernetes' in result['missingKeywords'] or 'aws' in result['missingKeywords']


def test_optimize_industry_plan():
    record = normalize_resume(make_resume())
    result = HeuristicResumeScorer().optimize_industry(record, 'Technology', 'Backend Engineer',
                                                       career_keywords=['golang'])

    assert list(result) == ['industryKeywords', 'skillsGaps', 'experienceReframing', 'industryTrends',
                            'certifications', 'networkingSuggestions', 'portfolioRecommendations',
                            'interviewTips']
    assert 'golang' in result['industryKeywords']
    importances = [gap['importance'] for gap in result['skillsGaps']]
    assert importances[:2] == ['high', 'high'][:len(importances)]
    assert all(i == 'medium' for i in importances[2:])
    assert [c['priority'] for c in result['certifications']] == ['high', 'medium', 'low']
    assert len(result['experienceReframing']) <= 3
    assert any('Backend Engineer' in tip for tip in result['interviewTips'])


def test_optimize_industry_reframes_vague_experience():
    experience = [dict(BASE_RESUME['experience'][0],
                       description='Worked on internal tools for the support team', achievements=[])]
    record = normalize_resume(make_resume(experience=experience))

    result = HeuristicResumeScorer().optimize_industry(record, 'finance', 'Analyst')

    reframing = result['experienceReframing']
    assert len(reframing) == 1
    assert reframing[0]['section'] == 'Software Engineer at Acme Corp'
    assert reframing[0]['current'] == 'Worked on internal tools for the support team'
    assert 'measurable' in reframing[0]['reason']
