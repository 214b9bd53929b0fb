"""
Industry reference data for keyword and industry optimization.

Each profile lists the keywords an ATS screen for that industry looks for,
the skills hiring managers expect, and the career-planning advice returned by
the heuristic industry optimizer. Unknown industries use the general profile.
"""

from typing import Dict, Any, Optional

INDUSTRY_PROFILES: Dict[str, Dict[str, Any]] = {
    'technology': {
        'keywords': ['agile', 'cloud', 'api', 'ci/cd', 'microservices', 'scalability',
                     'automation', 'testing', 'system design', 'devops'],
        'skills': ['Python', 'Cloud Platforms', 'System Design', 'Automated Testing',
                   'CI/CD', 'Data Structures'],
        'trends': [
            'Generative AI tooling is becoming part of everyday engineering workflows',
            'Platform engineering teams are consolidating internal developer tooling',
            'Cloud cost optimization (FinOps) is a hiring priority',
            'Security is shifting left into the development pipeline',
        ],
        'certifications': [
            ('AWS Certified Solutions Architect', 'Amazon Web Services'),
            ('Certified Kubernetes Application Developer', 'Cloud Native Computing Foundation'),
            ('Professional Cloud Developer', 'Google Cloud'),
        ],
        'networking': [
            'Contribute to open-source projects used by your target companies',
            'Attend local meetups and user groups for your core stack',
            'Share technical write-ups on a blog or developer community',
        ],
        'portfolio': [
            'Publish two or three polished repositories with READMEs and tests',
            'Deploy at least one project so reviewers can try it live',
            'Document architecture decisions and trade-offs for your main project',
        ],
    },
    'healthcare': {
        'keywords': ['patient care', 'hipaa', 'clinical', 'compliance', 'patient safety',
                     'electronic health records', 'quality improvement', 'care coordination'],
        'skills': ['Patient Care', 'Clinical Assessment', 'Medical Documentation',
                   'HIPAA Compliance', 'EHR Systems', 'Care Coordination'],
        'trends': [
            'Telehealth and remote patient monitoring continue to expand',
            'Value-based care models reward measurable patient outcomes',
            'Interoperability of health records is a regulatory focus',
            'Staffing shortages increase demand for cross-trained professionals',
        ],
        'certifications': [
            ('Basic Life Support (BLS)', 'American Heart Association'),
            ('Certified Professional in Healthcare Quality', 'NAHQ'),
            ('Certified Health Data Analyst', 'AHIMA'),
        ],
        'networking': [
            'Join a professional association for your clinical specialty',
            'Attend hospital grand rounds and continuing education events',
            'Connect with department leads at facilities you want to join',
        ],
        'portfolio': [
            'Keep a log of quality improvement initiatives and their outcomes',
            'Collect letters of recommendation from supervising clinicians',
            'List licenses and certifications with renewal dates',
        ],
    },
    'finance': {
        'keywords': ['financial analysis', 'financial modeling', 'risk management', 'forecasting',
                     'compliance', 'budgeting', 'excel', 'reporting', 'valuation'],
        'skills': ['Financial Modeling', 'Excel', 'Risk Management', 'Forecasting',
                   'Regulatory Compliance', 'Data Analysis'],
        'trends': [
            'Automation is replacing manual reconciliation and reporting work',
            'ESG reporting requirements are expanding',
            'Real-time payments and open banking are reshaping operations',
            'Data analytics skills are expected in most finance roles',
        ],
        'certifications': [
            ('Chartered Financial Analyst (CFA)', 'CFA Institute'),
            ('Certified Public Accountant (CPA)', 'AICPA'),
            ('Financial Risk Manager (FRM)', 'GARP'),
        ],
        'networking': [
            'Join your local CFA society or finance professional association',
            'Attend industry conferences and earnings-season events',
            'Reach out to alumni working in your target institutions',
        ],
        'portfolio': [
            'Prepare a sample financial model with documented assumptions',
            'Summarize cost savings or revenue impact from past analyses',
            'Include a short investment or market analysis write-up',
        ],
    },
    'marketing': {
        'keywords': ['digital marketing', 'seo', 'content strategy', 'campaign management',
                     'analytics', 'brand management', 'social media', 'conversion', 'roi'],
        'skills': ['Digital Marketing', 'SEO/SEM', 'Content Strategy', 'Marketing Analytics',
                   'Campaign Management', 'Brand Management'],
        'trends': [
            'First-party data strategies are replacing third-party cookies',
            'Short-form video dominates social engagement',
            'AI-assisted content creation is changing team workflows',
            'Marketing teams are expected to prove ROI with attribution data',
        ],
        'certifications': [
            ('Google Ads Certification', 'Google'),
            ('Inbound Marketing Certification', 'HubSpot Academy'),
            ('Google Analytics Certification', 'Google'),
        ],
        'networking': [
            'Engage with marketing communities on LinkedIn and industry forums',
            'Attend marketing conferences and local advertising clubs',
            'Offer a free audit or campaign idea to brands you admire',
        ],
        'portfolio': [
            'Show campaign case studies with goals, actions and measured results',
            'Include writing samples across channels',
            'Link to dashboards or reports you built, with data anonymized',
        ],
    },
    'education': {
        'keywords': ['curriculum development', 'classroom management', 'student assessment',
                     'differentiated instruction', 'educational technology', 'lesson planning'],
        'skills': ['Curriculum Development', 'Classroom Management', 'Student Assessment',
                   'Educational Technology', 'Differentiated Instruction', 'Mentoring'],
        'trends': [
            'Blended and hybrid learning models are now standard',
            'Social-emotional learning is integrated into curricula',
            'Data-informed instruction is used to personalize learning',
            'AI tools are changing assessment and academic integrity policies',
        ],
        'certifications': [
            ('Google Certified Educator', 'Google for Education'),
            ('National Board Certification', 'NBPTS'),
            ('TESOL Certificate', 'TESOL International Association'),
        ],
        'networking': [
            'Join subject-area teacher associations',
            'Present at district or regional professional development days',
            'Build relationships with school administrators and department heads',
        ],
        'portfolio': [
            'Include sample lesson plans and assessment rubrics',
            'Show student growth data from your classes',
            'Add a short teaching philosophy statement',
        ],
    },
    'sales': {
        'keywords': ['quota', 'pipeline', 'crm', 'lead generation', 'negotiation',
                     'account management', 'revenue growth', 'client relationships'],
        'skills': ['CRM Software', 'Negotiation', 'Pipeline Management', 'Lead Generation',
                   'Account Management', 'Forecasting'],
        'trends': [
            'Sales teams rely on intent data to prioritize prospects',
            'Hybrid selling mixes virtual and in-person meetings',
            'Revenue operations is aligning sales, marketing and success teams',
            'Buyers expect consultative, value-based selling',
        ],
        'certifications': [
            ('Salesforce Certified Administrator', 'Salesforce'),
            ('Certified Professional Sales Person', 'NASP'),
            ('HubSpot Sales Software Certification', 'HubSpot Academy'),
        ],
        'networking': [
            'Stay active on LinkedIn with posts about your market',
            'Attend trade shows in the verticals you sell into',
            'Ask satisfied clients for referrals and recommendations',
        ],
        'portfolio': [
            'List quota attainment by year with percentages',
            'Describe your largest deals and how you closed them',
            'Include awards and rankings within your sales team',
        ],
    },
    'design': {
        'keywords': ['user experience', 'user research', 'prototyping', 'figma', 'design systems',
                     'accessibility', 'usability testing', 'visual design'],
        'skills': ['Figma', 'User Research', 'Prototyping', 'Design Systems',
                   'Accessibility', 'Usability Testing'],
        'trends': [
            'Design systems are maintained as shared products',
            'Accessibility compliance is a release requirement',
            'Designers are expected to work with AI-generated assets',
            'Product designers are taking on more research work',
        ],
        'certifications': [
            ('Google UX Design Certificate', 'Google'),
            ('Certified Usability Analyst', 'Human Factors International'),
            ('UX Certification', 'Nielsen Norman Group'),
        ],
        'networking': [
            'Share work-in-progress on design communities',
            'Join local design meetups and portfolio reviews',
            'Collaborate with developers on side projects',
        ],
        'portfolio': [
            'Present three case studies with problem, process and outcome',
            'Show research artifacts, not only final screens',
            'Make the portfolio itself accessible and fast',
        ],
    },
    'general': {
        'keywords': ['leadership', 'communication', 'project management', 'problem solving',
                     'collaboration', 'process improvement', 'stakeholder management', 'analytical'],
        'skills': ['Project Management', 'Communication', 'Problem Solving',
                   'Data Analysis', 'Stakeholder Management', 'Time Management'],
        'trends': [
            'Employers value adaptability and continuous learning',
            'Remote and hybrid work require strong written communication',
            'Data literacy is expected across most roles',
        ],
        'certifications': [
            ('Project Management Professional (PMP)', 'PMI'),
            ('Google Data Analytics Certificate', 'Google'),
            ('Certified ScrumMaster', 'Scrum Alliance'),
        ],
        'networking': [
            'Reconnect with former colleagues and managers',
            'Join professional groups related to your target role',
            'Request informational interviews with people in your target companies',
        ],
        'portfolio': [
            'Collect concrete examples of projects with measurable results',
            'Keep references and recommendations up to date',
            'Maintain a complete, consistent LinkedIn profile',
        ],
    },
}

INDUSTRY_ALIASES = {
    'tech': 'technology',
    'software': 'technology',
    'it': 'technology',
    'information technology': 'technology',
    'engineering': 'technology',
    'health': 'healthcare',
    'medical': 'healthcare',
    'nursing': 'healthcare',
    'banking': 'finance',
    'accounting': 'finance',
    'financial services': 'finance',
    'advertising': 'marketing',
    'teaching': 'education',
    'business development': 'sales',
    'ux': 'design',
    'ui/ux': 'design',
}

INTERVIEW_TIPS = [
    'Prepare three STAR stories that show measurable impact relevant to the {role} role',
    'Research the company\'s recent {industry} initiatives and reference them in your answers',
    'Practice explaining a challenging project end to end in under two minutes',
    'Prepare questions about how success is measured for a {role} in the first 90 days',
]


def normalize_industry(industry: Optional[str]) -> str:
    """Map free-text industry names to a profile key ('general' when unknown)"""
    key = (industry or '').strip().lower()
    if key in INDUSTRY_PROFILES:
        return key
    if key in INDUSTRY_ALIASES:
        return INDUSTRY_ALIASES[key]
    for name in INDUSTRY_PROFILES:
        if name != 'general' and name in key:
            return name
    return 'general'


def get_industry_profile(industry: Optional[str]) -> Dict[str, Any]:
    return INDUSTRY_PROFILES[normalize_industry(industry)]
