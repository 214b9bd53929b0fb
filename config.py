"""
Configuration for the Resume Builder scoring service
Environment-driven settings for scoring, LLM access, logging and rate limiting
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Config:
    """Base configuration"""

    # Flask settings - generate secure random key if not provided
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        import secrets
        SECRET_KEY = secrets.token_hex(32)

    DEBUG = False
    TESTING = False

    # Request body limit (JSON payloads only)
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', str(2 * 1024 * 1024)))  # 2MB

    # Scoring strategy: "heuristic" (local rules) or "llm" (external model)
    SCORER_STRATEGY = os.environ.get('SCORER_STRATEGY', 'heuristic').lower()

    # Scoring thresholds
    MIN_CONTENT_LENGTH = int(os.environ.get('MIN_CONTENT_LENGTH', '500'))
    RECOMMENDATION_LIMIT = int(os.environ.get('RECOMMENDATION_LIMIT', '6'))

    # LLM provider settings
    LLM_PROVIDER = os.environ.get('LLM_PROVIDER', 'openai').lower()
    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY')
    OPENAI_BASE_URL = os.environ.get('OPENAI_BASE_URL')
    LLM_MODEL = os.environ.get('LLM_MODEL', 'gpt-4o-mini')
    LLM_TEMPERATURE = float(os.environ.get('LLM_TEMPERATURE', '0.2'))
    LLM_MAX_TOKENS = int(os.environ.get('LLM_MAX_TOKENS', '2048'))
    LLM_TIMEOUT = float(os.environ.get('LLM_TIMEOUT', '30'))

    # Rate limiting (memory-based unless a storage URI is given)
    RATELIMIT_ENABLED = os.environ.get('RATELIMIT_ENABLED', 'true').lower() == 'true'
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_DEFAULT = os.environ.get('RATELIMIT_DEFAULT', '200 per hour;50 per 15 minutes')

    # Monitoring and logging
    METRICS_ENABLED = os.environ.get('METRICS_ENABLED', 'true').lower() == 'true'
    LOG_TO_FILE = os.environ.get('LOG_TO_FILE', 'true').lower() == 'true'
    LOG_DIR = os.environ.get('LOG_DIR', os.path.join(os.getcwd(), 'logs'))

    # Security headers
    FORCE_HTTPS = False

    @classmethod
    def validate(cls):
        """Hook for environment-specific checks, run when the config is selected"""
        return cls

class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False

class ProductionConfig(Config):
    """Production configuration with security and performance settings"""
    DEBUG = False
    TESTING = False

    FORCE_HTTPS = os.environ.get('FORCE_HTTPS', 'true').lower() == 'true'

    @classmethod
    def validate(cls):
        # Production security - SECRET_KEY must come from the environment
        if not os.environ.get('SECRET_KEY'):
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if cls.SCORER_STRATEGY == 'llm' and not cls.OPENAI_API_KEY:
            raise ValueError("OPENAI_API_KEY environment variable must be set when SCORER_STRATEGY=llm")
        return cls

class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True

    SCORER_STRATEGY = 'heuristic'

    # Keep tests hermetic
    RATELIMIT_ENABLED = False
    METRICS_ENABLED = False
    LOG_TO_FILE = False

# Configuration mapping
config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

def get_config(env=None):
    """Get configuration based on environment"""
    env = env or os.environ.get('FLASK_ENV', 'development')
    return config_map.get(env, config_map['default']).validate()
