"""
WSGI Entry Point for Production Deployment
Production-ready Flask application entry point with proper configuration
"""

import os

# Set production environment if not already set
if not os.environ.get('FLASK_ENV'):
    os.environ['FLASK_ENV'] = 'production'

from app import create_app
from config import get_config

# Load production configuration (validated: SECRET_KEY, LLM key when needed)
app = create_app(get_config())

# Ensure we're not in debug mode for production
app.config['DEBUG'] = False

if __name__ == "__main__":
    # This should only be used for development testing
    # In production, use: gunicorn wsgi:app
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
