"""Logging Configuration for Production and Development"""

import logging
import logging.config
import os
from datetime import datetime

def setup_logging(app):
    """Setup structured logging for the Flask application"""

    log_level = 'DEBUG' if app.debug else 'INFO'
    log_to_file = app.config.get('LOG_TO_FILE', True)

    # Generate log file names with timestamp
    timestamp = datetime.now().strftime('%Y%m%d')
    log_dir = app.config.get('LOG_DIR') or os.path.join(os.getcwd(), 'logs')

    handlers = {
        'console': {
            'class': 'logging.StreamHandler',
            'level': log_level,
            'formatter': 'simple',
            'stream': 'ext://sys.stdout'
        }
    }
    root_handlers = ['console']
    llm_handlers = ['console']

    if log_to_file:
        # Create logs directory if it doesn't exist
        os.makedirs(log_dir, exist_ok=True)

        handlers.update({
            'file_info': {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'INFO',
                'formatter': 'detailed',
                'filename': os.path.join(log_dir, f'app_info_{timestamp}.log'),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf8'
            },
            'file_error': {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'ERROR',
                'formatter': 'detailed',
                'filename': os.path.join(log_dir, f'app_error_{timestamp}.log'),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 10,
                'encoding': 'utf8'
            },
            'llm_log': {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'INFO',
                'formatter': 'json',
                'filename': os.path.join(log_dir, f'llm_{timestamp}.log'),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf8'
            }
        })
        root_handlers = ['console', 'file_info', 'file_error']
        llm_handlers = ['llm_log', 'file_error']

    logging_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'detailed': {
                'format': '[%(asctime)s] %(levelname)s in %(module)s [%(pathname)s:%(lineno)d]: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'simple': {
                'format': '[%(asctime)s] %(levelname)s: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'json': {
                'format': '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "module": "%(module)s", "message": "%(message)s"}',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },
        'handlers': handlers,
        'loggers': {
            '': {  # Root logger
                'handlers': root_handlers,
                'level': log_level,
                'propagate': False
            },
            # Upstream model calls (prompts are never logged, only timings and failures)
            'llm': {
                'handlers': llm_handlers,
                'level': 'INFO',
                'propagate': False
            },
            'werkzeug': {
                'handlers': ['file_info'] if log_to_file else ['console'],
                'level': 'INFO',
                'propagate': False
            }
        }
    }

    # Apply logging configuration
    logging.config.dictConfig(logging_config)

    # Set Flask app logger
    app.logger.setLevel(logging.DEBUG if app.debug else logging.INFO)

    # Store reference in app for use in views
    llm_logger = logging.getLogger('llm')
    app.llm_logger = llm_logger

    app.logger.info("Logging configuration initialized")

    return app.logger, llm_logger
