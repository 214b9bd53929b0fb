# Gunicorn Configuration File
# Production WSGI server configuration for the scoring API

import os

# Server socket
bind = os.environ.get('GUNICORN_BIND', '0.0.0.0:5000')
backlog = 2048

# Worker processes; LLM calls block a worker for up to LLM_TIMEOUT seconds
workers = int(os.environ.get('GUNICORN_WORKERS', '2'))
worker_class = "sync"
timeout = int(os.environ.get('GUNICORN_TIMEOUT', '60'))
graceful_timeout = 30
keepalive = 2

# Restart workers after this many requests, to help prevent memory leaks
max_requests = 1000
max_requests_jitter = 100

# Security
limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = 'resume-scoring-api'

# Preload application code before the worker processes are forked
preload_app = True
