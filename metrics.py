"""
Prometheus Metrics Configuration
Provides application monitoring for the resume scoring service
"""

import sys
import time
import logging
from functools import wraps
from typing import Dict
from prometheus_flask_exporter import PrometheusMetrics
from prometheus_client import Counter, Histogram, Info

logger = logging.getLogger(__name__)

class ApplicationMetrics:
    """
    Custom metrics collector for the resume scoring service
    Provides business-specific metrics beyond basic HTTP metrics
    """

    def __init__(self):
        """Initialize custom metrics"""

        # Analysis request metrics
        self.analysis_requests_total = Counter(
            'resume_analysis_requests_total',
            'Total number of analysis requests',
            ['endpoint', 'status']
        )

        self.analysis_duration = Histogram(
            'resume_analysis_duration_seconds',
            'Time spent producing an analysis',
            ['endpoint', 'strategy']
        )

        self.resume_scores = Histogram(
            'resume_scores',
            'Distribution of resume scores',
            ['score_type'],
            buckets=[0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100]
        )

        # LLM metrics
        self.llm_request_duration = Histogram(
            'llm_request_duration_seconds',
            'Duration of upstream LLM requests',
            ['operation', 'status']
        )

        # Export metrics
        self.exports_total = Counter(
            'resume_exports_total',
            'Total document exports',
            ['format', 'template']
        )

        # System metrics
        self.application_info = Info(
            'application_info',
            'Application version and build information'
        )

        # Error tracking
        self.errors_total = Counter(
            'errors_total',
            'Total application errors',
            ['error_type', 'component']
        )

        self.application_info.info({
            'version': '1.0.0',
            'python_version': self._get_python_version()
        })

        logger.info("Application metrics initialized")

    def _get_python_version(self) -> str:
        """Get Python version string"""
        return f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

    def record_analysis(self, endpoint: str, status: str, scores: Dict[str, float] = None):
        """Record an analysis request and its scores"""
        self.analysis_requests_total.labels(endpoint=endpoint, status=status).inc()

        for score_type, score in (scores or {}).items():
            if isinstance(score, (int, float)):
                self.resume_scores.labels(score_type=score_type).observe(score)

    def record_llm_request(self, operation: str, status: str, duration: float):
        """Record an upstream LLM request"""
        self.llm_request_duration.labels(operation=operation, status=status).observe(duration)

    def record_export(self, export_format: str, template: str):
        """Record a document export"""
        self.exports_total.labels(format=export_format, template=template).inc()

    def record_error(self, error_type: str, component: str):
        """Record application error"""
        self.errors_total.labels(error_type=error_type, component=component).inc()

# Global metrics instance
app_metrics = ApplicationMetrics()

def init_metrics(app):
    """Initialize Prometheus metrics for Flask app"""
    try:
        metrics = PrometheusMetrics(app)

        metrics.info(
            'flask_app_info',
            'Application Information',
            version='1.0.0',
            scorer=app.config.get('SCORER_STRATEGY', 'heuristic')
        )

        app.metrics = app_metrics

        logger.info("Prometheus metrics initialized successfully")
        return metrics

    except Exception as e:
        logger.error(f"Failed to initialize Prometheus metrics: {e}")
        app.metrics = None
        return None

def track_processing_time(endpoint: str, strategy: str = 'heuristic'):
    """
    Decorator to track processing time for analysis functions

    Args:
        endpoint: Name of the endpoint being tracked
        strategy: Scoring strategy label
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                app_metrics.analysis_duration.labels(
                    endpoint=endpoint,
                    strategy=strategy
                ).observe(time.time() - start_time)
                return result

            except Exception as e:
                app_metrics.record_error(
                    error_type=type(e).__name__,
                    component=endpoint
                )
                raise

        return wrapper
    return decorator
