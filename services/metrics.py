"""
Prometheus Metrics Module
Version: 1.0.0

Provides application metrics for monitoring and alerting.

Usage:
    from services.metrics import FILTER_DURATION, record_filter_run

    record_filter_run(searched=True, result_count=12, duration_seconds=0.002)
"""
from prometheus_client import Counter, Histogram, Gauge, Info, REGISTRY
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response


# =============================================================================
# APPLICATION INFO
# =============================================================================

APP_INFO = Info(
    'zeno_app',
    'Application information'
)


# =============================================================================
# REQUEST METRICS
# =============================================================================

REQUEST_DURATION = Histogram(
    'zeno_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

REQUEST_COUNT = Counter(
    'zeno_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)


# =============================================================================
# SEARCH & FILTER METRICS
# =============================================================================

FILTER_RUNS_TOTAL = Counter(
    'zeno_filter_runs_total',
    'Total filter engine runs',
    ['searched']  # 'true' if a search term was applied
)

FILTER_DURATION = Histogram(
    'zeno_filter_duration_seconds',
    'Filter engine run duration',
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5]
)

FILTER_RESULT_SIZE = Histogram(
    'zeno_filter_result_size',
    'Number of tools returned by the filter engine',
    buckets=[0, 1, 5, 10, 25, 50, 100, 250, 500]
)


# =============================================================================
# TAXONOMY & CATALOG METRICS
# =============================================================================

TAXONOMY_LOADS_TOTAL = Counter(
    'zeno_taxonomy_loads_total',
    'Taxonomy load attempts',
    ['status']  # 'success' or 'error'
)

TAXONOMY_FALLBACK_ACTIVE = Gauge(
    'zeno_taxonomy_fallback_active',
    '1 if the built-in fallback taxonomy is in use'
)

CATALOG_TOOLS = Gauge(
    'zeno_catalog_tools',
    'Number of tools currently in the catalog'
)


# =============================================================================
# CONFIG STORE METRICS
# =============================================================================

CONFIG_STORE_ERRORS = Counter(
    'zeno_config_store_errors_total',
    'Redis config store failures',
    ['operation']
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def set_app_info(version: str, environment: str):
    """Set application info metrics."""
    APP_INFO.info({
        'version': version,
        'environment': environment
    })


def record_filter_run(searched: bool, result_count: int, duration_seconds: float):
    """Record a filter engine run."""
    FILTER_RUNS_TOTAL.labels(searched="true" if searched else "false").inc()
    FILTER_DURATION.observe(duration_seconds)
    FILTER_RESULT_SIZE.observe(result_count)


def record_taxonomy_load(success: bool, fallback: bool):
    """Record a taxonomy load attempt and whether the fallback is active."""
    TAXONOMY_LOADS_TOTAL.labels(status="success" if success else "error").inc()
    TAXONOMY_FALLBACK_ACTIVE.set(1 if fallback else 0)


def record_request(method: str, endpoint: str, status_code: int, duration_seconds: float):
    """Record an HTTP request."""
    REQUEST_COUNT.labels(method=method, endpoint=endpoint, status_code=str(status_code)).inc()
    REQUEST_DURATION.labels(
        method=method,
        endpoint=endpoint,
        status_code=str(status_code)
    ).observe(duration_seconds)


def get_metrics() -> Response:
    """Generate Prometheus metrics response."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST
    )
