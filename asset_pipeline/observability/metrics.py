"""
Prometheus metrics collection for asset-pipeline

Jobs, phases, row outcomes and asset writes are recorded on a private
registry exposed through /metrics or a standalone metrics server.
"""
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()


# =======================
# JOB METRICS
# =======================

jobs_started_total = Counter(
    name="asset_pipeline_jobs_started_total",
    documentation="Total number of import jobs started",
    registry=REGISTRY,
)

jobs_finished_total = Counter(
    name="asset_pipeline_jobs_finished_total",
    documentation="Import jobs reaching a resting or terminal status",
    labelnames=["status"],  # STAGED, COMPLETED, FAILED
    registry=REGISTRY,
)

phase_duration_seconds = Histogram(
    name="asset_pipeline_phase_duration_seconds",
    documentation="Time spent in each pipeline phase in seconds",
    labelnames=["phase"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

rows_processed_total = Counter(
    name="asset_pipeline_rows_processed_total",
    documentation="Rows transformed, by validation outcome",
    labelnames=["outcome"],  # valid, invalid
    registry=REGISTRY,
)

validation_issues_total = Counter(
    name="asset_pipeline_validation_issues_total",
    documentation="Row-level issues flagged by cleaning and validation",
    labelnames=["field", "severity"],
    registry=REGISTRY,
)

staged_rows = Gauge(
    name="asset_pipeline_staged_rows",
    documentation="Rows staged by the last import job to reach STAGED; not a total across jobs",
    registry=REGISTRY,
)

# =======================
# LOAD METRICS
# =======================

assets_upserted_total = Counter(
    name="asset_pipeline_assets_upserted_total",
    documentation="Assets written on approval, by result",
    labelnames=["result"],  # success, failure
    registry=REGISTRY,
)

load_decisions_total = Counter(
    name="asset_pipeline_load_decisions_total",
    documentation="Operator load decisions",
    labelnames=["decision"],  # approved, rejected
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def start_metrics_server(port: int) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on
    """
    # Imported here so importing this module never binds a port
    from prometheus_client import start_http_server

    start_http_server(port, registry=REGISTRY)


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(phase_duration_seconds, phase="CLEAN"):
            # do work
            pass
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        self.timer = self.histogram.labels(**self.labels).time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def set_gauge(gauge: Gauge, value: float, **labels) -> None:
    if labels:
        gauge.labels(**labels).set(value)
    else:
        gauge.set(value)


def record_transform_outcome(valid_rows: int, invalid_rows: int) -> None:
    """
    Record the validation outcome of one TRANSFORM phase.

    Args:
        valid_rows: Rows without errors
        invalid_rows: Rows with at least one error
    """
    increment_counter(rows_processed_total, valid_rows, outcome="valid")
    increment_counter(rows_processed_total, invalid_rows, outcome="invalid")


def record_issue(field: str, severity: str) -> None:
    increment_counter(validation_issues_total, 1, field=field, severity=severity)
