"""Prometheus metrics for the API service.

Exposes key metrics for monitoring:
- Request counts by endpoint and status
- Request duration histograms
- Receipt processing outcomes, per-document extraction and batch durations
- Schedule exports by template

Based on Prometheus best practices:
https://prometheus.io/docs/practices/naming/
"""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Receipt processing metrics
receipts_processed_total = Counter(
    "receipts_processed_total",
    "Receipt documents processed, by diagnostic level",
    ["status"],  # success, warning, error
)

receipt_upload_size_bytes = Histogram(
    "receipt_upload_size_bytes",
    "Receipt upload size in bytes",
    buckets=(10240, 102400, 1048576, 5242880, 19922944),  # 10KB to 19MB
)

extraction_duration_seconds = Histogram(
    "extraction_duration_seconds",
    "Duration of a single receipt extraction service call in seconds",
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

extraction_batch_duration_seconds = Histogram(
    "extraction_batch_duration_seconds",
    "Duration of a full receipt extraction batch in seconds",
    buckets=(1.0, 5.0, 15.0, 30.0, 60.0, 120.0, 300.0),
)

# Export metrics
schedules_exported_total = Counter(
    "schedules_exported_total",
    "Schedule export requests",
    ["mode", "status"],  # status: success, rejected
)


def get_metrics() -> tuple[bytes, str]:
    """Generate Prometheus metrics in text format.

    Returns:
        Tuple of (metrics bytes, content type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
