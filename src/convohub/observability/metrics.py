"""Prometheus metrics for ConvoHub.

Defines operational metrics exposed on /metrics.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "convohub_http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status_code"]
)

http_request_duration_seconds = Histogram(
    "convohub_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "route"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Document metrics
documents_uploaded_total = Counter(
    "convohub_documents_uploaded_total",
    "Total documents accepted for upload",
    ["backend"]  # backend: local|s3
)

documents_rejected_total = Counter(
    "convohub_documents_rejected_total",
    "Total documents rejected during upload validation",
    ["reason"]  # reason: mime_type|size|filename
)

document_sync_transitions_total = Counter(
    "convohub_document_sync_transitions_total",
    "Document sync status transitions",
    ["from_status", "to_status"]
)

# Staff onboarding
invitations_sent_total = Counter(
    "convohub_invitations_sent_total",
    "Invitation emails handed to the mail transport",
    ["status"]  # status: sent|skipped|error
)

# Meta Graph API
meta_graph_calls_total = Counter(
    "convohub_meta_graph_calls_total",
    "Calls made to the Meta Graph API",
    ["operation", "status"]  # status: success|error
)

meta_graph_latency_seconds = Histogram(
    "convohub_meta_graph_latency_seconds",
    "Meta Graph API call latency in seconds",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 15.0]
)
