"""
Constants used throughout the DNS target webhook.

This module defines all constant values used by the webhook including:
- The annotation written onto admitted objects
- The object kinds the webhook mutates
- Admission envelope and patch wire constants
- HTTP routes and TLS secret keys
"""

# Annotation written onto Ingress and Gateway objects
TARGET_ANNOTATION_KEY = "external-dns.alpha.kubernetes.io/target"

# Object kinds that receive the annotation (case-sensitive exact match)
ANNOTATED_KINDS = frozenset({"Ingress", "Gateway"})

# Admission envelope constants
ADMISSION_API_VERSION = "admission.k8s.io/v1"
ADMISSION_REVIEW_KIND = "AdmissionReview"
PATCH_TYPE_JSON_PATCH = "JSONPatch"
JSON_CONTENT_TYPE = "application/json"

# JSON Patch paths
ANNOTATIONS_PATH = "/metadata/annotations"
PATCH_OP_ADD = "add"

# HTTP routes
WEBHOOK_PATH = "/webhook"
HEALTHZ_PATH = "/healthz"
METRICS_PATH = "/metrics"

# Kubernetes TLS secret data keys
TLS_CERT_KEY = "tls.crt"
TLS_PRIVATE_KEY_KEY = "tls.key"

# Service account mount used to discover the webhook's own namespace
SERVICE_ACCOUNT_NAMESPACE_FILE = "/var/run/secrets/kubernetes.io/serviceaccount/namespace"

# Default listener configuration
DEFAULT_WEBHOOK_PORT = 8080
DEFAULT_WEBHOOK_HOST = "0.0.0.0"

# Admission review outcome labels (metrics and logs)
RESULT_ALLOWED = "allowed"
RESULT_PATCHED = "patched"
RESULT_DENIED = "denied"

# Metric label for kinds the webhook does not annotate
KIND_LABEL_OTHER = "other"

# Rejected request reasons (metrics)
REJECT_CONTENT_TYPE = "content_type"
REJECT_DECODE = "decode"
REJECT_ENCODE = "encode"
