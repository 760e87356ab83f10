"""
Models package - Pydantic models for type-safe admission handling.

Defines data models for:
- The AdmissionReview request and response envelope
- The metadata-only view of reviewed objects
"""

from .admission import (
    AdmissionRequest,
    AdmissionResponse,
    AdmissionReview,
    GroupVersionKind,
    ObjectMeta,
    ObjectWithMeta,
    Status,
)

__all__ = [
    "AdmissionRequest",
    "AdmissionResponse",
    "AdmissionReview",
    "GroupVersionKind",
    "ObjectMeta",
    "ObjectWithMeta",
    "Status",
]
