"""
AdmissionReview envelope handling for the mutating webhook.

Turns one HTTP request body into one HTTP response body:
- Rejects requests that are not ``application/json`` or not an AdmissionReview (400)
- Hands the embedded request to the AnnotationMutator
- Wraps the outcome back into an AdmissionReview (200, also for denials)
- Reports a response that cannot be serialized as an internal error (500)
"""

import logging
from collections.abc import Mapping

from opentelemetry.trace import SpanKind
from pydantic import ValidationError

from dns_target_webhook.constants import (
    JSON_CONTENT_TYPE,
    PATCH_TYPE_JSON_PATCH,
    REJECT_CONTENT_TYPE,
    REJECT_DECODE,
    REJECT_ENCODE,
    RESULT_ALLOWED,
    RESULT_DENIED,
    RESULT_PATCHED,
)
from dns_target_webhook.errors import ResponseEncodeError, ReviewDecodeError
from dns_target_webhook.models.admission import (
    AdmissionRequest,
    AdmissionResponse,
    AdmissionReview,
    Status,
)
from dns_target_webhook.observability.logging import set_correlation_id
from dns_target_webhook.observability.metrics import metrics_collector
from dns_target_webhook.observability.tracing import extract_trace_context, get_tracer
from dns_target_webhook.webhooks.annotate import (
    AllowWithPatch,
    AnnotationMutator,
    Deny,
    Outcome,
)

logger = logging.getLogger(__name__)


def outcome_result(outcome: Outcome) -> str:
    """Label an outcome for logs and metrics."""
    if isinstance(outcome, AllowWithPatch):
        return RESULT_PATCHED
    if isinstance(outcome, Deny):
        return RESULT_DENIED
    return RESULT_ALLOWED


def to_admission_response(uid: str, outcome: Outcome) -> AdmissionResponse:
    """
    Convert a decision into the response half of an AdmissionReview.

    Only a patching outcome sets ``patch`` and ``patchType``; only a denial
    sets ``status``. The others stay None and are left out of the JSON.

    Args:
        uid: Request UID to echo
        outcome: Decision returned by the mutator

    Returns:
        AdmissionResponse for the outcome
    """
    if isinstance(outcome, AllowWithPatch):
        return AdmissionResponse(
            uid=uid,
            allowed=True,
            patch=outcome.patch_bytes(),
            patch_type=PATCH_TYPE_JSON_PATCH,
        )

    if isinstance(outcome, Deny):
        return AdmissionResponse(
            uid=uid, allowed=False, status=Status(message=outcome.reason)
        )

    return AdmissionResponse(uid=uid, allowed=True)


class ReviewHandler:
    """Handles AdmissionReview requests for the annotation mutator."""

    def __init__(self, mutator: AnnotationMutator):
        self.mutator = mutator
        self.tracer = get_tracer(__name__)

    def handle(
        self,
        body: bytes,
        content_type: str,
        headers: Mapping[str, str] | None = None,
    ) -> tuple[bytes, int]:
        """
        Handle one webhook request.

        Args:
            body: Raw request body
            content_type: Value of the Content-Type request header
            headers: Request headers used for trace context propagation

        Returns:
            Tuple of (response body, HTTP status)
        """
        if content_type != JSON_CONTENT_TYPE:
            logger.error(
                f"Unexpected content type {content_type!r}",
                extra={"content_type": content_type, "http_status": 400},
            )
            metrics_collector.record_rejection(REJECT_CONTENT_TYPE)
            return b"", 400

        try:
            review = self.decode(body)
        except ReviewDecodeError as e:
            logger.error(
                f"Unable to decode admission review: {e.cause or e}",
                extra={"http_status": e.http_status},
            )
            metrics_collector.record_rejection(REJECT_DECODE)
            return b"", e.http_status

        response_review = AdmissionReview(
            api_version=review.api_version,
            kind=review.kind,
            response=self.review(review.request, headers or {}),
        )

        try:
            return self.encode(response_review), 200
        except ResponseEncodeError as e:
            logger.error(
                f"Unable to encode admission review response: {e}",
                extra={"http_status": e.http_status},
                exc_info=True,
            )
            metrics_collector.record_rejection(REJECT_ENCODE)
            return b"", e.http_status

    def decode(self, body: bytes) -> AdmissionReview:
        """
        Decode a request body into an AdmissionReview.

        Raises:
            ReviewDecodeError: If the body is not an AdmissionReview with a request
        """
        try:
            review = AdmissionReview.model_validate_json(body)
        except ValidationError as e:
            raise ReviewDecodeError("Malformed admission review", cause=e) from e

        if review.request is None:
            raise ReviewDecodeError("Admission review does not contain a request")

        return review

    def encode(self, review: AdmissionReview) -> bytes:
        """
        Serialize an AdmissionReview response.

        Raises:
            ResponseEncodeError: If the review cannot be serialized
        """
        try:
            return review.to_json()
        except (ValueError, TypeError) as e:
            raise ResponseEncodeError(
                f"Failed to serialize response: {e}", cause=e
            ) from e

    def review(
        self, request: AdmissionRequest, headers: Mapping[str, str]
    ) -> AdmissionResponse:
        """Decide one admission request and build its response."""
        kind = request.kind.kind
        set_correlation_id(request.uid)

        logger.info(
            f"Admission review for {kind} {request.namespace}/{request.name}",
            extra={
                "kind": kind,
                "resource_name": request.name,
                "namespace": request.namespace,
                "operation": request.operation,
                "uid": request.uid,
            },
        )

        with self.tracer.start_as_current_span(
            "admission_review",
            context=extract_trace_context(headers),
            kind=SpanKind.SERVER,
            attributes={
                "k8s.resource.kind": kind,
                "k8s.resource.name": request.name,
                "k8s.namespace": request.namespace,
                "admission.operation": request.operation,
                "admission.uid": request.uid,
            },
        ) as span:
            with metrics_collector.track_review(kind):
                outcome = self.mutator.decide(kind, request.object)

            result = outcome_result(outcome)
            span.set_attribute("admission.result", result)

        metrics_collector.record_review(kind, result)
        logger.debug(
            f"Admission review decided: {result}",
            extra={"kind": kind, "uid": request.uid, "result": result},
        )

        return to_admission_response(request.uid, outcome)
