"""
Mutation decision engine for the external-dns target annotation.

Decides, for one admission request, whether the candidate object receives the
``external-dns.alpha.kubernetes.io/target`` annotation:
- Kinds other than Ingress and Gateway are always allowed untouched
- Objects that already carry the annotation are left alone, whatever its value
- Everything else is allowed with a single JSON Patch ``add`` operation

The engine holds only immutable configuration and performs no I/O, so one
instance is shared by all concurrent requests.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from dns_target_webhook.constants import (
    ANNOTATED_KINDS,
    ANNOTATIONS_PATH,
    PATCH_OP_ADD,
    TARGET_ANNOTATION_KEY,
)
from dns_target_webhook.errors import ConfigurationError
from dns_target_webhook.models.admission import ObjectWithMeta

logger = logging.getLogger(__name__)


def escape_json_pointer(segment: str) -> str:
    """
    Escape one JSON Pointer reference token (RFC 6901).

    ``~`` must be replaced before ``/`` so that the ``~`` introduced by
    ``~1`` is not escaped a second time.

    Args:
        segment: Raw object key

    Returns:
        Key usable as a single path segment
    """
    return segment.replace("~", "~0").replace("/", "~1")


@dataclass(frozen=True)
class CreateMapping:
    """Add the whole annotations map, used when the object has none."""

    key: str
    value: str

    def to_json_patch(self) -> dict[str, Any]:
        return {
            "op": PATCH_OP_ADD,
            "path": ANNOTATIONS_PATH,
            "value": {self.key: self.value},
        }


@dataclass(frozen=True)
class AddMember:
    """Add one member to an annotations map that already has entries."""

    key: str
    value: str

    @property
    def path(self) -> str:
        return f"{ANNOTATIONS_PATH}/{escape_json_pointer(self.key)}"

    def to_json_patch(self) -> dict[str, Any]:
        return {"op": PATCH_OP_ADD, "path": self.path, "value": self.value}


PatchOperation = CreateMapping | AddMember


@dataclass(frozen=True)
class Allow:
    """Admit the object unchanged."""


@dataclass(frozen=True)
class AllowWithPatch:
    """Admit the object with exactly one patch operation applied."""

    operation: PatchOperation

    def patch_bytes(self) -> bytes:
        """Serialize the operation as a one-element JSON Patch document."""
        return json.dumps(
            [self.operation.to_json_patch()], separators=(",", ":")
        ).encode("utf-8")


@dataclass(frozen=True)
class Deny:
    """Reject the object because it could not be decoded."""

    reason: str


Outcome = Allow | AllowWithPatch | Deny


def decode_object(raw_object: Any) -> ObjectWithMeta:
    """
    Decode the metadata of a reviewed object.

    Args:
        raw_object: Serialized JSON bytes or an already parsed mapping

    Returns:
        Metadata-only view of the object

    Raises:
        ValueError: If the object is missing or its metadata is malformed
    """
    if raw_object is None:
        raise ValueError("admission request does not contain an object")

    if isinstance(raw_object, (bytes, bytearray)):
        return ObjectWithMeta.model_validate_json(raw_object)

    return ObjectWithMeta.model_validate(raw_object)


class AnnotationMutator:
    """Decides whether and how an admitted object gets the target annotation."""

    def __init__(
        self,
        target_value: str,
        annotation_key: str = TARGET_ANNOTATION_KEY,
        kinds: frozenset[str] = ANNOTATED_KINDS,
    ):
        """
        Initialize the mutator.

        Args:
            target_value: Address written as the annotation value
            annotation_key: Annotation the webhook owns
            kinds: Object kinds that are annotated

        Raises:
            ConfigurationError: If no target value is given
        """
        if not target_value:
            raise ConfigurationError("Annotation target value must not be empty")

        self.target_value = target_value
        self.annotation_key = annotation_key
        self.kinds = kinds

    def decide(self, kind: str, raw_object: Any) -> Outcome:
        """
        Decide the admission outcome for one object.

        Args:
            kind: Object kind from the admission request
            raw_object: The candidate object, serialized or parsed

        Returns:
            Allow, AllowWithPatch or Deny
        """
        if kind not in self.kinds:
            logger.info(
                f"Not adding annotation to object of kind {kind}",
                extra={"kind": kind},
            )
            return Allow()

        try:
            obj = decode_object(raw_object)
        except (ValidationError, ValueError) as e:
            logger.error(
                f"Error decoding {kind}: {e}",
                extra={"kind": kind, "error_type": type(e).__name__},
            )
            return Deny(reason=str(e))

        annotations = obj.annotations
        if self.annotation_key in annotations:
            logger.info(
                f"Not mutating {kind} that already has annotation "
                f"{self.annotation_key}={annotations[self.annotation_key]}",
                extra={"kind": kind},
            )
            return Allow()

        return AllowWithPatch(operation=self.build_operation(annotations))

    def build_operation(self, annotations: dict[str, str]) -> PatchOperation:
        """Pick the patch shape for the current annotations map."""
        if not annotations:
            return CreateMapping(key=self.annotation_key, value=self.target_value)
        return AddMember(key=self.annotation_key, value=self.target_value)
