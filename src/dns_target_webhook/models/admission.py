"""
Pydantic models for the admission.k8s.io/v1 AdmissionReview envelope.

Only the fields the webhook reads or writes are modelled; everything else in
the envelope and in the reviewed object is ignored on input.
"""

import base64
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

from dns_target_webhook.constants import ADMISSION_API_VERSION, ADMISSION_REVIEW_KIND


class GroupVersionKind(BaseModel):
    """Fully qualified kind of the object under review."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    group: str = Field("", description="API group, empty for the core group")
    version: str = Field("", description="API version")
    kind: str = Field("", description="Object kind, e.g. Ingress")

    @field_validator("group", "version", "kind", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class ObjectMeta(BaseModel):
    """The subset of object metadata the webhook inspects."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    name: str | None = Field(None, description="Object name")
    namespace: str | None = Field(None, description="Object namespace")
    annotations: dict[str, str] | None = Field(
        None, description="Object annotations"
    )


class ObjectWithMeta(BaseModel):
    """
    Partial view of any Kubernetes object.

    Decodes only ``metadata`` so that Ingresses, Gateways and any other kind
    share one model regardless of their spec and status.
    """

    model_config = {"populate_by_name": True, "extra": "ignore"}

    metadata: ObjectMeta | None = Field(None, description="Object metadata")

    @property
    def annotations(self) -> dict[str, str]:
        """Annotations of the object, empty when absent."""
        if self.metadata is None or self.metadata.annotations is None:
            return {}
        return self.metadata.annotations


class AdmissionRequest(BaseModel):
    """The request half of an AdmissionReview sent by the API server."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    uid: str = Field(..., description="Correlation identifier echoed in the response")
    kind: GroupVersionKind = Field(..., description="Kind of the object under review")
    name: str = Field("", description="Name of the object under review")
    namespace: str = Field("", description="Namespace of the object under review")
    operation: str = Field("", description="CREATE, UPDATE, DELETE or CONNECT")
    object: Any = Field(None, description="The candidate object, left undecoded")

    @field_validator("name", "namespace", "operation", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        """Treat an explicit JSON null like an absent field."""
        return "" if v is None else v


class Status(BaseModel):
    """Result details attached to a denied admission response."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    message: str | None = Field(None, description="Human-readable denial reason")


class AdmissionResponse(BaseModel):
    """
    The response half of an AdmissionReview.

    ``patch`` holds the raw JSON Patch bytes and is base64 encoded on the
    wire. Unset optional fields are dropped when serialized with
    ``exclude_none=True``.
    """

    model_config = {"populate_by_name": True, "extra": "ignore"}

    uid: str = Field(..., description="Correlation identifier from the request")
    allowed: bool = Field(..., description="Whether the operation is admitted")
    patch: bytes | None = Field(None, description="JSON Patch applied to the object")
    patch_type: str | None = Field(
        None, alias="patchType", description="Patch format, always JSONPatch"
    )
    status: Status | None = Field(None, description="Denial details")

    @field_validator("patch", mode="before")
    @classmethod
    def decode_patch(cls, v: Any) -> Any:
        """Decode a base64 patch received in JSON form."""
        if isinstance(v, str):
            return base64.b64decode(v, validate=True)
        return v

    @field_serializer("patch")
    def encode_patch(self, v: bytes | None) -> str | None:
        """Encode the patch as standard base64 without line breaks."""
        if v is None:
            return None
        return base64.b64encode(v).decode("ascii")


class AdmissionReview(BaseModel):
    """The AdmissionReview envelope exchanged with the API server."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    api_version: str = Field(ADMISSION_API_VERSION, alias="apiVersion")
    kind: str = Field(ADMISSION_REVIEW_KIND)
    request: AdmissionRequest | None = Field(None)
    response: AdmissionResponse | None = Field(None)

    def to_json(self) -> bytes:
        """Serialize the envelope the way the API server expects it."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
