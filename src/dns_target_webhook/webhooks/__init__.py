"""
Mutating admission webhook for external-dns target annotations.

This module provides the decision engine that picks the JSON Patch for
Ingress and Gateway objects, and the handler that exchanges AdmissionReview
envelopes with the Kubernetes API server.
"""
