"""
DNS Target Webhook - A mutating admission webhook for external-dns targets.

This webhook annotates Ingress and Gateway objects on creation with:
- The external-dns target annotation pointing at a configured address
- A minimal JSON Patch that never overwrites an existing target
- Fail-open behavior for every other object kind
"""

__version__ = "0.1.0"
