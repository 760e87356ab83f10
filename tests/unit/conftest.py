"""Shared pytest fixtures for webhook unit tests."""

import pytest

from dns_target_webhook.webhooks.annotate import AnnotationMutator
from dns_target_webhook.webhooks.handler import ReviewHandler


@pytest.fixture
def target_value() -> str:
    """Address the webhook is configured to write."""
    return "203.0.113.10"


@pytest.fixture
def mutator(target_value) -> AnnotationMutator:
    """Decision engine configured with the test target value."""
    return AnnotationMutator(target_value=target_value)


@pytest.fixture
def review_handler(mutator) -> ReviewHandler:
    """Envelope handler wrapping the test mutator."""
    return ReviewHandler(mutator)
