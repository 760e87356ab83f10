"""
Tests package - Test suite for the DNS target webhook.

Contains:
- unit/: Unit tests for individual components
- utils/: AdmissionReview builders shared by the tests
"""
