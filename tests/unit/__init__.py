"""Unit tests for the DNS target webhook."""
