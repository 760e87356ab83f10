"""Utility modules for the DNS target webhook."""
