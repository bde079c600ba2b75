"""Presentation Layer - CLI commands and HTTP middleware."""
