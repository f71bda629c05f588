"""Integrations with CoReason platform services."""
