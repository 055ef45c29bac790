"""Integrations with external tool-serving protocols."""
