"""Credential-guarded proxy and aggregation for GitHub Copilot usage metrics."""

__version__ = "0.1.0"
