"""Authenticated upstream HTTP client."""

from .auth import BearerAuth
from .client import APIClient, QueryParams

__all__ = ["APIClient", "BearerAuth", "QueryParams"]
