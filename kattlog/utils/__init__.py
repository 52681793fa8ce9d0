"""Utility modules."""

from .http_client import HTTPClient, HybridFetcher
from .url_utils import URLUtils

__all__ = ['HTTPClient', 'HybridFetcher', 'URLUtils']
