"""
API client module

HTTP transport shared by gateway adapters.
"""
from .base import BaseAPIClient, APIResponse, HTTPMethod, extract_error_message

__all__ = [
    "BaseAPIClient",
    "APIResponse",
    "HTTPMethod",
    "extract_error_message",
]
