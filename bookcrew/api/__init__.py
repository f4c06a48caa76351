"""
Backend access for BookCrew.

Every network call to the BookCrew REST backend goes through ApiClient.
"""

from bookcrew.api.backend import BookCrewApi
from bookcrew.api.client import ApiClient, ApiResponse
from bookcrew.api.errors import ApiError, ApplicationError, NetworkError, error_message

__all__ = [
    "ApiClient",
    "ApiResponse",
    "BookCrewApi",
    "ApiError",
    "ApplicationError",
    "NetworkError",
    "error_message",
]
