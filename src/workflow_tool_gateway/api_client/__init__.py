"""REST API client exports."""

from .api_errors import ApiError, extract_error_message
from .rest_client import WorkflowApiClient

__all__ = [
    "ApiError",
    "WorkflowApiClient",
    "extract_error_message",
]
