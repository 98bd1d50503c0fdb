"""
Error types raised at the I/O boundary (provider, store, request validation).
Each carries the short message shown to curators; internal detail stays in the exception chain and logs.
"""

from typing import Optional

SEARCH_FAILED_MESSAGE = "Failed to search movies. Please try again."
SAVE_FAILED_MESSAGE = "Failed to save movie. Please try again."
DELETE_FAILED_MESSAGE = "Failed to delete movie. Please try again."
LOAD_FAILED_MESSAGE = "Failed to load movies. Please try again."
MISSING_FIELDS_MESSAGE = "Please fill in all required fields including category"


class CuratorError(Exception):
	code: str = "curator_error"
	status: int = 500
	user_message: str = "Something went wrong. Please try again."

	def __init__(self, message: str = "", *, user_message: Optional[str] = None):
		super().__init__(message or self.__class__.__name__)
		if user_message:
			self.user_message = user_message


class ProviderError(CuratorError):
	"""The movie metadata provider failed or returned an error status."""
	code = "provider_error"
	status = 502
	user_message = SEARCH_FAILED_MESSAGE


class CatalogStoreError(CuratorError):
	code = "store_error"
	status = 502
	user_message = SAVE_FAILED_MESSAGE


class RecordNotFound(CatalogStoreError):
	code = "not_found"
	status = 404
	user_message = "Movie not found."


class ValidationError(CuratorError):
	code = "validation_error"
	status = 422
	user_message = MISSING_FIELDS_MESSAGE

	def __init__(self, message: str = MISSING_FIELDS_MESSAGE):
		super().__init__(message, user_message=message)
