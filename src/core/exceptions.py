# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exception taxonomy shared by the content network services.

- ContentNetworkError: Base exception for all service errors
- NotFoundError: A referenced content, node, job or request does not exist
- ValidationFailedError: Bad payload, enum value, version or state transition
- StorageUnavailableError: The persistence layer cannot be reached

Per-node errors raised during a distribution fan-out are never propagated;
they are recorded on the distribution job instead.
"""


class ContentNetworkError(Exception):
    """Base exception for content network errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class NotFoundError(ContentNetworkError):
    """Raised when a referenced entity does not exist."""


class ValidationFailedError(ContentNetworkError):
    """Raised when input or a requested state change is invalid."""


class StorageUnavailableError(ContentNetworkError):
    """Raised when the database cannot be reached.

    Attributes:
        original_error: The underlying driver or SQLAlchemy error.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            original_error: The exception that caused this error.
        """
        super().__init__(message)
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message
