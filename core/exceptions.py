"""Custom Exception Hierarchy for the connection relay.

This module defines a typed exception hierarchy that enables precise error
handling and structured responses across the relay.

Exception Handling Flow:
    1. Infrastructure layer raises typed exception (wrapping botocore errors)
    2. Relay handler catches it at the top of the operation
    3. Handler converts it to a status code and textual body
    4. The gateway receives a proxy response, never an uncaught exception
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base exception for all service layer errors."""


class ValidationError(ServiceError):
    """Raised when inbound payload validation fails."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class ConfigurationError(ServiceError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, key: str | None = None):
        self.message = message
        self.key = key
        super().__init__(self.message)


class StoreError(ServiceError):
    """Raised when the membership store is unavailable or rejects an operation."""

    def __init__(self, message: str, operation: str | None = None):
        self.message = message
        self.operation = operation
        super().__init__(self.message)
