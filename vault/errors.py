#!/usr/bin/env python3
"""
Error types for the movie vault

Hard failures (invalid ratings) are raised. Account and collection failures are
reported through OperationResult and only use these classes to tag the kind of
failure.
"""


class VaultError(Exception):
    """Base class for all movie vault errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(VaultError):
    """A rating or other value is outside its allowed range"""


class ConflictError(VaultError):
    """An account already exists for the email"""


class NotFoundError(VaultError):
    """No account (or movie) exists for the given key"""


class AuthError(VaultError):
    """Password did not match the stored account"""
