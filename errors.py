"""
Errors
======
Failure taxonomy shared by the bot core, storage and services.
None of these is fatal to the process.
"""


class BotError(Exception):
    """Base class for all FieldBot errors."""


class AccessDenied(BotError):
    """User is not on the allow-list."""

    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} is not allowed")
        self.user_id = user_id


class ValidationError(BotError):
    """Submitted free text has no usable content."""


class StorageError(BotError):
    """The report database could not be read or written."""


class NotFoundError(BotError):
    """A referenced report no longer exists."""


class ExternalFileError(BotError):
    """The device verification file is missing or unreadable."""
