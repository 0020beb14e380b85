class StorageError(Exception):
    """A storage operation failed. Surfaced to clients as a 400."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message: str = message or "Storage operation failed"


class StorageUnavailableError(StorageError):
    """The database could not be reached"""


class StorageRejectedError(StorageError):
    """The database answered, but refused the operation"""
