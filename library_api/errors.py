class LibraryError(Exception):
    """Base for every failure the services report to the HTTP layer."""

    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(LibraryError, ValueError):
    pass


class NotFound(LibraryError, LookupError):
    pass


class Conflict(LibraryError):
    pass


class Unavailable(Conflict):
    """No copy of the book is available to borrow."""


class StoreFailure(LibraryError):
    """
    The store could not complete an atomic unit (I/O error, lock timeout,
    aborted commit). Nothing from the unit was persisted.
    """

    def __init__(self, message: str, retryable: bool = True):
        super().__init__(message)
        self.retryable = retryable
