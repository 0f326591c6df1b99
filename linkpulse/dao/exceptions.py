"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkNotFoundError:
        Raised when a link is missing, or is owned by somebody else.

    DuplicateShortCodeError:
        Raised when attempting to insert a link whose shortcode is already taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

    UserAlreadyExistsError:
        Raised when attempting to insert a user that already exists.

Example:
    >>> from linkpulse.dao.exceptions import LinkNotFoundError
    >>> raise LinkNotFoundError("Link with code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    linkpulse.dao.exceptions.LinkNotFoundError: Link with code 'abc123' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class LinkNotFoundError(DAOError):
    """Exception raised when a link is not found in the data store.

    Also raised when the link exists but belongs to another owner, so callers
    cannot discover links they do not own.
    """

    pass


class DuplicateShortCodeError(DAOError):
    """Exception raised when attempting to insert a link whose shortcode already exists."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass


class UserAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a user that already exists."""

    pass
