"""Abstract base class for link data access objects (DAOs).

This class establishes a consistent contract for all link DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB, PostgreSQL).

Responsibilities:
    - Provide an interface for inserting, looking up and removing LinkRecord objects.
    - Provide an atomic append for visit records (log append + click counter increment).
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkpulse.dao.redis import LinkRedisDAO

        >>> dao = LinkRedisDAO(...)
        >>> dao.insert(link)

        >>> found = dao.find_active('a1b2c3')
        >>> found.target
        'https://example.com/blog/article-123'

        >>> dao.append_visit('a1b2c3', visit)
        1
"""

from abc import ABC, abstractmethod

from linkpulse.models import LinkRecord, VisitRecord


class LinkBaseDAO(ABC):
    """Interface for link data access objects (DAOs).

    Methods:
        insert(link: LinkRecord, **kwargs) -> LinkBaseDAO:
            Insert a new link. Raises DuplicateShortCodeError if the shortcode is taken.

        find_active(shortcode: str, **kwargs) -> LinkRecord | None:
            Return the link if it exists and is active, None otherwise.

        find_by_owner(shortcode: str, owner_id: str, include_visits: bool = False, **kwargs) -> LinkRecord | None:
            Return the link if it exists and belongs to owner_id, None otherwise.

        append_visit(shortcode: str, visit: VisitRecord, **kwargs) -> int:
            Atomically append a visit and increment the click counter.

        set_active(shortcode: str, owner_id: str, is_active: bool, **kwargs) -> LinkRecord:
            Set the active flag of an owned link.

        deactivate(shortcode: str, **kwargs) -> bool:
            Atomically flip an active link to inactive; True only for the caller that flipped it.

        delete(shortcode: str, owner_id: str, **kwargs) -> None:
            Delete an owned link together with its visit log.

        list_by_owner(owner_id: str, **kwargs) -> list[LinkRecord]:
            List all links of an owner (without visit logs).

        count(increment: bool = False, **kwargs) -> int:
            Return the global counter used by the shortcode generator.

    All methods raise DataStoreError on connection or I/O failure.

    NOTE:
        - Expired links are not removed by the DAO. Expiration is enforced
          lazily by the redirect resolver.
    """

    @abstractmethod
    def insert(self, link: LinkRecord, **kwargs) -> 'LinkBaseDAO':
        """Insert a new link into the data store.

        Raises:
            DuplicateShortCodeError:
                If a link with the same shortcode already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_active(self, shortcode: str, **kwargs) -> LinkRecord | None:
        """Look up an active link by shortcode. The visit log is not loaded."""
        pass

    @abstractmethod
    def find_by_owner(self, shortcode: str, owner_id: str, include_visits: bool = False, **kwargs) -> LinkRecord | None:
        """Look up a link by shortcode, scoped to its owner.

        Args:
            shortcode (str):
                The link's shortcode.

            owner_id (str):
                Identifier of the requesting owner.

            include_visits (bool):
                If True, load the visit log in the same point-in-time read as
                the click counter.

        Returns:
            LinkRecord | None: the link, or None if missing or owned by someone else.
        """
        pass

    @abstractmethod
    def append_visit(self, shortcode: str, visit: VisitRecord, **kwargs) -> int:
        """Append a visit to a link's log and increment its click counter.

        Both writes happen as one atomic unit, so concurrent appends never lose
        a count or a log entry.

        Returns:
            int: the link's click count after the append.

        Raises:
            LinkNotFoundError:
                If the link no longer exists (nothing is written).

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def set_active(self, shortcode: str, owner_id: str, is_active: bool, **kwargs) -> LinkRecord:
        """Set the active flag of a link.

        Raises:
            LinkNotFoundError:
                If the link is missing or owned by someone else.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def deactivate(self, shortcode: str, **kwargs) -> bool:
        """Disable a link if it is currently active.

        The check and the write are one atomic step: of several concurrent
        callers at most one gets True.

        Returns:
            bool: True if this call flipped the link, False if it was already
            inactive or doesn't exist.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, shortcode: str, owner_id: str, **kwargs) -> None:
        """Delete a link and its visit log.

        Raises:
            LinkNotFoundError:
                If the link is missing or owned by someone else.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: str, **kwargs) -> list[LinkRecord]:
        """List an owner's links, newest first, without their visit logs."""
        pass

    @abstractmethod
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve the current counter value from the data store.

        Args:
            increment (bool):
                If True, increment the counter by 1 before returning the value.
        """
        pass
