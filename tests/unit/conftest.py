"""Shared fixtures: in-memory DAOs honouring the atomicity contract of the Redis DAOs."""

import dataclasses
import threading
from concurrent.futures import Executor, Future

import pytest

from linkpulse.models import LinkRecord, UserModel, VisitRecord
from linkpulse.dao.base import LinkBaseDAO, UserBaseDAO
from linkpulse.dao.exceptions import DuplicateShortCodeError, LinkNotFoundError, UserAlreadyExistsError


class InMemoryLinkDAO(LinkBaseDAO):
    """LinkBaseDAO keeping links in dicts. Every operation holds one lock, like a Lua script."""

    def __init__(self):
        self.links: dict[str, LinkRecord] = {}
        self.visits: dict[str, list[VisitRecord]] = {}
        self.counter = 0
        self.lock = threading.Lock()

    def insert(self, link: LinkRecord, **kwargs) -> 'InMemoryLinkDAO':
        with self.lock:
            if link.shortcode in self.links:
                raise DuplicateShortCodeError(f"Link with code '{link.shortcode}' already exists.")
            self.links[link.shortcode] = dataclasses.replace(link, visit_history=None)
            self.visits[link.shortcode] = []
        return self

    def find_active(self, shortcode: str, **kwargs) -> LinkRecord | None:
        with self.lock:
            link = self.links.get(shortcode)
            return link if link is not None and link.is_active else None

    def find_by_owner(self, shortcode: str, owner_id: str, include_visits: bool = False, **kwargs) -> LinkRecord | None:
        with self.lock:
            link = self.links.get(shortcode)
            if link is None or link.owner_id != owner_id:
                return None
            if include_visits:
                link = dataclasses.replace(link, visit_history=tuple(self.visits[shortcode]))
            return link

    def append_visit(self, shortcode: str, visit: VisitRecord, **kwargs) -> int:
        with self.lock:
            link = self.links.get(shortcode)
            if link is None:
                raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
            self.visits[shortcode].append(visit)
            self.links[shortcode] = dataclasses.replace(link, total_clicks=link.total_clicks + 1)
            return link.total_clicks + 1

    def set_active(self, shortcode: str, owner_id: str, is_active: bool, **kwargs) -> LinkRecord:
        with self.lock:
            link = self.links.get(shortcode)
            if link is None or link.owner_id != owner_id:
                raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
            self.links[shortcode] = dataclasses.replace(link, is_active=is_active)
            return self.links[shortcode]

    def deactivate(self, shortcode: str, **kwargs) -> bool:
        with self.lock:
            link = self.links.get(shortcode)
            if link is None or not link.is_active:
                return False
            self.links[shortcode] = dataclasses.replace(link, is_active=False)
            return True

    def delete(self, shortcode: str, owner_id: str, **kwargs) -> None:
        with self.lock:
            link = self.links.get(shortcode)
            if link is None or link.owner_id != owner_id:
                raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
            del self.links[shortcode]
            del self.visits[shortcode]

    def list_by_owner(self, owner_id: str, **kwargs) -> list[LinkRecord]:
        with self.lock:
            links = [link for link in self.links.values() if link.owner_id == owner_id]
        return sorted(links, key=lambda link: link.created_at, reverse=True)

    def count(self, increment: bool = False, **kwargs) -> int:
        with self.lock:
            if increment:
                self.counter += 1
            return self.counter


class InMemoryUserDAO(UserBaseDAO):
    def __init__(self):
        self.users: dict[str, UserModel] = {}

    def get(self, user_id: str, **kwargs) -> UserModel | None:
        return self.users.get(user_id)

    def insert(self, user: UserModel, **kwargs) -> 'InMemoryUserDAO':
        if user.user_id in self.users:
            raise UserAlreadyExistsError(f"User with ID '{user.user_id}' already exists.")
        self.users[user.user_id] = user
        return self


class ImmediateExecutor(Executor):
    """Executor running submitted work inline, so tests can assert right after submit()."""

    def __init__(self):
        self.submitted = 0
        self._shutdown = False

    def submit(self, fn, /, *args, **kwargs) -> Future:
        if self._shutdown:
            raise RuntimeError('cannot schedule new futures after shutdown')
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        self._shutdown = True


@pytest.fixture
def memory_dao() -> InMemoryLinkDAO:
    return InMemoryLinkDAO()


@pytest.fixture
def memory_user_dao() -> InMemoryUserDAO:
    return InMemoryUserDAO()


@pytest.fixture
def immediate_executor() -> ImmediateExecutor:
    return ImmediateExecutor()
