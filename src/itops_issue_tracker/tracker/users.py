"""Fixed directory of users that issues can be assigned to."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from itops_issue_tracker.tracker.errors import UnknownUser


@dataclass(frozen=True, slots=True)
class User:
    id: int
    name: str


DEFAULT_USERS: tuple[User, ...] = (
    User(id=1, name="김개발"),
    User(id=2, name="이디자인"),
    User(id=3, name="박기획"),
)


class UserDirectory:
    """Read-only user lookup.

    The backing mapping is built once and never mutated, so concurrent readers
    need no lock.
    """

    def __init__(self, users: Iterable[User]) -> None:
        self._by_id: dict[int, User] = {user.id: user for user in users}

    @classmethod
    def default(cls) -> UserDirectory:
        return cls(DEFAULT_USERS)

    def lookup(self, user_id: int) -> User | None:
        return self._by_id.get(user_id)

    def require(self, user_id: int) -> User:
        user = self.lookup(user_id)
        if user is None:
            raise UnknownUser(user_id)
        return user

    def list(self) -> list[User]:
        return sorted(self._by_id.values(), key=lambda u: u.id)
