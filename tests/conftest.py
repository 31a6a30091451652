"""
Shared fixtures for doreader tests.

Provides a small user/friends service used as the environment in the
end-to-end scenarios, plus call counters to prove nothing runs early.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest


@dataclass(frozen=True)
class User:
    id: int
    name: str
    age: int = 30


@dataclass
class FriendsService:
    """In-memory data access service that records every call."""

    users: dict[int, User]
    friendships: dict[int, list[int]]
    calls: list[tuple[str, object]] = field(default_factory=list)

    def find_user(self, user_id: int) -> User:
        self.calls.append(("find_user", user_id))
        return self.users[user_id]

    def find_friends(self, user: User) -> list[User]:
        self.calls.append(("find_friends", user.id))
        return [self.users[friend_id] for friend_id in self.friendships.get(user.id, [])]


@pytest.fixture
def service() -> FriendsService:
    users = {
        1: User(1, "alice", 31),
        2: User(2, "bob", 27),
        3: User(3, "carol", 45),
        4: User(4, "dave", 19),
    }
    friendships = {1: [2, 3], 2: [1], 3: [1, 4], 4: []}
    return FriendsService(users=users, friendships=friendships)
