"""Dependency injection with Reader.

This example wires a user/friends lookup against a service that is only
supplied at the very end, then runs the same program against two services.

Key concepts:
- Wrap environment-consuming steps in Reader
- Chain dependent steps with flat_map or the @do decorator
- Use lift_to_many to go from one user to a list of per-friend results
- Swap the environment (production vs. in-memory) without touching the program

Run with: DOREADER_DEBUG=1 python examples/friends_service.py
"""

import logging
from dataclasses import dataclass

from doreader import Reader, do, lift_to_many


# ============================================================================
# Step 1: Domain and services
# ============================================================================


@dataclass(frozen=True)
class User:
    id: int
    name: str
    age: int


class InMemoryUserService:
    def __init__(self, users: dict[int, User], friendships: dict[int, list[int]]):
        self.users = users
        self.friendships = friendships

    def find_user(self, user_id: int) -> User:
        return self.users[user_id]

    def find_friends(self, user: User) -> list[User]:
        return [self.users[i] for i in self.friendships.get(user.id, [])]


# ============================================================================
# Step 2: Reader steps
# ============================================================================


def get_user(user_id: int) -> Reader[InMemoryUserService, User]:
    return Reader(lambda service: service.find_user(user_id))


def get_friends(user: User) -> Reader[InMemoryUserService, list[User]]:
    return Reader(lambda service: service.find_friends(user))


def get_age(user: User) -> Reader[InMemoryUserService, int]:
    return Reader.pure(user.age)


@do
def friend_report(user_id: int):
    user = yield get_user(user_id)
    friends = yield get_friends(user)
    ages = yield lift_to_many(get_age)(friends)
    names = ", ".join(friend.name for friend in friends) or "nobody"
    oldest = max(ages) if ages else None
    return f"{user.name} is friends with {names} (oldest: {oldest})"


# ============================================================================
# Step 3: Run against different environments
# ============================================================================


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    ages_of_friends = get_user(1).flat_map(get_friends).flat_map(lift_to_many(get_age))
    report = friend_report(1)

    small = InMemoryUserService(
        users={1: User(1, "alice", 31), 2: User(2, "bob", 27), 3: User(3, "carol", 45)},
        friendships={1: [2, 3]},
    )
    lonely = InMemoryUserService(users={1: User(1, "alice", 31)}, friendships={})

    print("ages:", ages_of_friends.run(small))
    print(report.run(small))
    print(report.run(lonely))
    print("program:", report)


if __name__ == "__main__":
    main()
