"""End-to-end dependency injection scenario over a user/friends service."""

from doreader import Reader, do, lift_to_many


def get_user(user_id):
    return Reader(lambda service: service.find_user(user_id))


def get_friends(user):
    return Reader(lambda service: service.find_friends(user))


def get_age(user):
    return Reader.pure(user.age)


def test_get_user_then_friends(service) -> None:
    friends = get_user(1).flat_map(get_friends)

    assert service.calls == []

    result = friends.run(service)

    assert [friend.name for friend in result] == ["bob", "carol"]
    assert service.calls == [("find_user", 1), ("find_friends", 1)]


def test_friend_ages_via_lift_to_many(service) -> None:
    ages = get_user(3).flat_map(get_friends).flat_map(lift_to_many(get_age))

    assert service.calls == []
    assert ages.run(service) == [31, 19]


def test_average_friend_age_with_do(service) -> None:
    @do
    def average_friend_age(user_id):
        user = yield get_user(user_id)
        friends = yield get_friends(user)
        ages = yield lift_to_many(get_age)(friends)
        if not ages:
            return None
        return sum(ages) / len(ages)

    program = average_friend_age(3)

    assert service.calls == []
    assert program.run(service) == 25.0
    assert average_friend_age(4).run(service) is None


def test_user_and_friend_count_zip(service) -> None:
    summary = get_user(1).zip(
        get_user(1).flat_map(get_friends).map(len),
        lambda user, count: f"{user.name} has {count} friends",
    )

    assert summary.run(service) == "alice has 2 friends"


def test_rerun_against_different_environment(service) -> None:
    user_type = type(service.users[1])
    other = type(service)(users={1: user_type(1, "zed", 50)}, friendships={1: []})
    names = get_user(1).attr("name")

    assert names.run(service) == "alice"
    assert names.run(other) == "zed"
