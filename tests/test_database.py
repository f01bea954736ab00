import pytest

from tandem_bot.database import INTEREST_CATALOG, Database, FriendshipPreferences, TimeAvailability


def test_upsert_user_is_idempotent(database):
    first = database.upsert_user(telegram_id=77, username="bob", first_name="Bob")
    second = database.upsert_user(telegram_id=77, username="bobby", first_name="Bob")

    assert first == second
    user = database.get_user_by_telegram_id(77)
    assert user.username == "bobby"
    assert user.state == "new"
    assert user.interface_language == "en"


def test_catalog_is_seeded_once(tmp_path):
    path = tmp_path / "catalog.sqlite"
    Database(path)
    database = Database(path)

    assert database.list_interest_categories() == list(INTEREST_CATALOG)
    keys = [interest.key for interest in database.list_interests()]
    assert len(keys) == sum(len(items) for items in INTEREST_CATALOG.values())
    assert [interest.key for interest in database.list_interests("social")] == list(INTEREST_CATALOG["social"])


def test_unknown_state_is_rejected(database, user_id):
    with pytest.raises(ValueError):
        database.update_user_state(user_id, "sleeping")
    with pytest.raises(ValueError):
        database.set_user_status(user_id, "gone")

    database.update_user_state(user_id, "waiting_interests")
    assert database.get_user(user_id).state == "waiting_interests"


def test_updating_a_missing_user_raises(database):
    with pytest.raises(LookupError):
        database.set_interface_language(999, "ru")


def test_availability_and_preferences_round_trip(database, user_id):
    assert database.get_time_availability(user_id) is None
    assert database.get_preferences(user_id) is None

    database.save_time_availability(
        user_id, TimeAvailability("specific", ["monday", "friday"], ["evening"])
    )
    database.save_preferences(user_id, FriendshipPreferences("walk", ["voice_msg", "text"], "daily"))
    database.save_time_availability(user_id, TimeAvailability("weekends", [], ["late"]))

    assert database.get_time_availability(user_id) == TimeAvailability("weekends", [], ["late"])
    assert database.get_preferences(user_id) == FriendshipPreferences("walk", ["voice_msg", "text"], "daily")


def test_saving_interests_replaces_previous_selection(database, user_id):
    ids = {interest.key: interest.interest_id for interest in database.list_interests()}

    database.save_user_interests(user_id, [ids["music"], ids["books"]], [ids["books"]])
    database.save_user_interests(user_id, [ids["art"], ids["music"]], [ids["art"]])

    stored = database.get_user_interests(user_id)
    assert [(item.key, item.is_primary) for item in stored] == [("art", True), ("music", False)]


def test_feedback_lifecycle(database, user_id):
    first = database.create_feedback(user_id, "first message here", None)
    second = database.create_feedback(user_id, "second message here", "@alice")

    assert [item.feedback_id for item in database.list_feedback()] == [second, first]
    assert database.get_feedback(second).username == "alice"

    assert database.set_feedback_processed(first, True)
    assert not database.set_feedback_processed(12345, True)
    counts = database.feedback_counts()
    assert (counts.total, counts.active, counts.archived) == (2, 1, 1)

    assert database.delete_processed_feedback() == 1
    assert database.delete_feedback(second)
    assert not database.delete_feedback(second)
    assert database.list_feedback() == []
