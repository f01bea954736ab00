import pytest

from tandem_bot.errors import FeedbackValidationError
from tandem_bot.services.feedback import (
    MAX_CONTACT_LENGTH,
    MAX_FEEDBACK_LENGTH,
    FeedbackService,
    clamp_index,
)


@pytest.fixture
def service(database):
    return FeedbackService(database)


@pytest.mark.parametrize(
    ("text", "key"),
    [
        ("too short", "feedback_too_short"),
        ("   padded   ", "feedback_too_short"),
        ("x" * (MAX_FEEDBACK_LENGTH + 1), "feedback_too_long"),
    ],
)
def test_invalid_feedback_text(service, text, key):
    with pytest.raises(FeedbackValidationError) as excinfo:
        service.validate_text(text)

    assert excinfo.value.key == key


def test_invalid_contact(service):
    with pytest.raises(FeedbackValidationError) as excinfo:
        service.validate_contact("   ")
    assert excinfo.value.key == "feedback_contact_empty"

    with pytest.raises(FeedbackValidationError) as excinfo:
        service.validate_contact("c" * (MAX_CONTACT_LENGTH + 1))
    assert excinfo.value.key == "feedback_contact_too_long"


def test_submit_stores_cleaned_feedback(service, user_id):
    stored = service.submit(user_id, "  The matching works great!  ", " @alice ")

    assert stored.feedback_text == "The matching works great!"
    assert stored.contact_info == "@alice"
    assert stored.first_name == "Alice"
    assert not stored.is_processed


def test_submit_rejects_short_text_without_storing(service, user_id):
    with pytest.raises(FeedbackValidationError):
        service.submit(user_id, "meh")

    assert service.stats().total == 0


@pytest.mark.parametrize(
    ("index", "total", "expected"),
    [(-3, 4, 0), (2, 4, 2), (9, 4, 3), (5, 0, 0)],
)
def test_clamp_index(index, total, expected):
    assert clamp_index(index, total) == expected


def test_pages_are_clamped_and_split_by_state(service, user_id):
    ids = [service.submit(user_id, f"feedback number {n}").feedback_id for n in range(3)]
    service.set_processed(ids[0], True)

    page = service.page("active", 10)
    assert (page.index, page.total) == (1, 2)
    assert page.has_previous and not page.has_next

    archive = service.page("archive", 0)
    assert archive.item.feedback_id == ids[0]
    assert service.page("all", 0).total == 3


def test_empty_list_has_no_page(service):
    assert service.page("archive", 0) is None


def test_unknown_list_kind(service):
    with pytest.raises(ValueError):
        service.items("spam")


def test_processed_flag_and_purge(service, user_id):
    first = service.submit(user_id, "first piece of feedback").feedback_id
    second = service.submit(user_id, "second piece of feedback").feedback_id

    assert service.set_processed(first, True)
    assert service.set_processed(second, True)
    assert service.set_processed(second, False)
    assert service.purge_archive() == 1

    stats = service.stats()
    assert (stats.total, stats.active, stats.archived) == (1, 1, 0)
    assert service.delete(second)
    assert not service.delete(second)
