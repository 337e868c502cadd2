import pytest

from blog.errors import ValidationError
from blog.repositories import comments as comment_repo
from blog.services import comment_service


def payload(**overrides):
    data = {"name": "Alice", "text": "Great post, thanks so much!", "post": "my-slug"}
    data.update(overrides)
    return data


def test_add_comment_persists_trimmed_fields(session):
    result = comment_service.add_comment(session, payload(name="  Alice  "))
    assert result == {"status": "success", "message": "Comment added."}
    (stored,) = comment_service.list_comments(session, "my-slug")
    assert stored.name == "Alice"
    assert stored.text == "Great post, thanks so much!"


@pytest.mark.parametrize("value, expected", [
    (None, None),
    ("", None),
    ("abc", None),
    ("12", 12),
    (" 7 ", 7),
    ("3rd", 3),
    (5, 5),
    (4.9, 4),
    (0, None),
    (True, None),
    ([1], None),
])
def test_parse_parent_id(value, expected):
    assert comment_service.parse_parent_id(value) == expected


@pytest.mark.parametrize("parent", [None, "", "not-a-number"])
def test_unusable_parent_id_is_stored_as_null(session, parent):
    data = payload()
    if parent is not None:
        data["parentCommentId"] = parent
    comment_service.add_comment(session, data)
    (stored,) = comment_repo.list_all(session)
    assert stored.parent_comment_id is None


@pytest.mark.parametrize("value, expected", [
    ("true", True),
    (" TRUE ", True),
    (True, True),
    (False, False),
    ("false", False),
    ("yes", False),
    (None, False),
    (1, False),
])
def test_coerce_moderated(value, expected):
    assert comment_service.coerce_moderated(value) is expected


@pytest.mark.parametrize("value, expected", [("true", True), (True, True), (False, False)])
def test_replace_comment_persists_moderated_flag(session, value, expected):
    comment = comment_repo.create(session, name="Alice", text="Great post, thanks so much!", post="my-slug")
    result = comment_service.replace_comment(session, comment.id, payload(moderated=value))
    assert result["message"] == f"Comment modified with ID: {comment.id}"
    session.refresh(comment)
    assert comment.moderated is expected


def test_new_comments_are_never_moderated(session):
    comment_service.add_comment(session, payload(moderated="true"))
    (stored,) = comment_repo.list_all(session)
    assert stored.moderated is False


def test_validation_collects_every_problem():
    with pytest.raises(ValidationError) as excinfo:
        comment_service.validate_submission({"name": "   ", "text": "too short", "post": ""})
    assert excinfo.value.errors == [
        "Name is required.",
        "Comment must be at least 20 characters.",
        "Post is required.",
    ]
    assert excinfo.value.status_code == 400


def test_validation_limits_name_length():
    with pytest.raises(ValidationError, match="at most 255"):
        comment_service.validate_submission(payload(name="x" * 256))
    assert comment_service.validate_submission(payload(name="x" * 255)).name == "x" * 255


def test_validation_rejects_structured_values():
    with pytest.raises(ValidationError, match="'name' must be a string"):
        comment_service.validate_submission(payload(name={"first": "Alice"}))


def test_invalid_submission_never_reaches_the_database(session):
    with pytest.raises(ValidationError):
        comment_service.add_comment(session, payload(text="short"))
    assert comment_repo.list_all(session) == []


def test_remove_missing_comment_is_a_no_op(session):
    assert comment_service.remove_comment(session, 42) == {
        "status": "success",
        "message": "No comment found with ID: 42",
    }
