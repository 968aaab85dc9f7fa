from mixtape.models.catalog import Role, User
from mixtape.models.submission import Submission, SubmissionStatus, full_messages


def _submission(**overrides) -> Submission:
    fields = dict(artist_id=1, dj_id=2, asset_id=3, playlist_id=4)
    fields.update(overrides)
    return Submission(**fields)


def test_status_defaults_to_pending():
    assert _submission().status == "pending"
    assert _submission().is_pending


def test_valid_with_all_references():
    assert _submission().validate() == {}


def test_missing_references_are_reported_per_field():
    errors = Submission(artist_id=None, dj_id=None, asset_id=None, playlist_id=None).validate()
    assert errors == {
        "artist": ["can't be blank"],
        "dj": ["can't be blank"],
        "asset": ["can't be blank"],
        "playlist": ["can't be blank"],
    }


def test_invalid_status_not_included_in_list():
    errors = _submission(status="invalid_status").validate()
    assert errors == {"status": ["is not included in the list"]}


def test_blank_status():
    assert _submission(status="").validate() == {"status": ["can't be blank"]}


def test_status_values():
    assert SubmissionStatus.values() == ["pending", "approved", "rejected"]


def test_full_messages():
    errors = {"asset": ["can't be blank", "must exist"], "status": ["is not included in the list"]}
    assert full_messages(errors) == [
        "Asset can't be blank",
        "Asset must exist",
        "Status is not included in the list",
    ]


def test_user_defaults_to_listener():
    user = User(id=1, login="someone")
    assert user.role == Role.LISTENER.value
    assert not user.is_artist
    assert not user.is_dj


def test_user_role_predicates():
    assert User(id=1, login="a", role="artist").is_artist
    assert User(id=2, login="d", role="dj").is_dj
