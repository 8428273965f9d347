import pytest

from jeeforces.core.exceptions import AlreadyRegisteredError, ResourceNotFoundError
from jeeforces.models.contest import ContestParticipant
from jeeforces.services.contest_service import contest_service

from factories import auth_headers, make_contest, make_user


def test_register_adds_participant(db):
    user = make_user(db)
    contest = make_contest(db)

    result = contest_service.register(db, contest.id, user.id)

    assert result == {"message": "Registered successfully"}
    assert contest_service.is_registered(db, contest.id, user.id)


def test_second_registration_is_rejected(db):
    user = make_user(db)
    contest = make_contest(db)
    contest_service.register(db, contest.id, user.id)

    with pytest.raises(AlreadyRegisteredError) as exc:
        contest_service.register(db, contest.id, user.id)

    assert exc.value.status_code == 400
    assert exc.value.message == "Already registered"
    count = db.query(ContestParticipant).filter(ContestParticipant.contest_id == contest.id).count()
    assert count == 1


def test_unknown_contest(db):
    user = make_user(db)
    with pytest.raises(ResourceNotFoundError) as exc:
        contest_service.register(db, 999, user.id)
    assert exc.value.message == "Contest not found"


def test_registration_shows_in_public_profile(db):
    from jeeforces.services.user_service import user_service

    user = make_user(db)
    contest = make_contest(db, title="Sunday Mock")
    contest_service.register(db, contest.id, user.id)

    profile = user_service.get_public_profile(db, user.username)

    assert profile["contestsParticipated"] == [contest.id]
    assert profile["contestsJoined"][0]["title"] == "Sunday Mock"


def test_register_over_http(client, client_db):
    user = make_user(client_db, "bob")
    contest = make_contest(client_db)

    first = client.post(f"/api/contests/{contest.id}/register", headers=auth_headers(user))
    second = client.post(f"/api/contests/{contest.id}/register", headers=auth_headers(user))
    anonymous = client.post(f"/api/contests/{contest.id}/register")
    missing = client.post("/api/contests/424242/register", headers=auth_headers(user))

    assert first.status_code == 200
    assert first.json() == {"message": "Registered successfully"}
    assert second.status_code == 400
    assert second.json()["error"] == "Already registered"
    assert anonymous.status_code == 401
    assert missing.status_code == 404
