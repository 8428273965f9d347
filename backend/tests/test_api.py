from jeeforces.models.contest import Contest
from jeeforces.models.discussion import Discussion
from jeeforces.models.problem import Problem
from jeeforces.models.submission import Submission
from jeeforces.models.user import User

from factories import auth_headers, make_contest, make_problem, make_user


def _discussion(db, author):
    discussion = Discussion(title="Best books for organic", content="Looking for suggestions", author_id=author.id)
    db.add(discussion)
    db.commit()
    db.refresh(discussion)
    return discussion


def test_comment_requires_text(client, client_db):
    user = make_user(client_db)
    discussion = _discussion(client_db, user)

    response = client.post(f"/api/discussions/{discussion.id}/comment", json={}, headers=auth_headers(user))

    assert response.status_code == 400
    assert response.json()["error"] == "Comment text is required"


def test_comment_and_reply_resolve_authors(client, client_db):
    alice = make_user(client_db, "alice")
    bob = make_user(client_db, "bob")
    discussion = _discussion(client_db, alice)

    commented = client.post(
        f"/api/discussions/{discussion.id}/comment", json={"text": "Try MS Chauhan"}, headers=auth_headers(bob)
    )
    comment_id = commented.json()["discussion"]["comments"][0]["id"]
    replied = client.post(
        f"/api/discussions/{discussion.id}/comment/{comment_id}/reply",
        json={"text": "Thanks!"},
        headers=auth_headers(alice),
    )
    fetched = client.get(f"/api/discussions/{discussion.id}")

    assert commented.status_code == 201
    assert commented.json()["message"] == "Comment added"
    assert replied.status_code == 201
    thread = fetched.json()["discussion"]
    assert thread["author"]["username"] == "alice"
    assert thread["comments"][0]["author"]["username"] == "bob"
    assert thread["comments"][0]["replies"][0]["author"]["username"] == "alice"


def test_missing_discussion(client, client_db):
    user = make_user(client_db)
    assert client.get("/api/discussions/999").status_code == 404
    response = client.post("/api/discussions/999/comment", json={"text": "hi"}, headers=auth_headers(user))
    assert response.status_code == 404
    assert response.json()["error"] == "Discussion not found"


def test_unknown_user_profile(client):
    response = client.get("/api/users/unknown_user")
    assert response.status_code == 404
    assert response.json()["error"] == "User not found"


def test_public_profile_hides_private_fields(client, client_db):
    make_user(client_db, "dave", verify_token="ff" * 32)

    profile = client.get("/api/users/dave").json()

    assert profile["username"] == "dave"
    for private in ("password_hash", "email", "is_verified", "verify_token", "role", "created_at"):
        assert private not in profile


def test_update_profile(client, client_db):
    make_user(client_db, "erin")

    missing = client.post("/api/update-profile", json={"username": "erin", "avatar": "a.png"})
    unknown = client.post(
        "/api/update-profile",
        json={"username": "nobody", "avatar": "a.png", "institute": "IIT", "yearofstudy": 2},
    )
    ok = client.post(
        "/api/update-profile",
        json={"username": "erin", "avatar": "a.png", "institute": "IIT Delhi", "yearofstudy": 2},
    )

    assert missing.status_code == 400
    assert missing.json()["error"] == "All fields are required"
    assert unknown.status_code == 404
    assert ok.json() == {"message": "Profile updated successfully"}
    client_db.expire_all()
    assert client_db.query(User).filter(User.username == "erin").one().institute == "IIT Delhi"


def test_user_count_includes_seeded_admin(client, client_db):
    make_user(client_db, "frank")
    assert client.get("/api/user/count").json() == {"count": 2}


def test_sign_up_then_login(client, client_db):
    created = client.post(
        "/api/sign-up", json={"username": "gina_99", "email": "gina@example.com", "password": "secret1"}
    )
    duplicate = client.post(
        "/api/sign-up", json={"username": "gina_99", "email": "other@example.com", "password": "secret1"}
    )
    login = client.post("/api/auth/login", json={"identifier": "gina@example.com", "password": "secret1"})
    bad_login = client.post("/api/auth/login", json={"identifier": "gina_99", "password": "wrong-pass"})

    assert created.status_code == 201
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "Username already exists"
    user = client_db.query(User).filter(User.username == "gina_99").one()
    assert not user.is_verified
    assert len(user.verify_token) == 64

    assert login.status_code == 200
    assert login.json()["user"]["username"] == "gina_99"
    session = client.get("/api/auth/session", headers={"Authorization": f"Bearer {login.json()['access_token']}"})
    assert session.json()["username"] == "gina_99"
    assert bad_login.status_code == 401


def test_sign_up_is_rate_limited(client):
    statuses = [
        client.post(
            "/api/sign-up",
            json={"username": f"user_{i}", "email": f"user{i}@example.com", "password": "secret1"},
        ).status_code
        for i in range(6)
    ]
    assert statuses == [201] * 5 + [429]


def test_check_username_unique(client, client_db):
    make_user(client_db, "hank")
    assert client.get("/api/check-username-unique?username=hank").json()["success"] is False
    assert client.get("/api/check-username-unique?username=ha").status_code == 400
    assert client.get("/api/check-username-unique?username=new_name").json() == {
        "success": True,
        "message": "Username is unique",
    }


def test_page_guard_redirects(client, client_db):
    user = make_user(client_db, "ivy")

    anonymous = client.get("/dashboard", follow_redirects=False)
    admin_page = client.get("/admin", headers=auth_headers(user), follow_redirects=False)
    sign_in = client.get("/sign-in", headers=auth_headers(user), follow_redirects=False)

    assert anonymous.status_code == 307
    assert anonymous.headers["location"] == "/sign-in"
    assert admin_page.status_code == 307
    assert admin_page.headers["location"] == "/dashboard"
    assert sign_in.status_code == 307
    assert sign_in.headers["location"] == "/dashboard"


def test_admin_api_requires_admin(client, client_db):
    user = make_user(client_db, "jack")
    admin = client_db.query(User).filter(User.role == "admin").one()

    assert client.get("/api/admin/users").status_code == 401
    assert client.get("/api/admin/users", headers=auth_headers(user)).status_code == 403
    listed = client.get("/api/admin/users", headers=auth_headers(admin))
    assert listed.status_code == 200
    assert all("password_hash" not in entry for entry in listed.json())


def test_admin_actions_are_logged(client, client_db):
    admin = client_db.query(User).filter(User.role == "admin").one()
    problem = make_problem(client_db)
    contest = make_contest(client_db, problems=[problem], is_published=False)

    toggled = client.post(f"/api/contests/{contest.id}/toggle-publish", headers=auth_headers(admin))
    logs = client.get("/api/admin/logs", headers=auth_headers(admin)).json()

    assert toggled.json()["isPublished"] is True
    assert logs[0]["action"] == "toggle_contest_publish"
    assert logs[0]["target_contest_id"] == contest.id


def test_problem_hides_answer(client, client_db):
    problem = make_problem(client_db, solution="Use R = u^2 sin 2θ / g")

    body = client.get(f"/api/problems/{problem.id}").json()

    assert body["difficultyLabel"] == "Medium"
    assert "correct_option" not in body and "correctOption" not in body
    assert "solution" not in body


def test_robots_and_sitemap(client, client_db):
    make_problem(client_db)

    robots = client.get("/robots.txt")
    sitemap = client.get("/sitemap.xml")

    assert "User-agent: *" in robots.text
    assert "Sitemap: https://jeeforces.me/sitemap.xml" in robots.text
    assert sitemap.headers["content-type"].startswith("application/xml")
    for path in ("/contests", "/problems", "/discussions", "/leaderboard", "/about"):
        assert f"<loc>https://jeeforces.me{path}</loc>" in sitemap.text
    assert "<loc>https://jeeforces.me/problems/1</loc>" in sitemap.text
    assert "<loc>https://jeeforces.me/users/admin</loc>" in sitemap.text


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["readiness"]["redis"]["ok"] is True


def test_empty_comment_is_rejected_after_many_comments(client, client_db):
    user = make_user(client_db)
    discussion = _discussion(client_db, user)
    url = f"/api/discussions/{discussion.id}/comment"

    statuses = [
        client.post(url, json={"text": f"point {i}"}, headers=auth_headers(user)).status_code
        for i in range(6)
    ]
    empty = client.post(url, json={}, headers=auth_headers(user))

    assert statuses == [201] * 6
    assert empty.status_code == 400
    assert empty.json()["error"] == "Comment text is required"


def test_create_contest_with_mixed_timezones(client, client_db):
    admin = client_db.query(User).filter(User.role == "admin").one()
    body = {"title": "Full syllabus mock", "description": "Three hours, all subjects", "problems": []}

    created = client.post(
        "/api/contests",
        json={**body, "startTime": "2030-01-01T00:00:00Z", "endTime": "2030-01-02T00:00:00"},
        headers=auth_headers(admin),
    )
    backwards = client.post(
        "/api/contests",
        json={**body, "startTime": "2030-01-02T00:00:00+05:30", "endTime": "2030-01-01T00:00:00"},
        headers=auth_headers(admin),
    )

    assert created.status_code == 201
    contest = client_db.query(Contest).filter(Contest.id == created.json()["contestId"]).one()
    assert contest.start_time.replace(tzinfo=None).isoformat() == "2030-01-01T00:00:00"
    assert backwards.status_code == 422
    assert backwards.json()["error"] == "Validation failed"


def test_contest_leaderboard_requires_session(client, client_db):
    user = make_user(client_db)
    contest = make_contest(client_db)

    anonymous = client.get(f"/api/contests/{contest.id}/leaderboard")
    signed_in = client.get(f"/api/contests/{contest.id}/leaderboard", headers=auth_headers(user))

    assert anonymous.status_code == 401
    assert signed_in.status_code == 200
    assert signed_in.json() == []


def test_admin_updates_and_deletes_problem(client, client_db):
    admin = client_db.query(User).filter(User.role == "admin").one()
    user = make_user(client_db)
    problem = make_problem(client_db)
    url = f"/api/problems/{problem.id}"

    forbidden = client.delete(url, headers=auth_headers(user))
    updated = client.put(url, json={"title": "Projectile on an incline", "score": 8}, headers=auth_headers(admin))
    bad_answer = client.put(url, json={"correctOption": "E"}, headers=auth_headers(admin))
    deleted = client.delete(url, headers=auth_headers(admin))
    missing = client.delete(url, headers=auth_headers(admin))
    logs = client.get("/api/admin/logs", headers=auth_headers(admin)).json()

    assert forbidden.status_code == 403
    assert updated.status_code == 200
    assert (updated.json()["title"], updated.json()["score"]) == ("Projectile on an incline", 8)
    assert bad_answer.status_code == 400
    assert deleted.json() == {"message": "Problem deleted successfully"}
    assert missing.status_code == 404
    assert [entry["action"] for entry in logs[:2]] == ["delete_problem", "update_problem"]
    client_db.expire_all()
    assert client_db.query(Problem).count() == 0


def test_random_problems_skip_practised(client, client_db):
    user = make_user(client_db)
    done = make_problem(client_db, title="Projectile range", subject="Physics")
    fresh = make_problem(client_db, title="Gas laws", subject="Chemistry")
    make_problem(client_db, title="Limits", subject="Mathematics")
    client_db.add(Submission(
        user_id=user.id, problem_id=done.id, selected_options=["B"], verdict="Correct", score=4, is_final=True,
    ))
    client_db.commit()

    anonymous = client.get("/api/problems/random")
    one = client.get("/api/problems/random?subjects=Physics,Chemistry", headers=auth_headers(user))
    several = client.get("/api/problems/random?count=5", headers=auth_headers(user))
    exhausted = client.get("/api/problems/random?subjects=Physics", headers=auth_headers(user))

    assert anonymous.status_code == 401
    assert one.json()["id"] == fresh.id
    assert "correctOption" not in one.json()
    assert sorted(p["title"] for p in several.json()) == ["Gas laws", "Limits"]
    assert exhausted.status_code == 404
    assert exhausted.json()["error"].startswith("No more problems found")


def test_user_stats(client, client_db):
    user = make_user(client_db, "kiran")
    easy = make_problem(client_db, title="Unit vectors", difficulty=1)
    hard = make_problem(client_db, title="Rigid body rolling", difficulty=3)
    for problem, verdict in ((easy, "Correct"), (hard, "Incorrect")):
        client_db.add(Submission(
            user_id=user.id, problem_id=problem.id, selected_options=["B"], verdict=verdict, score=0, is_final=True,
        ))
    client_db.commit()

    stats = client.get("/api/users/kiran/stats").json()

    assert (stats["problemsSolved"], stats["totalAttempted"], stats["accuracy"]) == (1, 2, 50.0)
    assert stats["difficultyCounts"] == {"easy": 1, "medium": 0, "hard": 0}
    assert client.get("/api/users/nobody/stats").status_code == 404


def test_submission_detail_is_private(client, client_db):
    owner = make_user(client_db, "owner")
    other = make_user(client_db, "other")
    admin = client_db.query(User).filter(User.role == "admin").one()
    problem = make_problem(client_db)
    submission = Submission(
        user_id=owner.id, problem_id=problem.id, selected_options=["B"], verdict="Correct", score=4, is_final=True,
    )
    client_db.add(submission)
    client_db.commit()
    url = f"/api/submissions/{submission.id}"

    mine = client.get(url, headers=auth_headers(owner))

    assert mine.status_code == 200
    assert mine.json()["user"]["username"] == "owner"
    assert mine.json()["problem"]["title"] == problem.title
    assert mine.json()["contest"] is None
    assert client.get(url, headers=auth_headers(other)).status_code == 403
    assert client.get(url, headers=auth_headers(admin)).status_code == 200
    assert client.get(url).status_code == 401
    assert client.get("/api/submissions/999", headers=auth_headers(owner)).status_code == 404


def test_reply_votes_and_deletion(client, client_db):
    alice = make_user(client_db, "alice")
    bob = make_user(client_db, "bob")
    admin = client_db.query(User).filter(User.role == "admin").one()
    discussion = _discussion(client_db, alice)
    base = f"/api/discussions/{discussion.id}/comment"

    comment_id = client.post(base, json={"text": "Try HC Verma"}, headers=auth_headers(alice)).json()[
        "discussion"]["comments"][0]["id"]
    thread = client.post(
        f"{base}/{comment_id}/reply", json={"text": "Agreed"}, headers=auth_headers(bob)
    ).json()["discussion"]
    reply_id = thread["comments"][0]["replies"][0]["id"]

    voted = client.put(
        f"{base}/{comment_id}/reply",
        json={"action": "upvote", "replyId": reply_id},
        headers=auth_headers(alice),
    )
    by_stranger = client.delete(f"{base}/{comment_id}/reply/{reply_id}", headers=auth_headers(alice))
    by_admin = client.delete(f"{base}/{comment_id}/reply/{reply_id}", headers=auth_headers(admin))
    again = client.delete(f"{base}/{comment_id}/reply/{reply_id}", headers=auth_headers(bob))

    assert voted.json()["discussion"]["comments"][0]["replies"][0]["upvotes"] == [alice.id]
    assert by_stranger.status_code == 403
    assert by_stranger.json()["error"] == "Forbidden: You are not authorized to delete this reply."
    assert by_admin.json() == {"message": "Reply deleted successfully"}
    assert again.status_code == 404
    assert again.json()["error"] == "Reply not found"
