import pytest

from jeeforces.core.exceptions import AuthorizationError, BusinessLogicError, ResourceNotFoundError
from jeeforces.core.session import SessionIdentity
from jeeforces.models.discussion import Discussion, Reply, Vote
from jeeforces.services.discussion_service import discussion_service

from factories import make_user


def _thread(db, author):
    discussion = Discussion(title="Doubt in rotational mechanics", content="Why is friction static?", author_id=author.id)
    db.add(discussion)
    db.commit()
    db.refresh(discussion)
    return discussion


def _identity(user):
    return SessionIdentity(id=user.id, username=user.username, role=user.role)


def test_vote_switches_between_up_and_down(db):
    alice = make_user(db, "alice")
    bob = make_user(db, "bob")
    discussion = _thread(db, alice)

    discussion_service.vote_discussion(db, discussion.id, bob.id, "upvote")
    discussion_service.vote_discussion(db, discussion.id, bob.id, "upvote")
    voted = discussion_service.vote_discussion(db, discussion.id, alice.id, "upvote")
    assert sorted(voted["upvotes"]) == sorted([alice.id, bob.id])

    switched = discussion_service.vote_discussion(db, discussion.id, bob.id, "downvote")

    assert switched["upvotes"] == [alice.id]
    assert switched["downvotes"] == [bob.id]
    assert db.query(Vote).count() == 2


def test_vote_rejects_unknown_action_and_target(db):
    user = make_user(db)
    discussion = _thread(db, user)

    with pytest.raises(BusinessLogicError):
        discussion_service.vote_discussion(db, discussion.id, user.id, "sideways")
    with pytest.raises(ResourceNotFoundError):
        discussion_service.vote_discussion(db, 999, user.id, "upvote")
    with pytest.raises(ResourceNotFoundError) as exc:
        discussion_service.vote_comment(db, discussion.id, 999, user.id, "upvote")
    assert exc.value.message == "Comment not found"


def test_comment_votes_are_listed_per_comment(db):
    alice = make_user(db, "alice")
    bob = make_user(db, "bob")
    discussion = _thread(db, alice)
    thread = discussion_service.add_comment(db, discussion.id, alice.id, "Use torque about the contact point")
    discussion_service.add_comment(db, discussion.id, bob.id, "Or energy conservation")
    first_id = thread["comments"][0]["id"]

    comments = discussion_service.vote_comment(db, discussion.id, first_id, bob.id, "downvote")

    assert comments[0]["downvotes"] == [bob.id]
    assert comments[1]["upvotes"] == [] and comments[1]["downvotes"] == []


def test_reply_delete_allows_author_only(db):
    alice = make_user(db, "alice")
    bob = make_user(db, "bob")
    discussion = _thread(db, alice)
    comment_id = discussion_service.add_comment(db, discussion.id, alice.id, "Check the FBD")["comments"][0]["id"]
    thread = discussion_service.add_reply(db, discussion.id, comment_id, bob.id, "Done, thanks")
    reply_id = thread["comments"][0]["replies"][0]["id"]
    discussion_service.vote_reply(db, discussion.id, comment_id, reply_id, alice.id, "upvote")

    with pytest.raises(AuthorizationError):
        discussion_service.delete_reply(db, discussion.id, comment_id, reply_id, _identity(alice))

    discussion_service.delete_reply(db, discussion.id, comment_id, reply_id, _identity(bob))

    assert db.query(Reply).count() == 0
    assert db.query(Vote).count() == 0
    assert discussion_service.get_discussion(db, discussion.id)["comments"][0]["replies"] == []
