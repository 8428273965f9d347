"""Contest routes"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional

from jeeforces.core.database import get_db
from jeeforces.core.session import SessionIdentity
from jeeforces.schemas.contest import ContestCreate, StandingEntry
from jeeforces.services.contest_service import contest_service
from jeeforces.services.admin_log_service import admin_log_service
from jeeforces.api.deps import client_ip, get_session_identity, require_admin, require_session

router = APIRouter()


@router.get("")
def list_contests(
    identity: Optional[SessionIdentity] = Depends(get_session_identity),
    db: Session = Depends(get_db),
):
    """Published contests; admins also see drafts"""
    return {"contests": contest_service.list_contests(db, identity)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_contest(
    data: ContestCreate,
    request: Request,
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Create contest (admin only)

    Args:
        data: Title, description, window and problem ids
        identity: Current admin

    Returns:
        Created contest id
    """
    contest = contest_service.create_contest(db, data, identity.id)
    admin_log_service.log_event(
        db,
        user_id=identity.id,
        action="create_contest",
        target_contest_id=contest.id,
        ip_address=client_ip(request),
        metadata={"title": contest.title, "problem_count": len(data.problems)},
    )
    return {"message": "Contest created", "contestId": contest.id}


@router.get("/{contest_id}")
def get_contest(
    contest_id: int,
    identity: Optional[SessionIdentity] = Depends(get_session_identity),
    db: Session = Depends(get_db),
):
    return {"contest": contest_service.get_contest_detail(db, contest_id, identity)}


@router.post("/{contest_id}/register")
def register_for_contest(
    contest_id: int,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """
    Register the caller for a contest

    Args:
        contest_id: Contest to join
        identity: Current session

    Returns:
        Success message; 400 "Already registered" on a repeat
    """
    return contest_service.register(db, contest_id, identity.id)


@router.post("/{contest_id}/toggle-publish")
def toggle_publish(
    contest_id: int,
    request: Request,
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    contest = contest_service.toggle_publish(db, contest_id)
    admin_log_service.log_event(
        db,
        user_id=identity.id,
        action="toggle_contest_publish",
        target_contest_id=contest.id,
        ip_address=client_ip(request),
        metadata={"is_published": contest.is_published},
    )
    return {"message": "Publish status updated", "isPublished": contest.is_published}


@router.get("/{contest_id}/leaderboard", response_model=List[StandingEntry])
def contest_leaderboard(
    contest_id: int,
    identity: SessionIdentity = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Contest standings, best score per problem summed; signed-in users only"""
    contest_service.get_contest(db, contest_id)
    return contest_service.standings(db, contest_id)


@router.post("/{contest_id}/update-ratings")
def update_ratings(
    contest_id: int,
    request: Request,
    identity: SessionIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Apply rating changes for a finished contest (admin only)

    Returns:
        Per-user rating changes
    """
    changes = contest_service.update_ratings(db, contest_id)
    admin_log_service.log_event(
        db,
        user_id=identity.id,
        action="update_ratings",
        target_contest_id=contest_id,
        ip_address=client_ip(request),
        metadata={"participants": len(changes)},
    )
    return {
        "message": "Ratings updated successfully",
        "changes": [
            {
                "userId": change.user_id,
                "oldRating": change.old_rating,
                "newRating": change.new_rating,
                "delta": change.delta,
                "title": change.title,
            }
            for change in changes
        ],
    }
