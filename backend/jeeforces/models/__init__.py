"""Database models"""

from jeeforces.models.user import User, RatingHistory
from jeeforces.models.problem import Problem
from jeeforces.models.contest import Contest, ContestParticipant, contest_problems
from jeeforces.models.submission import Submission
from jeeforces.models.discussion import Discussion, Comment, Reply, Vote
from jeeforces.models.report import Report
from jeeforces.models.admin_log import AdminLog

__all__ = [
    "User", "RatingHistory", "Problem", "Contest", "ContestParticipant", "contest_problems",
    "Submission", "Discussion", "Comment", "Reply", "Vote", "Report", "AdminLog",
]
