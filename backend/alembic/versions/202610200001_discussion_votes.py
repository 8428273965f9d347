"""add discussion_votes table

Revision ID: 202610200001
Revises: 202610190001
Create Date: 2026-10-20 09:00:01
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "202610200001"
down_revision: Union[str, None] = "202610190001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "discussion_votes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("discussion_id", sa.Integer(), nullable=True),
        sa.Column("comment_id", sa.Integer(), nullable=True),
        sa.Column("reply_id", sa.Integer(), nullable=True),
        sa.Column("value", sa.SmallInteger(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["discussion_id"], ["discussions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["comment_id"], ["discussion_comments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reply_id"], ["comment_replies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "discussion_id", name="uq_votes_user_discussion"),
        sa.UniqueConstraint("user_id", "comment_id", name="uq_votes_user_comment"),
        sa.UniqueConstraint("user_id", "reply_id", name="uq_votes_user_reply"),
        sa.CheckConstraint("value IN (-1, 1)", name="chk_vote_value"),
        sa.CheckConstraint(
            "(CASE WHEN discussion_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN reply_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="chk_vote_single_target",
        ),
    )
    op.create_index("ix_discussion_votes_id", "discussion_votes", ["id"])


def downgrade() -> None:
    op.drop_index("ix_discussion_votes_id", table_name="discussion_votes")
    op.drop_table("discussion_votes")
