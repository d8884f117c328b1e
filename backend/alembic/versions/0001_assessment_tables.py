"""assessment tables

Revision ID: 0001_assessment_tables
Revises:
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_assessment_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "admins",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        # string-based enum storage for portability
        sa.Column("role", sa.String(length=11), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("admins.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_admins_email", "admins", ["email"], unique=True)

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("admin_id", sa.String(length=36), sa.ForeignKey("admins.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_sessions_admin_id", "sessions", ["admin_id"], unique=False)
    op.create_index("ix_sessions_token_hash", "sessions", ["token_hash"], unique=True)

    op.create_table(
        "candidate_assessments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("admin_label", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=11), nullable=False),
        sa.Column("current_step", sa.Integer(), nullable=False),
        sa.Column("answers", sa.JSON(), nullable=False),
        sa.Column("proctoring", sa.JSON(), nullable=False),
        sa.Column("ai_evaluations", sa.JSON(), nullable=False),
        sa.Column("video_behavior", sa.JSON(), nullable=True),
        sa.Column(
            "created_by_trainer_id",
            sa.String(length=36),
            sa.ForeignKey("admins.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_candidate_assessments_token", "candidate_assessments", ["token"], unique=True)

    op.create_table(
        "video_access_tokens",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "assessment_id",
            sa.String(length=36),
            sa.ForeignKey("candidate_assessments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("question_index", sa.Integer(), nullable=False),
        sa.Column("storage_path", sa.String(length=1024), nullable=False),
        sa.Column("password", sa.String(length=16), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("is_used", sa.Boolean(), nullable=False),
        sa.Column("accessed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_video_access_tokens_assessment_id", "video_access_tokens", ["assessment_id"], unique=False)
    op.create_index("ix_video_access_tokens_expires_at", "video_access_tokens", ["expires_at"], unique=False)


def downgrade():
    op.drop_index("ix_video_access_tokens_expires_at", table_name="video_access_tokens")
    op.drop_index("ix_video_access_tokens_assessment_id", table_name="video_access_tokens")
    op.drop_table("video_access_tokens")
    op.drop_index("ix_candidate_assessments_token", table_name="candidate_assessments")
    op.drop_table("candidate_assessments")
    op.drop_index("ix_sessions_token_hash", table_name="sessions")
    op.drop_index("ix_sessions_admin_id", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("ix_admins_email", table_name="admins")
    op.drop_table("admins")
