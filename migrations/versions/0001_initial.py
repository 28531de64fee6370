from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "labs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("room_number", sa.String(length=64), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("seating_config", sa.JSON(), nullable=False),
        sa.Column("used_slots", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "participants",
        sa.Column("participant_id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("team_id", sa.String(length=64), nullable=False),
        sa.Column("assigned_lab", sa.String(length=255), nullable=True),
        sa.Column("assigned_seat", sa.String(length=64), nullable=True),
        sa.Column("domain", sa.String(length=255), nullable=True),
        sa.Column("has_confirmed_problem", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_participants_team_id", "participants", ["team_id"])

    op.create_table(
        "problem_assignments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "participant_id",
            sa.String(length=64),
            sa.ForeignKey("participants.participant_id"),
            nullable=False,
        ),
        sa.Column("team_id", sa.String(length=64), nullable=False),
        sa.Column("offered_problems", sa.JSON(), nullable=False),
        sa.Column("selected_problem", sa.JSON(), nullable=True),
        sa.Column("is_confirmed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("refresh_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_refreshes", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("refresh_history", sa.JSON(), nullable=False),
        sa.Column("assigned_by", sa.String(length=255), nullable=False, server_default="system"),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("selected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_problem_assignments_participant_id", "problem_assignments", ["participant_id"], unique=True
    )
    op.create_index("ix_problem_assignments_team_id", "problem_assignments", ["team_id"])
    op.create_index("ix_problem_assignments_is_confirmed", "problem_assignments", ["is_confirmed"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("actor", sa.String(length=255), nullable=False),
        sa.Column("action", sa.String(length=255), nullable=False),
        sa.Column("meta", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_index("ix_problem_assignments_is_confirmed", table_name="problem_assignments")
    op.drop_index("ix_problem_assignments_team_id", table_name="problem_assignments")
    op.drop_index("ix_problem_assignments_participant_id", table_name="problem_assignments")
    op.drop_table("problem_assignments")
    op.drop_index("ix_participants_team_id", table_name="participants")
    op.drop_table("participants")
    op.drop_table("labs")
