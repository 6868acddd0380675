"""Initial schema: users, events, parties, assignments and entries.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-01-06 19:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.UniqueConstraint("email", name=op.f("uq_users_email")),
    )
    op.create_table(
        "rumble_events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('UPCOMING','LIVE','COMPLETED')",
            name=op.f("ck_rumble_events_status_enum"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_rumble_events")),
    )
    op.create_table(
        "parties",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("invite_code", sa.String(length=16), nullable=False),
        sa.Column("host_id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("distribution_mode", sa.String(length=20), nullable=False),
        sa.Column("entry_fee", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('LOBBY','NUMBERS_ASSIGNED','IN_PROGRESS','COMPLETED')",
            name=op.f("ck_parties_status_enum"),
        ),
        sa.CheckConstraint(
            "distribution_mode IN ('EXCLUDE','BUY_EXTRA','SHARED')",
            name=op.f("ck_parties_distribution_mode_enum"),
        ),
        sa.ForeignKeyConstraint(
            ["event_id"],
            ["rumble_events.id"],
            name=op.f("fk_parties_event_id_rumble_events"),
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["host_id"],
            ["users.id"],
            name=op.f("fk_parties_host_id_users"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_parties")),
        sa.UniqueConstraint("invite_code", name=op.f("uq_parties_invite_code")),
    )
    op.create_index(op.f("ix_parties_event_id"), "parties", ["event_id"], unique=False)
    op.create_index(op.f("ix_parties_host_id"), "parties", ["host_id"], unique=False)

    op.create_table(
        "party_participants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("party_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("has_paid", sa.Boolean(), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["party_id"],
            ["parties.id"],
            name=op.f("fk_party_participants_party_id_parties"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f("fk_party_participants_user_id_users"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_party_participants")),
        sa.UniqueConstraint("party_id", "user_id", name="uq_party_participant"),
    )
    op.create_index(
        op.f("ix_party_participants_party_id"),
        "party_participants",
        ["party_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_party_participants_user_id"),
        "party_participants",
        ["user_id"],
        unique=False,
    )

    op.create_table(
        "number_assignments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("party_id", sa.Integer(), nullable=False),
        sa.Column("participant_id", sa.Integer(), nullable=False),
        sa.Column("entry_number", sa.Integer(), nullable=False),
        sa.Column("is_shared", sa.Boolean(), nullable=False),
        sa.Column("share_group", sa.Integer(), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "entry_number BETWEEN 1 AND 30",
            name=op.f("ck_number_assignments_entry_number_range"),
        ),
        sa.ForeignKeyConstraint(
            ["participant_id"],
            ["party_participants.id"],
            name=op.f("fk_number_assignments_participant_id_party_participants"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["party_id"],
            ["parties.id"],
            name=op.f("fk_number_assignments_party_id_parties"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_number_assignments")),
        sa.UniqueConstraint(
            "participant_id", "entry_number", name="uq_number_assignment_participant"
        ),
    )
    op.create_index(
        op.f("ix_number_assignments_participant_id"),
        "number_assignments",
        ["participant_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_number_assignments_party_id"),
        "number_assignments",
        ["party_id"],
        unique=False,
    )
    op.create_index(
        "ix_number_assignments_party_number",
        "number_assignments",
        ["party_id", "entry_number"],
        unique=False,
    )

    op.create_table(
        "rumble_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("party_id", sa.Integer(), nullable=False),
        sa.Column("entry_number", sa.Integer(), nullable=False),
        sa.Column("wrestler_name", sa.String(length=255), nullable=True),
        sa.Column("entered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("eliminated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("eliminated_by", sa.String(length=255), nullable=True),
        sa.Column("is_winner", sa.Boolean(), nullable=False),
        sa.CheckConstraint(
            "entry_number BETWEEN 1 AND 30",
            name=op.f("ck_rumble_entries_entry_number_range"),
        ),
        sa.ForeignKeyConstraint(
            ["party_id"],
            ["parties.id"],
            name=op.f("fk_rumble_entries_party_id_parties"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_rumble_entries")),
        sa.UniqueConstraint("party_id", "entry_number", name="uq_rumble_entry_number"),
    )
    op.create_index(
        op.f("ix_rumble_entries_party_id"), "rumble_entries", ["party_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_rumble_entries_party_id"), table_name="rumble_entries")
    op.drop_table("rumble_entries")
    op.drop_index("ix_number_assignments_party_number", table_name="number_assignments")
    op.drop_index(op.f("ix_number_assignments_party_id"), table_name="number_assignments")
    op.drop_index(
        op.f("ix_number_assignments_participant_id"), table_name="number_assignments"
    )
    op.drop_table("number_assignments")
    op.drop_index(op.f("ix_party_participants_user_id"), table_name="party_participants")
    op.drop_index(op.f("ix_party_participants_party_id"), table_name="party_participants")
    op.drop_table("party_participants")
    op.drop_index(op.f("ix_parties_host_id"), table_name="parties")
    op.drop_index(op.f("ix_parties_event_id"), table_name="parties")
    op.drop_table("parties")
    op.drop_table("rumble_events")
    op.drop_table("users")
