"""create timetables and time slots

Revision ID: 20261017_0002
Revises: 20261017_0001
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261017_0002"
down_revision = "20261017_0001"
branch_labels = None
depends_on = None


timetable_status_enum = sa.Enum("draft", "published", name="timetable_status")


def upgrade() -> None:
    op.create_table(
        "timetables",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("group_id", sa.String(length=36), sa.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("status", timetable_status_enum, nullable=False, server_default="draft"),
        sa.Column("generated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("optimization_score", sa.Float(), nullable=True),
        sa.Column("optimization_details", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("group_id", "month", "year", name="uq_timetables_group_month_year"),
    )
    op.create_index("ix_timetables_group_id", "timetables", ["group_id"])

    op.create_table(
        "time_slots",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "timetable_id",
            sa.String(length=36),
            sa.ForeignKey("timetables.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("subject_id", sa.String(length=36), sa.ForeignKey("subjects.id"), nullable=False),
        sa.Column("venue_id", sa.String(length=36), sa.ForeignKey("venues.id"), nullable=False),
        sa.Column("lecturer_id", sa.String(length=36), sa.ForeignKey("lecturers.id"), nullable=False),
        sa.Column("is_locked", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("manually_assigned", sa.Boolean(), nullable=False, server_default=sa.text("false")),
    )
    op.create_index("ix_time_slots_timetable_id", "time_slots", ["timetable_id"])
    op.create_index("ix_time_slots_subject_id", "time_slots", ["subject_id"])
    op.create_index("ix_time_slots_venue_id", "time_slots", ["venue_id"])
    op.create_index("ix_time_slots_lecturer_id", "time_slots", ["lecturer_id"])


def downgrade() -> None:
    op.drop_index("ix_time_slots_lecturer_id", table_name="time_slots")
    op.drop_index("ix_time_slots_venue_id", table_name="time_slots")
    op.drop_index("ix_time_slots_subject_id", table_name="time_slots")
    op.drop_index("ix_time_slots_timetable_id", table_name="time_slots")
    op.drop_table("time_slots")
    op.drop_index("ix_timetables_group_id", table_name="timetables")
    op.drop_table("timetables")
    timetable_status_enum.drop(op.get_bind(), checkfirst=True)
