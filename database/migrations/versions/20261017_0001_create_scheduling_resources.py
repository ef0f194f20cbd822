"""create scheduling resources

Revision ID: 20261017_0001
Revises: None
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None


group_type_enum = sa.Enum("weekday", "weekend", name="group_type")
subject_status_enum = sa.Enum("active", "inactive", name="subject_status")
venue_type_enum = sa.Enum("lecture", "tutorial", "lab", name="venue_type")


def upgrade() -> None:
    op.create_table(
        "groups",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("faculty", sa.String(length=200), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("semester", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("group_type", group_type_enum, nullable=False, server_default="weekday"),
        sa.Column("roster_size", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_groups_name", "groups", ["name"], unique=True)
    op.create_index("ix_groups_department", "groups", ["department"])

    op.create_table(
        "lecturers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_lecturers_email", "lecturers", ["email"], unique=True)

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=False),
        sa.Column("lecturer_id", sa.String(length=36), sa.ForeignKey("lecturers.id"), nullable=False),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("status", subject_status_enum, nullable=False, server_default="active"),
        sa.Column("preferred_days", sa.JSON(), nullable=False),
        sa.Column("preferred_time_ranges", sa.JSON(), nullable=False),
        sa.Column("session_duration", sa.Integer(), nullable=True),
        sa.Column("required_venue_types", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_subjects_code", "subjects", ["code"], unique=True)
    op.create_index("ix_subjects_department", "subjects", ["department"])
    op.create_index("ix_subjects_lecturer_id", "subjects", ["lecturer_id"])

    op.create_table(
        "venues",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("building", sa.String(length=200), nullable=False),
        sa.Column("faculty", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("department", sa.String(length=200), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("type", venue_type_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_venues_name", "venues", ["name"], unique=True)
    op.create_index("ix_venues_department", "venues", ["department"])


def downgrade() -> None:
    op.drop_index("ix_venues_department", table_name="venues")
    op.drop_index("ix_venues_name", table_name="venues")
    op.drop_table("venues")
    op.drop_index("ix_subjects_lecturer_id", table_name="subjects")
    op.drop_index("ix_subjects_department", table_name="subjects")
    op.drop_index("ix_subjects_code", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("ix_lecturers_email", table_name="lecturers")
    op.drop_table("lecturers")
    op.drop_index("ix_groups_department", table_name="groups")
    op.drop_index("ix_groups_name", table_name="groups")
    op.drop_table("groups")
    venue_type_enum.drop(op.get_bind(), checkfirst=True)
    subject_status_enum.drop(op.get_bind(), checkfirst=True)
    group_type_enum.drop(op.get_bind(), checkfirst=True)
