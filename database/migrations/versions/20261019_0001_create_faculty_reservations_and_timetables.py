"""create faculty reservations and generated timetables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "faculty_reservations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("faculty_id", sa.String(length=64), nullable=False),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("period", sa.Integer(), nullable=False),
        sa.Column("class_info", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("faculty_id", "day", "period", name="uq_faculty_reservations_slot"),
    )
    op.create_index("ix_faculty_reservations_faculty_id", "faculty_reservations", ["faculty_id"], unique=False)
    op.create_index("ix_faculty_reservations_class_info", "faculty_reservations", ["class_info"], unique=False)

    op.create_table(
        "generated_timetables",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("class_name", sa.String(length=200), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("section", sa.String(length=50), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("class_info", sa.String(length=255), nullable=False),
        sa.Column("created_by", sa.String(length=200), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
    )
    op.create_index("ix_generated_timetables_class_info", "generated_timetables", ["class_info"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_generated_timetables_class_info", table_name="generated_timetables")
    op.drop_table("generated_timetables")
    op.drop_index("ix_faculty_reservations_class_info", table_name="faculty_reservations")
    op.drop_index("ix_faculty_reservations_faculty_id", table_name="faculty_reservations")
    op.drop_table("faculty_reservations")
