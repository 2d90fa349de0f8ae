"""Create assignments and schedule_template tables

Revision ID: 4a7e1c2b9d30
Revises:
Create Date: 2025-09-01
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4a7e1c2b9d30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "assignments",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("subject", sa.String(), nullable=True),
        sa.Column("course_name", sa.String(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("scheduled_date", sa.Date(), nullable=True),
        sa.Column("scheduled_block", sa.Integer(), nullable=True),
        sa.Column("completion_status", sa.String(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("detected_family", sa.String(), nullable=True),
        sa.Column("actual_estimated_minutes", sa.Integer(), nullable=True),
        sa.Column("parent_id", sa.String(), nullable=True),
        sa.Column("segment_order", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("parent_id", "segment_order", name="uq_assignment_segment"),
    )
    op.create_index(op.f("ix_assignments_user_id"), "assignments", ["user_id"], unique=False)
    op.create_index(op.f("ix_assignments_due_date"), "assignments", ["due_date"], unique=False)
    op.create_index(op.f("ix_assignments_scheduled_date"), "assignments", ["scheduled_date"], unique=False)
    op.create_index(op.f("ix_assignments_parent_id"), "assignments", ["parent_id"], unique=False)

    op.create_table(
        "schedule_template",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("student_name", sa.String(), nullable=False),
        sa.Column("weekday", sa.String(), nullable=False),
        sa.Column("block_number", sa.Integer(), nullable=True),
        sa.Column("start_time", sa.String(), nullable=False),
        sa.Column("end_time", sa.String(), nullable=False),
        sa.Column("subject", sa.String(), nullable=False),
        sa.Column("block_name", sa.String(), nullable=True),
        sa.Column("block_type", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_schedule_template_student_name"), "schedule_template", ["student_name"], unique=False)
    op.create_index(op.f("ix_schedule_template_weekday"), "schedule_template", ["weekday"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_schedule_template_weekday"), table_name="schedule_template")
    op.drop_index(op.f("ix_schedule_template_student_name"), table_name="schedule_template")
    op.drop_table("schedule_template")
    op.drop_index(op.f("ix_assignments_parent_id"), table_name="assignments")
    op.drop_index(op.f("ix_assignments_scheduled_date"), table_name="assignments")
    op.drop_index(op.f("ix_assignments_due_date"), table_name="assignments")
    op.drop_index(op.f("ix_assignments_user_id"), table_name="assignments")
    op.drop_table("assignments")
