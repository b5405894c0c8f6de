"""lab users, instructor availability, team availability views"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "lab_users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_lab_users_email", "lab_users", ["email"], unique=True)
    op.create_index("ix_lab_users_role", "lab_users", ["role"])

    op.create_table(
        "instructor_availability",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("instructor_id", sa.Integer(), sa.ForeignKey("lab_users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("is_all_day", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("instructor_id", "date", "start_time", name="uq_availability_instructor_date_start"),
    )
    op.create_index("ix_instructor_availability_instructor_id", "instructor_availability", ["instructor_id"])
    op.create_index("ix_instructor_availability_date", "instructor_availability", ["date"])
    op.create_index("ix_availability_instructor_date", "instructor_availability", ["instructor_id", "date"])

    op.create_table(
        "team_availability_views",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("instructor_emails", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_team_availability_views_created_by", "team_availability_views", ["created_by"])

def downgrade():
    op.drop_index("ix_team_availability_views_created_by", table_name="team_availability_views")
    op.drop_table("team_availability_views")
    op.drop_index("ix_availability_instructor_date", table_name="instructor_availability")
    op.drop_index("ix_instructor_availability_date", table_name="instructor_availability")
    op.drop_index("ix_instructor_availability_instructor_id", table_name="instructor_availability")
    op.drop_table("instructor_availability")
    op.drop_index("ix_lab_users_role", table_name="lab_users")
    op.drop_index("ix_lab_users_email", table_name="lab_users")
    op.drop_table("lab_users")
