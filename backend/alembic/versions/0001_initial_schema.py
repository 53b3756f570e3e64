"""create users, kids, chores, tasks and earning periods

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

_IN_PROGRESS_ONLY = sa.text("\"Status\" = 'in_progress'")


def _created_at() -> sa.Column:
    return sa.Column(
        "CreatedAt",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.current_timestamp(),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column("Username", sa.String(length=120), nullable=False),
        sa.Column("PasswordHash", sa.String(length=255), nullable=False),
        sa.Column("Email", sa.String(length=254), nullable=True),
        sa.Column("Timezone", sa.String(length=64), nullable=False, server_default="UTC"),
        _created_at(),
        sa.Column("LastSignedInAt", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_Username", "users", ["Username"], unique=True)

    op.create_table(
        "refresh_tokens",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column(
            "UserId",
            sa.Integer(),
            sa.ForeignKey("users.Id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("TokenHash", sa.String(length=255), nullable=False),
        _created_at(),
        sa.Column("ExpiresAt", sa.DateTime(timezone=True), nullable=False),
        sa.Column("RevokedAt", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_refresh_tokens_UserId", "refresh_tokens", ["UserId"])

    op.create_table(
        "kids",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column("OwnerUserId", sa.Integer(), sa.ForeignKey("users.Id"), nullable=False),
        sa.Column("Name", sa.String(length=120), nullable=False),
        sa.Column("Birthday", sa.Date(), nullable=False),
        sa.Column("AvatarColor", sa.String(length=7), nullable=False, server_default="#4F46E5"),
        sa.Column("PocketMoneyAmount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("PocketMoneyFrequency", sa.String(length=20), nullable=False, server_default="weekly"),
        sa.Column("SavingsPercent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("Timezone", sa.String(length=64), nullable=True),
        sa.Column("NetWealth", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("SavingsBalance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index("ix_kids_OwnerUserId", "kids", ["OwnerUserId"])

    op.create_table(
        "chores",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column("OwnerUserId", sa.Integer(), sa.ForeignKey("users.Id"), nullable=True),
        sa.Column("Title", sa.String(length=200), nullable=False),
        sa.Column("Description", sa.Text(), nullable=True),
        sa.Column("PaymentAmount", sa.Numeric(10, 2), nullable=False),
        sa.Column("Frequency", sa.String(length=20), nullable=False, server_default="daily"),
        sa.Column("ChoreType", sa.String(length=20), nullable=False, server_default="individual"),
        sa.Column("IsPrePopulated", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.Column(
            "UpdatedAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
    )
    op.create_index("ix_chores_OwnerUserId", "chores", ["OwnerUserId"])

    op.create_table(
        "chore_assignments",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column("ChoreId", sa.Integer(), sa.ForeignKey("chores.Id"), nullable=False),
        sa.Column("KidId", sa.Integer(), sa.ForeignKey("kids.Id"), nullable=True),
        _created_at(),
        sa.UniqueConstraint("ChoreId", "KidId", name="uq_chore_assignments_chore_kid"),
    )
    op.create_index("ix_chore_assignments_ChoreId", "chore_assignments", ["ChoreId"])
    op.create_index("ix_chore_assignments_KidId", "chore_assignments", ["KidId"])

    op.create_table(
        "tasks",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column("ChoreId", sa.Integer(), sa.ForeignKey("chores.Id"), nullable=False),
        sa.Column("KidId", sa.Integer(), sa.ForeignKey("kids.Id"), nullable=False),
        sa.Column("Status", sa.String(length=20), nullable=False, server_default="in_progress"),
        sa.Column("StartedAt", sa.DateTime(timezone=True), nullable=True),
        sa.Column("CompletedAt", sa.DateTime(timezone=True), nullable=True),
        sa.Column("TimeToComplete", sa.Integer(), nullable=True),
        sa.Column("PhotoUrl", sa.Text(), nullable=True),
        sa.Column("EarningsAmount", sa.Numeric(10, 2), nullable=False),
        sa.Column("ReviewedAt", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ReviewedByUserId", sa.Integer(), sa.ForeignKey("users.Id"), nullable=True),
        _created_at(),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_tasks_ChoreId", "tasks", ["ChoreId"])
    op.create_index("ix_tasks_KidId", "tasks", ["KidId"])
    op.create_index("ix_tasks_Status", "tasks", ["Status"])
    op.create_index("ix_tasks_chore_completed", "tasks", ["ChoreId", "CompletedAt"])
    op.create_index(
        "ux_tasks_kid_in_progress",
        "tasks",
        ["KidId"],
        unique=True,
        sqlite_where=_IN_PROGRESS_ONLY,
        postgresql_where=_IN_PROGRESS_ONLY,
        mssql_where=sa.text("Status = 'in_progress'"),
    )

    op.create_table(
        "earning_periods",
        sa.Column("Id", sa.Integer(), primary_key=True),
        sa.Column("KidId", sa.Integer(), sa.ForeignKey("kids.Id"), nullable=False),
        sa.Column("PeriodStart", sa.DateTime(timezone=True), nullable=False),
        sa.Column("PeriodEnd", sa.DateTime(timezone=True), nullable=False),
        sa.Column("TotalEarned", sa.Numeric(12, 2), nullable=False),
        sa.Column("TasksCompleted", sa.Integer(), nullable=False),
        sa.Column("SavingsAmount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("BreakdownJson", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_earning_periods_KidId", "earning_periods", ["KidId"])


def downgrade() -> None:
    op.drop_index("ix_earning_periods_KidId", table_name="earning_periods")
    op.drop_table("earning_periods")
    op.drop_index("ux_tasks_kid_in_progress", table_name="tasks")
    op.drop_index("ix_tasks_chore_completed", table_name="tasks")
    op.drop_index("ix_tasks_Status", table_name="tasks")
    op.drop_index("ix_tasks_KidId", table_name="tasks")
    op.drop_index("ix_tasks_ChoreId", table_name="tasks")
    op.drop_table("tasks")
    op.drop_index("ix_chore_assignments_KidId", table_name="chore_assignments")
    op.drop_index("ix_chore_assignments_ChoreId", table_name="chore_assignments")
    op.drop_table("chore_assignments")
    op.drop_index("ix_chores_OwnerUserId", table_name="chores")
    op.drop_table("chores")
    op.drop_index("ix_kids_OwnerUserId", table_name="kids")
    op.drop_table("kids")
    op.drop_index("ix_refresh_tokens_UserId", table_name="refresh_tokens")
    op.drop_table("refresh_tokens")
    op.drop_index("ix_users_Username", table_name="users")
    op.drop_table("users")
