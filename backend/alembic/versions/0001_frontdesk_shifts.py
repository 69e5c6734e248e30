from alembic import op
import sqlalchemy as sa


revision = "0001_frontdesk_shifts"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "shifts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("staff_id", sa.String(length=64), nullable=False, index=True),
        sa.Column("scheduled_start", sa.DateTime(), nullable=False, index=True),
        sa.Column("scheduled_end", sa.DateTime(), nullable=False),
        sa.Column("actual_start", sa.DateTime(), nullable=True),
        sa.Column("actual_end", sa.DateTime(), nullable=True),
        sa.Column("opening_cash_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("closing_cash_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("expected_cash_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("cash_discrepancy", sa.Numeric(10, 2), nullable=True),
        sa.Column("cash_discrepancy_notes", sa.Text(), nullable=True),
        sa.Column("total_transactions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_revenue", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_appointments", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("shift_type", sa.String(length=50), nullable=False, server_default="Regular"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Active", index=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "uq_shifts_one_active_per_staff",
        "shifts",
        ["staff_id"],
        unique=True,
        sqlite_where=sa.text("status = 'Active'"),
        postgresql_where=sa.text("status = 'Active'"),
    )

    op.create_table(
        "cash_drawer_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("shift_id", sa.Integer(), nullable=False, index=True),
        sa.Column("staff_id", sa.String(length=64), nullable=False, index=True),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("previous_balance", sa.Numeric(10, 2), nullable=False),
        sa.Column("new_balance", sa.Numeric(10, 2), nullable=False),
        sa.Column("cash_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("card_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("other_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("reference_id", sa.String(length=64), nullable=True, index=True),
        sa.Column("reference_type", sa.String(length=50), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("verified_by", sa.String(length=64), nullable=True),
        sa.Column("verified_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now(), index=True),
        sa.ForeignKeyConstraint(["shift_id"], ["shifts.id"], ondelete="RESTRICT"),
    )
    op.create_index(
        "ix_cash_drawer_transactions_shift_created",
        "cash_drawer_transactions",
        ["shift_id", "created_at"],
    )

    op.create_table(
        "shift_handovers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("from_staff_id", sa.String(length=64), nullable=False, index=True),
        sa.Column("to_staff_id", sa.String(length=64), nullable=False, index=True),
        sa.Column("from_shift_id", sa.Integer(), nullable=True, index=True),
        sa.Column("to_shift_id", sa.Integer(), nullable=True, index=True),
        sa.Column("handover_type", sa.String(length=20), nullable=False, server_default="General"),
        sa.Column("handover_notes", sa.Text(), nullable=True),
        sa.Column("pending_tasks", sa.JSON(), nullable=False),
        sa.Column("important_notes", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Pending", index=True),
        sa.Column("handover_time", sa.DateTime(), nullable=False, server_default=sa.func.now(), index=True),
        sa.Column("accepted_at", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("acceptance_notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["from_shift_id"], ["shifts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["to_shift_id"], ["shifts.id"], ondelete="SET NULL"),
    )


def downgrade() -> None:
    op.drop_table("shift_handovers")
    op.drop_index("ix_cash_drawer_transactions_shift_created", table_name="cash_drawer_transactions")
    op.drop_table("cash_drawer_transactions")
    op.drop_index("uq_shifts_one_active_per_staff", table_name="shifts")
    op.drop_table("shifts")
