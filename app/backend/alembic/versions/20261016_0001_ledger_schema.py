"""ledger schema

Revision ID: 20261016_0001
Revises:
Create Date: 2026-10-16
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261016_0001"
down_revision = None
branch_labels = None
depends_on = None


def _cost_center_fk() -> sa.Column:
    return sa.Column(
        "cost_center_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("cost_centers.id"), nullable=True
    )


def upgrade() -> None:
    op.create_table(
        "cost_centers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=32), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "payroll_entries",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _cost_center_fk(),
        sa.Column("employee_name", sa.String(length=255), nullable=False),
        sa.Column("period_year", sa.Integer(), nullable=False),
        sa.Column("period_month", sa.Integer(), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=True),
        sa.Column("amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("net_salary", sa.Numeric(14, 2), nullable=True),
        sa.CheckConstraint("period_month BETWEEN 1 AND 12", name="ck_payroll_entries_period_month"),
    )
    op.create_index("ix_payroll_entries_period", "payroll_entries", ["period_year", "period_month"])
    op.create_index("ix_payroll_entries_cost_center_id", "payroll_entries", ["cost_center_id"])

    op.create_table(
        "factoring_operations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _cost_center_fk(),
        sa.Column("entity_name", sa.String(length=255), nullable=False),
        sa.Column("factoring_date", sa.Date(), nullable=True),
        sa.Column("amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("interest_rate", sa.Numeric(7, 4), nullable=True),
    )
    op.create_index("ix_factoring_operations_date", "factoring_operations", ["factoring_date"])
    op.create_index("ix_factoring_operations_cost_center_id", "factoring_operations", ["cost_center_id"])

    op.create_table(
        "statutory_contributions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _cost_center_fk(),
        sa.Column("employee_name", sa.String(length=255), nullable=False),
        sa.Column("contribution_type", sa.String(length=64), nullable=False),
        sa.Column("contribution_date", sa.Date(), nullable=True),
        sa.Column("amount", sa.Numeric(14, 2), nullable=True),
    )
    op.create_index("ix_statutory_contributions_date", "statutory_contributions", ["contribution_date"])
    op.create_index("ix_statutory_contributions_cost_center_id", "statutory_contributions", ["cost_center_id"])

    op.create_table(
        "fixed_costs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _cost_center_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("quota_count", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("quota_value", sa.Numeric(14, 2), nullable=True),
        sa.CheckConstraint("quota_count >= 0", name="ck_fixed_costs_quota_count_non_negative"),
    )
    op.create_index("ix_fixed_costs_cost_center_id", "fixed_costs", ["cost_center_id"])

    op.create_table(
        "account_categories",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type_code", sa.String(length=32), nullable=False),
        sa.Column("group_name", sa.String(length=100), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.UniqueConstraint("code", name="uq_account_categories_code"),
    )

    op.create_table(
        "purchase_order_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "account_category_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("account_categories.id"),
            nullable=False,
        ),
        _cost_center_fk(),
        sa.Column("order_number", sa.String(length=64), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("item_date", sa.Date(), nullable=True),
        sa.Column("total", sa.Numeric(14, 2), nullable=True),
    )
    op.create_index(
        "ix_purchase_order_items_category_date", "purchase_order_items", ["account_category_id", "item_date"]
    )
    op.create_index("ix_purchase_order_items_cost_center_id", "purchase_order_items", ["cost_center_id"])

    op.create_table(
        "income_categories",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.UniqueConstraint("name", name="uq_income_categories_name"),
    )

    op.create_table(
        "income_entries",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "income_category_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("income_categories.id"),
            nullable=False,
        ),
        _cost_center_fk(),
        sa.Column("document_number", sa.String(length=64), nullable=False),
        sa.Column("income_date", sa.Date(), nullable=True),
        sa.Column("total_amount", sa.Numeric(14, 2), nullable=True),
    )
    op.create_index("ix_income_entries_category_date", "income_entries", ["income_category_id", "income_date"])
    op.create_index("ix_income_entries_cost_center_id", "income_entries", ["cost_center_id"])


def downgrade() -> None:
    op.drop_index("ix_income_entries_cost_center_id", table_name="income_entries")
    op.drop_index("ix_income_entries_category_date", table_name="income_entries")
    op.drop_table("income_entries")
    op.drop_table("income_categories")

    op.drop_index("ix_purchase_order_items_cost_center_id", table_name="purchase_order_items")
    op.drop_index("ix_purchase_order_items_category_date", table_name="purchase_order_items")
    op.drop_table("purchase_order_items")
    op.drop_table("account_categories")

    op.drop_index("ix_fixed_costs_cost_center_id", table_name="fixed_costs")
    op.drop_table("fixed_costs")

    op.drop_index("ix_statutory_contributions_cost_center_id", table_name="statutory_contributions")
    op.drop_index("ix_statutory_contributions_date", table_name="statutory_contributions")
    op.drop_table("statutory_contributions")

    op.drop_index("ix_factoring_operations_cost_center_id", table_name="factoring_operations")
    op.drop_index("ix_factoring_operations_date", table_name="factoring_operations")
    op.drop_table("factoring_operations")

    op.drop_index("ix_payroll_entries_cost_center_id", table_name="payroll_entries")
    op.drop_index("ix_payroll_entries_period", table_name="payroll_entries")
    op.drop_table("payroll_entries")

    op.drop_table("cost_centers")
