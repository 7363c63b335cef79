"""ORM entities for the cost and income sub-ledgers."""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from costledger.db.base import Base


class AccountCategoryType(str, enum.Enum):
    MANO_OBRA = "mano_obra"
    MAQUINARIA = "maquinaria"
    MATERIALES = "materiales"
    COMBUSTIBLES = "combustibles"
    GASTOS_GENERALES = "gastos_generales"


class CostCenter(Base):
    __tablename__ = "cost_centers"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class PayrollEntry(Base):
    __tablename__ = "payroll_entries"
    __table_args__ = (
        CheckConstraint("period_month BETWEEN 1 AND 12", name="ck_payroll_entries_period_month"),
        Index("ix_payroll_entries_period", "period_year", "period_month"),
        Index("ix_payroll_entries_cost_center_id", "cost_center_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    cost_center_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("cost_centers.id"), nullable=True
    )
    employee_name: Mapped[str] = mapped_column(String(255), nullable=False)
    period_year: Mapped[int] = mapped_column(Integer, nullable=False)
    period_month: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    net_salary: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)


class FactoringOperation(Base):
    __tablename__ = "factoring_operations"
    __table_args__ = (
        Index("ix_factoring_operations_date", "factoring_date"),
        Index("ix_factoring_operations_cost_center_id", "cost_center_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    cost_center_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("cost_centers.id"), nullable=True
    )
    entity_name: Mapped[str] = mapped_column(String(255), nullable=False)
    factoring_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    # Percentage, e.g. 2.5 means 2.5 %.
    interest_rate: Mapped[Decimal | None] = mapped_column(Numeric(7, 4), nullable=True)


class StatutoryContribution(Base):
    __tablename__ = "statutory_contributions"
    __table_args__ = (
        Index("ix_statutory_contributions_date", "contribution_date"),
        Index("ix_statutory_contributions_cost_center_id", "cost_center_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    cost_center_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("cost_centers.id"), nullable=True
    )
    employee_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contribution_type: Mapped[str] = mapped_column(String(64), nullable=False)
    contribution_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)


class FixedCost(Base):
    __tablename__ = "fixed_costs"
    __table_args__ = (
        CheckConstraint("quota_count >= 0", name="ck_fixed_costs_quota_count_non_negative"),
        Index("ix_fixed_costs_cost_center_id", "cost_center_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    cost_center_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("cost_centers.id"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    quota_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    quota_value: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)


class AccountCategory(Base):
    __tablename__ = "account_categories"
    __table_args__ = (UniqueConstraint("code", name="uq_account_categories_code"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type_code: Mapped[str] = mapped_column(String(32), nullable=False)
    group_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class PurchaseOrderItem(Base):
    __tablename__ = "purchase_order_items"
    __table_args__ = (
        Index("ix_purchase_order_items_category_date", "account_category_id", "item_date"),
        Index("ix_purchase_order_items_cost_center_id", "cost_center_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    account_category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("account_categories.id"), nullable=False
    )
    cost_center_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("cost_centers.id"), nullable=True
    )
    order_number: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    item_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)


class IncomeCategory(Base):
    __tablename__ = "income_categories"
    __table_args__ = (UniqueConstraint("name", name="uq_income_categories_name"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class IncomeEntry(Base):
    __tablename__ = "income_entries"
    __table_args__ = (
        Index("ix_income_entries_category_date", "income_category_id", "income_date"),
        Index("ix_income_entries_cost_center_id", "cost_center_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    income_category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("income_categories.id"), nullable=False
    )
    cost_center_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("cost_centers.id"), nullable=True
    )
    document_number: Mapped[str] = mapped_column(String(64), nullable=False)
    income_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
