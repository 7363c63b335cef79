"""Repository helpers for the cost and income sub-ledgers."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from costledger.models.entities import (
    AccountCategory,
    FactoringOperation,
    FixedCost,
    IncomeCategory,
    IncomeEntry,
    PayrollEntry,
    PurchaseOrderItem,
    StatutoryContribution,
)


def _year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


class LedgerRepository:
    """Read operations used by the period aggregation providers."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ---------- Payroll ----------
    def list_payroll_for_month(
        self,
        *,
        year: int,
        month: int,
        cost_center_id: UUID | None = None,
    ) -> list[PayrollEntry]:
        stmt = select(PayrollEntry).where(
            and_(PayrollEntry.period_year == year, PayrollEntry.period_month == month)
        )
        if cost_center_id is not None:
            stmt = stmt.where(PayrollEntry.cost_center_id == cost_center_id)
        return self.db.scalars(stmt.order_by(PayrollEntry.employee_name.asc())).all()

    # ---------- Factoring ----------
    def list_factoring_operations(self, *, year: int, cost_center_id: UUID | None = None) -> list[FactoringOperation]:
        first_day, last_day = _year_bounds(year)
        stmt = select(FactoringOperation).where(
            and_(FactoringOperation.factoring_date >= first_day, FactoringOperation.factoring_date <= last_day)
        )
        if cost_center_id is not None:
            stmt = stmt.where(FactoringOperation.cost_center_id == cost_center_id)
        return self.db.scalars(stmt.order_by(FactoringOperation.factoring_date.asc())).all()

    # ---------- Statutory contributions ----------
    def list_statutory_contributions(
        self,
        *,
        year: int,
        cost_center_id: UUID | None = None,
    ) -> list[StatutoryContribution]:
        first_day, last_day = _year_bounds(year)
        stmt = select(StatutoryContribution).where(
            and_(
                StatutoryContribution.contribution_date >= first_day,
                StatutoryContribution.contribution_date <= last_day,
            )
        )
        if cost_center_id is not None:
            stmt = stmt.where(StatutoryContribution.cost_center_id == cost_center_id)
        return self.db.scalars(stmt.order_by(StatutoryContribution.contribution_date.asc())).all()

    # ---------- Fixed costs ----------
    def list_fixed_costs(self, *, cost_center_id: UUID | None = None) -> list[FixedCost]:
        # Installment schedules may start in earlier years, so no date filter here.
        stmt = select(FixedCost)
        if cost_center_id is not None:
            stmt = stmt.where(FixedCost.cost_center_id == cost_center_id)
        return self.db.scalars(stmt.order_by(FixedCost.start_date.asc(), FixedCost.name.asc())).all()

    # ---------- Account categories and purchase-order items ----------
    def list_active_account_categories(self) -> list[AccountCategory]:
        return self.db.scalars(
            select(AccountCategory)
            .where(AccountCategory.active.is_(True))
            .order_by(AccountCategory.type_code.asc(), AccountCategory.name.asc())
        ).all()

    def list_purchase_order_items(
        self,
        *,
        account_category_id: UUID,
        year: int,
        cost_center_id: UUID | None = None,
    ) -> list[PurchaseOrderItem]:
        first_day, last_day = _year_bounds(year)
        stmt = select(PurchaseOrderItem).where(
            and_(
                PurchaseOrderItem.account_category_id == account_category_id,
                PurchaseOrderItem.item_date >= first_day,
                PurchaseOrderItem.item_date <= last_day,
            )
        )
        if cost_center_id is not None:
            stmt = stmt.where(PurchaseOrderItem.cost_center_id == cost_center_id)
        return self.db.scalars(stmt.order_by(PurchaseOrderItem.item_date.asc())).all()

    # ---------- Income ----------
    def list_active_income_categories(self) -> list[IncomeCategory]:
        return self.db.scalars(
            select(IncomeCategory).where(IncomeCategory.active.is_(True)).order_by(IncomeCategory.name.asc())
        ).all()

    def list_income_entries(
        self,
        *,
        income_category_id: UUID,
        year: int,
        cost_center_id: UUID | None = None,
    ) -> list[IncomeEntry]:
        first_day, last_day = _year_bounds(year)
        stmt = select(IncomeEntry).where(
            and_(
                IncomeEntry.income_category_id == income_category_id,
                IncomeEntry.income_date >= first_day,
                IncomeEntry.income_date <= last_day,
            )
        )
        if cost_center_id is not None:
            stmt = stmt.where(IncomeEntry.cost_center_id == cost_center_id)
        return self.db.scalars(stmt.order_by(IncomeEntry.income_date.asc())).all()
