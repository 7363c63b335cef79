"""Upstream ledger provider contracts and their SQL-backed implementations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from costledger.core.errors import SourceUnavailableError
from costledger.repositories.ledger_repository import LedgerRepository
from costledger.services.category_aggregation import DiscoveredCategory

logger = logging.getLogger(__name__)

LedgerRecord = Mapping[str, object]


class LedgerProvider(Protocol):
    async def list_records(self, year: int, cost_center_id: UUID | None = None) -> Sequence[LedgerRecord]: ...


class CategoryDirectory(Protocol):
    async def list_active_categories(self) -> Sequence[DiscoveredCategory]: ...


class CategoryItemProvider(Protocol):
    async def list_items(
        self,
        category: DiscoveredCategory,
        year: int,
        cost_center_id: UUID | None = None,
    ) -> Sequence[LedgerRecord]: ...


@dataclass(slots=True, frozen=True)
class IncomeCategoryRef:
    id: object
    name: str


class IncomeProvider(Protocol):
    async def list_categories(self) -> Sequence[IncomeCategoryRef]: ...

    async def list_records(
        self,
        category: IncomeCategoryRef,
        year: int,
        cost_center_id: UUID | None = None,
    ) -> Sequence[LedgerRecord]: ...


@dataclass(slots=True)
class LedgerProviders:
    """Bundle of the sources one cost aggregation reads from."""

    payroll: LedgerProvider
    factoring: LedgerProvider
    statutory_contributions: LedgerProvider
    fixed_costs: LedgerProvider
    category_directory: CategoryDirectory
    category_items: CategoryItemProvider


SessionFactory = Callable[[], Session]


class _SqlProvider:
    """Runs blocking repository reads in a worker thread, one session per call."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory

    async def _read(self, reader: Callable[[LedgerRepository], list[dict[str, object]]]) -> list[dict[str, object]]:
        return await asyncio.to_thread(self._read_sync, reader)

    def _read_sync(self, reader: Callable[[LedgerRepository], list[dict[str, object]]]) -> list[dict[str, object]]:
        with self.session_factory() as session:
            return reader(LedgerRepository(session))


class SqlPayrollProvider(_SqlProvider):
    """Payroll is stored per pay period; the year is read as twelve monthly fetches."""

    async def list_records(self, year: int, cost_center_id: UUID | None = None) -> list[dict[str, object]]:
        outcomes = await asyncio.gather(
            *(self.list_month(year, month, cost_center_id) for month in range(1, 13)),
            return_exceptions=True,
        )
        failures = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
        if failures and len(failures) == len(outcomes):
            raise SourceUnavailableError("payroll", f"All monthly payroll reads failed for {year}.") from failures[0]
        records: list[dict[str, object]] = []
        for month, outcome in enumerate(outcomes, start=1):
            if isinstance(outcome, BaseException):
                logger.warning("Payroll fetch failed for %s-%02d: %s", year, month, outcome)
                continue
            records.extend(outcome)
        return records

    async def list_month(self, year: int, month: int, cost_center_id: UUID | None = None) -> list[dict[str, object]]:
        def reader(repo: LedgerRepository) -> list[dict[str, object]]:
            return [
                {
                    "date": row.payment_date or date(year, month, 1),
                    "amount": row.amount,
                    "net_salary": row.net_salary,
                    "cost_center_id": row.cost_center_id,
                    "employee_name": row.employee_name,
                }
                for row in repo.list_payroll_for_month(year=year, month=month, cost_center_id=cost_center_id)
            ]

        return await self._read(reader)


class SqlFactoringProvider(_SqlProvider):
    async def list_records(self, year: int, cost_center_id: UUID | None = None) -> list[dict[str, object]]:
        def reader(repo: LedgerRepository) -> list[dict[str, object]]:
            return [
                {
                    "date": row.factoring_date,
                    "amount": row.amount,
                    "interest_rate": row.interest_rate,
                    "cost_center_id": row.cost_center_id,
                    "entity_name": row.entity_name,
                }
                for row in repo.list_factoring_operations(year=year, cost_center_id=cost_center_id)
            ]

        return await self._read(reader)


class SqlStatutoryContributionProvider(_SqlProvider):
    async def list_records(self, year: int, cost_center_id: UUID | None = None) -> list[dict[str, object]]:
        def reader(repo: LedgerRepository) -> list[dict[str, object]]:
            return [
                {
                    "date": row.contribution_date,
                    "amount": row.amount,
                    "cost_center_id": row.cost_center_id,
                    "contribution_type": row.contribution_type,
                }
                for row in repo.list_statutory_contributions(year=year, cost_center_id=cost_center_id)
            ]

        return await self._read(reader)


class SqlFixedCostProvider(_SqlProvider):
    async def list_records(self, year: int, cost_center_id: UUID | None = None) -> list[dict[str, object]]:
        def reader(repo: LedgerRepository) -> list[dict[str, object]]:
            return [
                {
                    "start_date": row.start_date,
                    "installment_count": row.quota_count,
                    "installment_amount": row.quota_value,
                    "cost_center_id": row.cost_center_id,
                    "name": row.name,
                }
                for row in repo.list_fixed_costs(cost_center_id=cost_center_id)
            ]

        return await self._read(reader)


class SqlCategoryDirectory(_SqlProvider):
    async def list_active_categories(self) -> list[DiscoveredCategory]:
        def reader(repo: LedgerRepository) -> list[DiscoveredCategory]:
            return [
                DiscoveredCategory(id=row.id, type_code=row.type_code, name=row.name)
                for row in repo.list_active_account_categories()
            ]

        return await asyncio.to_thread(self._read_sync, reader)


class SqlPurchaseOrderItemProvider(_SqlProvider):
    async def list_items(
        self,
        category: DiscoveredCategory,
        year: int,
        cost_center_id: UUID | None = None,
    ) -> list[dict[str, object]]:
        def reader(repo: LedgerRepository) -> list[dict[str, object]]:
            return [
                {
                    "date": row.item_date,
                    "amount": row.total,
                    "cost_center_id": row.cost_center_id,
                    "order_number": row.order_number,
                }
                for row in repo.list_purchase_order_items(
                    account_category_id=category.id,
                    year=year,
                    cost_center_id=cost_center_id,
                )
            ]

        return await self._read(reader)


class SqlIncomeProvider(_SqlProvider):
    async def list_categories(self) -> list[IncomeCategoryRef]:
        def reader(repo: LedgerRepository) -> list[IncomeCategoryRef]:
            return [IncomeCategoryRef(id=row.id, name=row.name) for row in repo.list_active_income_categories()]

        return await asyncio.to_thread(self._read_sync, reader)

    async def list_records(
        self,
        category: IncomeCategoryRef,
        year: int,
        cost_center_id: UUID | None = None,
    ) -> list[dict[str, object]]:
        def reader(repo: LedgerRepository) -> list[dict[str, object]]:
            return [
                {
                    "date": row.income_date,
                    "amount": row.total_amount,
                    "cost_center_id": row.cost_center_id,
                    "document_number": row.document_number,
                }
                for row in repo.list_income_entries(
                    income_category_id=category.id,
                    year=year,
                    cost_center_id=cost_center_id,
                )
            ]

        return await self._read(reader)


def sql_ledger_providers(session_factory: SessionFactory) -> LedgerProviders:
    return LedgerProviders(
        payroll=SqlPayrollProvider(session_factory),
        factoring=SqlFactoringProvider(session_factory),
        statutory_contributions=SqlStatutoryContributionProvider(session_factory),
        fixed_costs=SqlFixedCostProvider(session_factory),
        category_directory=SqlCategoryDirectory(session_factory),
        category_items=SqlPurchaseOrderItemProvider(session_factory),
    )
