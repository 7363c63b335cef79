"""ORM model package."""

from costledger.models.entities import (
    AccountCategory,
    AccountCategoryType,
    CostCenter,
    FactoringOperation,
    FixedCost,
    IncomeCategory,
    IncomeEntry,
    PayrollEntry,
    PurchaseOrderItem,
    StatutoryContribution,
)

__all__ = [
    "AccountCategory",
    "AccountCategoryType",
    "CostCenter",
    "FactoringOperation",
    "FixedCost",
    "IncomeCategory",
    "IncomeEntry",
    "PayrollEntry",
    "PurchaseOrderItem",
    "StatutoryContribution",
]
