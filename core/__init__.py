"""Core domain package for the FlowCast analytics engine."""

from .exceptions import FlowcastError, InvalidParameterError, MalformedTransactionError
from .models import (
    CashFlowProjection,
    CashFlowReport,
    CategorizationResult,
    CategoryRule,
    CategoryRuleSet,
    DailyFlow,
    RecurringExpenseRule,
    Transaction,
)

__all__ = [
    "CashFlowProjection",
    "CashFlowReport",
    "CategorizationResult",
    "CategoryRule",
    "CategoryRuleSet",
    "DailyFlow",
    "RecurringExpenseRule",
    "Transaction",
    "FlowcastError",
    "InvalidParameterError",
    "MalformedTransactionError",
]
