"""Shared data model definitions for the FlowCast analytics engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Literal, Mapping, NamedTuple, Optional, TypedDict

from core.exceptions import MalformedTransactionError

TransactionType = Literal["income", "expense"]
ConfidenceTier = Literal["high", "medium", "low"]
TrendLabel = Literal["improving", "stable", "declining"]
Severity = Literal["high", "medium", "low"]
VelocityTrend = Literal["increasing", "stable", "decreasing"]


def parse_calendar_date(value: Any) -> date:
    """Return a calendar date from a ``date``, ``datetime`` or ISO-8601 string."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError as exc:
            raise MalformedTransactionError(f"Unrecognised date: {value!r}") from exc
    raise MalformedTransactionError(f"Missing or invalid date: {value!r}")


@dataclass(frozen=True)
class Transaction:
    """A single income (positive) or expense (negative) event."""

    amount: float
    date: date
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    description: Optional[str] = None
    merchant_name: Optional[str] = None
    id: Optional[str] = None

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "Transaction":
        """Build a transaction from a raw record using camelCase or snake_case keys."""

        if "date" not in record:
            raise MalformedTransactionError("Transaction record has no date")
        raw_amount = record.get("amount")
        if isinstance(raw_amount, bool) or raw_amount is None:
            raise MalformedTransactionError(f"Missing or invalid amount: {raw_amount!r}")
        try:
            amount = float(raw_amount)
        except (TypeError, ValueError) as exc:
            raise MalformedTransactionError(f"Non-numeric amount: {raw_amount!r}") from exc

        txn_type = record.get("type")
        if txn_type not in (None, "income", "expense"):
            raise MalformedTransactionError(f"Unknown transaction type: {txn_type!r}")

        merchant = record.get("merchant_name", record.get("merchantName"))
        raw_id = record.get("id")
        return cls(
            amount=amount,
            date=parse_calendar_date(record["date"]),
            type=txn_type,
            category=record.get("category") or None,
            description=record.get("description"),
            merchant_name=merchant,
            id=str(raw_id) if raw_id is not None else None,
        )


@dataclass(frozen=True)
class DailyFlow:
    date: date
    income: float
    expenses: float
    net_flow: float


class RecurrenceKey(NamedTuple):
    """Grouping key for repeated expenses."""

    description: str
    category: str


@dataclass(frozen=True)
class RecurringExpenseRule:
    description: str
    average_amount: int
    frequency_days: int
    next_due_date: date
    last_date: date
    occurrences: int
    category: Optional[str] = None


@dataclass(frozen=True)
class IncomePrediction:
    next_income_date: date
    confidence: float
    average_amount: float
    average_interval_days: Optional[float]
    sample_size: int


@dataclass(frozen=True)
class SeasonalityResult:
    has_pattern: bool
    pattern: Literal["weekly", "none"]
    weekday_averages: Mapping[int, float] = field(default_factory=dict)
    variance: float = 0.0


@dataclass(frozen=True)
class ProjectionDay:
    day: int
    date: date
    balance: int
    income: int
    expenses: int


@dataclass(frozen=True)
class UpcomingIncome:
    amount: int
    date: date
    confidence: float


@dataclass(frozen=True)
class CashFlowProjection:
    projected_balance: int
    days_until_low: Optional[int]
    projection_by_day: list[ProjectionDay]
    average_income: int
    average_expenses: int
    net_daily_flow: int
    confidence: ConfidenceTier
    trend: TrendLabel
    recurring_expenses: list[RecurringExpenseRule]
    upcoming_income: Optional[UpcomingIncome]
    seasonality: SeasonalityResult


@dataclass(frozen=True)
class CategoryRule:
    category: str
    keywords: tuple[str, ...]
    weight: float = 1.0

    def matches(self, search_text: str) -> list[str]:
        """Return the keywords contained in ``search_text``."""

        return [keyword for keyword in self.keywords if keyword.lower() in search_text]


@dataclass(frozen=True)
class CategoryRuleSet:
    """Ordered, immutable collection of category rules."""

    rules: tuple[CategoryRule, ...]

    def __iter__(self):
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def find(self, category: str) -> Optional[CategoryRule]:
        for rule in self.rules:
            if rule.category == category:
                return rule
        return None

    def prepend(self, rule: CategoryRule) -> "CategoryRuleSet":
        return CategoryRuleSet(rules=(rule, *self.rules))


@dataclass(frozen=True)
class AlternativeCategory:
    category: str
    confidence: float


@dataclass(frozen=True)
class CategorizationResult:
    amount: float
    date: date
    category: str
    type: TransactionType
    confidence: float
    description: Optional[str] = None
    merchant_name: Optional[str] = None
    id: Optional[str] = None
    alternative_categories: Optional[list[AlternativeCategory]] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class SpendingAnomaly:
    transaction: Transaction | CategorizationResult
    reason: str
    severity: Severity
    category_average: float


class CategoryShare(TypedDict):
    category: str
    amount: float
    percentage: int


@dataclass(frozen=True)
class SpendingVelocity:
    velocity: int
    previous_velocity: int
    trend: VelocityTrend
    risk: Severity


@dataclass(frozen=True)
class CashFlowReport:
    reference_date: date
    current_balance: float
    transactions: list[CategorizationResult]
    projection: CashFlowProjection
    category_breakdown: list[CategoryShare]
    top_category: Optional[tuple[str, float]]
    anomalies: list[SpendingAnomaly]
    velocity: SpendingVelocity


__all__ = [
    "TransactionType",
    "ConfidenceTier",
    "TrendLabel",
    "Severity",
    "VelocityTrend",
    "parse_calendar_date",
    "Transaction",
    "DailyFlow",
    "RecurrenceKey",
    "RecurringExpenseRule",
    "IncomePrediction",
    "SeasonalityResult",
    "ProjectionDay",
    "UpcomingIncome",
    "CashFlowProjection",
    "CategoryRule",
    "CategoryRuleSet",
    "AlternativeCategory",
    "CategorizationResult",
    "SpendingAnomaly",
    "CategoryShare",
    "SpendingVelocity",
    "CashFlowReport",
]
