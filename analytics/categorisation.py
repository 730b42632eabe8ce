"""Keyword-weighted transaction categorisation."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from config.settings import AnalyticsSettings, get_settings
from core.models import (
    AlternativeCategory,
    CategorizationResult,
    CategoryRule,
    CategoryRuleSet,
    Transaction,
)

__all__ = [
    "INCOME_CATEGORY",
    "FALLBACK_CATEGORY",
    "DEFAULT_CATEGORY_RULES",
    "build_search_text",
    "Categorizer",
]

logger = logging.getLogger(__name__)

INCOME_CATEGORY = "Income"
FALLBACK_CATEGORY = "Others"

_FALLBACK_CONFIDENCE = 0.3
_INCOME_CONFIDENCE_STRONG = 0.9
_INCOME_CONFIDENCE_WEAK = 0.7
_MAX_CONFIDENCE = 0.95
_MAX_ALTERNATIVE_CONFIDENCE = 0.9
_MAX_ALTERNATIVES = 3
_LEARNED_RULE_WEIGHT = 1.2

DEFAULT_CATEGORY_RULES = CategoryRuleSet(
    rules=(
        CategoryRule(
            "Food & Dining",
            (
                "swiggy", "zomato", "restaurant", "cafe", "coffee", "starbucks", "food", "dining",
                "mcdonald", "pizza", "burger", "domino", "kfc", "subway", "dunkin", "baskin",
                "barbeque", "biryani", "haldiram", "breakfast", "lunch", "dinner", "foodpanda",
                "ubereats", "grubhub", "deliveroo", "takeaway", "dine", "bistro", "eatery",
            ),
        ),
        CategoryRule(
            "Transport",
            (
                "uber", "ola", "rapido", "taxi", "metro", "bus", "petrol", "fuel", "parking",
                "toll", "auto", "rickshaw", "lyft", "cab", "transport", "commute", "travel",
                "railway", "train", "flight", "airline", "indigo", "spicejet", "goair",
                "vistara", "airasia", "booking", "makemytrip", "yatra", "cleartrip",
            ),
        ),
        CategoryRule(
            "Groceries",
            (
                "dmart", "bigbasket", "grocery", "supermarket", "reliance fresh", "more",
                "fresh", "vegetables", "fruits", "walmart", "target", "whole foods",
                "trader joe", "costco", "safeway", "kroger", "blinkit", "zepto", "dunzo",
                "grofers", "jiomart", "amazon fresh", "market", "provisions",
            ),
        ),
        CategoryRule(
            "Entertainment",
            (
                "netflix", "prime video", "hotstar", "disney", "spotify", "youtube",
                "movie", "cinema", "theatre", "game", "subscription", "amazon prime",
                "hulu", "hbo", "apple tv", "paramount", "peacock", "discovery",
                "xbox", "playstation", "nintendo", "steam", "epic games", "concert",
                "show", "event", "ticket", "bookmyshow", "paytm insider",
            ),
        ),
        CategoryRule(
            "Shopping",
            (
                "amazon", "flipkart", "myntra", "ajio", "shopping", "mall", "store",
                "clothes", "fashion", "ebay", "etsy", "target", "walmart", "nike",
                "adidas", "h&m", "zara", "uniqlo", "levi", "puma", "reebok",
                "meesho", "snapdeal", "paytm mall", "shopclues", "tata cliq",
            ),
        ),
        CategoryRule(
            "Bills & Utilities",
            (
                "electricity", "water", "gas", "internet", "broadband", "mobile",
                "recharge", "bill", "utility", "rent", "jio", "airtel", "vodafone",
                "bsnl", "tata", "reliance", "payment", "insurance", "premium",
                "phone bill", "wifi", "cable", "dish", "dth", "tatasky", "paytm bill",
            ),
        ),
        CategoryRule(
            "Healthcare",
            (
                "pharmacy", "hospital", "clinic", "doctor", "medical", "health",
                "medicine", "apollo", "practo", "max", "fortis", "medanta",
                "diagnostic", "lab", "test", "prescription", "dentist", "therapy",
                "wellness", "fitness", "gym", "yoga", "1mg", "pharmeasy", "netmeds",
            ),
        ),
        CategoryRule(
            "Education",
            (
                "school", "college", "university", "course", "tuition", "coaching",
                "udemy", "coursera", "skillshare", "linkedin learning", "masterclass",
                "byju", "unacademy", "vedantu", "toppr", "book", "library", "education",
                "training", "workshop", "seminar", "textbook", "study material",
            ),
        ),
        CategoryRule(
            "Personal Care",
            (
                "salon", "spa", "haircut", "beauty", "cosmetics", "skincare",
                "nykaa", "purplle", "lakme", "loreal", "maybelline", "barber",
                "massage", "facial", "manicure", "pedicure", "grooming",
            ),
        ),
        CategoryRule(
            "Investments & Savings",
            (
                "mutual fund", "sip", "stock", "equity", "investment", "zerodha",
                "groww", "upstox", "angelone", "edelweiss", "hdfc securities",
                "icici direct", "gold", "bond", "fd", "fixed deposit", "ppf",
                "nps", "insurance premium", "lic",
            ),
        ),
        CategoryRule(
            INCOME_CATEGORY,
            (
                "salary", "payment received", "freelance", "project", "income",
                "credit", "deposit", "transfer from", "refund", "cashback",
                "bonus", "commission", "wages", "earnings", "revenue", "payout",
            ),
            weight=1.5,
        ),
    )
)


def build_search_text(transaction: Transaction) -> str:
    description = (transaction.description or "").lower()
    merchant = (transaction.merchant_name or "").lower()
    return f"{description} {merchant}"


def _matched_reason(keywords: list[str]) -> str:
    return f"Matched keywords: {', '.join(keywords[:2])}"


class Categorizer:
    """Assign spending categories by scoring keyword rule matches.

    The rule set is fixed at construction time; :meth:`with_rule` returns a
    new categoriser rather than mutating this one, so instances can be shared
    across threads.
    """

    def __init__(
        self,
        rules: Optional[CategoryRuleSet] = None,
        settings: Optional[AnalyticsSettings] = None,
    ) -> None:
        self._rules = rules if rules is not None else DEFAULT_CATEGORY_RULES
        self._settings = settings or get_settings()

    @property
    def rules(self) -> CategoryRuleSet:
        return self._rules

    def with_rule(self, rule: CategoryRule) -> "Categorizer":
        """Return a categoriser that checks ``rule`` ahead of the existing rules."""

        return Categorizer(self._rules.prepend(rule), self._settings)

    def categorize(self, transaction: Transaction) -> CategorizationResult:
        search_text = build_search_text(transaction)
        if transaction.amount > 0:
            return self._categorize_income(transaction, search_text)

        candidates: list[tuple[CategoryRule, float, list[str]]] = []
        for rule in self._rules:
            matches = rule.matches(search_text)
            score = len(matches) * rule.weight
            if score > 0:
                candidates.append((rule, score, matches))

        if not candidates:
            return self._result(
                transaction,
                category=FALLBACK_CATEGORY,
                confidence=_FALLBACK_CONFIDENCE,
                reason="No clear category match found",
            )

        candidates.sort(key=lambda candidate: candidate[1], reverse=True)
        total_score = sum(score for _, score, _ in candidates)
        winner, winner_score, winner_matches = candidates[0]

        alternatives = [
            AlternativeCategory(
                category=rule.category,
                confidence=min(_MAX_ALTERNATIVE_CONFIDENCE, score / total_score),
            )
            for rule, score, _ in candidates[1 : 1 + _MAX_ALTERNATIVES]
            if rule.category != winner.category
        ]

        return self._result(
            transaction,
            category=winner.category,
            confidence=min(_MAX_CONFIDENCE, winner_score / total_score),
            reason=_matched_reason(winner_matches),
            alternatives=alternatives or None,
        )

    def categorize_many(self, transactions: Iterable[Transaction]) -> list[CategorizationResult]:
        results = [self.categorize(txn) for txn in transactions]
        logger.debug("Categorised transactions", extra={"count": len(results)})
        return results

    def learn_from_correction(self, transaction: Transaction, correct_category: str) -> CategoryRule:
        """Suggest a rule that would have categorised ``transaction`` as ``correct_category``.

        Keywords are the merchant name plus description words longer than
        three characters. Feed the rule to :meth:`with_rule` to apply it.
        """

        merchant = (transaction.merchant_name or "").lower().strip()
        words = [word for word in (transaction.description or "").lower().split() if len(word) > 3]

        keywords: list[str] = []
        for keyword in (merchant, *words):
            if keyword and keyword not in keywords:
                keywords.append(keyword)

        return CategoryRule(correct_category, tuple(keywords), weight=_LEARNED_RULE_WEIGHT)

    def _categorize_income(self, transaction: Transaction, search_text: str) -> CategorizationResult:
        income_rule = self._rules.find(INCOME_CATEGORY)
        matches = income_rule.matches(search_text) if income_rule is not None else []

        if transaction.amount > self._settings.income_high_amount or matches:
            confidence = _INCOME_CONFIDENCE_STRONG
        else:
            confidence = _INCOME_CONFIDENCE_WEAK

        reason = _matched_reason(matches) if matches else "Amount indicates income"
        return self._result(transaction, category=INCOME_CATEGORY, confidence=confidence, reason=reason)

    @staticmethod
    def _result(
        transaction: Transaction,
        *,
        category: str,
        confidence: float,
        reason: str,
        alternatives: Optional[list[AlternativeCategory]] = None,
    ) -> CategorizationResult:
        return CategorizationResult(
            amount=transaction.amount,
            date=transaction.date,
            category=category,
            type="income" if transaction.amount > 0 else "expense",
            confidence=confidence,
            description=transaction.description,
            merchant_name=transaction.merchant_name,
            id=transaction.id,
            alternative_categories=alternatives,
            reason=reason,
        )
