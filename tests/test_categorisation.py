"""Tests for the keyword categoriser."""

from __future__ import annotations

from datetime import date

import pytest

from analytics.categorisation import (
    DEFAULT_CATEGORY_RULES,
    FALLBACK_CATEGORY,
    INCOME_CATEGORY,
    Categorizer,
    build_search_text,
)
from core.models import CategoryRule, CategoryRuleSet, Transaction

TODAY = date(2025, 1, 14)


def _txn(description: str, amount: float = -100, merchant: str | None = None) -> Transaction:
    return Transaction(amount=amount, date=TODAY, description=description, merchant_name=merchant)


@pytest.fixture()
def categorizer(settings) -> Categorizer:
    return Categorizer(settings=settings)


def test_swiggy_order_is_food(categorizer):
    result = categorizer.categorize(_txn("Swiggy order", amount=-450))

    assert result.category == "Food & Dining"
    assert result.type == "expense"
    assert 0 < result.confidence <= 1
    assert result.confidence == pytest.approx(0.95)
    assert "swiggy" in result.reason
    assert result.amount == -450
    assert result.description == "Swiggy order"


def test_search_text_includes_merchant_name():
    assert build_search_text(_txn("UPI/123", merchant="Zomato")) == "upi/123 zomato"
    assert build_search_text(Transaction(amount=-1, date=TODAY)) == " "


def test_merchant_name_drives_match(categorizer):
    result = categorizer.categorize(_txn("UPI/98231", merchant="Netflix"))

    assert result.category == "Entertainment"


@pytest.mark.parametrize(
    ("description", "amount", "confidence"),
    [
        ("Coffee with client", 500, 0.7),
        ("Transfer", 5000, 0.9),
        ("Salary for March", 200, 0.9),
        ("Swiggy refund", 300, 0.9),
    ],
)
def test_positive_amounts_are_always_income(categorizer, description, amount, confidence):
    result = categorizer.categorize(_txn(description, amount=amount))

    assert result.category == INCOME_CATEGORY
    assert result.type == "income"
    assert result.confidence == pytest.approx(confidence)
    assert result.alternative_categories is None


def test_income_reason_explains_match(categorizer):
    assert categorizer.categorize(_txn("Salary", amount=50)).reason == "Matched keywords: salary"
    assert categorizer.categorize(_txn("xyz", amount=50)).reason == "Amount indicates income"


def test_unmatched_expense_falls_back(categorizer):
    result = categorizer.categorize(_txn("qwxz 7781"))

    assert result.category == FALLBACK_CATEGORY
    assert result.confidence == pytest.approx(0.3)
    assert result.reason == "No clear category match found"
    assert result.alternative_categories is None


def test_scores_rank_alternatives(settings):
    rules = CategoryRuleSet(
        rules=(
            CategoryRule("A", ("alpha", "beta")),
            CategoryRule("B", ("alpha",)),
            CategoryRule("C", ("gamma",)),
            CategoryRule("D", ("alpha",)),
            CategoryRule("E", ("alpha",)),
            CategoryRule("F", ("omega",)),
        )
    )
    result = Categorizer(rules, settings).categorize(_txn("alpha beta gamma"))

    assert result.category == "A"
    assert result.confidence == pytest.approx(2 / 6)
    alternatives = result.alternative_categories
    assert [alt.category for alt in alternatives] == ["B", "C", "D"]
    assert all(alt.confidence == pytest.approx(1 / 6) for alt in alternatives)
    assert result.category not in {alt.category for alt in alternatives}
    assert result.reason == "Matched keywords: alpha, beta"


def test_rule_weight_scales_score(settings):
    rules = CategoryRuleSet(
        rules=(
            CategoryRule("Plain", ("alpha", "beta")),
            CategoryRule("Heavy", ("gamma",), weight=3.0),
        )
    )
    result = Categorizer(rules, settings).categorize(_txn("alpha beta gamma"))

    assert result.category == "Heavy"
    assert result.confidence == pytest.approx(0.6)
    assert result.alternative_categories[0].confidence == pytest.approx(0.4)


def test_zero_weight_rule_falls_back(settings):
    rules = CategoryRuleSet(rules=(CategoryRule("Muted", ("coffee",), weight=0.0),))

    result = Categorizer(rules, settings).categorize(_txn("coffee", amount=-50))

    assert result.category == FALLBACK_CATEGORY
    assert result.confidence == pytest.approx(0.3)


def test_zero_weight_rule_is_not_an_alternative(settings):
    rules = CategoryRuleSet(
        rules=(
            CategoryRule("Muted", ("coffee",), weight=0.0),
            CategoryRule("Cafe", ("coffee",)),
        )
    )

    result = Categorizer(rules, settings).categorize(_txn("coffee", amount=-50))

    assert result.category == "Cafe"
    assert result.confidence == pytest.approx(0.95)
    assert result.alternative_categories is None


def test_alternative_confidence_is_capped(settings):
    rules = CategoryRuleSet(rules=(CategoryRule("A", ("alpha",)), CategoryRule("B", ("alpha",))))

    result = Categorizer(rules, settings).categorize(_txn("alpha"))

    assert result.category == "A"
    assert result.confidence == pytest.approx(0.5)
    assert result.alternative_categories[0].confidence == pytest.approx(0.5)


def test_default_rules_are_used_when_none_given(categorizer):
    assert categorizer.rules is DEFAULT_CATEGORY_RULES
    assert DEFAULT_CATEGORY_RULES.find(INCOME_CATEGORY).weight == pytest.approx(1.5)
    assert len(DEFAULT_CATEGORY_RULES) == 11


def test_categorize_many_preserves_order(categorizer):
    transactions = [_txn("Uber trip"), _txn("Salary", amount=40000), _txn("Swiggy")]

    results = categorizer.categorize_many(transactions)

    assert [result.category for result in results] == ["Transport", "Income", "Food & Dining"]


def test_learn_from_correction_builds_rule(categorizer):
    txn = _txn("Monthly yoga class", merchant="CultFit")

    rule = categorizer.learn_from_correction(txn, "Fitness Club")

    assert rule.category == "Fitness Club"
    assert rule.keywords == ("cultfit", "monthly", "yoga", "class")
    assert rule.weight == pytest.approx(1.2)


def test_with_rule_returns_new_categorizer(categorizer):
    txn = _txn("Monthly yoga class", merchant="CultFit")
    learned = categorizer.with_rule(categorizer.learn_from_correction(txn, "Fitness Club"))

    result = learned.categorize(txn)

    assert result.category == "Fitness Club"
    assert "Healthcare" in {alt.category for alt in result.alternative_categories}
    assert categorizer.categorize(txn).category == "Healthcare"
    assert len(learned.rules) == len(categorizer.rules) + 1


@pytest.mark.parametrize(
    "description",
    ["Swiggy order", "Amazon shopping", "Airtel broadband bill", "qqq", "Uber to metro station"],
)
def test_confidence_bounds(categorizer, description):
    result = categorizer.categorize(_txn(description))

    assert 0 <= result.confidence <= 1
    alternatives = result.alternative_categories or []
    assert len(alternatives) <= 3
    assert result.category not in {alt.category for alt in alternatives}
