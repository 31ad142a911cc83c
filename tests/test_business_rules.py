"""
Tests for BusinessRuleResult.
"""

from skima import BusinessRuleResult


def test_success_is_valid_and_empty():
    result = BusinessRuleResult.success()
    assert result.is_valid
    assert result.violations == {}


def test_failure_is_invalid_without_violations():
    result = BusinessRuleResult.failure()
    assert not result.is_valid
    assert result.violations == {}


def test_add_violation_is_chainable_and_invalidates():
    result = BusinessRuleResult.success()

    returned = result.add_violation("start_date", "must not be after end_date").add_violation("start_date", "again")

    assert returned is result
    assert not result.is_valid
    assert result.violations_for("start_date") == ["must not be after end_date", "again"]
    assert result.violations_for("end_date") == []


def test_violations_returns_copy():
    result = BusinessRuleResult.success().add_violation("a", "x")
    result.violations["a"].append("y")
    result.violations_for("a").append("z")
    assert result.violations == {"a": ["x"]}


def test_merge_two_successes():
    merged = BusinessRuleResult.success().merge(BusinessRuleResult.success())
    assert merged.is_valid
    assert merged.violations == {}


def test_merge_valid_empty_is_noop():
    result = BusinessRuleResult.success().add_violation("a", "x")
    before = result.violations

    result.merge(BusinessRuleResult.success())

    assert result.violations == before
    assert not result.is_valid


def test_merge_failure_into_success_propagates():
    result = BusinessRuleResult.success().merge(BusinessRuleResult.failure())
    assert not result.is_valid


def test_merge_unions_without_dropping_or_deduplicating():
    left = BusinessRuleResult.success().add_violation("a", "x").add_violation("b", "y")
    right = BusinessRuleResult.success().add_violation("a", "x").add_violation("c", "z")

    left.merge(right)

    assert not left.is_valid
    assert left.violations == {"a": ["x", "x"], "b": ["y"], "c": ["z"]}
    assert right.violations == {"a": ["x"], "c": ["z"]}


def test_merge_is_associative():
    def build():
        return (
            BusinessRuleResult.success().add_violation("a", "1"),
            BusinessRuleResult.success().add_violation("a", "2").add_violation("b", "3"),
            BusinessRuleResult.failure(),
        )

    a, b, c = build()
    left_first = a.merge(b).merge(c)
    a, b, c = build()
    right_first = a.merge(b.merge(c))

    assert left_first == right_first


def test_to_errors():
    result = BusinessRuleResult.success().add_violation("order_items.3.start_date", "must not be after end_date")

    errors = result.to_errors()

    assert errors.to_dict() == {
        "order_items.3.start_date": [{"message": "must not be after end_date", "context": {}}],
    }
