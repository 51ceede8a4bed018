"""
Unit tests for risk classification, counting and filtering.
"""

import pytest

pytestmark = pytest.mark.unit


def _item(item_id: str, risk: str):
    from contract_analyzer.models import Clause

    return Clause(id=item_id, title=item_id, content="text", category="Key Clause", risk=risk)


class TestClassifyRisk:
    """Tests for classify_risk."""

    @pytest.mark.parametrize("title,content", [
        ("Limitation of Liability", "Capped at fees paid."),
        ("Clause 3", "Either party may seek damages."),
        ("Non-Compete", "Two years after the term."),
        ("IP", "All Intellectual Property is assigned."),
    ])
    def test_high(self, title: str, content: str):
        """Verify high-risk terms in title or content give HIGH."""
        from contract_analyzer.risk import classify_risk

        assert classify_risk(title, content) == "high"

    @pytest.mark.parametrize("title,content", [
        ("Invoicing", "Payment is due within 30 days."),
        ("Governing Law", "The laws of Delaware apply."),
        ("Clause 1", "Automatic renewal each year."),
    ])
    def test_medium(self, title: str, content: str):
        """Verify medium-risk terms give MEDIUM."""
        from contract_analyzer.risk import classify_risk

        assert classify_risk(title, content) == "medium"

    def test_low(self):
        """Verify clauses without any listed term are LOW."""
        from contract_analyzer.risk import classify_risk

        assert classify_risk("Scope of Work", "Consulting services.") == "low"

    def test_high_takes_precedence(self):
        """Verify high-risk terms win over medium-risk terms."""
        from contract_analyzer.risk import classify_risk

        assert classify_risk("Payment", "Late payment is a material breach.") == "high"

    def test_case_insensitive(self):
        """Verify matching ignores case."""
        from contract_analyzer.risk import classify_risk

        assert classify_risk("TERMINATION", "") == "high"

    def test_deterministic(self):
        """Verify the same input always gives the same tier."""
        from contract_analyzer.risk import classify_risk

        results = {classify_risk("Fees", "Monthly fees apply.") for _ in range(5)}

        assert results == {"medium"}


class TestCountByRisk:
    """Tests for count_by_risk."""

    def test_counts(self):
        """Verify counts per tier and that they sum to the item count."""
        from contract_analyzer.risk import count_by_risk

        items = [_item("1", "high"), _item("2", "medium"), _item("3", "medium"), _item("4", "none")]
        counts = count_by_risk(items)

        assert counts.high == 1
        assert counts.medium == 2
        assert counts.low == 0
        assert counts.none == 1
        assert counts.total == len(items)

    def test_empty(self):
        """Verify an empty list counts zero everywhere."""
        from contract_analyzer.risk import count_by_risk

        assert count_by_risk([]).total == 0


class TestFilterByRisk:
    """Tests for filter_by_risk."""

    @pytest.fixture
    def items(self):
        return [_item("1", "high"), _item("2", "low"), _item("3", "medium"), _item("4", "high")]

    def test_single_tier(self, items):
        """Verify only the selected tier is kept, in order."""
        from contract_analyzer.risk import filter_by_risk

        assert [i.id for i in filter_by_risk(items, ["high"])] == ["1", "4"]

    def test_several_tiers(self, items):
        """Verify several tiers can be selected at once."""
        from contract_analyzer.models import RiskLevel
        from contract_analyzer.risk import filter_by_risk

        kept = filter_by_risk(items, [RiskLevel.LOW, RiskLevel.MEDIUM])

        assert [i.id for i in kept] == ["2", "3"]

    def test_all_keeps_everything(self, items):
        """Verify "all" or an empty selection keeps every item."""
        from contract_analyzer.risk import filter_by_risk

        assert filter_by_risk(items, ["all"]) == items
        assert filter_by_risk(items, ["all", "high"]) == items
        assert filter_by_risk(items, []) == items

    def test_no_match(self, items):
        """Verify selecting an unused tier returns nothing."""
        from contract_analyzer.risk import filter_by_risk

        assert filter_by_risk(items, ["none"]) == []

    def test_unknown_tier_rejected(self, items):
        """Verify unknown tier names raise ValueError."""
        from contract_analyzer.risk import filter_by_risk

        with pytest.raises(ValueError):
            filter_by_risk(items, ["critical"])
