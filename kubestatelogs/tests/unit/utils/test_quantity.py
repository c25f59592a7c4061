"""Tests for resource quantity parsing, arithmetic and formatting."""

from __future__ import annotations

from decimal import Decimal

import pytest

from kubestatelogs.constants.enums import QuantityFormat
from kubestatelogs.utils.quantity import (
    Quantity,
    QuantityParseError,
    add_quantities,
    aggregate_resource_maps,
    format_quantity,
    format_resource_map,
)


class TestQuantityParse:
    """Tests for Quantity.parse."""

    def test_parse_millicores(self) -> None:
        """Test Quantity.parse reads millicores as decimal SI."""
        quantity = Quantity.parse("100m")
        assert quantity.value == Decimal("0.1")
        assert quantity.format is QuantityFormat.DECIMAL_SI

    def test_parse_binary_suffix(self) -> None:
        """Test Quantity.parse reads binary suffixes."""
        quantity = Quantity.parse("128Mi")
        assert quantity.value == 128 * 1024 * 1024
        assert quantity.format is QuantityFormat.BINARY_SI

    def test_parse_exponent(self) -> None:
        """Test Quantity.parse reads decimal exponents."""
        quantity = Quantity.parse("12e6")
        assert quantity.value == 12_000_000
        assert quantity.format is QuantityFormat.DECIMAL_EXPONENT

    def test_parse_exa_suffix_is_not_exponent(self) -> None:
        """Test a trailing E is the exa suffix, not an exponent."""
        assert Quantity.parse("1E").value == Decimal(10) ** 18

    def test_parse_number(self) -> None:
        """Test Quantity.parse accepts plain numbers."""
        assert Quantity.parse(2).value == 2

    @pytest.mark.parametrize("raw", ["abc", "", "1.2.3", "10 Mi", "5x", None, True])
    def test_parse_invalid(self, raw: object) -> None:
        """Test Quantity.parse rejects malformed input."""
        with pytest.raises(QuantityParseError):
            Quantity.parse(raw)

    def test_parse_error_is_value_error(self) -> None:
        """Test QuantityParseError is a ValueError."""
        with pytest.raises(ValueError):
            Quantity.parse("bogus")


class TestCanonicalFormat:
    """Tests for canonical rendering."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("100m", "100m"),
            ("0.5", "500m"),
            ("1.5", "1500m"),
            ("2", "2"),
            ("1500", "1500"),
            ("2000", "2k"),
            ("0", "0"),
            ("0Mi", "0"),
            ("128Mi", "128Mi"),
            ("2Gi", "2Gi"),
            ("1024Mi", "1Gi"),
            ("0.5Gi", "512Mi"),
            ("1000Mi", "1000Mi"),
            ("1e3", "1e3"),
            ("1k", "1k"),
        ],
    )
    def test_canonical(self, raw: str, expected: str) -> None:
        """Test format_quantity renders the canonical form."""
        assert format_quantity(raw) == expected

    def test_small_binary_value_renders_decimal(self) -> None:
        """Test binary values below one render as decimal SI."""
        assert Quantity(Decimal("0.5"), QuantityFormat.BINARY_SI).canonical() == "500m"

    def test_str_is_canonical(self) -> None:
        """Test str of a Quantity is its canonical form."""
        assert str(Quantity.parse("2000")) == "2k"

    def test_canonical_round_trips(self) -> None:
        """Test canonical forms parse back to the same value."""
        for raw in ("100m", "1536Mi", "2k", "12e6", "3"):
            canonical = format_quantity(raw)
            assert Quantity.parse(canonical).value == Quantity.parse(raw).value


class TestFormatHelpers:
    """Tests for format_quantity and format_resource_map."""

    def test_format_quantity_passes_through_invalid(self) -> None:
        """Test format_quantity returns invalid input unchanged."""
        assert format_quantity("not-a-quantity") == "not-a-quantity"

    def test_format_quantity_none(self) -> None:
        """Test format_quantity renders None as empty string."""
        assert format_quantity(None) == ""

    def test_format_resource_map_keeps_every_key(self) -> None:
        """Test format_resource_map formats every resource."""
        result = format_resource_map({"cpu": "0.5", "memory": "1Gi", "example.com/gpu": "1"})
        assert result == {"cpu": "500m", "memory": "1Gi", "example.com/gpu": "1"}

    def test_format_resource_map_not_a_mapping(self) -> None:
        """Test format_resource_map returns empty dict for non-mappings."""
        assert format_resource_map(None) == {}
        assert format_resource_map(["cpu"]) == {}


class TestAddition:
    """Tests for quantity arithmetic."""

    def test_add_millicores(self) -> None:
        """Test adding millicore quantities."""
        assert add_quantities("100m", "100m") == "200m"

    def test_add_binary(self) -> None:
        """Test adding binary quantities."""
        assert add_quantities("1Gi", "512Mi") == "1536Mi"

    def test_add_left_format_wins(self) -> None:
        """Test a sum keeps the format of the left operand."""
        total = Quantity.parse("1k") + Quantity.parse("1Ki")
        assert total.format is QuantityFormat.DECIMAL_SI
        assert total.value == 2024

    def test_add_invalid_raises(self) -> None:
        """Test add_quantities raises for unparseable input."""
        with pytest.raises(QuantityParseError):
            add_quantities("100m + 1", "100m")

    def test_add_non_quantity_not_implemented(self) -> None:
        """Test adding a non-Quantity raises TypeError."""
        with pytest.raises(TypeError):
            Quantity.parse("1") + 1


class TestAggregateResourceMaps:
    """Tests for per-resource aggregation across containers."""

    def test_sums_per_resource(self) -> None:
        """Test aggregate_resource_maps sums each resource."""
        totals, fallbacks = aggregate_resource_maps(
            [{"cpu": "100m", "memory": "128Mi"}, {"cpu": "100m"}, {"memory": "128Mi"}]
        )
        assert totals == {"cpu": "200m", "memory": "256Mi"}
        assert fallbacks == 0

    def test_single_value_is_canonicalized(self) -> None:
        """Test a single value is rendered canonically."""
        totals, _ = aggregate_resource_maps([{"cpu": "0.25"}])
        assert totals == {"cpu": "250m"}

    def test_skips_missing_maps(self) -> None:
        """Test missing or empty maps are skipped."""
        totals, fallbacks = aggregate_resource_maps([None, {"cpu": "1"}, {}])
        assert totals == {"cpu": "1"}
        assert fallbacks == 0

    def test_unparseable_total_concatenates(self) -> None:
        """Test an unparseable first value concatenates the rest."""
        totals, fallbacks = aggregate_resource_maps(
            [{"cpu": "lots"}, {"cpu": "100m"}, {"cpu": "100m"}]
        )
        assert totals == {"cpu": "lots + 100m + 100m"}
        assert fallbacks == 2

    def test_unparseable_value_concatenates(self) -> None:
        """Test an unparseable later value is concatenated."""
        totals, fallbacks = aggregate_resource_maps([{"cpu": "100m"}, {"cpu": "???"}])
        assert totals == {"cpu": "100m + ???"}
        assert fallbacks == 1

    def test_empty(self) -> None:
        """Test aggregating no maps yields nothing."""
        assert aggregate_resource_maps([]) == ({}, 0)
