"""Resource quantity utilities.

Parses Kubernetes resource quantity strings, adds them with exact decimal
arithmetic and renders them in the canonical form used by the API server:
- DecimalSI: "100m" + "100m" -> "200m", "1500" stays "1500", "2000" -> "2k"
- BinarySI: "1Gi" + "512Mi" -> "1536Mi" (values below 1Ki render as DecimalSI)
- DecimalExponent: "1e3" -> "1e3", "12e6" -> "12e6"

Values are parsed with :func:`kubernetes.utils.parse_quantity`, so every string
produced here round-trips through the same parser.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_UP, Decimal, InvalidOperation, localcontext
from typing import Any

from kubernetes.utils import parse_quantity

from kubestatelogs.constants.enums import QuantityFormat
from kubestatelogs.constants.limits import QUANTITY_MIN_EXPONENT
from kubestatelogs.constants.values import AGGREGATION_FALLBACK_SEPARATOR

logger = logging.getLogger(__name__)

# Exponent suffix is tried before the single-letter SI suffixes so "1E3" is
# read as 1000 while "1E" stays one exa.
_QUANTITY_PATTERN = re.compile(
    r"^(?P<number>[+-]?(?:\d+\.?\d*|\.\d+))"
    r"(?P<suffix>[eE][+-]?\d+|Ki|Mi|Gi|Ti|Pi|Ei|[numkMGTPE])?$"
)

_DECIMAL_SUFFIXES: dict[int, str] = {
    -9: "n",
    -6: "u",
    -3: "m",
    0: "",
    3: "k",
    6: "M",
    9: "G",
    12: "T",
    15: "P",
    18: "E",
}
_BINARY_SUFFIXES: tuple[str, ...] = ("", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei")
_BINARY_BASE = 1024

# Working precision for sums; well above the 19 integer + 9 fractional digits
# a quantity can carry.
_PRECISION = 64


class QuantityParseError(ValueError):
    """Raised when a value is not a valid Kubernetes resource quantity."""


def _format_for_suffix(suffix: str | None) -> QuantityFormat:
    if suffix and suffix.endswith("i"):
        return QuantityFormat.BINARY_SI
    if suffix and len(suffix) > 1 and suffix[0] in "eE":
        return QuantityFormat.DECIMAL_EXPONENT
    return QuantityFormat.DECIMAL_SI


def _round_to_nano(value: Decimal) -> Decimal:
    exponent = value.as_tuple().exponent
    if not isinstance(exponent, int) or exponent >= QUANTITY_MIN_EXPONENT:
        return value
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return value.quantize(Decimal(1).scaleb(QUANTITY_MIN_EXPONENT), rounding=ROUND_UP)


def _decimal_mantissa(value: Decimal) -> tuple[int, int]:
    """Split ``value`` into an integer mantissa and a base-10 exponent divisible by 3."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        sign, digits, exponent = value.normalize().as_tuple()
    mantissa = int("".join(str(digit) for digit in digits))
    if sign:
        mantissa = -mantissa
    shift = int(exponent) % 3
    return mantissa * 10**shift, int(exponent) - shift


def _format_binary(amount: int) -> str:
    exponent = 0
    while exponent < len(_BINARY_SUFFIXES) - 1 and amount % _BINARY_BASE == 0:
        amount //= _BINARY_BASE
        exponent += 1
    return f"{amount}{_BINARY_SUFFIXES[exponent]}"


@dataclass(frozen=True)
class Quantity:
    """An exact resource quantity together with the format it was written in."""

    value: Decimal
    format: QuantityFormat = QuantityFormat.DECIMAL_SI

    @classmethod
    def parse(cls, raw: Any) -> Quantity:
        """Parse a quantity string such as "100m", "1.5Gi" or "12e6".

        Raises:
            QuantityParseError: if ``raw`` is not a valid quantity.
        """
        if raw is None or isinstance(raw, bool):
            raise QuantityParseError(f"invalid quantity: {raw!r}")
        text = str(raw).strip()
        match = _QUANTITY_PATTERN.match(text)
        if match is None:
            raise QuantityParseError(f"invalid quantity: {raw!r}")
        try:
            value = parse_quantity(text)
        except (ValueError, InvalidOperation) as exc:
            raise QuantityParseError(f"invalid quantity: {raw!r}") from exc
        return cls(value=_round_to_nano(value), format=_format_for_suffix(match.group("suffix")))

    def __add__(self, other: object) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        with localcontext() as ctx:
            ctx.prec = _PRECISION
            total = self.value + other.value
        # The left operand's format wins, as it does for Quantity.Add in the API machinery.
        return Quantity(value=total, format=self.format)

    def is_zero(self) -> bool:
        return self.value == 0

    def canonical(self) -> str:
        """Render the quantity in canonical form."""
        if self.value == 0:
            return "0"

        if self.format is QuantityFormat.BINARY_SI:
            is_small = -_BINARY_BASE < self.value < _BINARY_BASE
            if not is_small and self.value == self.value.to_integral_value():
                return _format_binary(int(self.value))

        mantissa, exponent = _decimal_mantissa(self.value)
        if self.format is QuantityFormat.DECIMAL_EXPONENT:
            suffix = f"e{exponent}" if exponent else ""
        else:
            suffix = _DECIMAL_SUFFIXES.get(exponent, f"e{exponent}")
        return f"{mantissa}{suffix}"

    def __str__(self) -> str:
        return self.canonical()


def format_quantity(raw: Any) -> str:
    """Return the canonical form of ``raw``.

    Values that are not quantities are passed through as strings so that no
    data is lost; ``None`` becomes an empty string.
    """
    if raw is None:
        return ""
    try:
        return Quantity.parse(raw).canonical()
    except QuantityParseError:
        return str(raw)


def format_resource_map(resources: Any) -> dict[str, str]:
    """Convert a resource list mapping (e.g. ``{"cpu": "0.5"}``) to canonical strings.

    Every key is kept; a missing or malformed mapping yields an empty dict.
    """
    if not isinstance(resources, Mapping):
        return {}
    return {str(name): format_quantity(value) for name, value in resources.items()}


def add_quantities(total: Any, value: Any) -> str:
    """Add two quantities and return the canonical sum.

    Raises:
        QuantityParseError: if either operand is not a valid quantity.
    """
    return (Quantity.parse(total) + Quantity.parse(value)).canonical()


def aggregate_resource_maps(
    resource_maps: Iterable[Any],
) -> tuple[dict[str, str], int]:
    """Sum quantities per resource name across ``resource_maps`` in order.

    When a running total (or the value being added) cannot be parsed, the
    total becomes ``"<old> + <new>"`` instead of being dropped.

    Args:
        resource_maps: Resource list mappings, e.g. the ``requests`` of each container.

    Returns:
        Tuple of (totals by resource name, number of concatenation fallbacks).
    """
    totals: dict[str, str] = {}
    fallbacks = 0
    for resources in resource_maps:
        if not isinstance(resources, Mapping):
            continue
        for name, value in resources.items():
            key = str(name)
            if key not in totals:
                totals[key] = format_quantity(value)
                continue
            try:
                totals[key] = add_quantities(totals[key], value)
            except QuantityParseError:
                logger.debug(
                    "Cannot add quantity %r to running total %r for %s; concatenating",
                    value,
                    totals[key],
                    key,
                )
                totals[key] = f"{totals[key]}{AGGREGATION_FALLBACK_SEPARATOR}{format_quantity(value)}"
                fallbacks += 1
    return totals, fallbacks


__all__ = [
    "Quantity",
    "QuantityParseError",
    "add_quantities",
    "aggregate_resource_maps",
    "format_quantity",
    "format_resource_map",
]
