"""Parsing and canonicalization of Kubernetes quantity strings.

Quota sizes are sent to the API server in the same canonical form the server
itself stores, so that re-running the tool with "50G" or "50000M" produces an
identical patch and leaves the object unchanged.
"""

import decimal
import re
from dataclasses import dataclass
from decimal import Decimal

from kubernetes.utils.quantity import parse_quantity as _parse_decimal

from models import InvalidQuantityError

# <sign><digits>[.<digits>][<suffix>], where suffix is binary SI, decimal SI
# or a decimal exponent
_QUANTITY_RE = re.compile(
    r"^(?P<sign>[+-]?)(?P<number>\d+(\.\d*)?|\.\d+)"
    r"(?P<suffix>Ki|Mi|Gi|Ti|Pi|Ei|n|u|m|k|M|G|T|P|E|[eE][+-]?\d+)?$"
)

_BINARY_SUFFIXES = ["", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei"]
_DECIMAL_SUFFIXES = {
    18: "E",
    15: "P",
    12: "T",
    9: "G",
    6: "M",
    3: "k",
    0: "",
    -3: "m",
    -6: "u",
    -9: "n",
}

_NANO = 10**9


@dataclass(frozen=True)
class Quantity:
    """A validated, non-negative quantity with its canonical string form."""

    value: Decimal
    canonical: str

    @property
    def is_zero(self) -> bool:
        return self.value == 0

    def __str__(self) -> str:
        return self.canonical


def _format_decimal(nanos: int, exponent_style: bool) -> str:
    for exponent in sorted(_DECIMAL_SUFFIXES, reverse=True):
        scale = 10 ** (exponent + 9)
        if nanos % scale == 0:
            mantissa = nanos // scale
            if exponent_style:
                suffix = f"e{exponent}" if exponent else ""
            else:
                suffix = _DECIMAL_SUFFIXES[exponent]
            return f"{mantissa}{suffix}"
    # Unreachable: nanos is always divisible by 10**0
    return str(nanos)


def _format_binary(nanos: int) -> str | None:
    if nanos % _NANO:
        return None
    amount = nanos // _NANO
    if amount < 1024:
        return None
    power = 0
    while power < len(_BINARY_SUFFIXES) - 1 and amount % 1024 == 0:
        amount //= 1024
        power += 1
    return f"{amount}{_BINARY_SUFFIXES[power]}"


def canonicalize(value: Decimal, suffix: str = "") -> str:
    """Render a non-negative value the way the API server would.

    The format family (binary SI, decimal SI, decimal exponent) follows the
    suffix the value was written with. Precision finer than one nano-unit is
    rounded up.
    """
    with decimal.localcontext() as ctx:
        ctx.prec = 60
        nanos = int((value * _NANO).to_integral_value(rounding=decimal.ROUND_CEILING))

    if nanos == 0:
        return "0"

    if suffix.endswith("i"):
        binary = _format_binary(nanos)
        if binary is not None:
            return binary
    return _format_decimal(nanos, exponent_style=len(suffix) > 1 and suffix[0] in "eE")


def parse_quantity(raw: str) -> Quantity:
    """Parse a quota size such as '50G', '200T' or '10Gi'.

    Raises:
        InvalidQuantityError: if the string is malformed or negative
    """
    text = (raw or "").strip()
    match = _QUANTITY_RE.match(text)
    if not match:
        raise InvalidQuantityError(
            f"invalid quantity {raw!r}, for example: 50G / 200T / 10Gi"
        )
    if match.group("sign") == "-":
        raise InvalidQuantityError(f"quota must not be negative, got {raw!r}")

    try:
        value = _parse_decimal(text)
    except (ValueError, decimal.InvalidOperation) as e:
        raise InvalidQuantityError(f"invalid quantity {raw!r}: {e}") from e

    return Quantity(value=value, canonical=canonicalize(value, match.group("suffix") or ""))


def is_zero_quantity(raw: str | None) -> bool:
    """Check whether a stored quota value is zero in any spelling."""
    if raw is None:
        return False
    try:
        return parse_quantity(raw).is_zero
    except InvalidQuantityError:
        return False
