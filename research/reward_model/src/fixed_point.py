"""Checked integer arithmetic and the 18 decimal fixed point type.

Amounts are plain Python ints bounded to u128. Ratios are ``FixedDecimal``
values holding u128 atomics at a 1e18 scale. Every division rounds down.
Ratio and summation steps are carried out in a 256-bit intermediate and only
narrowed back to u128 at the end, so no precision is lost before the single
final floor.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from .constants import DECIMAL_FRACTIONAL, DECIMAL_PLACES, U128_MAX, U256_MAX
from .errors import (
    ArithmeticOverflowError,
    ArithmeticUnderflowError,
    DivisionByZeroError,
    ValidationError,
)


def checked_add(a: int, b: int, bound: int = U128_MAX) -> int:
    """Add with overflow checking"""
    result = a + b
    if result > bound:
        raise ArithmeticOverflowError(f"Arithmetic overflow in addition: {a} + {b}")
    return result

def checked_sub(a: int, b: int) -> int:
    """Subtract with underflow checking"""
    if b > a:
        raise ArithmeticUnderflowError(f"Arithmetic underflow in subtraction: {a} - {b}")
    return a - b

def checked_mul(a: int, b: int, bound: int = U128_MAX) -> int:
    """Multiply with overflow checking"""
    result = a * b
    if result > bound:
        raise ArithmeticOverflowError(f"Arithmetic overflow in multiplication: {a} * {b}")
    return result

def checked_div(a: int, b: int) -> int:
    """Divide (floor) with zero checking"""
    if b == 0:
        raise DivisionByZeroError("Division by zero")
    return a // b

def narrow_u128(value: int) -> int:
    """Narrow a 256-bit intermediate back to the u128 storage width"""
    if value > U128_MAX:
        raise ArithmeticOverflowError(f"Value {value} does not fit in u128")
    return value

def multiply_ratio(value: int, numerator: int, denominator: int) -> int:
    """floor(value * numerator / denominator) with a 256-bit intermediate"""
    product = checked_mul(value, numerator, bound=U256_MAX)
    return narrow_u128(checked_div(product, denominator))


@dataclass(frozen=True, order=True)
class FixedDecimal:
    """Unsigned fixed point number with 18 decimal places.

    ``atomics`` is the value scaled by 1e18, e.g. 0.81 is stored as
    810_000_000_000_000_000.
    """
    atomics: int

    def __post_init__(self):
        if not isinstance(self.atomics, int) or isinstance(self.atomics, bool):
            raise ValidationError(f"atomics must be an int, got {type(self.atomics)}")
        if self.atomics < 0:
            raise ArithmeticUnderflowError("FixedDecimal cannot be negative")
        if self.atomics > U128_MAX:
            raise ArithmeticOverflowError("FixedDecimal atomics exceed u128")

    @classmethod
    def zero(cls) -> "FixedDecimal":
        return cls(0)

    @classmethod
    def one(cls) -> "FixedDecimal":
        return cls(DECIMAL_FRACTIONAL)

    @classmethod
    def percent(cls, x: int) -> "FixedDecimal":
        """``percent(10)`` is 0.10"""
        return cls(checked_mul(x, DECIMAL_FRACTIONAL // 100))

    @classmethod
    def from_ratio(cls, numerator: int, denominator: int) -> "FixedDecimal":
        """numerator / denominator rounded down to 18 decimals.

        The scaled numerator may exceed u128, so it is kept at 256 bits until
        after the division.
        """
        if denominator == 0:
            raise DivisionByZeroError("FixedDecimal.from_ratio with zero denominator")
        scaled = checked_mul(numerator, DECIMAL_FRACTIONAL, bound=U256_MAX)
        return cls(narrow_u128(scaled // denominator))

    @classmethod
    def from_str(cls, value: Union[str, int]) -> "FixedDecimal":
        """Parse a decimal string such as ``"0.10"``; at most 18 fractional digits"""
        with localcontext() as ctx:
            ctx.prec = 100
            try:
                parsed = Decimal(str(value).strip())
            except InvalidOperation:
                raise ValidationError(f"Invalid decimal string: {value!r}")
            if not parsed.is_finite() or parsed < 0:
                raise ValidationError(f"Decimal must be finite and non-negative: {value!r}")
            scaled = parsed * DECIMAL_FRACTIONAL
            if scaled != scaled.to_integral_value():
                raise ValidationError(
                    f"Decimal {value!r} has more than {DECIMAL_PLACES} fractional digits"
                )
            atomics = int(scaled)
        if atomics > U128_MAX:
            raise ArithmeticOverflowError(f"Decimal {value!r} exceeds u128 atomics")
        return cls(atomics)

    def is_zero(self) -> bool:
        return self.atomics == 0

    def mul_int(self, amount: int) -> int:
        """floor(amount * self) as an integer amount"""
        return multiply_ratio(amount, self.atomics, DECIMAL_FRACTIONAL)

    def __add__(self, other: "FixedDecimal") -> "FixedDecimal":
        if not isinstance(other, FixedDecimal):
            return NotImplemented
        return decimal_summation_in_256(self, other)

    def __float__(self) -> float:
        return self.atomics / DECIMAL_FRACTIONAL

    def __str__(self) -> str:
        whole, fractional = divmod(self.atomics, DECIMAL_FRACTIONAL)
        if fractional == 0:
            return str(whole)
        digits = f"{fractional:0{DECIMAL_PLACES}d}".rstrip("0")
        return f"{whole}.{digits}"


def decimal_summation_in_256(a: FixedDecimal, b: FixedDecimal) -> FixedDecimal:
    """a + b computed at 256 bits and narrowed to the u128 storage width"""
    total = checked_add(a.atomics, b.atomics, bound=U256_MAX)
    return FixedDecimal(narrow_u128(total))
