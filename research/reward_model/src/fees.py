"""Protocol fee and transfer tax helpers"""
from .constants import DECIMAL_FRACTIONAL
from .errors import ValidationError
from .host import Querier
from .fixed_point import FixedDecimal, checked_add, checked_sub, multiply_ratio
from .msgs import Coin


def compute_lido_fee(amount: int, fee_rate: FixedDecimal) -> int:
    """floor(amount * fee_rate)"""
    if fee_rate > FixedDecimal.one():
        raise ValidationError("fee rate must be in [0, 1]")
    return fee_rate.mul_int(amount)

def compute_tax(amount: int, tax_rate: FixedDecimal, tax_cap: int) -> int:
    """Tax the ledger will charge on top of a send of the net amount.

    Solves net + tax = amount for tax, i.e. amount - amount / (1 + rate),
    capped at ``tax_cap``.
    """
    # 1 + rate in atomics
    denominator = checked_add(DECIMAL_FRACTIONAL, tax_rate.atomics)
    net = multiply_ratio(amount, DECIMAL_FRACTIONAL, denominator)
    return min(checked_sub(amount, net), tax_cap)

def deduct_tax(querier: Querier, coin: Coin) -> Coin:
    """Net coin to declare in a send so that the sender is debited ``coin.amount``"""
    tax = compute_tax(coin.amount, querier.query_tax_rate(), querier.query_tax_cap(coin.denom))
    return Coin(coin.denom, checked_sub(coin.amount, tax))
