"""
host: in-memory stand-ins for the ledger services a contract invocation sees.

- Api: human <-> canonical address conversion.
- Storage: deterministic bytes key/value store with snapshot/restore so a
  failed invocation can be rolled back.
- Bank: per-address balances, taxed transfers and market swaps.
- Querier: read-only view of balances and tax parameters for handlers.

None of this is a ledger implementation. It mirrors only the surface the
reward contract needs so the accounting can be exercised end to end.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .constants import DEFAULT_TAX_CAP, DEFAULT_TAX_EXEMPT_DENOMS, DEFAULT_TAX_RATE
from .errors import HostError, ValidationError
from .fixed_point import FixedDecimal, checked_add, checked_sub
from .msgs import Coin



# ---------------- Addresses ----------------

class Api:
    """Address conversion. Canonical form is the lowercased ascii bytes."""

    MIN_LEN = 3
    MAX_LEN = 90

    def canonical_address(self, human: str) -> bytes:
        if not isinstance(human, str) or not human:
            raise ValidationError("address must be a non-empty str")
        if not human.isascii() or any(c.isspace() for c in human):
            raise ValidationError(f"invalid address: {human!r}")
        if not self.MIN_LEN <= len(human) <= self.MAX_LEN:
            raise ValidationError(f"address length {len(human)} out of range")
        return human.lower().encode("ascii")

    def human_address(self, canonical: bytes) -> str:
        if not isinstance(canonical, (bytes, bytearray)) or not canonical:
            raise ValidationError("canonical address must be non-empty bytes")
        return bytes(canonical).decode("ascii")


# ---------------- Storage ----------------

class Storage:
    """Bytes key/value store.

    .get(key) -> bytes | None
    .set(key, value) -> None
    .delete(key) -> bool
    .snapshot() / .restore(snap)
    """

    def __init__(self) -> None:
        self._kv: Dict[bytes, bytes] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        return self._kv.get(bytes(key))

    def set(self, key: bytes, value: bytes) -> None:
        if not isinstance(key, (bytes, bytearray)) or not key:
            raise ValidationError("storage key must be non-empty bytes")
        if not isinstance(value, (bytes, bytearray)):
            raise ValidationError("storage value must be bytes")
        self._kv[bytes(key)] = bytes(value)

    def delete(self, key: bytes) -> bool:
        return self._kv.pop(bytes(key), None) is not None

    def snapshot(self) -> Tuple[Tuple[bytes, bytes], ...]:
        return tuple(self._kv.items())

    def restore(self, snap: Tuple[Tuple[bytes, bytes], ...]) -> None:
        self._kv = dict(snap)


# ---------------- Bank ----------------

@dataclass(frozen=True)
class TaxParams:
    """Transfer tax: ``min(amount * rate, cap)`` charged on top of a send"""
    rate: FixedDecimal = field(default_factory=lambda: FixedDecimal.from_str(DEFAULT_TAX_RATE))
    cap: int = DEFAULT_TAX_CAP
    exempt_denoms: Tuple[str, ...] = DEFAULT_TAX_EXEMPT_DENOMS

    def __post_init__(self):
        if self.rate > FixedDecimal.one():
            raise ValidationError("tax rate must be in [0, 1]")
        if self.cap < 0:
            raise ValidationError("tax cap must be non-negative")

    def tax_for(self, coin: Coin) -> int:
        if coin.denom in self.exempt_denoms:
            return 0
        return min(self.rate.mul_int(coin.amount), self.cap)


class Bank:
    """Balances keyed by address then denom"""

    def __init__(self, tax: Optional[TaxParams] = None) -> None:
        self.tax = tax if tax is not None else TaxParams()
        self._balances: Dict[str, Dict[str, int]] = {}
        # (offer_denom, ask_denom) -> rate
        self._rates: Dict[Tuple[str, str], FixedDecimal] = {}
        self.burnt: Dict[str, int] = {}

    def balance(self, address: str, denom: str) -> int:
        return self._balances.get(address, {}).get(denom, 0)

    def all_balances(self, address: str) -> List[Coin]:
        held = self._balances.get(address, {})
        return [Coin(denom, amount) for denom, amount in sorted(held.items()) if amount > 0]

    def mint(self, address: str, coin: Coin) -> None:
        """Credit ``coin`` out of thin air (staking rewards arriving)"""
        if coin.amount < 0:
            raise HostError("cannot mint a negative amount")
        self._credit(address, coin)

    def set_rate(self, offer_denom: str, ask_denom: str, rate: FixedDecimal) -> None:
        self._rates[(offer_denom, ask_denom)] = rate

    def send(self, from_address: str, to_address: str, coins: Iterable[Coin]) -> int:
        """Transfer coins, charging tax on top. Returns the total tax burnt."""
        burnt = 0
        for coin in coins:
            tax = self.tax.tax_for(coin)
            self._debit(from_address, Coin(coin.denom, checked_add(coin.amount, tax)))
            self._credit(to_address, coin)
            self.burnt[coin.denom] = self.burnt.get(coin.denom, 0) + tax
            burnt += tax
        return burnt

    def swap(self, trader: str, offer_coin: Coin, ask_denom: str) -> Coin:
        """Convert the full offer at the configured rate, rounding down"""
        rate = self._rates.get((offer_coin.denom, ask_denom))
        if rate is None:
            raise HostError(f"no market rate for {offer_coin.denom} -> {ask_denom}")
        received = Coin(ask_denom, rate.mul_int(offer_coin.amount))
        self._debit(trader, offer_coin)
        self._credit(trader, received)
        return received

    def _debit(self, address: str, coin: Coin) -> None:
        held = self.balance(address, coin.denom)
        if coin.amount > held:
            raise HostError(
                f"insufficient funds: {address} holds {held}{coin.denom}, needs {coin.amount}"
            )
        self._balances.setdefault(address, {})[coin.denom] = checked_sub(held, coin.amount)

    def _credit(self, address: str, coin: Coin) -> None:
        held = self.balance(address, coin.denom)
        self._balances.setdefault(address, {})[coin.denom] = checked_add(held, coin.amount)

    def snapshot(self):
        return (
            {addr: dict(held) for addr, held in self._balances.items()},
            dict(self.burnt),
        )

    def restore(self, snap) -> None:
        balances, burnt = snap
        self._balances = {addr: dict(held) for addr, held in balances.items()}
        self.burnt = dict(burnt)


# ---------------- Handler-facing views ----------------

class Querier:
    """Read-only ledger queries available to a handler"""

    def __init__(self, bank: Bank) -> None:
        self._bank = bank

    def query_balance(self, address: str, denom: str) -> Coin:
        return Coin(denom, self._bank.balance(address, denom))

    def query_all_balances(self, address: str) -> List[Coin]:
        return self._bank.all_balances(address)

    def query_tax_rate(self) -> FixedDecimal:
        return self._bank.tax.rate

    def query_tax_cap(self, denom: str) -> int:
        # exempt denoms are never taxed, a zero cap says exactly that
        if denom in self._bank.tax.exempt_denoms:
            return 0
        return self._bank.tax.cap


@dataclass
class Deps:
    storage: Storage
    api: Api
    querier: Querier


@dataclass(frozen=True)
class Env:
    contract_address: str
    block_height: int = 0


@dataclass(frozen=True)
class MessageInfo:
    sender: str
