"""Inbound messages, outbound instructions and invocation responses"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .fixed_point import FixedDecimal


@dataclass(frozen=True)
class Coin:
    """An amount of a single denom"""
    denom: str
    amount: int


# ---------------- Outbound instructions ----------------

@dataclass(frozen=True)
class BankSend:
    """Transfer ``amount`` from ``from_address`` to ``to_address``.

    The amount is the declared amount the recipient receives; the host adds
    its transfer tax on top when debiting the sender.
    """
    from_address: str
    to_address: str
    amount: Tuple[Coin, ...]


@dataclass(frozen=True)
class Swap:
    """Convert ``offer_coin`` held by ``trader`` into ``ask_denom``"""
    trader: str
    offer_coin: Coin
    ask_denom: str


@dataclass(frozen=True)
class WasmExecute:
    """Execute ``msg`` on another contract, e.g. to register with the hub"""
    contract_addr: str
    msg: bytes
    funds: Tuple[Coin, ...] = ()


OutboundMsg = Union[BankSend, Swap, WasmExecute]


@dataclass
class Response:
    """Result of a successful invocation"""
    messages: List[OutboundMsg] = field(default_factory=list)
    attributes: List[Tuple[str, str]] = field(default_factory=list)

    def add_message(self, msg: OutboundMsg) -> "Response":
        self.messages.append(msg)
        return self

    def add_attribute(self, key: str, value) -> "Response":
        self.attributes.append((key, str(value)))
        return self

    def attribute(self, key: str) -> str:
        """Value of the first attribute named ``key``"""
        for k, v in self.attributes:
            if k == key:
                return v
        raise KeyError(key)


# ---------------- Inbound messages ----------------

@dataclass(frozen=True)
class InitHook:
    """Message the new contract sends to ``contract_addr`` right after instantiation"""
    contract_addr: str
    msg: bytes


@dataclass(frozen=True)
class InstantiateMsg:
    hub_contract: str
    reward_denom: str
    lido_fee_rate: FixedDecimal
    lido_fee_address: str
    owner: str
    init_hook: Optional[InitHook] = None


@dataclass(frozen=True)
class TriggerSwap:
    pass


@dataclass(frozen=True)
class UpdateGlobalIndex:
    pass


@dataclass(frozen=True)
class SendReward:
    receiver: str
    amount: int


ExecuteMsg = Union[TriggerSwap, UpdateGlobalIndex, SendReward]


@dataclass(frozen=True)
class StateQuery:
    pass


@dataclass(frozen=True)
class ConfigQuery:
    pass


QueryMsg = Union[StateQuery, ConfigQuery]


@dataclass(frozen=True)
class StateResponse:
    global_index: FixedDecimal
    total_balance: int
    prev_reward_balance: int


@dataclass(frozen=True)
class ConfigResponse:
    hub_contract: str
    reward_denom: str
    lido_fee_rate: FixedDecimal
    lido_fee_address: str
    owner: str
