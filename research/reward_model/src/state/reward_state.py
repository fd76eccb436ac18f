"""Reward accrual state"""
import json
from dataclasses import dataclass

from ..constants import STATE_KEY
from ..errors import UninitializedError, ValidationError
from ..host import Storage
from ..fixed_point import FixedDecimal


@dataclass
class State:
    """Accrual ledger of the reward contract"""
    total_balance: int  # bonded principal
    prev_reward_balance: int  # reward denom balance after the last fee extraction
    global_index: FixedDecimal  # cumulative reward per unit of principal

    def __post_init__(self):
        if self.total_balance < 0 or self.prev_reward_balance < 0:
            raise ValidationError("balances must be non-negative")

    @classmethod
    def initial(cls) -> "State":
        return cls(total_balance=0, prev_reward_balance=0, global_index=FixedDecimal.zero())

    def to_bytes(self) -> bytes:
        return json.dumps({
            "total_balance": str(self.total_balance),
            "prev_reward_balance": str(self.prev_reward_balance),
            "global_index": str(self.global_index.atomics),
        }, sort_keys=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "State":
        data = json.loads(raw.decode("utf-8"))
        return cls(
            total_balance=int(data["total_balance"]),
            prev_reward_balance=int(data["prev_reward_balance"]),
            global_index=FixedDecimal(int(data["global_index"])),
        )


def store_state(storage: Storage, state: State) -> None:
    """Write the whole record in one go"""
    storage.set(STATE_KEY, state.to_bytes())

def read_state(storage: Storage) -> State:
    raw = storage.get(STATE_KEY)
    if raw is None:
        raise UninitializedError("state not found")
    return State.from_bytes(raw)
