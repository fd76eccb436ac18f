"""Contract configuration record"""
import json
from dataclasses import dataclass

from ..constants import CONFIG_KEY
from ..errors import UninitializedError, ValidationError
from ..host import Storage
from ..fixed_point import FixedDecimal


@dataclass(frozen=True)
class Config:
    """Addressing and fee parameters, written once at instantiation"""
    hub_contract: bytes  # canonical
    reward_denom: str
    lido_fee_rate: FixedDecimal
    lido_fee_address: str
    owner: bytes  # canonical, authorises SendReward only

    def __post_init__(self):
        if not self.hub_contract or not self.owner:
            raise ValidationError("hub_contract and owner must be set")
        if not self.reward_denom:
            raise ValidationError("reward_denom must be set")
        if not self.lido_fee_address:
            raise ValidationError("lido_fee_address must be set")
        if not isinstance(self.lido_fee_rate, FixedDecimal):
            raise ValidationError("lido_fee_rate must be a FixedDecimal")
        if self.lido_fee_rate > FixedDecimal.one():
            raise ValidationError(f"lido_fee_rate {self.lido_fee_rate} must be in [0, 1]")

    def to_bytes(self) -> bytes:
        return json.dumps({
            "hub_contract": self.hub_contract.hex(),
            "reward_denom": self.reward_denom,
            "lido_fee_rate": str(self.lido_fee_rate.atomics),
            "lido_fee_address": self.lido_fee_address,
            "owner": self.owner.hex(),
        }, sort_keys=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Config":
        data = json.loads(raw.decode("utf-8"))
        return cls(
            hub_contract=bytes.fromhex(data["hub_contract"]),
            reward_denom=data["reward_denom"],
            lido_fee_rate=FixedDecimal(int(data["lido_fee_rate"])),
            lido_fee_address=data["lido_fee_address"],
            owner=bytes.fromhex(data["owner"]),
        )


def store_config(storage: Storage, config: Config) -> None:
    storage.set(CONFIG_KEY, config.to_bytes())

def read_config(storage: Storage) -> Config:
    raw = storage.get(CONFIG_KEY)
    if raw is None:
        raise UninitializedError("config not found")
    return Config.from_bytes(raw)
