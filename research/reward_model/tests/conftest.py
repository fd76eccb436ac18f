"""Shared fixtures: a ledger with the reward contract instantiated"""
import pytest

from reward_model.src.host import TaxParams
from reward_model.src.ledger import Ledger
from reward_model.src.fixed_point import FixedDecimal
from reward_model.src.msgs import InstantiateMsg
from reward_model.src.state.reward_state import State, read_state, store_state

REWARD = "reward_contract"
HUB = "hub_contract"
OWNER = "gov_owner"
FEE_ADDRESS = "lido_fee_collector"


def _instantiated(tax: TaxParams, fee_rate: str = "0.10") -> Ledger:
    ledger = Ledger(tax)
    ledger.instantiate(REWARD, OWNER, InstantiateMsg(
        hub_contract=HUB,
        reward_denom="uusd",
        lido_fee_rate=FixedDecimal.from_str(fee_rate),
        lido_fee_address=FEE_ADDRESS,
        owner=OWNER,
    ))
    return ledger


@pytest.fixture
def ledger() -> Ledger:
    """Tax free ledger, so settlement debits exactly the declared amounts"""
    return _instantiated(TaxParams(rate=FixedDecimal.zero(), cap=0))


@pytest.fixture
def taxed_ledger() -> Ledger:
    """Ledger with the default 0.1% transfer tax"""
    return _instantiated(TaxParams())


@pytest.fixture
def seed():
    """seed(ledger, total_balance, prev_reward_balance) as the bonding side would"""
    def _seed(ledger: Ledger, total_balance: int, prev_reward_balance: int = 0) -> State:
        storage = ledger.storage(REWARD)
        state = read_state(storage)
        state.total_balance = total_balance
        state.prev_reward_balance = prev_reward_balance
        store_state(storage, state)
        return state
    return _seed
