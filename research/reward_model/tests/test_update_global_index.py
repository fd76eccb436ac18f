"""Global index accrual - fee extraction, balance deltas and index progress"""
from fractions import Fraction

import numpy as np
import pytest

from reward_model.src.constants import DECIMAL_FRACTIONAL
from reward_model.src.errors import (
    ArithmeticUnderflowError,
    InvalidStateError,
    UnauthorizedError,
    UninitializedError,
)
from reward_model.src.instructions.update_global_index import compute_accrual
from reward_model.src.ledger import Ledger
from reward_model.src.fixed_point import FixedDecimal
from reward_model.src.msgs import BankSend, Coin, StateQuery, UpdateGlobalIndex
from reward_model.src.state.reward_state import State

REWARD = "reward_contract"
HUB = "hub_contract"
FEE_ADDRESS = "lido_fee_collector"


def test_worked_example(ledger, seed):
    """total 1000, prev 100, fee 10%, balance 1000"""
    seed(ledger, total_balance=1000, prev_reward_balance=100)
    ledger.bank.mint(REWARD, Coin("uusd", 1000))

    response = ledger.execute(REWARD, HUB, UpdateGlobalIndex())

    assert response.attribute("action") == "update_global_index"
    assert response.attribute("claimed_rewards") == "810"
    assert response.attribute("lido_fee") == "90"
    assert response.messages == [
        BankSend(from_address=REWARD, to_address=FEE_ADDRESS, amount=(Coin("uusd", 90),)),
    ]

    state = ledger.query(REWARD, StateQuery())
    assert state.prev_reward_balance == 910
    assert state.global_index == FixedDecimal.from_str("0.81")
    assert state.total_balance == 1000

    # fee settled after the handler returned
    assert ledger.bank.balance(REWARD, "uusd") == 910
    assert ledger.bank.balance(FEE_ADDRESS, "uusd") == 90

def test_second_update_without_new_rewards_is_a_no_op(ledger, seed):
    seed(ledger, total_balance=1000, prev_reward_balance=100)
    ledger.bank.mint(REWARD, Coin("uusd", 1000))
    ledger.execute(REWARD, HUB, UpdateGlobalIndex())
    before = ledger.query(REWARD, StateQuery())

    response = ledger.execute(REWARD, HUB, UpdateGlobalIndex())

    assert response.attribute("claimed_rewards") == "0"
    assert response.attribute("lido_fee") == "0"
    assert len(response.messages) == 1
    assert ledger.query(REWARD, StateQuery()) == before

def test_zero_principal_is_rejected(ledger, seed):
    seed(ledger, total_balance=0, prev_reward_balance=0)
    ledger.bank.mint(REWARD, Coin("uusd", 500))
    before = ledger.query(REWARD, StateQuery())

    with pytest.raises(InvalidStateError, match="no bonded principal"):
        ledger.execute(REWARD, HUB, UpdateGlobalIndex())

    assert ledger.query(REWARD, StateQuery()) == before
    assert ledger.bank.balance(FEE_ADDRESS, "uusd") == 0

def test_balance_below_snapshot_underflows(ledger, seed):
    seed(ledger, total_balance=1000, prev_reward_balance=100)
    ledger.bank.mint(REWARD, Coin("uusd", 50))
    before = ledger.query(REWARD, StateQuery())

    with pytest.raises(ArithmeticUnderflowError):
        ledger.execute(REWARD, HUB, UpdateGlobalIndex())

    assert ledger.query(REWARD, StateQuery()) == before
    assert ledger.bank.balance(REWARD, "uusd") == 50

def test_only_hub_may_update(ledger, seed):
    seed(ledger, total_balance=1000)
    ledger.bank.mint(REWARD, Coin("uusd", 1000))

    for sender in ("gov_owner", "somebody_else"):
        with pytest.raises(UnauthorizedError):
            ledger.execute(REWARD, sender, UpdateGlobalIndex())

    assert ledger.query(REWARD, StateQuery()).global_index.is_zero()

def test_hub_address_compared_canonically(ledger, seed):
    seed(ledger, total_balance=1000)
    ledger.bank.mint(REWARD, Coin("uusd", 1000))
    ledger.execute(REWARD, HUB.upper(), UpdateGlobalIndex())
    assert ledger.query(REWARD, StateQuery()).global_index == FixedDecimal.from_str("0.9")

def test_uninitialized_contract():
    ledger = Ledger()
    with pytest.raises(UninitializedError):
        ledger.execute(REWARD, HUB, UpdateGlobalIndex())
    with pytest.raises(UninitializedError):
        ledger.query(REWARD, StateQuery())

def test_fee_declared_net_of_tax_but_snapshot_debited_gross(taxed_ledger, seed):
    seed(taxed_ledger, total_balance=10**12)
    taxed_ledger.bank.mint(REWARD, Coin("uusd", 10**10))

    response = taxed_ledger.execute(REWARD, HUB, UpdateGlobalIndex())

    lido_fee = int(response.attribute("lido_fee"))
    assert lido_fee == 10**9
    declared = response.messages[0].amount[0]
    assert declared.amount < lido_fee

    state = taxed_ledger.query(REWARD, StateQuery())
    assert state.prev_reward_balance == 10**10 - lido_fee
    assert taxed_ledger.bank.balance(FEE_ADDRESS, "uusd") == declared.amount
    # the next update can never underflow because of tax rounding
    assert taxed_ledger.bank.balance(REWARD, "uusd") >= state.prev_reward_balance

def test_snapshot_matches_balance_up_to_tax_rounding(taxed_ledger, seed):
    """Worked example under 0.1% tax: fee 90 is declared as 89, nothing is taxed on 89"""
    seed(taxed_ledger, total_balance=1000, prev_reward_balance=100)
    taxed_ledger.bank.mint(REWARD, Coin("uusd", 1000))

    response = taxed_ledger.execute(REWARD, HUB, UpdateGlobalIndex())

    assert response.messages[0].amount == (Coin("uusd", 89),)
    state = taxed_ledger.query(REWARD, StateQuery())
    assert state.prev_reward_balance == 910
    assert taxed_ledger.bank.balance(REWARD, "uusd") == 911
    assert taxed_ledger.bank.balance(FEE_ADDRESS, "uusd") == 89

    # the rounding surplus is picked up as reward by the next update
    response = taxed_ledger.execute(REWARD, HUB, UpdateGlobalIndex())
    assert response.attribute("claimed_rewards") == "1"
    assert response.attribute("lido_fee") == "0"

def test_index_is_monotone_over_many_updates(taxed_ledger, seed):
    seed(taxed_ledger, total_balance=7_777_777)
    rng = np.random.default_rng(11)
    last = FixedDecimal.zero()

    for _ in range(200):
        taxed_ledger.bank.mint(REWARD, Coin("uusd", int(rng.integers(0, 5_000_000))))
        taxed_ledger.execute(REWARD, HUB, UpdateGlobalIndex())
        index = taxed_ledger.query(REWARD, StateQuery()).global_index
        assert index >= last
        last = index

def test_index_drift_bounded_by_one_atomic_per_update():
    """Each update floors once; the exact rational sum stays within n atomics"""
    rng = np.random.default_rng(3)
    total_balance = 3 * 10**12 + 7
    state = State(total_balance=total_balance, prev_reward_balance=0, global_index=FixedDecimal.zero())
    fee_rate = FixedDecimal.from_str("0.10")
    exact = Fraction(0)
    balance = 0
    updates = 1_000

    for _ in range(updates):
        balance += int(rng.integers(1, 10**9))
        accrual = compute_accrual(state, balance, fee_rate)
        exact += Fraction(accrual.claimed_rewards, total_balance)
        state.prev_reward_balance = accrual.prev_reward_balance
        state.global_index = accrual.global_index
        balance = accrual.prev_reward_balance

    drift = exact * DECIMAL_FRACTIONAL - state.global_index.atomics
    assert 0 <= drift < updates

def test_index_tracks_numpy_reference():
    """Compare the fixed point index with a float64 model of the same rewards"""
    rng = np.random.default_rng(5)
    total_balance = 10**12
    rewards = rng.integers(10**6, 10**8, size=365 * 4)
    state = State(total_balance=total_balance, prev_reward_balance=0, global_index=FixedDecimal.zero())
    fee_rate = FixedDecimal.from_str("0.10")
    balance = 0

    for reward in rewards:
        balance += int(reward)
        accrual = compute_accrual(state, balance, fee_rate)
        state.prev_reward_balance = accrual.prev_reward_balance
        state.global_index = accrual.global_index
        balance = accrual.prev_reward_balance

    numpy_index = np.sum(rewards.astype(np.float64) * 0.9) / total_balance
    assert float(state.global_index) == pytest.approx(numpy_index, rel=1e-6)

def test_compute_accrual_is_pure():
    state = State(total_balance=1000, prev_reward_balance=100, global_index=FixedDecimal.zero())
    accrual = compute_accrual(state, 1000, FixedDecimal.percent(10))
    assert (accrual.claimed_rewards, accrual.lido_fee, accrual.prev_reward_balance) == (810, 90, 910)
    assert accrual.global_index == FixedDecimal.from_str("0.81")
    assert state.prev_reward_balance == 100
    assert state.global_index.is_zero()
