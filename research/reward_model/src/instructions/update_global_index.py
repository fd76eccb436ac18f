"""Global index accrual"""
import logging
from dataclasses import dataclass

from ..constants import ACTION_UPDATE_GLOBAL_INDEX
from ..errors import InvalidStateError, UnauthorizedError
from ..fees import compute_lido_fee, deduct_tax
from ..host import Deps, Env, MessageInfo
from ..fixed_point import FixedDecimal, checked_sub, decimal_summation_in_256
from ..msgs import BankSend, Coin, Response
from ..state.config import read_config
from ..state.reward_state import State, read_state, store_state

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Accrual:
    """Outcome of one accrual step, before anything is written"""
    claimed_rewards: int  # net of the protocol fee
    lido_fee: int  # gross, what the contract is debited
    prev_reward_balance: int
    global_index: FixedDecimal


def compute_accrual(state: State, current_balance: int, lido_fee_rate: FixedDecimal) -> Accrual:
    """Pure accrual arithmetic on top of ``state``.

    Raises ArithmeticUnderflowError if the reward balance dropped below the
    last snapshot, and InvalidStateError if there is no bonded principal.
    """
    if state.total_balance == 0:
        raise InvalidStateError("no bonded principal")

    # claimed_rewards = current_balance - prev_balance
    claimed_rewards = checked_sub(current_balance, state.prev_reward_balance)

    # subtract the Lido fee from claimed rewards
    lido_fee = compute_lido_fee(claimed_rewards, lido_fee_rate)
    claimed_rewards = checked_sub(claimed_rewards, lido_fee)

    # the contract is debited the gross fee, tax included
    prev_reward_balance = checked_sub(current_balance, lido_fee)

    # global_index += claimed_rewards / total_balance
    global_index = decimal_summation_in_256(
        state.global_index,
        FixedDecimal.from_ratio(claimed_rewards, state.total_balance),
    )

    return Accrual(
        claimed_rewards=claimed_rewards,
        lido_fee=lido_fee,
        prev_reward_balance=prev_reward_balance,
        global_index=global_index,
    )


def update_global_index(deps: Deps, env: Env, info: MessageInfo) -> Response:
    """Increase global_index by the rewards received since the last call.

    Only the hub contract may call. Sends the protocol fee to the fee address
    and writes the state once at the end.
    """
    config = read_config(deps.storage)
    state = read_state(deps.storage)

    # Permission check
    if deps.api.canonical_address(info.sender) != config.hub_contract:
        raise UnauthorizedError(f"{info.sender} may not update the global index")

    # Load the reward contract balance
    balance = deps.querier.query_balance(env.contract_address, config.reward_denom)

    accrual = compute_accrual(state, balance.amount, config.lido_fee_rate)

    # declared amount is net of tax, the ledger adds the tax back on top
    fee_coin = deduct_tax(deps.querier, Coin(config.reward_denom, accrual.lido_fee))
    fee_msg = BankSend(
        from_address=env.contract_address,
        to_address=config.lido_fee_address,
        amount=(fee_coin,),
    )

    state.prev_reward_balance = accrual.prev_reward_balance
    state.global_index = accrual.global_index
    store_state(deps.storage, state)

    log.info(
        "update_global_index: claimed_rewards=%d lido_fee=%d global_index=%s",
        accrual.claimed_rewards, accrual.lido_fee, accrual.global_index,
    )
    return (
        Response()
        .add_message(fee_msg)
        .add_attribute("action", ACTION_UPDATE_GLOBAL_INDEX)
        .add_attribute("claimed_rewards", accrual.claimed_rewards)
        .add_attribute("lido_fee", accrual.lido_fee)
    )
