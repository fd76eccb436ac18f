"""Plain reward payout by the owner"""
import logging

from ..constants import ACTION_SEND_REWARD
from ..errors import InvalidAmountError, UnauthorizedError
from ..host import Deps, Env, MessageInfo
from ..msgs import BankSend, Coin, Response
from ..state.config import read_config

log = logging.getLogger(__name__)


def send_reward(deps: Deps, env: Env, info: MessageInfo, receiver: str, amount: int) -> Response:
    if amount <= 0:
        raise InvalidAmountError("Invalid zero amount")

    config = read_config(deps.storage)
    if deps.api.canonical_address(info.sender) != config.owner:
        raise UnauthorizedError(f"{info.sender} is not the owner")

    log.info("send_reward: %d%s to %s", amount, config.reward_denom, receiver)
    return (
        Response()
        .add_message(BankSend(
            from_address=env.contract_address,
            to_address=receiver,
            amount=(Coin(config.reward_denom, amount),),
        ))
        .add_attribute("action", ACTION_SEND_REWARD)
        .add_attribute("from", env.contract_address)
        .add_attribute("amount", amount)
    )
