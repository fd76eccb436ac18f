"""Swap every non reward denom balance into the reward denom"""
import logging

from ..constants import ACTION_SWAP
from ..errors import UnauthorizedError
from ..host import Deps, Env, MessageInfo
from ..msgs import Response, Swap
from ..state.config import read_config

log = logging.getLogger(__name__)


def trigger_swap(deps: Deps, env: Env, info: MessageInfo) -> Response:
    """Only the hub contract may call.

    Emits one swap per foreign denom held; conversion happens after this
    invocation returns, so no state is touched here.
    """
    config = read_config(deps.storage)
    if deps.api.canonical_address(info.sender) != config.hub_contract:
        raise UnauthorizedError(f"{info.sender} may not trigger swaps")

    response = Response()
    for coin in deps.querier.query_all_balances(env.contract_address):
        if coin.denom == config.reward_denom:
            continue
        response.add_message(Swap(
            trader=env.contract_address,
            offer_coin=coin,
            ask_denom=config.reward_denom,
        ))

    log.debug("swap: %d conversion(s) into %s", len(response.messages), config.reward_denom)
    return response.add_attribute("action", ACTION_SWAP)
