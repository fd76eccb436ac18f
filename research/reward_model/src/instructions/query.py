"""Read-only queries"""
from ..host import Deps
from ..msgs import ConfigResponse, StateResponse
from ..state.config import read_config
from ..state.reward_state import read_state


def query_state(deps: Deps) -> StateResponse:
    state = read_state(deps.storage)
    return StateResponse(
        global_index=state.global_index,
        total_balance=state.total_balance,
        prev_reward_balance=state.prev_reward_balance,
    )

def query_config(deps: Deps) -> ConfigResponse:
    config = read_config(deps.storage)
    return ConfigResponse(
        hub_contract=deps.api.human_address(config.hub_contract),
        reward_denom=config.reward_denom,
        lido_fee_rate=config.lido_fee_rate,
        lido_fee_address=config.lido_fee_address,
        owner=deps.api.human_address(config.owner),
    )
