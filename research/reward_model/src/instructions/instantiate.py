"""Contract instantiation"""
import logging

from ..constants import CONFIG_KEY
from ..errors import InvalidStateError
from ..host import Deps, Env, MessageInfo
from ..msgs import InstantiateMsg, Response, WasmExecute
from ..state.config import Config, store_config
from ..state.reward_state import State, store_state

log = logging.getLogger(__name__)


def instantiate(deps: Deps, env: Env, info: MessageInfo, msg: InstantiateMsg) -> Response:
    """Write the config and a zeroed state. Can only happen once."""
    if deps.storage.get(CONFIG_KEY) is not None:
        raise InvalidStateError("contract already instantiated")

    # validates the fee address format, the human form is what gets stored
    deps.api.canonical_address(msg.lido_fee_address)

    config = Config(
        hub_contract=deps.api.canonical_address(msg.hub_contract),
        reward_denom=msg.reward_denom,
        lido_fee_rate=msg.lido_fee_rate,
        lido_fee_address=msg.lido_fee_address,
        owner=deps.api.canonical_address(msg.owner),
    )
    store_config(deps.storage, config)
    store_state(deps.storage, State.initial())

    log.info(
        "instantiated %s: reward_denom=%s lido_fee_rate=%s",
        env.contract_address, config.reward_denom, config.lido_fee_rate,
    )
    response = Response()
    if msg.init_hook is not None:
        response.add_message(WasmExecute(
            contract_addr=msg.init_hook.contract_addr,
            msg=msg.init_hook.msg,
        ))
    return response.add_attribute("action", "instantiate").add_attribute("by", info.sender)
