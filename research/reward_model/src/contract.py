"""Contract entry points"""
from .errors import UnknownMessageError
from .host import Deps, Env, MessageInfo
from .instructions.instantiate import instantiate
from .instructions.query import query_config, query_state
from .instructions.send_reward import send_reward
from .instructions.swap import trigger_swap
from .instructions.update_global_index import update_global_index
from .msgs import (
    ConfigQuery,
    ExecuteMsg,
    QueryMsg,
    Response,
    SendReward,
    StateQuery,
    TriggerSwap,
    UpdateGlobalIndex,
)

__all__ = ["instantiate", "execute", "query"]


def execute(deps: Deps, env: Env, info: MessageInfo, msg: ExecuteMsg) -> Response:
    if isinstance(msg, TriggerSwap):
        return trigger_swap(deps, env, info)
    if isinstance(msg, UpdateGlobalIndex):
        return update_global_index(deps, env, info)
    if isinstance(msg, SendReward):
        return send_reward(deps, env, info, msg.receiver, msg.amount)
    raise UnknownMessageError(f"unknown execute message: {type(msg).__name__}")


def query(deps: Deps, env: Env, msg: QueryMsg):
    if isinstance(msg, StateQuery):
        return query_state(deps)
    if isinstance(msg, ConfigQuery):
        return query_config(deps)
    raise UnknownMessageError(f"unknown query message: {type(msg).__name__}")
