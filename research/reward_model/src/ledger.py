"""
ledger: runs contract invocations the way the host chain would.

Each invocation is atomic: storage, bank balances and delivered contract
messages are snapshotted before the handler runs; the handler's outbound
messages are settled only after it returns; if the handler or any settlement
raises, every snapshot is restored and the error is re-raised to the caller.

Typical usage
-------------
    ledger = Ledger()
    ledger.instantiate("reward", "creator", InstantiateMsg(...))
    ledger.bank.mint("reward", Coin("uusd", 1_000))
    ledger.execute("reward", "hub", UpdateGlobalIndex())
"""
import logging
from typing import Callable, Dict, List, Optional, Tuple

from . import contract
from .errors import HostError
from .host import Api, Bank, Deps, Env, MessageInfo, Querier, Storage, TaxParams
from .msgs import BankSend, ExecuteMsg, InstantiateMsg, QueryMsg, Response, Swap, WasmExecute

log = logging.getLogger(__name__)


class Ledger:
    def __init__(self, tax: Optional[TaxParams] = None) -> None:
        self.api = Api()
        self.bank = Bank(tax)
        self.block_height = 0
        self._storages: Dict[str, Storage] = {}
        # target address -> [(sender, msg)] delivered by WasmExecute
        self.inbox: Dict[str, List[Tuple[str, bytes]]] = {}

    def storage(self, contract_address: str) -> Storage:
        return self._storages.setdefault(contract_address, Storage())

    def deps(self, contract_address: str) -> Deps:
        return Deps(
            storage=self.storage(contract_address),
            api=self.api,
            querier=Querier(self.bank),
        )

    def env(self, contract_address: str) -> Env:
        return Env(contract_address=contract_address, block_height=self.block_height)

    # -------- Entry points --------

    def instantiate(self, contract_address: str, sender: str, msg: InstantiateMsg) -> Response:
        return self._run(
            contract_address,
            lambda deps, env: contract.instantiate(deps, env, MessageInfo(sender), msg),
        )

    def execute(self, contract_address: str, sender: str, msg: ExecuteMsg) -> Response:
        return self._run(
            contract_address,
            lambda deps, env: contract.execute(deps, env, MessageInfo(sender), msg),
        )

    def query(self, contract_address: str, msg: QueryMsg):
        return contract.query(self.deps(contract_address), self.env(contract_address), msg)

    # -------- Internals --------

    def _run(self, contract_address: str, handler: Callable[[Deps, Env], Response]) -> Response:
        storage = self.storage(contract_address)
        storage_snap = storage.snapshot()
        bank_snap = self.bank.snapshot()
        inbox_snap = {addr: list(msgs) for addr, msgs in self.inbox.items()}
        try:
            response = handler(self.deps(contract_address), self.env(contract_address))
            for msg in response.messages:
                self._settle(contract_address, msg)
        except Exception as e:
            storage.restore(storage_snap)
            self.bank.restore(bank_snap)
            self.inbox = inbox_snap
            log.warning("invocation on %s reverted: %s: %s", contract_address, type(e).__name__, e)
            raise
        self.block_height += 1
        return response

    def _settle(self, contract_address: str, msg) -> None:
        if isinstance(msg, BankSend):
            if msg.from_address != contract_address:
                raise HostError(f"{contract_address} cannot send from {msg.from_address}")
            burnt = self.bank.send(msg.from_address, msg.to_address, msg.amount)
            log.debug("settled send to %s, tax burnt %d", msg.to_address, burnt)
        elif isinstance(msg, Swap):
            if msg.trader != contract_address:
                raise HostError(f"{contract_address} cannot swap for {msg.trader}")
            received = self.bank.swap(msg.trader, msg.offer_coin, msg.ask_denom)
            log.debug("settled swap %s -> %s", msg.offer_coin, received)
        elif isinstance(msg, WasmExecute):
            if msg.funds:
                self.bank.send(contract_address, msg.contract_addr, msg.funds)
            # no code runs at the target here; it is queued for whoever drives it
            self.inbox.setdefault(msg.contract_addr, []).append((contract_address, msg.msg))
            log.debug("delivered execute from %s to %s", contract_address, msg.contract_addr)
        else:
            raise HostError(f"unsupported message: {type(msg).__name__}")
