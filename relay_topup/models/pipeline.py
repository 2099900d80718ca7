from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Self

from better_proxy import Proxy

from relay_topup.exceptions.custom_exceptions import (
    BridgeUnavailable,
    ConfigurationError,
    InvalidStateTransition,
)


@dataclass(frozen=True, slots=True)
class WalletRecord:
    name: str
    private_key: str = field(repr=False)
    proxy: Proxy | None = None
    raw: str = field(default="", repr=False)

    @classmethod
    def from_line(cls, line: str) -> Self:
        raw = line.strip()
        parts = raw.split("|")
        name = parts[0].strip()
        private_key = parts[1].strip() if len(parts) > 1 else ""

        if not name or not private_key:
            raise ConfigurationError("Wallet line must look like name|private_key|proxy")

        proxy_str = parts[2].strip() if len(parts) > 2 else ""
        proxy = Proxy.from_str(proxy_str) if proxy_str else None

        return cls(name=name, private_key=private_key, proxy=proxy, raw=raw)


class PipelineState(str, Enum):
    INIT = "init"
    WITHDRAWING = "withdrawing"
    AWAITING_ORIGIN_DEPOSIT = "awaiting_origin_deposit"
    PRE_BRIDGE_DELAY = "pre_bridge_delay"
    GAS_GATE = "gas_gate"
    BRIDGING = "bridging"
    AWAITING_DESTINATION_DEPOSIT = "awaiting_destination_deposit"
    NOTIFYING = "notifying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.SUCCEEDED, PipelineState.FAILED)


_PIPELINE_ORDER = (
    PipelineState.INIT,
    PipelineState.WITHDRAWING,
    PipelineState.AWAITING_ORIGIN_DEPOSIT,
    PipelineState.PRE_BRIDGE_DELAY,
    PipelineState.GAS_GATE,
    PipelineState.BRIDGING,
    PipelineState.AWAITING_DESTINATION_DEPOSIT,
    PipelineState.NOTIFYING,
    PipelineState.SUCCEEDED,
)

NEXT_STATE: dict[PipelineState, PipelineState] = dict(zip(_PIPELINE_ORDER, _PIPELINE_ORDER[1:]))


@dataclass(slots=True)
class FundingJob:
    record: WalletRecord
    address: str
    origin_chain: str
    destination_chain: str
    topup_amount: Decimal
    bridge_amount: Decimal
    state: PipelineState = PipelineState.INIT
    history: list[PipelineState] = field(default_factory=lambda: [PipelineState.INIT])

    def advance(self, new_state: PipelineState) -> None:
        if self.state.is_terminal:
            raise InvalidStateTransition(f"Job is already {self.state.value}")

        if new_state is not PipelineState.FAILED and NEXT_STATE.get(self.state) is not new_state:
            raise InvalidStateTransition(
                f"Cannot move from {self.state.value} to {new_state.value}"
            )

        self.state = new_state
        self.history.append(new_state)

    def fail(self) -> None:
        if not self.state.is_terminal:
            self.advance(PipelineState.FAILED)


@dataclass(frozen=True, slots=True)
class BridgeQuote:
    transaction_payload: dict[str, Any]
    relayer_fee_wei: int
    status_check_endpoint: str

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> Self:
        try:
            item = data["steps"][0]["items"][0]
            return cls(
                transaction_payload=dict(item["data"]),
                relayer_fee_wei=int(data["fees"]["relayer"]),
                status_check_endpoint=item["check"]["endpoint"],
            )
        except (KeyError, IndexError, TypeError, ValueError) as error:
            raise BridgeUnavailable(f"Malformed Relay API response: {error!r}") from error
