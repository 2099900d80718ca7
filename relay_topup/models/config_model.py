from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)

from configs import SHUFFLE_WALLETS, DEST_CHAIN
from relay_topup.models.chains import CHAINS


def _not_below(value, info: ValidationInfo, lower_field: str):
    lower = info.data.get(lower_field)
    if lower is not None and value < lower:
        raise ValueError(f'must be greater than or equal to {lower_field}')
    return value


class DelayRange(BaseModel):
    min: int = Field(ge=0)
    max: int = Field(ge=0)

    @field_validator('max')
    @classmethod
    def validate_max(cls, value: int, info: ValidationInfo) -> int:
        return _not_below(value, info, 'min')

    model_config = ConfigDict(frozen=True)


class AmountRange(BaseModel):
    min: float = Field(gt=0)
    max: float = Field(gt=0)
    min_decimals: int = Field(ge=0, le=18)
    max_decimals: int = Field(ge=0, le=18)

    @field_validator('max')
    @classmethod
    def validate_max(cls, value: float, info: ValidationInfo) -> float:
        return _not_below(value, info, 'min')

    @field_validator('max_decimals')
    @classmethod
    def validate_max_decimals(cls, value: int, info: ValidationInfo) -> int:
        return _not_below(value, info, 'min_decimals')

    model_config = ConfigDict(frozen=True)


class ShareRange(AmountRange):
    min: float = Field(gt=0, le=1)
    max: float = Field(gt=0, le=1)


class GasSettings(BaseModel):
    start_gwei: float = Field(gt=0)
    step: float = Field(ge=0)
    delay_minutes: float = Field(ge=0)
    max_gwei: float = Field(gt=0)

    @field_validator('max_gwei')
    @classmethod
    def validate_max_gwei(cls, value: float, info: ValidationInfo) -> float:
        return _not_below(value, info, 'start_gwei')

    model_config = ConfigDict(frozen=True)


class Config(BaseModel):
    binance_api_key: str = ""
    binance_api_secret: str = ""
    tg_token: str = ""
    tg_chat_ids: list[str] = Field(default_factory=list)

    topup_amount: AmountRange
    bridge_share: ShareRange
    topup_chains: list[str] = Field(min_length=1)
    gas: GasSettings

    delay_after_cex_withdraw: DelayRange
    delay_between_accounts: DelayRange

    shuffle_wallets: bool = SHUFFLE_WALLETS
    wait_for_gas_for_cex_topup: bool = False
    max_relayer_fee_eth: float = Field(gt=0)
    balance_deadline_sec: int = Field(default=600, ge=0)
    show_debug_log: bool = False
    rpcs: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra='forbid',
    )

    @field_validator('tg_chat_ids', mode='before')
    @classmethod
    def validate_tg_chat_ids(cls, value):
        if value is None:
            return []
        if isinstance(value, (str, int)):
            value = [value]
        return [str(chat).strip() for chat in value if str(chat).strip()]

    @field_validator('topup_chains')
    @classmethod
    def validate_topup_chains(cls, value: list[str]) -> list[str]:
        chains = [chain.strip().lower() for chain in value]
        for chain in chains:
            if chain not in CHAINS:
                raise ValueError(f'unknown chain: {chain}')
            if chain == DEST_CHAIN:
                raise ValueError(f'{DEST_CHAIN} is the destination chain and cannot be topped up from CEX')
        return chains

    @field_validator('rpcs')
    @classmethod
    def validate_rpcs(cls, value: dict[str, str]) -> dict[str, str]:
        unknown = set(value) - set(CHAINS)
        if unknown:
            raise ValueError(f'unknown chains in rpcs: {", ".join(sorted(unknown))}')
        return value

    def rpc_for(self, chain_name: str) -> str:
        return self.rpcs.get(chain_name) or CHAINS[chain_name].rpc
