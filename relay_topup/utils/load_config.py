import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError
from ruamel.yaml import YAML

from relay_topup.exceptions.custom_exceptions import ConfigurationError
from relay_topup.models import Config


yaml = YAML(typ='safe')


class ConfigLoader:
    REQUIRED_PARAMS: frozenset[str] = frozenset({
        'topup_amount',
        'bridge_share',
        'topup_chains',
        'gas',
        'delay_after_cex_withdraw',
        'delay_between_accounts',
        'max_relayer_fee_eth'
    })

    # environment variable -> settings key
    ENV_OVERRIDES: dict[str, str] = {
        'BINANCE_API_KEY': 'binance_api_key',
        'BINANCE_API_SECRET': 'binance_api_secret',
        'TG_BOT_TOKEN': 'tg_token',
    }

    def __init__(self, base_path: str | Path | None = None) -> None:
        self.base_path = Path(base_path or Path(__file__).parent.parent.parent)
        self.config_path = self.base_path / 'config'
        self.settings_path = self.config_path / 'settings.yaml'
        self.env_path = self.base_path / '.env'

    def _load_yaml(self) -> dict:
        try:
            with open(self.settings_path, 'r', encoding='utf-8') as file:
                config = yaml.load(file)
        except FileNotFoundError as error:
            raise ConfigurationError(f'Settings file not found: {self.settings_path}') from error
        except Exception as error:
            raise ConfigurationError(f'Error loading configuration: {error}') from error

        if not isinstance(config, dict):
            raise ConfigurationError('Configuration must be a dictionary')

        missing_fields = self.REQUIRED_PARAMS - set(config.keys())
        if missing_fields:
            raise ConfigurationError(
                f'Missing required fields: {", ".join(sorted(missing_fields))}'
            )

        return config

    def _apply_env(self, params: dict) -> dict:
        load_dotenv(self.env_path)

        for env_name, key in self.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                params[key] = value

        chat_ids = os.getenv('TG_CHAT_IDS') or os.getenv('TG_CHAT_ID')
        if chat_ids:
            params['tg_chat_ids'] = [chat.strip() for chat in chat_ids.split(',') if chat.strip()]

        return params

    def load(self) -> Config:
        params = self._apply_env(self._load_yaml())

        try:
            return Config.model_validate(params)
        except ValidationError as error:
            raise ConfigurationError(f'Configuration error: {error}') from error


def load_config(base_path: str | Path | None = None) -> Config:
    return ConfigLoader(base_path).load()
