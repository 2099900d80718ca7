import asyncio
from typing import Any, Union, Self

from better_proxy import Proxy
from eth_account import Account
from eth_typing import ChecksumAddress
from pydantic import HttpUrl
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.eth import AsyncEth
from web3.types import Nonce, TxParams
from web3.middleware import ExtraDataToPOAMiddleware

from relay_topup.exceptions.custom_exceptions import TransactionReverted, WalletError
from relay_topup.logger import AsyncLogger


logger = AsyncLogger()
Account.enable_unaudited_hdwallet_features()


class BlockchainError(Exception):
    """
    Base class for blockchain-related errors.
    """


class ChainClient(AsyncWeb3):
    """Read-only access to one chain, optionally through a proxy."""

    def __init__(
        self,
        rpc_url: Union[HttpUrl, str],
        proxy: Proxy | None = None,
        request_timeout: int = 30
    ) -> None:
        self._provider = AsyncHTTPProvider(
            str(rpc_url),
            request_kwargs={
                "proxy": proxy.as_url if proxy else None,
                "timeout": request_timeout
            }
        )

        super().__init__(self._provider, modules={"eth": AsyncEth})

        self.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        self._is_closed = False

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        if self._is_closed:
            return

        try:
            if isinstance(self._provider, AsyncHTTPProvider):
                await self._provider.disconnect()
                await logger.logger_msg(
                    msg="Provider disconnected successfully",
                    type_msg="debug",
                    class_name=self.__class__.__name__,
                    method_name="close"
                )
        except Exception as e:
            await logger.logger_msg(
                msg=f"Error during provider cleanup: {str(e)}",
                type_msg="warning",
                class_name=self.__class__.__name__,
                method_name="close"
            )
        finally:
            self._is_closed = True

    @staticmethod
    def _get_checksum_address(address: str) -> ChecksumAddress:
        return AsyncWeb3.to_checksum_address(address)

    async def get_balance(self, address: str) -> int:
        return await self.eth.get_balance(self._get_checksum_address(address))

    async def get_network_id(self) -> int:
        return int(await self.eth.chain_id)

    async def gas_price_gwei(self) -> float:
        gas_price = await self.eth.gas_price
        return float(self.from_wei(gas_price, "gwei"))

    async def send_transaction(self, payload: dict[str, Any]) -> str:
        raise WalletError("Read-only chain client cannot send transactions")


class Wallet(ChainClient):
    DEFAULT_TIMEOUT = 600
    MAX_RETRIES = 3

    def __init__(
        self,
        keypair: str,
        rpc_url: Union[HttpUrl, str],
        proxy: Proxy | None = None,
        request_timeout: int = 30
    ) -> None:
        super().__init__(rpc_url, proxy, request_timeout)
        self.keypair = self._initialize_account(keypair)

    @staticmethod
    def _initialize_account(input_str: str) -> Account:
        input_str = input_str.strip()

        key_candidate = input_str.replace(" ", "")
        if key_candidate.startswith('0x'):
            key_body = key_candidate[2:]
        else:
            key_body = key_candidate

        if len(key_body) == 64 and all(c in '0123456789abcdefABCDEF' for c in key_body):
            keypair = '0x' + key_body
            try:
                return Account.from_key(keypair)
            except ValueError:
                pass

        words = [word for word in input_str.split() if word]
        if len(words) in (12, 24):
            mnemonic = ' '.join(words)
            try:
                return Account.from_mnemonic(mnemonic)
            except ValueError as e:
                raise WalletError(f"Invalid mnemonic phrase: {e}")
        else:
            raise WalletError("Input must be a 12 or 24 word mnemonic phrase or a 64-character hexadecimal private key")

    @property
    def wallet_address(self):
        return self.keypair.address

    @property
    async def use_eip1559(self) -> bool:
        try:
            latest_block = await self.eth.get_block('latest')
            return 'baseFeePerGas' in latest_block
        except Exception as e:
            await logger.logger_msg(
                msg=f"Error checking EIP-1559 support: {e}", type_msg="error",
                class_name=self.__class__.__name__, method_name="use_eip1559"
            )
            return False

    async def get_nonce(self) -> Nonce:
        for attempt in range(self.MAX_RETRIES):
            try:
                count = await self.eth.get_transaction_count(self.wallet_address, 'pending')
                return Nonce(count)
            except Exception as e:
                await logger.logger_msg(
                    msg=f"Failed to get nonce (attempt {attempt + 1}): {e}", type_msg="warning",
                    class_name=self.__class__.__name__, method_name="get_nonce"
                )
                if attempt < self.MAX_RETRIES - 1:
                    await asyncio.sleep(1)
                else:
                    raise BlockchainError(f"Failed to get nonce after {self.MAX_RETRIES} attempts") from e

    async def _estimate_gas_params(
        self,
        tx_params: dict,
        gas_buffer: float = 1.2,
        gas_price_buffer: float = 1.05
    ) -> dict:
        try:
            if "gas" not in tx_params:
                gas_estimate = await self.eth.estimate_gas(tx_params)
                tx_params["gas"] = int(gas_estimate * gas_buffer)

            if "gasPrice" in tx_params or "maxFeePerGas" in tx_params:
                return tx_params

            if await self.use_eip1559:
                latest_block = await self.eth.get_block('latest')
                base_fee = latest_block['baseFeePerGas']
                priority_fee = await self.eth.max_priority_fee

                tx_params.update({
                    "maxPriorityFeePerGas": int(priority_fee * gas_price_buffer),
                    "maxFeePerGas": int((base_fee * 2 + priority_fee) * gas_price_buffer)
                })
            else:
                tx_params["gasPrice"] = int(await self.eth.gas_price * gas_price_buffer)

            return tx_params
        except Exception as error:
            raise BlockchainError(f"Failed to estimate gas: {error}") from error

    async def build_transaction_params(self, payload: dict[str, Any]) -> TxParams:
        """Turn an aggregator-style payload (hex or decimal strings) into web3 params."""
        tx_params: dict[str, Any] = {
            "from": self.wallet_address,
            "to": self._get_checksum_address(payload["to"]),
            "value": int(str(payload.get("value", 0)), 0),
            "data": payload.get("data") or "0x",
            "nonce": await self.get_nonce(),
            "chainId": int(str(payload["chainId"]), 0) if "chainId" in payload else await self.get_network_id(),
        }

        for key in ("gas", "gasPrice", "maxFeePerGas", "maxPriorityFeePerGas"):
            if payload.get(key) is not None:
                tx_params[key] = int(str(payload[key]), 0)

        return await self._estimate_gas_params(tx_params)

    async def send_transaction(self, payload: dict[str, Any]) -> str:
        transaction = await self.build_transaction_params(payload)

        signed = self.keypair.sign_transaction(transaction)
        tx_hash = await self.eth.send_raw_transaction(signed.raw_transaction)

        receipt = await asyncio.wait_for(
            self.eth.wait_for_transaction_receipt(tx_hash, timeout=self.DEFAULT_TIMEOUT),
            timeout=self.DEFAULT_TIMEOUT + 30
        )

        tx_hash_hex = self.to_hex(tx_hash)
        if receipt["status"] != 1:
            raise TransactionReverted(f"Transaction reverted. Hash: {tx_hash_hex}")

        return tx_hash_hex
