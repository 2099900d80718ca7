import asyncio
import json
import ssl as ssl_module
from dataclasses import dataclass
from types import TracebackType
from typing import Literal, Any, Self, Type

import aiohttp
import certifi
import ua_generator
from yarl import URL
from better_proxy import Proxy

from relay_topup.exceptions.api_exceptions import (
    APIClientError, APIConnectionError, APITimeoutError,
    APIRateLimitError, APIResponseError, APIClientSideError,
    APIServerSideError, APIRetryExhaustedError, APISSLError
)
from relay_topup.logger import AsyncLogger
from relay_topup.utils.retry import RetryPolicy


logger = AsyncLogger()


@dataclass(frozen=True, slots=True)
class APIResponse:
    status_code: int
    url: str
    text: str
    data: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def raise_for_status(response: APIResponse) -> None:
    status_code = response.status_code
    result = {"url": response.url, "text": response.text, "data": response.data}
    if status_code == 429:
        raise APIRateLimitError(f"Too many requests: {status_code}", status_code, result)
    if 400 <= status_code < 500:
        raise APIClientSideError(f"Client error: {status_code}", status_code, result)
    if status_code >= 500:
        raise APIServerSideError(f"Server error: {status_code}", status_code, result)
    if not response.ok:
        raise APIResponseError(f"Unexpected status: {status_code}", status_code, result)


class BaseAPIClient:
    RETRYABLE_ERRORS = (
        APIConnectionError,
        APITimeoutError,
        APISSLError,
        APIResponseError,
    )

    def __init__(
        self,
        base_url: str,
        proxy: Proxy | None = None
    ) -> None:
        self.base_url: str = base_url
        self.proxy: Proxy | None = proxy
        self.session: aiohttp.ClientSession | None = None
        self._headers: dict[str, str | bool | list[str]] = self._generate_headers()
        self._ssl_context = ssl_module.create_default_context(cafile=certifi.where())

    @staticmethod
    def _generate_headers() -> dict[str, str | bool | list[str]]:
        user_agent = ua_generator.generate(
            device='desktop',
            platform='windows',
            browser='chrome'
        )

        return {
            'accept-language': 'en-US;q=0.9,en;q=0.8',
            'content-type': 'application/json',
            'sec-ch-ua': user_agent.ch.brands,
            'sec-ch-ua-mobile': user_agent.ch.mobile,
            'sec-ch-ua-platform': user_agent.ch.platform,
            'user-agent': user_agent.text
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(ssl=self._ssl_context, limit=10),
                headers=self._headers
            )
        return self.session

    async def __aenter__(self) -> Self:
        await self._get_session()
        return self

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None
    ) -> None:
        await self.close()

    def _build_url(self, method: str | None, url: str | None) -> str:
        if url:
            return url
        if not method:
            raise APIClientError("Either url or method must be provided")
        return str(URL(self.base_url) / method.lstrip('/'))

    async def _request_once(
        self,
        request_type: Literal["POST", "GET"],
        target_url: str,
        json_data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        timeout: float = 30.0
    ) -> APIResponse:
        session = await self._get_session()

        try:
            async with session.request(
                method=request_type,
                url=target_url,
                json=json_data,
                params=params,
                proxy=self.proxy.as_url if self.proxy else None,
                raise_for_status=False,
                timeout=aiohttp.ClientTimeout(total=timeout)
            ) as response:
                content_type = response.headers.get('Content-Type', '').lower()
                text = await response.text()

                data = None
                try:
                    if text and ('json' in content_type or text.strip().startswith('{')):
                        data = json.loads(text)
                except json.JSONDecodeError:
                    pass

                return APIResponse(
                    status_code=response.status,
                    url=str(response.url),
                    text=text,
                    data=data
                )

        except asyncio.TimeoutError as error:
            raise APITimeoutError(f"Request timed out after {timeout} seconds") from error
        except aiohttp.ClientSSLError as error:
            await self.close()
            raise APISSLError(f"SSL Error: {error}") from error
        except aiohttp.ClientError as error:
            await self.close()
            raise APIConnectionError(f"Connection error: {error}") from error

    async def send_request(
        self,
        request_type: Literal["POST", "GET"] = "POST",
        method: str | None = None,
        json_data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        url: str | None = None,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 30.0
    ) -> APIResponse:
        """
        Send a request, retrying transport errors and non-2xx answers.

        Every attempt allowed by ``retry_policy`` is used; when all of them
        fail ``APIRetryExhaustedError`` carries the last error.
        """
        target_url = self._build_url(method, url)
        policy = retry_policy or RetryPolicy()
        last_error: Exception | None = None

        for attempt in policy.attempts():
            try:
                response = await self._request_once(
                    request_type, target_url, json_data=json_data, params=params, timeout=timeout
                )
                raise_for_status(response)
                return response

            except self.RETRYABLE_ERRORS as error:
                last_error = error
                await logger.logger_msg(
                    msg=f"Attempt {attempt}/{policy.max_attempts} to {target_url} failed: {error}",
                    type_msg="debug", class_name=self.__class__.__name__, method_name="send_request"
                )
                if attempt < policy.max_attempts:
                    await asyncio.sleep(policy.backoff())

        raise APIRetryExhaustedError(
            f"The request failed after {policy.max_attempts} attempts to {target_url}",
            policy.max_attempts,
            last_error
        )

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None
