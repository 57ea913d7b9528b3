"""Client for OpenAI-compatible chat completion APIs."""

import json
import logging
import os
from typing import List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .config import ClientConfig, OPENAI_API_BASE, PRESETS, TIMEOUT
from .errors import DecodeError, ResponseReadError, TransportError, error_for_status
from .models import Completion, CompletionRequest, Model, ModelListResponse

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def decode_body(model_cls: Type[T], raw: bytes) -> T:
    """
    Parse a response body into model_cls.

    Raises:
        DecodeError: if the body is not JSON or does not match the expected shape
    """
    try:
        payload = json.loads(raw)
    except ValueError as e:
        logger.error(f"Response body is not valid JSON: {str(e)}")
        raise DecodeError(f"Response body is not valid JSON: {str(e)}") from e

    try:
        return model_cls.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Response does not match {model_cls.__name__}: {str(e)}")
        raise DecodeError(f"Response does not match {model_cls.__name__}") from e


class OpenAIClient:
    """Minimal client exposing the model catalog and chat completions."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = PRESETS["openai"],
        organization_id: Optional[str] = None,
        timeout: float = TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        :param api_key: API key sent as a Bearer token, required
        :param base_url: Base URL of the API or a preset name such as "openai"
        :param organization_id: Optional organization sent as OpenAI-Organization
        :param timeout: Timeout in seconds applied to every request
        :param transport: Optional httpx transport used for every call
        :raises ConfigError: if the API key is missing or the base URL is invalid
        """
        self.config = ClientConfig.create(
            api_key, base_url=base_url, organization_id=organization_id, timeout=timeout
        )
        self._transport = transport

    @classmethod
    def from_env(cls, **kwargs) -> "OpenAIClient":
        """Build a client from OPENAI_API_KEY, OPENAI_ORGANIZATION_ID and the configured base URL."""
        kwargs.setdefault("base_url", OPENAI_API_BASE)
        kwargs.setdefault("organization_id", os.environ.get("OPENAI_ORGANIZATION_ID"))
        return cls(os.environ.get("OPENAI_API_KEY"), **kwargs)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    async def list_models(self) -> List[Model]:
        """Return the model catalog in the order the server lists it."""
        raw = await self._call("GET", "/models")
        return decode_body(ModelListResponse, raw).data

    async def complete(self, request: CompletionRequest, verbose: bool = False) -> Completion:
        """
        Request a chat completion.

        Args:
            request: The completion payload
            verbose: Log the raw response body at debug level

        Returns:
            The decoded Completion
        """
        body = request.to_json().encode()
        raw = await self._call("POST", "/chat/completions", content=body)
        if verbose:
            logger.debug(f"Response: {raw.decode(errors='replace')}")
        return decode_body(Completion, raw)

    async def _call(self, method: str, path: str, content: Optional[bytes] = None) -> bytes:
        """
        Perform one round trip and return the full body of a 200 response.

        Raises:
            TransportError: the request could not be sent or no response arrived
            ApiError: the server answered with a non-200 status
            ResponseReadError: the body could not be read
        """
        url = f"{self.config.base_url}{path}"
        headers = dict(self.config.headers)
        logger.info(f"Calling {method} {url}")

        async with httpx.AsyncClient(
            transport=self._transport, timeout=self.config.timeout
        ) as client:
            request = client.build_request(method, url, headers=headers, content=content)
            try:
                response = await client.send(request, stream=True)
            except httpx.TransportError as e:
                logger.error(f"Error calling {url}: {str(e)}")
                raise TransportError(f"Error calling {url}: {str(e)}") from e

            try:
                if response.status_code != 200:
                    raise error_for_status(response.status_code, await self._error_text(response))
                try:
                    return await response.aread()
                except httpx.HTTPError as e:
                    logger.error(f"Error reading response from {url}: {str(e)}")
                    raise ResponseReadError(f"Error reading response from {url}: {str(e)}") from e
            finally:
                await response.aclose()

    @staticmethod
    async def _error_text(response) -> Optional[str]:
        try:
            content = await response.aread()
        except httpx.HTTPError as e:
            logger.warning(f"Could not read error body for status {response.status_code}: {str(e)}")
            return None
        if isinstance(content, bytes):
            content = content.decode(errors="replace")
        logger.warning(f"API returned status {response.status_code}: {content}")
        return content
