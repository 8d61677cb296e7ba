"""
Generation client.

Wraps an LLMProvider behind the collaborator contract: a system instruction
and a user payload go in, raw completion text comes out. Blocking SDK calls
run in a worker thread so the event loop stays free.
"""
import asyncio
import logging
import time
from typing import Optional

from ..exceptions import NetworkError, ParseError
from ..llm.provider import LLMProvider
from .request_builder import SynthesisRequest

logger = logging.getLogger(__name__)


class GenerationClient:
    """Runs one synthesis request against a provider."""

    def __init__(self, provider: LLMProvider, timeout: Optional[float] = None):
        self.provider = provider
        self.timeout = timeout

    @property
    def provider_name(self) -> str:
        return getattr(self.provider, "provider_name", self.provider.__class__.__name__)

    def _messages(self, request: SynthesisRequest):
        return [
            {"role": "system", "content": request.system_instruction},
            {"role": "user", "content": request.to_user_payload()},
        ]

    async def generate(self, request: SynthesisRequest) -> str:
        """
        Send the request and return the raw completion text.

        Raises:
            NetworkError: provider unreachable, timed out or raised
            ParseError: provider returned no text
        """
        started = time.monotonic()
        call = asyncio.to_thread(self.provider.generate, self._messages(request))
        try:
            if self.timeout:
                response = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                response = await call
        except asyncio.TimeoutError as e:
            logger.error(f"{request.kind.value} call to {self.provider_name} timed out")
            raise NetworkError(f"Generation timed out after {self.timeout}s") from e
        except Exception as e:
            logger.error(f"{request.kind.value} call to {self.provider_name} failed: {e}")
            raise NetworkError(f"Generation provider error: {e}") from e

        elapsed = time.monotonic() - started
        logger.info(
            f"{request.kind.value} call to {self.provider_name} "
            f"({self.provider.model}) took {elapsed:.2f}s"
        )

        if response.is_truncated:
            logger.warning(f"{request.kind.value} response hit the token limit")

        if not response.content or not response.content.strip():
            raise ParseError("Empty response from generation provider", raw=response.content or "")
        return response.content
