"""Client for the hosted chat-completion gateway (OpenAI-compatible API)."""

import httpx
from typing import Optional
from consultant_hub.config import settings
from consultant_hub.errors import (
    ConfigurationError,
    GatewayError,
    PaymentRequired,
    RateLimited,
    TransportError
)
from consultant_hub.utils.logging_utils import StructuredLogger

DEFAULT_COMPLETION_TEXT = "No response generated."

logger = StructuredLogger("consultant_hub.gateway")


def build_user_prompt(context: str, query: str) -> str:
    """Join the knowledge context and the user's query into one user message."""
    return f"{context}\n---\nUSER QUERY: {query}"


class CompletionGateway:
    """Sends one system + user prompt pair to the completion endpoint.

    No retries and no streaming. Every call carries an explicit timeout;
    callers that need to abandon a request cancel the awaiting task.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://ai.gateway.lovable.dev/v1",
        model: str = "google/gemini-2.5-flash",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.transport = transport

    @property
    def headers(self):
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        placeholder: str = DEFAULT_COMPLETION_TEXT,
        correlation_id: Optional[str] = None,
    ) -> str:
        """
        Run a single chat completion.

        Args:
            system_prompt: Instructions for the model
            user_prompt: User message (context and query)
            placeholder: Returned when the gateway answers without content
            correlation_id: Optional id for log correlation

        Returns:
            Content of the first choice, or ``placeholder`` when absent

        Raises:
            RateLimited: gateway answered 429
            PaymentRequired: gateway answered 402
            GatewayError: any other non-2xx status
            TransportError: network failure, timeout or unparseable body
            ConfigurationError: no API key is configured
        """
        if not self.api_key:
            raise ConfigurationError("LLM_API_KEY is not configured")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=self.headers,
                    json=payload,
                )
        except httpx.TimeoutException as e:
            logger.error("Completion request timed out", correlation_id=correlation_id, error=str(e))
            raise TransportError(str(e), timed_out=True) from e
        except httpx.HTTPError as e:
            logger.error("Completion request failed", correlation_id=correlation_id, error=str(e))
            raise TransportError(str(e)) from e

        if response.status_code == 429:
            logger.warning("Completion gateway rate limited", correlation_id=correlation_id)
            raise RateLimited()
        if response.status_code == 402:
            logger.warning("Completion gateway requires payment", correlation_id=correlation_id)
            raise PaymentRequired()
        if not response.is_success:
            logger.error(
                "Completion gateway error",
                correlation_id=correlation_id,
                status_code=response.status_code,
                body=response.text[:2000]
            )
            raise GatewayError(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Completion response could not be decoded", correlation_id=correlation_id, error=str(e))
            raise TransportError("unparseable completion response") from e

        content = self._extract_content(data)
        if not content:
            logger.warning("Completion response had no content", correlation_id=correlation_id)
            return placeholder
        return content

    @staticmethod
    def _extract_content(data) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        choices = data.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            return None
        message = choices[0].get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        return content if isinstance(content, str) else None


def get_completion_gateway() -> CompletionGateway:
    """FastAPI dependency building a gateway from settings."""
    return CompletionGateway(
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        model=settings.llm_model,
        timeout=settings.llm_timeout_seconds,
    )
