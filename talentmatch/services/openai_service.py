from typing import Any, Dict, Optional
import logging

import openai

from talentmatch.config.settings import Settings
from talentmatch.exceptions import (
    ConfigurationError,
    RateLimited,
    QuotaExhausted,
    UpstreamError,
    MalformedResponse,
)
from talentmatch.schemas.inference import InferenceRequest, StructuredPayload, ToolCallResult, TextResult

logger = logging.getLogger(__name__)

class OpenAIService:
    """Client for the OpenAI-compatible scoring service.

    Makes exactly one chat-completions call per request. Retries, batching and
    pacing belong to the BatchScheduler, so the SDK's own retries are disabled.
    """

    def __init__(self, settings: Settings, client: Optional[openai.AsyncOpenAI] = None):
        self.settings = settings
        self.model = settings.openai_model
        if client is not None:
            self.client = client
        elif settings.openai_api_key:
            self.client = openai.AsyncOpenAI(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                timeout=settings.request_timeout_seconds,
                max_retries=0
            )
        else:
            logger.warning("OpenAI API key is missing in settings.")
            self.client = None

    def is_configured(self) -> bool:
        """Check if the client is initialized and likely usable."""
        return self.client is not None

    def ensure_configured(self) -> None:
        if not self.is_configured():
            raise ConfigurationError("OPENAI_API_KEY is not configured")

    async def complete(self, request: InferenceRequest) -> StructuredPayload:
        """
        Send one request and return the raw payload, unparsed.

        Returns ToolCallResult when the service filled in the forced function,
        TextResult when it answered in prose.
        """
        self.ensure_configured()

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": request.messages(),
            "temperature": request.temperature,
        }
        if request.is_structured:
            kwargs["tools"] = request.tools()
            kwargs["tool_choice"] = request.tool_choice()

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except openai.RateLimitError as e:
            logger.warning(f"Scoring service rate limited the request: {e}")
            raise RateLimited("Rate limit exceeded. Please try again later.")
        except openai.APIStatusError as e:
            logger.error(f"Scoring service error: {e.status_code} {e.message}", extra={"status_code": e.status_code})
            if e.status_code == 402:
                raise QuotaExhausted("AI credits exhausted. Please add funds to continue.")
            raise UpstreamError(f"AI gateway error: {e.status_code}")
        except openai.APITimeoutError:
            logger.error("Scoring service request timed out")
            raise UpstreamError("AI gateway request timed out")
        except openai.APIConnectionError as e:
            logger.error(f"Could not reach scoring service: {e}")
            raise UpstreamError("AI gateway unreachable")

        if not response.choices:
            raise MalformedResponse("No response from AI")

        message = response.choices[0].message
        if message.tool_calls:
            return ToolCallResult(arguments=message.tool_calls[0].function.arguments)
        if message.content:
            return TextResult(content=message.content)
        raise MalformedResponse("No match data generated")
