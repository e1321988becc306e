import logging
from typing import Optional

import openai
from openai import OpenAI

from agentchat.core import config
from agentchat.core.errors import UpstreamError, UpstreamFailure

logger = logging.getLogger(__name__)


class ReplyGenerator:
    """
    Calls a chat completions API (any OpenAI-compatible endpoint) to produce
    one assistant reply from a fully rendered prompt.

    Every failure (missing key, auth, rate limit, transport, empty or malformed
    completion) is raised as UpstreamError so callers only handle one type.
    Its `kind` tells key and permission problems, rate limits and content
    filtering apart from everything else.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[OpenAI] = None,
    ):
        self.api_key = config.LLM_API_KEY if api_key is None else api_key
        self.base_url = base_url or config.LLM_BASE_URL
        self.model = model or config.LLM_MODEL
        self.timeout = timeout or config.LLM_TIMEOUT_SECONDS
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise UpstreamError("LLM API key not configured", kind=UpstreamFailure.AUTH)
            self._client = OpenAI(
                base_url=self.base_url,
                api_key=self.api_key,
                timeout=self.timeout,
                default_headers={"User-Agent": "AI-Agent-Chat/1.0"},
            )
        return self._client

    def generate(self, prompt: str) -> str:
        req_params = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": config.LLM_TEMPERATURE,
            "max_tokens": config.LLM_MAX_TOKENS,
            "top_p": config.LLM_TOP_P,
        }

        try:
            completion = self.client.chat.completions.create(**req_params)
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            logger.error("LLM API rejected the credentials: %s", exc)
            raise UpstreamError(f"LLM API key rejected: {exc}", kind=UpstreamFailure.AUTH) from exc
        except openai.RateLimitError as exc:
            logger.warning("LLM API rate limit or quota exceeded: %s", exc)
            raise UpstreamError(f"Rate limit exceeded: {exc}", kind=UpstreamFailure.RATE_LIMIT) from exc
        except openai.OpenAIError as exc:
            logger.error("LLM API error: %s", exc)
            raise UpstreamError(f"LLM API error: {exc}") from exc

        if not completion.choices:
            raise UpstreamError("No response generated from LLM API")

        choice = completion.choices[0]
        if getattr(choice, "finish_reason", None) == "content_filter":
            logger.warning("Response blocked by safety filters")
            raise UpstreamError("Response blocked by safety filters", kind=UpstreamFailure.SAFETY)

        response_message = choice.message
        content = getattr(response_message, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise UpstreamError("Invalid response structure from LLM API")

        return content.strip()


def get_reply_generator() -> ReplyGenerator:
    """FastAPI dependency; tests override it with a stub."""
    return ReplyGenerator()
