"""LLM completion service used to answer Slack mentions."""

from typing import Any, Dict, Optional

import httpx

from ..config import BridgeConfig
from ..models import CompletionRequest, CompletionResult, Failure, FailureReason, Success
from ..utils.logger import logger


class ResponseGenerator:
    """Service for requesting a single chat completion from the configured endpoint.

    Every outcome, including network and protocol failures, is returned as a
    CompletionResult. Nothing is retried.
    """

    def __init__(self, config: BridgeConfig, client: Optional[httpx.Client] = None):
        """Initialize the HTTP client.

        Args:
            config: Bridge configuration
            client: Optional preconfigured httpx client (shared across threads)
        """
        self.config = config
        self.client = client or httpx.Client(timeout=config.request_timeout)

    def build_request(self, user_content: str, model_override: Optional[str] = None) -> CompletionRequest:
        system_prompt = self.config.system_prompt
        return CompletionRequest(
            model=model_override or self.config.default_model,
            user_content=scrub_text(user_content),
            system_prompt=scrub_text(system_prompt) if system_prompt else system_prompt,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "x-operator-id": self.config.operator_id,
            "Authorization": f"Bearer {self.config.credential.get_secret_value()}",
        }

    def generate(self, user_content: str, model_override: Optional[str] = None) -> CompletionResult:
        """Generate a reply for the given text.

        Args:
            user_content: Text sent as the user message
            model_override: Model to use instead of the configured default

        Returns:
            Success with the completion text, or Failure with the reason
        """
        request = self.build_request(user_content, model_override)
        logger.debug(f"Requesting completion from {request.model} ({len(user_content)} chars)")

        try:
            response = self.client.post(
                str(self.config.endpoint_url),
                headers=self._headers(),
                json=request.to_payload(),
            )
        except (httpx.InvalidURL, UnicodeEncodeError) as e:
            logger.error(f"Could not build LLM request: {type(e).__name__}: {e}")
            return Failure(FailureReason.TRANSPORT_ERROR, detail=type(e).__name__)
        except httpx.TimeoutException as e:
            logger.warning(f"LLM request timed out after {self.config.request_timeout}s: {e}")
            return Failure(FailureReason.TRANSPORT_ERROR, detail="timeout")
        except httpx.RequestError as e:
            logger.warning(f"LLM request failed: {type(e).__name__}: {e}")
            return Failure(FailureReason.TRANSPORT_ERROR, detail=type(e).__name__)

        if not response.is_success:
            logger.warning(f"LLM endpoint returned HTTP {response.status_code}: {response.text[:200]}")
            return Failure(FailureReason.UPSTREAM_ERROR, status=response.status_code)

        try:
            body = response.json()
        except ValueError:
            logger.warning(f"LLM response is not valid JSON: {response.text[:200]}")
            return Failure(FailureReason.MALFORMED_RESPONSE, detail="invalid json")

        text = extract_completion_text(body)
        if text is None:
            logger.warning("LLM response has no choices[0].message.content")
            return Failure(FailureReason.MALFORMED_RESPONSE, detail="missing content")

        return Success(text)

    def close(self) -> None:
        self.client.close()


def scrub_text(text: str) -> str:
    """Replace lone surrogates (valid in Slack's JSON escapes, not in UTF-8) with '?'."""
    return text.encode("utf-8", errors="replace").decode("utf-8")


def extract_completion_text(body: Any) -> Optional[str]:
    """Return choices[0].message.content if it is a string, else None."""
    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None
