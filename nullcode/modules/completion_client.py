"""Model invocation for completion requests.

Thin async wrapper around LiteLLM. Every failure mode (missing credentials,
unsupported provider, timeout, provider error, unparseable output) is logged
and collapses to an empty completion, which the post-processor treats as
"no suggestion".

Providers are handled symmetrically: the only thing that differs between
openai and anthropic is the "<provider>/<model>" string handed to LiteLLM.
"""

from __future__ import annotations

import asyncio
import json
import re
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from .config import SUPPORTED_PROVIDERS, ProviderSettings
from .schemas import CompletionPayload


ProviderCall = Callable[..., Awaitable[Any]]

_FENCED_JSON_RE = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")
_BARE_JSON_RE = re.compile(r"\{[\s\S]*\}")

_PROBE_MESSAGES = [{"role": "user", "content": "Test prompt for validation."}]


def _response_content(resp: Any) -> str:
    try:
        return resp["choices"][0]["message"]["content"] or ""
    except Exception:
        return str(resp or "")


def parse_completion_payload(content: str) -> CompletionPayload:
    """Parse {"codeSnippet", "language"} out of raw model text.

    Accepts bare JSON, fenced JSON, or JSON surrounded by chatter.
    Raises ValueError when no valid payload is found.
    """
    text = (content or "").strip()
    candidates = [text]
    fenced = _FENCED_JSON_RE.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    bare = _BARE_JSON_RE.search(text)
    if bare:
        candidates.append(bare.group(0))

    last_error: Optional[Exception] = None
    for candidate in candidates:
        try:
            return CompletionPayload.model_validate(json.loads(candidate))
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            last_error = e

    raise ValueError(f"Invalid LLM JSON output: {last_error}")


class CompletionClient:
    """
    Fetches a completion candidate from the configured provider.

    Usage:
        client = CompletionClient(settings.provider)
        text = await client.fetch_completion(messages)
    """

    def __init__(self, settings: ProviderSettings, provider_call: Optional[ProviderCall] = None):
        self.settings = settings
        # Injected in tests; otherwise litellm.acompletion
        self._provider_call = provider_call

    def _configuration_error(self) -> Optional[str]:
        if not self.settings.api_key:
            return "API Key is missing."
        if not self.settings.name or not self.settings.model:
            return "Provider or Model is not selected."
        if self.settings.name not in SUPPORTED_PROVIDERS:
            return f"Unsupported provider. Please choose one of: {', '.join(SUPPORTED_PROVIDERS)}."
        return None

    async def _invoke(self, messages: List[Dict[str, str]], temperature: float) -> Any:
        kwargs = {
            "model": self.settings.litellm_model,
            "messages": messages,
            "temperature": temperature,
            "api_key": self.settings.api_key,
        }
        if self._provider_call is not None:
            call = self._provider_call(**kwargs)
        else:
            import litellm  # local import for testability

            call = litellm.acompletion(**kwargs)
        return await asyncio.wait_for(call, timeout=self.settings.timeout_seconds)

    async def fetch_completion(self, messages: List[Dict[str, str]]) -> str:
        """Return the model's code snippet, or "" on any failure."""
        problem = self._configuration_error()
        if problem:
            logger.error(problem)
            return ""

        start = time.time()
        try:
            resp = await self._invoke(messages, self.settings.temperature)
        except asyncio.TimeoutError:
            logger.warning(f"Completion request timed out after {self.settings.timeout_seconds}s")
            return ""
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error fetching completion: {type(e).__name__}: {e}")
            return ""

        latency_ms = int((time.time() - start) * 1000)
        logger.debug(f"Completion received from {self.settings.litellm_model} in {latency_ms}ms")

        try:
            payload = parse_completion_payload(_response_content(resp))
        except ValueError as e:
            logger.error(f"Error parsing completion: {e}")
            return ""

        return payload.code_snippet

    async def check_api_key(self) -> bool:
        """Probe the provider with a trivial prompt; True when it answers."""
        problem = self._configuration_error()
        if problem:
            logger.warning(f"API key check skipped: {problem}")
            return False

        try:
            await self._invoke(list(_PROBE_MESSAGES), 0)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error validating API key: {type(e).__name__}")
            return False
        return True
