import threading
from typing import Protocol

import requests

from resume_screener.models.ai_settings import CompletionOptions, LLMSettings, get_llm_settings
from resume_screener.utils.exceptions import (
    CompletionProviderError,
    CompletionTimeoutError,
    ConfigurationError,
)
from resume_screener.utils.logging_config import get_logger

logger = get_logger(__name__)


class CompletionClient(Protocol):
    """Prompt in, free text out.

    Clients may also expose cancel(), called when the caller stops waiting.
    """

    def complete(self, prompt: str, options: CompletionOptions) -> str: ...


class XAICompletionClient:
    """Chat-completions client for the xAI API"""

    def __init__(self, api_key: str = None, base_url: str = "https://api.x.ai/v1", timeout: float = 30.0):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        # one session per in-flight call, so cancel() can release it
        self._sessions = set()
        self._lock = threading.Lock()

    def cancel(self) -> None:
        """Close the sessions of every in-flight call; their replies are discarded."""
        with self._lock:
            sessions = list(self._sessions)
            self._sessions.clear()
        for session in sessions:
            session.close()
        if sessions:
            logger.info(f"Cancelled {len(sessions)} in-flight completion call(s)")

    def complete(self, prompt: str, options: CompletionOptions) -> str:
        if not self._api_key:
            raise ConfigurationError("XAI_API_KEY is missing", config_key="XAI_API_KEY")

        session = requests.Session()
        with self._lock:
            self._sessions.add(session)
        try:
            resp = self._post(session, prompt, options)
        finally:
            with self._lock:
                cancelled = session not in self._sessions
                self._sessions.discard(session)
            session.close()

        if cancelled:
            raise CompletionProviderError("Completion call was cancelled", model_name=options.model)

        try:
            text = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise CompletionProviderError(
                "Unexpected completion response shape", model_name=options.model, cause=e,
            ) from e

        logger.debug(f"Completion received: {len(text or '')} chars from {options.model}")
        return text or ""

    def _post(self, session: requests.Session, prompt: str, options: CompletionOptions) -> requests.Response:
        url = f"{self._base_url}/chat/completions"
        try:
            resp = session.post(
                url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={
                    "model": options.model,
                    "messages": [
                        {"role": "system", "content": options.system_instruction},
                        {"role": "user", "content": prompt},
                    ],
                    "max_tokens": options.max_output_tokens,
                    "temperature": options.temperature,
                    "stream": False,
                },
                timeout=self._timeout,
            )
            resp.raise_for_status()
            return resp
        except requests.Timeout as e:
            raise CompletionTimeoutError(
                f"Completion request timed out after {self._timeout}s",
                timeout=self._timeout, model_name=options.model, cause=e,
            ) from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise CompletionProviderError(
                f"Completion provider returned HTTP {status}",
                model_name=options.model, status_code=status, cause=e,
            ) from e
        except requests.RequestException as e:
            raise CompletionProviderError(
                f"Completion request failed: {e}", model_name=options.model, cause=e,
            ) from e


def build_completion_client(settings: LLMSettings) -> CompletionClient:
    return XAICompletionClient(api_key=settings.api_key, base_url=settings.base_url, timeout=settings.timeout)


def get_completion_client() -> CompletionClient:
    """FastAPI dependency; overridden in tests with a canned client."""
    return build_completion_client(get_llm_settings())
