"""Async AI client wrapper built around OpenAI-compatible endpoints."""

from __future__ import annotations

import inspect
import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, cast

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI
from openai.types.chat import ChatCompletion, ChatCompletionMessageParam, ChatCompletionToolParam
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .orchestration.types import AssistantTurn, Message, ToolCall

LOGGER = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.2
TOOL_CHOICE = "auto"


class ModelEndpointError(RuntimeError):
    """Fatal failure talking to the chat-completions endpoint.

    Attributes:
        status_code: HTTP status of the failed response, ``None`` for transport failures.
        body: Raw response body when one was received.
    """

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is None:
            return base
        if self.body:
            return f"{base} (status {self.status_code}): {self.body}"
        return f"{base} (status {self.status_code})"


@dataclass(slots=True)
class ClientSettings:
    """Subset of settings required to configure the AI client."""

    base_url: str
    api_key: str
    model: str
    request_timeout: float | None = 90.0
    max_retries: int = 1
    retry_min_seconds: float = 0.5
    retry_max_seconds: float = 6.0
    default_headers: Mapping[str, str] | None = None
    debug_logging: bool = False


class AIClient:
    """Async client performing one chat-completion exchange per call."""

    def __init__(
        self,
        settings: ClientSettings,
        *,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._settings = settings
        self._client = client or self._build_client(settings)

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    async def complete(
        self,
        messages: Iterable[Message | Mapping[str, Any]],
        *,
        tools: Sequence[ChatCompletionToolParam | Mapping[str, Any]] | None = None,
    ) -> AssistantTurn:
        """Send the transcript and tool catalog; return the first assistant choice.

        Raises:
            ModelEndpointError: On a non-success status, a transport failure that
                outlived the retry budget, or a response with no usable choice.
        """

        payload = self._build_chat_payload(self._coerce_messages(messages), tools)
        LOGGER.debug(
            "Requesting chat completion via %s with %s message(s) and %s tool(s)",
            self._settings.model,
            len(payload["messages"]),
            len(payload.get("tools", ())),
        )
        if self._settings.debug_logging:
            self._log_prompt_payload(payload)

        try:
            completion = await self._create_with_retry(payload)
        except APIStatusError as exc:
            body = _response_text(exc.response)
            LOGGER.error("Model endpoint returned status %s", exc.status_code)
            raise ModelEndpointError(
                "Model endpoint request failed",
                status_code=exc.status_code,
                body=body,
            ) from exc
        except (APIConnectionError, httpx.TimeoutException) as exc:
            LOGGER.error("Model endpoint unreachable: %s", exc)
            raise ModelEndpointError(f"Model endpoint unreachable: {exc}") from exc

        return self._normalize_completion(completion)

    async def _create_with_retry(self, payload: Dict[str, Any]) -> ChatCompletion:
        # Only transport failures are retried; status errors surface immediately.
        async for attempt in self._retrying():
            with attempt:
                return await self._client.chat.completions.create(**payload)
        raise AssertionError("unreachable")  # pragma: no cover

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(max(1, self._settings.max_retries)),
            wait=wait_exponential(
                multiplier=self._settings.retry_min_seconds,
                max=self._settings.retry_max_seconds,
            ),
            retry=retry_if_exception_type((APIConnectionError, httpx.TimeoutException)),
        )

    def _build_client(self, settings: ClientSettings) -> AsyncOpenAI:
        headers = dict(settings.default_headers) if settings.default_headers else None
        return AsyncOpenAI(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.request_timeout,
            max_retries=0,
            default_headers=headers,
        )

    def _coerce_messages(
        self, messages: Iterable[Message | Mapping[str, Any]]
    ) -> List[ChatCompletionMessageParam]:
        normalized: List[ChatCompletionMessageParam] = []
        for message in messages:
            if isinstance(message, Message):
                normalized.append(message.to_chat_param())
            else:
                normalized.append(cast(ChatCompletionMessageParam, dict(message)))
        if not normalized:
            raise ValueError("At least one message is required to start a chat")
        return normalized

    def _build_chat_payload(
        self,
        messages: Sequence[ChatCompletionMessageParam],
        tools: Sequence[ChatCompletionToolParam | Mapping[str, Any]] | None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self._settings.model,
            "messages": list(messages),
            "temperature": DEFAULT_TEMPERATURE,
        }
        if tools:
            payload["tools"] = [dict(tool) for tool in tools]
            payload["tool_choice"] = TOOL_CHOICE
        return payload

    def _normalize_completion(self, completion: ChatCompletion) -> AssistantTurn:
        choices = getattr(completion, "choices", None) or []
        if not choices or getattr(choices[0], "message", None) is None:
            raise ModelEndpointError(
                "Model response contained no usable choice",
                status_code=200,
                body=_dump_completion(completion),
            )

        choice = choices[0]
        message = choice.message
        calls: list[ToolCall] = []
        for index, raw_call in enumerate(message.tool_calls or ()):
            function = getattr(raw_call, "function", None)
            if function is None:
                LOGGER.debug("Skipping non-function tool call at index %s", index)
                continue
            call_id = raw_call.id or f"call_{index}_{uuid.uuid4().hex[:8]}"
            calls.append(
                ToolCall(
                    id=call_id,
                    name=function.name or "",
                    arguments=function.arguments or "{}",
                )
            )

        return AssistantTurn(
            content=message.content or "",
            tool_calls=tuple(calls),
            finish_reason=choice.finish_reason,
            model=getattr(completion, "model", None),
        )

    def _log_prompt_payload(self, payload: Mapping[str, Any]) -> None:
        try:
            serialized = json.dumps(payload, ensure_ascii=False, indent=2)
        except (TypeError, ValueError):
            LOGGER.debug("AI prompt payload (unserializable): %s", payload)
        else:
            LOGGER.debug("AI prompt payload:\n%s", serialized)

    async def aclose(self) -> None:
        """Close the underlying OpenAI client to release network resources."""

        close = getattr(self._client, "close", None)
        if close is None:
            return
        result = close()
        if inspect.isawaitable(result):
            await result


def _response_text(response: httpx.Response | None) -> str | None:
    if response is None:
        return None
    try:
        return response.text
    except httpx.ResponseNotRead:
        return None


def _dump_completion(completion: Any) -> str | None:
    dump = getattr(completion, "model_dump_json", None)
    if dump is None:
        return None
    try:
        return dump()
    except (TypeError, ValueError):
        return None


__all__ = ["AIClient", "ClientSettings", "ModelEndpointError", "DEFAULT_TEMPERATURE", "TOOL_CHOICE"]
