from __future__ import annotations
import asyncio
import logging
import os
import time
from dataclasses import dataclass, replace
from typing import Dict, List, Optional
from pydantic import BaseModel
import requests

from ..errors import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)


class LLMResponse(BaseModel):
    content: Optional[str] = None
    finish_reason: str
    usage: Optional[Dict[str, int]] = None
    time_taken: float
    error: str | None = None
    status_code: int | None = None


@dataclass
class LLMConfig:
    api_base: str = "https://router.huggingface.co/v1"
    model: str = "Qwen/Qwen2.5-Coder-32B-Instruct"
    max_tokens: int = 4096
    temperature: float = 0.0
    timeout: int = 60


class ChatCompletionClient:
    """Client for an OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(self, config: LLMConfig | None = None, api_key: str | None = None):
        self.config = config or LLMConfig()
        self.api_key = api_key or os.getenv("HF_TOKEN")
        if not self.api_key:
            raise ConfigurationError("HF_TOKEN environment variable not set")

        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def chat(
        self,
        system_prompt: str,
        user_message: str,
        conversation_history: List[Dict[str, str]] | None = None,
        json_mode: bool = False,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        messages = []
        if system_prompt and system_prompt.strip():
            messages.append({"role": "system", "content": system_prompt.strip()})
        if conversation_history:
            messages.extend(conversation_history)
        messages.append({"role": "user", "content": user_message.strip()})
        url = f"{self.config.api_base.rstrip('/')}/chat/completions"
        payload = {
            "model": self.config.model,
            "messages": messages,
            "max_tokens": max_tokens if max_tokens is not None else self.config.max_tokens,
            "temperature": temperature if temperature is not None else self.config.temperature,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}
        start_time = time.time()
        try:
            response = requests.post(
                url,
                headers=self.headers,
                json=payload,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
            if "choices" in data and data["choices"]:
                choice = data["choices"][0]
                message_content = choice.get("message", {}).get("content") or ""
                usage = data.get("usage") or {}

                return LLMResponse(
                    content=message_content.strip(),
                    finish_reason=choice.get("finish_reason") or "stop",
                    usage={
                        "prompt_tokens": usage.get("prompt_tokens", 0),
                        "completion_tokens": usage.get("completion_tokens", 0),
                        "total_tokens": usage.get("total_tokens", 0),
                    },
                    time_taken=time.time() - start_time,
                    error=None,
                )
            else:
                raise RuntimeError(f"Unexpected response format: {data}")

        except Exception as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            return LLMResponse(
                finish_reason="error",
                time_taken=time.time() - start_time,
                error=str(e),
                status_code=status,
            )

    async def complete(
        self,
        prompt: str,
        system_prompt: str = "",
        json_mode: bool = False,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Run one completion off the event loop.

        Raises:
            UpstreamServiceError: On any transport, HTTP or format failure
        """
        response = await asyncio.to_thread(
            self.chat,
            system_prompt,
            prompt,
            None,
            json_mode,
            temperature,
            max_tokens,
        )
        if response.error:
            logger.error(f"Completion failed after {response.time_taken:.1f}s: {response.error}")
            raise UpstreamServiceError("AI request failed.", status_code=response.status_code)
        return response.content or ""


def create_client(config: LLMConfig | None = None) -> ChatCompletionClient:
    return ChatCompletionClient(config)


def make_llm_client(cfg: Dict) -> ChatCompletionClient:
    llm_cfg = cfg.get("llm", {})
    config = replace(
        LLMConfig(),
        **{k: llm_cfg[k] for k in ("api_base", "model", "max_tokens", "temperature", "timeout") if k in llm_cfg},
    )
    return create_client(config)
