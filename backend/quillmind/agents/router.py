from __future__ import annotations

import logging
import re
from typing import Awaitable, Callable, Dict, Optional

from ..core import RoutingDecision
from ..prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)

_CHOICES = {
    "edit": RoutingDecision.EDIT,
    "retrieval": RoutingDecision.RETRIEVAL,
    "rag": RoutingDecision.RETRIEVAL,
    "standard": RoutingDecision.STANDARD,
}


def parse_routing_choice(reply: Optional[str]) -> RoutingDecision:
    """First recognised word of the reply, ``standard`` if there is none."""
    for token in re.findall(r"[a-z]+", (reply or "").lower()):
        if token in _CHOICES:
            return _CHOICES[token]
    return RoutingDecision.STANDARD


class IntentRouter:
    """Classifies a request with one short completion call.

    Any failure of that call routes to ``standard``, never to ``edit``.
    """

    def __init__(self, llm, prompt_builder: PromptBuilder, max_tokens: int = 10):
        self.llm = llm
        self.prompt_builder = prompt_builder
        self.max_tokens = max_tokens

    async def classify(self, text: str, has_file_context: bool) -> RoutingDecision:
        prompt = self.prompt_builder.build_route_prompt(text, has_file_context)
        try:
            reply = await self.llm.complete(prompt, temperature=0.0, max_tokens=self.max_tokens)
        except Exception as e:
            logger.error(f"Routing call failed, defaulting to standard: {e}")
            return RoutingDecision.STANDARD

        decision = parse_routing_choice(reply)
        logger.info(f'Routing choice for "{text[:80]}" (context provided: {has_file_context}): {decision.value}')
        return decision

    @staticmethod
    def dispatch(
        decision: RoutingDecision,
        handlers: Dict[RoutingDecision, Callable[..., Awaitable]],
    ) -> Callable[..., Awaitable]:
        return handlers.get(decision, handlers[RoutingDecision.STANDARD])
