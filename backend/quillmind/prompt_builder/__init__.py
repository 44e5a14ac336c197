from .builder import PromptBuilder, PromptConfig, format_history, make_prompt_builder
from .llm_client import ChatCompletionClient, LLMConfig, LLMResponse, create_client, make_llm_client

__all__ = [
    "PromptBuilder",
    "PromptConfig",
    "format_history",
    "make_prompt_builder",
    "ChatCompletionClient",
    "LLMConfig",
    "LLMResponse",
    "create_client",
    "make_llm_client",
]
