from synthpanel.infra.llm_client import AnthropicClient, LLMClient

__all__ = [
    "AnthropicClient",
    "LLMClient",
]
