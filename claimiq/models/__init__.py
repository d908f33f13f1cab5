"""
LLM abstraction layer for the claim analysis pipeline.
"""

from .llm_manager import LLMManager, LLMConfig, StrategyMode, OpenAIProvider, AnthropicProvider

__all__ = ["LLMManager", "LLMConfig", "StrategyMode", "OpenAIProvider", "AnthropicProvider"]
