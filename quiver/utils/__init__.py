"""
Shared utilities for QUIVER.

Common functionality used across contexts:
- Logger configuration
- LLM provider abstraction and response parsing
"""

from quiver.utils.llm import ChatMessage, LLMClient, get_provider, parse_json_object, strip_code_fence

__all__ = ["ChatMessage", "LLMClient", "get_provider", "parse_json_object", "strip_code_fence"]
