"""Extraction providers: offline fallback and networked models."""

from cairn.llm.anthropic import AnthropicProvider
from cairn.llm.base import Embedder, ExtractionProvider
from cairn.llm.fallback import FallbackProvider
from cairn.llm.openai import OpenAIProvider
from cairn.llm.parsing import parse_json
from cairn.llm.registry import create_embedder, create_llm_provider, create_provider

__all__ = [
    "AnthropicProvider",
    "Embedder",
    "ExtractionProvider",
    "FallbackProvider",
    "OpenAIProvider",
    "create_embedder",
    "create_llm_provider",
    "create_provider",
    "parse_json",
]
