"""Hosted language model clients."""

from signdesk.infrastructure.external.llm.chat_client import ChatCompletionClient

__all__ = ["ChatCompletionClient"]
