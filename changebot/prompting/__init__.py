"""Prompt construction for the generative model."""

from .builder import PromptBuilder, PromptRequest

__all__ = ["PromptBuilder", "PromptRequest"]
