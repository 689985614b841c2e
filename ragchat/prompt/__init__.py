"""Prompt assembly and token budgeting.

Components:
    - TokenAccountant: per-message token cost estimation
    - PromptBuilder: ordered prompt with a running token total
"""

from ragchat.prompt.prompt_builder import PromptBuilder, PromptFinalizedError
from ragchat.prompt.token_accountant import TokenAccountant

__all__ = ["PromptBuilder", "PromptFinalizedError", "TokenAccountant"]
