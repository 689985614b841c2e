"""Test package for RAG Chat.

Structure:
    - unit/: Individual module and class tests
    - integration/: HTTP tests against the FastAPI app

Collaborators (knowledge search, chat model, tokenizer) are replaced by
in-memory fakes from conftest.py. Leverages pytest with pytest-check for
soft assertions.
"""
