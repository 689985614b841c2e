"""RAG Chat - retrieval-augmented chat completions.

Combines Agno for model access and knowledge search, tiktoken for token
budgeting, FastAPI for HTTP, and Pydantic for data validation.

Components:
    - models: Chat messages, passages and completion results
    - prompt: Token accounting and budgeted prompt assembly
    - retrieval: Knowledge passage lookup and normalization
    - agent: Configuration, credentials, generation and the chat turn
    - api: HTTP endpoints
"""

__version__ = "0.1.0"
