"""Chat orchestrator: one retrieval-augmented turn end to end.

Flow of a turn:

1. The last message is the search query.
2. The top-k passages are retrieved and listed as ``source: text`` lines.
3. The sources are injected into the user message.
4. The prompt is built: system message, augmented user message, then as much
   history as the token ceiling allows, most recent first. A history message
   that pushes the total over the ceiling is popped and the loop stops; older
   messages are never tried in its place.
5. The model is invoked and the reply is returned with the sources and a
   debug trace.

The system and user messages are always sent, even if they alone exceed the
ceiling. Collaborators are injected; every turn builds its own prompt, so a
single orchestrator can serve concurrent requests.
"""

import logging
from collections.abc import Sequence

from ragchat.agent.config import AgentConfig, get_agent_config
from ragchat.agent.credentials import ApiKeyProvider
from ragchat.agent.generation import (
    AgnoChatGenerator,
    ChatGenerator,
    GenerationError,
    create_chat_model,
)
from ragchat.models import ChatCompletionResult, ChatMessage, MessageRole
from ragchat.prompt import PromptBuilder, TokenAccountant
from ragchat.retrieval import (
    RetrievalStep,
    SimilaritySearch,
    build_source_block,
    format_sources,
)
from ragchat.retrieval.knowledge import KnowledgeSearch, create_knowledge

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE_PROMPT = (
    "Assistant helps the company's customers with support questions regarding terms of "
    "service, privacy policy, and questions about support requests. Be brief in your answers.\n"
    "Answer ONLY with the facts listed in the list of sources below. If there isn't enough "
    "information below, say you don't know. Do not generate answers that don't use the "
    "sources below. If asking a clarifying question to the user would help, ask the question.\n"
    "For tabular information return it as an html table. Do not return markdown format. "
    "If the question is not in English, answer in the language used in the question.\n"
    "Each source has a name followed by a colon and the actual information, always include "
    "the source name for each fact you use in the response. Use square brackets to reference "
    "the source, for example: [info1.txt]. Don't combine sources, list each source separately, "
    "for example: [info1.txt][info2.pdf].\n"
)

DEFAULT_TOP_K = 3
DEFAULT_TOKEN_LIMIT = 4000
TRACE_LINE_BREAK = "<br>"


class ChatOrchestrator:
    """Runs retrieval, prompt assembly and generation for one chat turn."""

    def __init__(
        self,
        search: SimilaritySearch,
        generator: ChatGenerator,
        *,
        model_name: str,
        system_prompt: str = SYSTEM_MESSAGE_PROMPT,
        top_k: int = DEFAULT_TOP_K,
        token_limit: int = DEFAULT_TOKEN_LIMIT,
        accountant: TokenAccountant | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            search: Similarity search over the knowledge base.
            generator: Chat model wrapper.
            model_name: Model identifier, used for token accounting.
            system_prompt: Instruction placed in the system message.
            top_k: Number of passages retrieved per turn.
            token_limit: Token ceiling for the assembled prompt.
            accountant: Optional token accountant shared by all turns.
        """
        self._retrieval = RetrievalStep(search)
        self._generator = generator
        self.model_name = model_name
        self.system_prompt = system_prompt
        self.top_k = top_k
        self.token_limit = token_limit
        self._accountant = accountant or TokenAccountant(model_name)

    async def run(self, messages: Sequence[ChatMessage]) -> ChatCompletionResult:
        """Answer the last message of a conversation.

        Args:
            messages: Conversation, oldest first. The last message is the question.

        Returns:
            The assistant reply with its sources and debug trace.

        Raises:
            ValueError: If ``messages`` is empty.
            RetrievalError: If the similarity search fails.
            GenerationError: If the model call fails.
        """
        if not messages:
            raise ValueError("At least one message is required")

        query = messages[-1].content

        passages = await self._retrieval.retrieve(query, self.top_k)
        sources = format_sources(passages)
        user_message = f"{query}\n\nSources:\n{build_source_block(passages)}"

        builder = PromptBuilder(self.system_prompt, self.model_name, self._accountant)
        builder.append_message(MessageRole.USER.value, user_message)

        included = 0
        for history_message in reversed(messages[:-1]):
            builder.append_message(history_message.role, history_message.content)
            if builder.tokens > self.token_limit:
                builder.pop_message()
                break
            included += 1

        logger.debug(
            f"Prompt holds {included} of {len(messages) - 1} history messages "
            f"({builder.tokens}/{self.token_limit} tokens)"
        )

        conversation = "\n\n".join(f"{m.role}: {m.content}" for m in builder.messages)
        thoughts = f"Search query:\n{query}\n\nConversation:\n{conversation}"

        try:
            content = await self._generator.invoke(builder.get_messages())
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"Model call failed: {e}")
            raise GenerationError(f"Model call failed: {e}") from e

        logger.info(
            f"Completed chat turn with {len(passages)} sources and {included} history messages"
        )

        return ChatCompletionResult(
            message=ChatMessage(role=MessageRole.ASSISTANT, content=content),
            context_data=sources,
            trace=thoughts.replace("\n", TRACE_LINE_BREAK),
        )


def build_chat_orchestrator(config: AgentConfig | None = None) -> ChatOrchestrator:
    """Wire the Agno model and knowledge base into an orchestrator.

    Args:
        config: Optional agent configuration.
                Loads from environment if not provided.

    Returns:
        Configured ChatOrchestrator.

    Raises:
        AuthError: If no API key is configured and dummy keys are not allowed.
    """
    config = config or get_agent_config()

    token_provider = ApiKeyProvider(config.api_key, allow_dummy=config.allow_dummy_credentials)
    generator = AgnoChatGenerator(create_chat_model(config, token_provider))
    search = KnowledgeSearch(create_knowledge(config.knowledge_dir, config.knowledge_table))

    return ChatOrchestrator(
        search,
        generator,
        model_name=config.model_name,
        top_k=config.top_k,
        token_limit=config.token_limit,
    )
