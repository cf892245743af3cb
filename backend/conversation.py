"""Conversation state machine.

Two phases: ``IDLE`` and ``AWAITING_REPLY``. At most one request is in flight;
a submit while one is pending is ignored rather than queued. Every request
carries the generation it started under, and ``clear_conversation`` bumps the
generation, so a reply that lands after a reset is discarded instead of being
appended to the fresh history.
"""
from enum import Enum
from typing import Callable, List, Optional, Protocol

from context import assemble_context
from document_store import DocumentStore
from logger import logger
from models import ConversationState, Document, Message, Role

WELCOME_MESSAGE = (
    "Ciao! Sono il tuo assistente virtuale. "
    "Chiedimi pure informazioni su manuali e documenti aziendali."
)
CLEARED_MESSAGE = "Chat cancellata. Come posso aiutarti ora?"
APOLOGY_MESSAGE = (
    "Mi dispiace, ho riscontrato un errore nel generare la risposta. "
    "Assicurati che la chiave API sia configurata correttamente."
)


class ReplyGateway(Protocol):
    async def generate_reply(self, user_text: str, grounding_context: str, history: List[Message]) -> str:
        ...


class ConversationPhase(str, Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"


class ConversationOrchestrator:
    def __init__(
        self,
        store: DocumentStore,
        gateway: ReplyGateway,
        assembler: Callable[[List[Document]], str] = assemble_context,
    ):
        self.store = store
        self.gateway = gateway
        self.assembler = assembler
        self._state = ConversationState(messages=[Message(role=Role.ASSISTANT, content=WELCOME_MESSAGE)])

    @property
    def messages(self) -> List[Message]:
        return list(self._state.messages)

    @property
    def pending(self) -> bool:
        return self._state.pending

    @property
    def generation(self) -> int:
        return self._state.generation

    @property
    def state(self) -> ConversationPhase:
        return ConversationPhase.AWAITING_REPLY if self._state.pending else ConversationPhase.IDLE

    def _append(self, message: Message) -> None:
        self._state.messages.append(message)

    async def submit(self, text: str) -> Optional[Message]:
        """Send a user message and return the assistant reply that was appended.

        Returns None when the submit is rejected (blank text or a request
        already in flight) or when the reply arrived after a reset.
        """
        if not text or not text.strip():
            return None
        if self._state.pending:
            logger.debug("[chat] submit ignored, a reply is still pending")
            return None

        history = [m for m in self._state.messages if not m.is_error]
        self._append(Message(role=Role.USER, content=text))
        self._state.pending = True
        generation = self._state.generation

        reply: Optional[Message] = None
        try:
            context = self.assembler(self.store.list())
            answer = await self.gateway.generate_reply(text, context, history)
            reply = Message(role=Role.ASSISTANT, content=answer)
        except Exception as e:
            # Never shown to the user; kept for diagnosis only
            logger.exception(f"[chat] reply generation failed: {e}")
            reply = Message(role=Role.ASSISTANT, content=APOLOGY_MESSAGE, is_error=True)
        finally:
            stale = generation != self._state.generation
            if not stale:
                self._state.pending = False

        if stale:
            logger.warning(f"[chat] dropping reply from generation {generation}, conversation was reset")
            return None
        self._append(reply)
        return reply

    def clear_conversation(self) -> None:
        """Reset history to a single seed message. Any in-flight reply is discarded."""
        if self._state.pending:
            logger.info("[chat] clearing while a reply is pending; it will be dropped")
        self._state = ConversationState(
            messages=[Message(role=Role.ASSISTANT, content=CLEARED_MESSAGE)],
            pending=False,
            generation=self._state.generation + 1,
        )
