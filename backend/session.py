"""Application context: one knowledge base and one conversation per process."""
from typing import Optional

from conversation import ConversationOrchestrator, ReplyGateway
from document_store import DocumentStore
from gemini_client import GeminiGateway
from ingestion import IngestionPipeline
from logger import logger


class ChatSession:
    def __init__(self, gateway: ReplyGateway):
        self.store = DocumentStore()
        self.pipeline = IngestionPipeline(self.store)
        self.chat = ConversationOrchestrator(self.store, gateway)

    def clear_documents(self) -> int:
        # Callers confirm with the user before getting here
        removed = self.store.clear()
        logger.info(f"[session] knowledge base cleared ({removed} document(s))")
        return removed


def build_session(gateway: Optional[ReplyGateway] = None) -> ChatSession:
    """Create a session; raises ConfigurationError if no API key is set."""
    return ChatSession(gateway or GeminiGateway())
