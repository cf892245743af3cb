"""Serializes the knowledge base into the context blob sent with every prompt."""
from typing import List

from models import Document

NO_DOCUMENTS_SENTINEL = "Nessun documento caricato al momento."

BLOCK_TEMPLATE = "--- INIZIO DOCUMENTO: {name} ---\n{content}\n--- FINE DOCUMENTO ---\n"


def format_document_block(doc: Document) -> str:
    return BLOCK_TEMPLATE.format(name=doc.name, content=doc.content)


def assemble_context(documents: List[Document]) -> str:
    """Concatenate every document in order. No truncation is applied."""
    if not documents:
        return NO_DOCUMENTS_SENTINEL
    return "\n".join(format_document_block(d) for d in documents)
