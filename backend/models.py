from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Tuple
from datetime import datetime, timezone
from enum import Enum
import uuid


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


class DocumentKind(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    TEXT = "text"


class Document(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    name: str
    kind: DocumentKind
    byte_size: int
    ingested_at: datetime = Field(default_factory=_now)
    content: str

    @property
    def fingerprint(self) -> Tuple[str, int]:
        """Sync identity: same name and same size means already present."""
        return (self.name, self.byte_size)


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    role: Role
    content: str
    timestamp: datetime = Field(default_factory=_now)
    is_error: bool = False


class ConversationState(BaseModel):
    messages: List[Message] = Field(default_factory=list)
    pending: bool = False
    generation: int = 0


# --- API schemas ---

class QuestionRequest(BaseModel): question: str

class FolderSyncRequest(BaseModel): path: str

class AskResponse(BaseModel):
    message: Message
    pending: bool = False

class SyncReport(BaseModel):
    added: List[str] = []
    skipped: List[str] = []
    failed: List[str] = []
    status_message: str = ""

class FileInfo(BaseModel):
    id: str
    filename: str
    kind: DocumentKind
    size: int
    size_label: str
    upload_date: datetime
    characters: int

class FilesListResponse(BaseModel):
    files: List[FileInfo]
    total_files: int
    total_characters: int
    estimated_tokens: int

class MessagesResponse(BaseModel):
    messages: List[Message]
    pending: bool

class ClearResponse(BaseModel):
    message: str
    removed: Optional[int] = None

class HealthCheckResponse(BaseModel):
    status: str
    message: str
    documents: int
