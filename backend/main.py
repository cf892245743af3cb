from contextlib import asynccontextmanager
from fastapi import FastAPI, UploadFile, File, HTTPException, Request, Depends, status
from fastapi.middleware.cors import CORSMiddleware
from typing import List

# Local imports
from models import (
    QuestionRequest, AskResponse, FolderSyncRequest, SyncReport, FileInfo,
    FilesListResponse, MessagesResponse, ClearResponse, HealthCheckResponse,
)
from errors import SyncPathError
from ingestion import InMemoryFile
from session import ChatSession, build_session
from utils import format_file_size

# Import logger
from logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A missing API key stops the server here, before any request is served
    app.state.session = build_session()
    logger.info("Server started")
    yield
    logger.info("Server stopped")


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    try:
        logger.info(f"[req] {request.method} {request.url.path}")
        response = await call_next(request)
        logger.info(f"[res] {request.method} {request.url.path} -> {response.status_code}")
        return response
    except Exception as e:
        logger.exception(f"[req] unhandled error on {request.method} {request.url.path}: {e}")
        raise


def get_session(request: Request) -> ChatSession:
    return request.app.state.session


@app.post("/upload/", response_model=SyncReport)
async def upload_files(files: List[UploadFile] = File(...), session: ChatSession = Depends(get_session)):
    logger.info(f"[upload] request received: {len(files) if files else 0} file(s)")
    batch = [InMemoryFile(name=f.filename, data=await f.read()) for f in files or []]
    report = await session.pipeline.ingest(batch)
    logger.info(f"[upload] {report.status_message or 'no-op'}")
    return report


@app.post("/sync-folder", response_model=SyncReport)
async def sync_folder(payload: FolderSyncRequest, session: ChatSession = Depends(get_session)):
    path = (payload.path or "").strip()
    if not path:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing 'path'")
    try:
        return await session.pipeline.sync_folder(path)
    except (SyncPathError, FileNotFoundError, NotADirectoryError) as e:
        logger.warning(f"[sync-folder] {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@app.get("/files/", response_model=FilesListResponse)
async def list_files(session: ChatSession = Depends(get_session)):
    docs = session.store.list()
    files = [
        FileInfo(
            id=d.id,
            filename=d.name,
            kind=d.kind,
            size=d.byte_size,
            size_label=format_file_size(d.byte_size),
            upload_date=d.ingested_at,
            characters=len(d.content),
        )
        for d in docs
    ]
    return FilesListResponse(
        files=files,
        total_files=len(files),
        total_characters=session.store.aggregate_character_count(),
        estimated_tokens=session.store.estimated_tokens(),
    )


@app.delete("/clear-all/", response_model=ClearResponse)
async def clear_all(session: ChatSession = Depends(get_session)):
    removed = session.clear_documents()
    logger.info("[clear-all] Knowledge base cleared")
    return ClearResponse(message="All documents cleared.", removed=removed)


@app.post("/ask", response_model=AskResponse)
async def ask(data: QuestionRequest, session: ChatSession = Depends(get_session)):
    question = (data.question or "").strip()
    if not question:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty question")
    if session.chat.pending:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A reply is already being generated")

    reply = await session.chat.submit(data.question)
    if reply is None:
        # The conversation was reset while this reply was in flight
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Conversation was reset")
    return AskResponse(message=reply, pending=session.chat.pending)


@app.get("/messages", response_model=MessagesResponse)
async def get_messages(session: ChatSession = Depends(get_session)):
    return MessagesResponse(messages=session.chat.messages, pending=session.chat.pending)


@app.post("/new-session/", response_model=ClearResponse)
async def new_session(session: ChatSession = Depends(get_session)):
    session.chat.clear_conversation()
    logger.info("[session] New conversation session started")
    return ClearResponse(message="New conversation session started")


@app.get("/health", response_model=HealthCheckResponse)
async def health(session: ChatSession = Depends(get_session)):
    return HealthCheckResponse(status="ok", message="Service is running", documents=len(session.store))
