"""Turns raw files into knowledge-base documents.

Sync semantics: a file whose ``(name, size)`` is already in the store is
skipped before any extraction happens. Extraction failures never abort the
batch; they become placeholder documents so the failure stays visible in the
document listing.
"""
import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol, Tuple

from config import Config
from document_store import DocumentStore
from errors import SyncPathError
from extractors import detect_kind, extract_text
from logger import logger
from models import Document, SyncReport

PLACEHOLDER_TEMPLATE = "[ERRORE: Impossibile leggere il contenuto di {name}]"
ALREADY_SYNCED_MESSAGE = "Tutti i file selezionati sono già aggiornati."
SYNC_DONE_TEMPLATE = "Sincronizzazione completata: {count} documenti aggiunti."


class RawFile(Protocol):
    name: str
    size: int

    def read(self) -> bytes:
        ...


@dataclass
class InMemoryFile:
    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def read(self) -> bytes:
        return self.data


@dataclass
class LocalFile:
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    def read(self) -> bytes:
        return self.path.read_bytes()


def placeholder_content(name: str) -> str:
    return PLACEHOLDER_TEMPLATE.format(name=name)


def _read_size(f: RawFile) -> int:
    # A file that vanished before sync still gets a (placeholder) entry
    try:
        return f.size
    except OSError as e:
        logger.warning(f"[ingest] could not stat {f.name}: {e}")
        return 0


def _is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


class IngestionPipeline:
    def __init__(
        self,
        store: DocumentStore,
        extractor: Callable[..., str] = extract_text,
        sync_root: Optional[Path] = None,
    ):
        self.store = store
        self.extractor = extractor
        self.sync_root = Path(sync_root or Config.SYNC_ROOT)

    def partition(self, files: Iterable[RawFile]) -> Tuple[List[Tuple[RawFile, int]], List[RawFile]]:
        """Split a batch into files to extract (with the size read once) and files already present."""
        new: List[Tuple[RawFile, int]] = []
        present: List[RawFile] = []
        seen = set()
        for f in files:
            key = (f.name, _read_size(f))
            if key in seen or self.store.contains(*key):
                present.append(f)
                continue
            seen.add(key)
            new.append((f, key[1]))
        return new, present

    def _process_file(self, f: RawFile, size: int) -> Tuple[Document, bool]:
        kind = detect_kind(f.name)
        try:
            content = self.extractor(f.name, f.read(), kind)
            ok = True
        except Exception as e:
            logger.error(f"[ingest] extraction failed for {f.name}: {e}")
            content = placeholder_content(f.name)
            ok = False
        doc = Document(name=f.name, kind=kind, byte_size=size, content=content)
        return doc, ok

    async def ingest(self, files: Optional[Iterable[RawFile]]) -> SyncReport:
        batch = list(files or [])
        if not batch:
            logger.debug("[ingest] empty batch, nothing to do")
            return SyncReport()

        new, present = self.partition(batch)
        skipped = [f.name for f in present]
        if present:
            logger.info(f"[ingest] skipping {len(present)} already synced file(s)")
        if not new:
            return SyncReport(skipped=skipped, status_message=ALREADY_SYNCED_MESSAGE)

        logger.info(f"[ingest] extracting {len(new)} new file(s)")
        results = await asyncio.gather(
            *(asyncio.to_thread(self._process_file, f, size) for f, size in new)
        )

        # Single commit: a partial batch is never visible in the store
        documents = [doc for doc, _ in results]
        self.store.add(documents)

        failed = [doc.name for doc, ok in results if not ok]
        logger.info(f"[ingest] done: added={len(documents)} failed={len(failed)} skipped={len(skipped)}")
        return SyncReport(
            added=[doc.name for doc in documents],
            skipped=skipped,
            failed=failed,
            status_message=SYNC_DONE_TEMPLATE.format(count=len(documents)),
        )

    def resolve_sync_path(self, folder) -> Path:
        """Resolve a folder against the sync root; anything outside it is refused."""
        allowed = self.sync_root.resolve()
        root = Path(folder)
        if not root.is_absolute():
            root = allowed / root
        root = root.resolve()
        if not _is_within(root, allowed):
            raise SyncPathError(f"Folder is outside the sync root: {folder}")
        return root

    async def sync_folder(self, folder) -> SyncReport:
        """Ingest every supported file under a directory tree inside the sync root."""
        root = self.resolve_sync_path(folder)
        if not root.exists():
            raise FileNotFoundError(f"Folder not found: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")

        allowed = self.sync_root.resolve()
        paths = sorted(
            p for p in root.rglob("*")
            if p.is_file()
            and p.suffix.lower() in Config.ACCEPTED_SUFFIXES
            and _is_within(p.resolve(), allowed)
        )
        logger.info(f"[ingest] folder sync {root}: {len(paths)} candidate file(s)")
        return await self.ingest([LocalFile(p) for p in paths])
