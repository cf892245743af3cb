from pathlib import Path
from dotenv import load_dotenv
import os

# Load .env from the backend directory regardless of current working directory
_BASE_DIR = Path(__file__).resolve().parent
_ENV_PATH = Path(__file__).with_name('.env')
load_dotenv(dotenv_path=_ENV_PATH)
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Several naming conventions are accepted for the credential
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or ""
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    # Pinned: literal grounding over creative paraphrase
    TEMPERATURE = 0.0

    ACCEPTED_SUFFIXES = (".pdf", ".docx", ".txt")

    # Folder sync only reads below this directory
    SYNC_ROOT = Path(os.getenv("SYNC_ROOT", str(_BASE_DIR / "documents")))

    LOG_DIR = Path(os.getenv("LOG_DIR", str(_BASE_DIR / "logs")))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    LOG_TO_STDERR = _env_bool("LOG_TO_STDERR", False)

    @classmethod
    def init_dirs(cls):
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
