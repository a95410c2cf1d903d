from __future__ import annotations

import contextlib
import os
from pathlib import Path
from typing import Dict, Optional


def parse_dotenv(dotenv_path: Path) -> Dict[str, str]:
    """Parse a simple .env file (KEY=VALUE per line, '#' comments, quotes stripped)."""
    env: Dict[str, str] = {}
    if dotenv_path.exists():
        with contextlib.suppress(OSError):
            for raw in dotenv_path.read_text(encoding="utf-8", errors="ignore").splitlines():
                s = raw.strip()
                if not s or s.startswith("#") or "=" not in s:
                    continue
                k, v = s.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k:
                    env[k] = v
    return env


def env_get(key: str) -> Optional[str]:
    """Get environment value from process env, falling back to .env in CWD."""
    v = os.getenv(key)
    if v is not None and v.strip():
        return v.strip()
    v2 = parse_dotenv(Path(".env")).get(key)
    return v2.strip() if v2 is not None and v2.strip() else None


def env_str(name: str, default: str) -> str:
    return env_get(name) or default


def env_int(name: str, default: int) -> int:
    try:
        return int(env_str(name, str(default)))
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    try:
        return float(env_str(name, str(default)))
    except ValueError:
        return default


def collection_name() -> str:
    return env_str("DOCVEC_COLLECTION", "documents")


def qdrant_url() -> str:
    return env_str("QDRANT_URL", "http://localhost:6333").rstrip("/")


def embed_provider() -> str:
    return env_str("EMBED_PROVIDER", "huggingface").lower()


HF_DEFAULT_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
OLLAMA_DEFAULT_MODEL = "all-minilm"


def embed_model(default: str = HF_DEFAULT_MODEL) -> str:
    """EMBED_MODEL, or the calling adapter's own default model name."""
    return env_str("EMBED_MODEL", default)


def hf_api_url() -> str:
    return env_str("HF_API_URL", "https://api-inference.huggingface.co/models").rstrip("/")


def hf_token() -> Optional[str]:
    return env_get("HF_TOKEN") or env_get("HUGGINGFACE_API_KEY")


def ollama_url() -> str:
    return env_str("OLLAMA_URL", "http://localhost:11434").rstrip("/")


def openai_base_url() -> str:
    return env_str("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")


def openai_api_key() -> Optional[str]:
    return env_get("OPENAI_API_KEY")


def chat_model() -> str:
    return env_str("CHAT_MODEL", "gpt-3.5-turbo")


def duplicate_policy() -> str:
    """'overwrite' (default, lossy) or 'reject'."""
    policy = env_str("DOCVEC_DUPLICATE_POLICY", "overwrite").lower()
    return policy if policy in {"overwrite", "reject"} else "overwrite"


def scroll_page_size() -> int:
    return max(1, env_int("DOCVEC_SCROLL_PAGE", 256))
