import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


# ----------------------------
# Provider selection
# ----------------------------

AI_PROVIDER = os.getenv("AI_PROVIDER", "gemini").strip().lower()

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL",
    "https://generativelanguage.googleapis.com/v1beta",
)
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# OpenAI-compatible chat completions server (llama.cpp, vLLM, OpenAI, ...)
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "http://llama:8001")
LLM_MODEL = os.getenv("LLM_MODEL", "mistral-7b-instruct")
LLM_API_KEY = os.getenv("LLM_API_KEY", "")

OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://host.docker.internal:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "mistral:7b-instruct")

# ----------------------------
# Generation defaults
# ----------------------------

AI_TEMPERATURE = _float_env("AI_TEMPERATURE", 0.7)
AI_MAX_TOKENS = _int_env("AI_MAX_TOKENS", 8192)
AI_TIMEOUT_SECONDS = _float_env("AI_TIMEOUT_SECONDS", 60.0)

# ----------------------------
# Pipeline bounds
# ----------------------------

DEFAULT_DIAGRAM_COUNT = _int_env("DEFAULT_DIAGRAM_COUNT", 3)
MAX_DIAGRAM_COUNT = _int_env("MAX_DIAGRAM_COUNT", 10)
MIN_ARTICLE_LENGTH = _int_env("MIN_ARTICLE_LENGTH", 10)

# 0 disables the re-prompt on structurally malformed output; capped at 1
EXTRACT_MALFORMED_RETRIES = min(max(_int_env("EXTRACT_MALFORMED_RETRIES", 1), 0), 1)

# ----------------------------
# HTTP / logging
# ----------------------------

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
