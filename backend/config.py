import os
from dotenv import load_dotenv

load_dotenv()

# Completion provider: "anthropic" (default), "openai" or "groq"
AI_PROVIDER = os.getenv("AI_PROVIDER", "anthropic").lower()

ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-5")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# Groq speaks the OpenAI chat completions protocol
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
GROQ_BASE_URL = "https://api.groq.com/openai/v1"

AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", "0.7"))
AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", "1024"))

BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))


def resolve_database_path(path: str) -> str:
    """Relative paths are taken from the backend directory, where alembic runs."""
    return path if os.path.isabs(path) else os.path.join(BACKEND_DIR, path)


DATABASE_PATH = resolve_database_path(os.getenv("DATABASE_PATH", "tasks.db"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

PORT = int(os.getenv("PORT", "5000"))
