import os
from dotenv import load_dotenv

load_dotenv()

# --- LLM provider ---
# "gemini" (default) or "groq"
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini").strip().lower()
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))

# --- Database ---
# Local SQLite by default; any SQLAlchemy URL works
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/tafa.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- Storage keys (one JSON blob per key) ---
HABITS_KEY = os.getenv("TAFA_HABITS_KEY", "tafa-habits")
GOALS_KEY = os.getenv("TAFA_GOALS_KEY", "tafa-goals")
STATS_KEY = os.getenv("TAFA_STATS_KEY", "tafa-user-stats")
ACHIEVEMENTS_KEY = os.getenv("TAFA_ACHIEVEMENTS_KEY", "tafa-achievements")
CHALLENGES_KEY = os.getenv("TAFA_CHALLENGES_KEY", "tafa-daily-challenges")

# --- App ---
APP_NAME = os.getenv("APP_NAME", "Tafa")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
