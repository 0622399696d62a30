import os

# Default to local SQLite for dev/tests; override via env in Docker/Prod
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./taskmanager.db")

# Owner assigned to every created task until callers carry their own identity
DEFAULT_USER_ID = int(os.environ.get("DEFAULT_USER_ID", 1))
DEFAULT_USER_EMAIL = os.environ.get("DEFAULT_USER_EMAIL", "default@taskmanager.app")
DEFAULT_USER_PASSWORD_HASH = os.environ.get("DEFAULT_USER_PASSWORD_HASH", "!")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

CORS_ORIGINS = [
    o.strip()
    for o in os.environ.get("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]
