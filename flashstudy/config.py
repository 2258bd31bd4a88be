import secrets
import dotenv
import os
dotenv.load_dotenv(".env")

STORAGE_SECRET = os.getenv("FLASHSTUDY_STORAGE_SECRET")
if not STORAGE_SECRET:
    STORAGE_SECRET = secrets.token_hex(32)

DATABASE_URL = os.getenv("FLASHSTUDY_DATABASE_URL", "sqlite:///db/flashstudy.db")

LOG_LEVEL = os.getenv("FLASHSTUDY_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("FLASHSTUDY_LOG_FILE")

PORT = int(os.getenv("FLASHSTUDY_PORT", "8080"))

# Folder pre-filled in the "load folder" box of the upload step
DECK_DIR = os.getenv("FLASHSTUDY_DECK_DIR", "")

SNAPSHOT_KEY = os.getenv("FLASHSTUDY_SNAPSHOT_KEY", "last_session")
