"""HostQuote: run locally with python main.py or uvicorn main:app --reload."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env before importing the app so HOSTQUOTE_* settings are visible at import time
load_dotenv(Path(__file__).resolve().parent / ".env")

from hostquote.api import app, set_static_dir  # noqa: E402

logging.basicConfig(
    level=os.environ.get("HOSTQUOTE_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

# Optional logo for quotes lives in project_root/static
set_static_dir(app, Path(__file__).resolve().parent / "static")

if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
