from __future__ import annotations
from pathlib import Path
import os

# Directory layout:
#   .../GraphCanvas/
#       ├─ gstore/        <-- this file is in GraphCanvas/gstore/
#       ├─ static/        <-- index.html served at "/"
#       └─ storage/       <-- edges.json, edges_hash.txt, graph_<ts>.png
#
# BASE -> .../GraphCanvas
BASE = Path(__file__).resolve().parent.parent
STATIC_DIR = BASE / "static"

# Allow overrides via env vars if you ever need them
STORAGE_DIR = Path(os.getenv("GRAPH_STORAGE_DIR") or (BASE / "storage")).resolve()

# File names inside the storage directory
DOCUMENT_NAME = "edges.json"
HASH_NAME     = "edges_hash.txt"
LATEST_NAME   = "latest_image.txt"

# Public URL used to build absolute image links
PUBLIC_BASE_URL = (os.getenv("GRAPH_PUBLIC_BASE_URL") or "http://localhost:3000").rstrip("/")

HOST = os.getenv("GRAPH_HOST", "0.0.0.0")
PORT = int(os.getenv("GRAPH_PORT", "3000"))


def ensure_dirs(storage_dir: Path = STORAGE_DIR) -> Path:
    """Create the storage directory if it doesn't exist."""
    storage_dir.mkdir(parents=True, exist_ok=True)
    return storage_dir
