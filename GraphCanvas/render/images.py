# render/images.py
"""
Rendered image files in the storage directory.

Images are named graph_<unix-ms>.png. The latest one is normally known from
the store's latest-pointer; a directory scan over the file names is the
fallback when the pointer is missing or stale.
"""
from __future__ import annotations

import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from gstore.errors import StorageError
from gstore.paths import PUBLIC_BASE_URL
from render.formatters import format_timestamp

IMAGE_NAME_RE = re.compile(r"^graph_(\d+)\.(png|jpg|jpeg|gif)$", re.IGNORECASE)
IMAGE_EXT_RE = re.compile(r"\.(png|jpg|jpeg|gif)$", re.IGNORECASE)


@dataclass
class LatestImage:
    url: str
    path: str
    last_update: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "imageUrl": self.url,
            "imagePath": self.path,
            "lastUpdate": self.last_update,
        }


EMPTY_LATEST = {"imageUrl": None, "imagePath": None, "lastUpdate": None}


def image_timestamp(name: str) -> Optional[int]:
    """Millisecond timestamp from an image name, or None if it is not one of ours.

    Names whose timestamp cannot be shown as a date are treated as foreign files.
    """
    m = IMAGE_NAME_RE.match(name)
    if not m:
        return None
    ts = int(m.group(1))
    try:
        format_timestamp(ts)
    except (ValueError, OverflowError, OSError):
        return None
    return ts


def now_ms() -> int:
    return time.time_ns() // 1_000_000


class ImageStore:
    def __init__(
        self,
        storage_dir: Path,
        *,
        public_base_url: str = PUBLIC_BASE_URL,
        legacy_timestamps: bool = False,
    ) -> None:
        self.storage_dir = Path(storage_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.legacy_timestamps = legacy_timestamps

    # ---------------------------- Naming ---------------------------- #

    def new_image_name(self, latest_name: Optional[str] = None, ts: Optional[int] = None) -> str:
        """Name for the next image; timestamps never go backwards."""
        ts = now_ms() if ts is None else ts
        previous = image_timestamp(latest_name) if latest_name else None
        if previous is None:
            previous = self._scan_latest_timestamp()
        if previous is not None and ts <= previous:
            ts = previous + 1
        return f"graph_{ts}.png"

    def write(self, name: str, data: bytes) -> Path:
        path = self.storage_dir / name
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Error writing image {name}: {exc}") from exc
        print(f"[images] Image saved as {path}")
        return path

    # ---------------------------- Lookup ---------------------------- #

    def list_images(self) -> List[str]:
        try:
            names = [p.name for p in self.storage_dir.iterdir() if p.is_file()]
        except OSError as exc:
            raise StorageError(f"Error reading storage folder: {exc}") from exc
        return [n for n in names if image_timestamp(n) is not None]

    def _scan_latest_timestamp(self) -> Optional[int]:
        stamps = [image_timestamp(n) for n in self.list_images()]
        return max(stamps) if stamps else None

    def scan_latest(self) -> Optional[str]:
        images = self.list_images()
        if not images:
            return None
        return max(images, key=image_timestamp)

    def describe(self, name: str) -> LatestImage:
        ts = image_timestamp(name)
        return LatestImage(
            url=f"{self.public_base_url}/storage/{name}",
            path=f"/storage/{name}",
            last_update=format_timestamp(ts, legacy=self.legacy_timestamps),
        )

    def latest(self, pointer: Optional[str] = None) -> Optional[LatestImage]:
        name = pointer
        if not name or image_timestamp(name) is None or not (self.storage_dir / name).is_file():
            name = self.scan_latest()
        if name is None:
            return None
        return self.describe(name)

    # ---------------------------- Cleanup --------------------------- #

    def delete_all(self) -> List[str]:
        try:
            candidates = [p for p in self.storage_dir.iterdir() if p.is_file() and IMAGE_EXT_RE.search(p.name)]
        except OSError as exc:
            raise StorageError(f"Error reading storage folder: {exc}") from exc
        deleted = []
        for path in candidates:
            try:
                path.unlink()
                deleted.append(path.name)
            except OSError as exc:
                print(f"[images] Error deleting file {path.name}: {exc}")
        return deleted
