from __future__ import annotations
from typing import Any, Dict, Optional

def print_latest(data: Dict[str, Any]) -> None:
    if not data.get("imagePath"):
        print("No image rendered yet.")
        return
    print(f"{data['imagePath']} -> {data.get('imageUrl')}")
    print(f"    Last update: {data.get('lastUpdate')}")

def print_saved(path: str, size: int, image_path: Optional[str]) -> None:
    print(f"Wrote: {path} ({size} bytes)")
    if image_path:
        print(f"    Stored as: {image_path}")
