"""File-backed graph store.

Owns the persisted graph document (edges.json) together with the two pieces
of render bookkeeping that must never drift apart from it:

* ``edges_hash.txt``   - fingerprint of the document at the last render
* ``latest_image.txt`` - file name of the image produced by that render

All three are loaded on startup and rewritten together by ``commit_render``.
The store itself does no locking; callers serialize access (see webapp.GraphService).
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Tuple

from gstore.document import Edge, GraphDocument, Vertex, fingerprint
from gstore.errors import StorageError, ValidationError
from gstore.paths import DOCUMENT_NAME, HASH_NAME, LATEST_NAME, STORAGE_DIR, ensure_dirs


def _atomic_write(path: Path, text: str) -> None:
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


class GraphStore:
    def __init__(self, storage_dir: Optional[Path] = None, *, normalize_reset: bool = True) -> None:
        self.storage_dir = ensure_dirs(Path(storage_dir or STORAGE_DIR))
        self.document_path = self.storage_dir / DOCUMENT_NAME
        self.hash_path = self.storage_dir / HASH_NAME
        self.latest_path = self.storage_dir / LATEST_NAME
        self.normalize_reset = normalize_reset

        if not self.document_path.exists():
            self.save(GraphDocument.initial())

        self.last_fingerprint: Optional[str] = self._read_sidecar(self.hash_path)
        if self.last_fingerprint is None:
            self.last_fingerprint = self._initial_fingerprint()
            self._write_sidecar(self.hash_path, self.last_fingerprint)
        self.latest_image: Optional[str] = self._read_sidecar(self.latest_path)

    # ------------------------------------------------------------------ #
    # Loading & serialization
    # ------------------------------------------------------------------ #

    def load(self) -> GraphDocument:
        if not self.document_path.exists():
            doc = GraphDocument.initial()
            self.save(doc)
            return doc
        try:
            with self.document_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
            return GraphDocument.from_json(payload)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise StorageError(f"Error reading edges file: {exc}") from exc

    def save(self, doc: GraphDocument) -> None:
        text = json.dumps(doc.to_dict(), indent=2, ensure_ascii=False)
        try:
            _atomic_write(self.document_path, text)
        except OSError as exc:
            raise StorageError(f"Error writing edges file: {exc}") from exc

    def _read_sidecar(self, path: Path) -> Optional[str]:
        try:
            value = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"Error reading {path.name}: {exc}") from exc
        return value or None

    def _write_sidecar(self, path: Path, value: Optional[str]) -> None:
        try:
            _atomic_write(path, value or "")
        except OSError as exc:
            raise StorageError(f"Error writing {path.name}: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Fingerprint
    # ------------------------------------------------------------------ #

    def fingerprint(self, doc: GraphDocument) -> str:
        return fingerprint(doc, normalize_reset=self.normalize_reset)

    def _initial_fingerprint(self) -> str:
        # Hashed with the reset flag still set, so it never matches a rendered document.
        return fingerprint(GraphDocument.initial(), normalize_reset=False)

    def is_unchanged(self, doc: GraphDocument) -> Tuple[bool, str]:
        current = self.fingerprint(doc)
        return current == self.last_fingerprint, current

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def add_vertex(self, name: Optional[str]) -> GraphDocument:
        if not name:
            raise ValidationError("Name is required.")
        doc = self.load()
        doc.vertices.append(Vertex(name=name))
        self.save(doc)
        return doc

    def add_edge(self, source: Optional[str], target: Optional[str]) -> GraphDocument:
        if not source or not target:
            raise ValidationError("From and to are required.")
        doc = self.load()
        doc.edges.append(Edge(source=source, target=target))
        self.save(doc)
        return doc

    def replace_graph(self, vertices, edges) -> GraphDocument:
        """Swap in a client-supplied vertex/edge list, keeping the reset flag."""
        doc = self.load()
        doc.vertices = list(vertices)
        doc.edges = list(edges)
        self.save(doc)
        return doc

    def reset(self) -> GraphDocument:
        doc = GraphDocument.initial()
        self.save(doc)
        self.last_fingerprint = self._initial_fingerprint()
        self._write_sidecar(self.hash_path, self.last_fingerprint)
        self.latest_image = None
        self._write_sidecar(self.latest_path, None)
        print(f"[store] Reset {self.document_path}")
        return doc

    def commit_render(self, doc: GraphDocument, digest: str, image_name: str) -> None:
        """Persist the rendered document, its fingerprint and the latest-image pointer."""
        self.save(doc)
        self._write_sidecar(self.hash_path, digest)
        self._write_sidecar(self.latest_path, image_name)
        self.last_fingerprint = digest
        self.latest_image = image_name
