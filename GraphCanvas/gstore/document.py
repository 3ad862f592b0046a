"""Graph document model persisted in edges.json.

The on-disk shape is kept compatible with the original service:

    {"reset": true, "vertices": [{"name": "A"}], "edges": [{"from": "A", "to": "B"}]}
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class Vertex:
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name}


@dataclass
class Edge:
    source: str
    target: str

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.source, "to": self.target}


@dataclass
class GraphDocument:
    reset: bool = True
    vertices: List[Vertex] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    @classmethod
    def initial(cls) -> "GraphDocument":
        return cls(reset=True, vertices=[], edges=[])

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "GraphDocument":
        if not isinstance(payload, dict):
            raise ValueError("graph document must be a JSON object")
        vertices = [Vertex(name=str(item["name"])) for item in payload.get("vertices") or []]
        edges = [
            Edge(source=str(item["from"]), target=str(item["to"]))
            for item in payload.get("edges") or []
        ]
        return cls(reset=bool(payload.get("reset", False)), vertices=vertices, edges=edges)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reset": self.reset,
            "vertices": [v.to_dict() for v in self.vertices],
            "edges": [e.to_dict() for e in self.edges],
        }

    def copy(self, **changes: Any) -> "GraphDocument":
        doc = replace(self, vertices=list(self.vertices), edges=list(self.edges))
        return replace(doc, **changes) if changes else doc


# ---------------------------------------------------------------------------
# Fingerprint
# ---------------------------------------------------------------------------


def canonical_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def fingerprint(doc: GraphDocument, *, normalize_reset: bool = True) -> str:
    """MD5 over the canonical JSON form of ``doc``.

    Key order does not matter. With ``normalize_reset`` the reset flag is
    hashed as ``false``, so clearing the flag on render is not a content change.
    """
    payload = doc.to_dict()
    if normalize_reset:
        payload["reset"] = False
    return hashlib.md5(canonical_json(payload).encode("utf-8")).hexdigest()
