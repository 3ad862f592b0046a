# webapp.py - Graph rendering service (circular layout -> PNG)
from __future__ import annotations
from fastapi import Depends, FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.requests import Request
from pydantic import BaseModel, Field, ConfigDict
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Optional, Any, Dict, List
from dataclasses import dataclass
from pathlib import Path
import threading

from gstore.document import Edge, Vertex
from gstore.errors import RateLimitError, StorageError, ValidationError
from gstore.paths import HOST, PORT, PUBLIC_BASE_URL, STATIC_DIR, STORAGE_DIR
from gstore.store import GraphStore
from render.canvas import RenderOptions, default_captions, render_graph
from render.images import EMPTY_LATEST, ImageStore, LatestImage
from render.layout import circular_layout
from webapp_lib.options import ServiceOptions
from webapp_lib.ratelimit import RateLimiter

# ============================================================================
# REQUEST BODIES
# ============================================================================

class VertexItem(BaseModel):
    name: str

class EdgeItem(BaseModel):
    source: str = Field(validation_alias="from")
    target: str = Field(validation_alias="to")
    model_config = ConfigDict(populate_by_name=True)

class GraphBody(BaseModel):
    vertices: Optional[List[VertexItem]] = None
    edges: Optional[List[EdgeItem]] = None

class VertexBody(BaseModel):
    name: Optional[str] = None

class EdgeBody(BaseModel):
    source: Optional[str] = Field(default=None, validation_alias="from")
    target: Optional[str] = Field(default=None, validation_alias="to")
    model_config = ConfigDict(populate_by_name=True)

# ============================================================================
# GRAPH SERVICE (store + images + renderer behind one lock)
# ============================================================================

@dataclass
class RenderResult:
    image: LatestImage
    png: Optional[bytes] = None

    @property
    def cached(self) -> bool:
        return self.png is None


class GraphService:
    def __init__(self, storage_dir: Path, options: ServiceOptions, public_base_url: str = PUBLIC_BASE_URL) -> None:
        self.options = options
        self._lock = threading.RLock()
        self.store = GraphStore(storage_dir)
        self.images = ImageStore(
            self.store.storage_dir,
            public_base_url=public_base_url,
            legacy_timestamps=options.legacy_timestamps,
        )
        self.render_options = RenderOptions(
            transparent_background=options.transparent_background,
            draw_axes=options.draw_axes,
            captions=default_captions(options.title, options.subtitle) if options.enable_captions else [],
        )

    @property
    def storage_dir(self) -> Path:
        return self.store.storage_dir

    # ---------------------------- Read endpoints ---------------------------- #

    def latest(self) -> Dict[str, Any]:
        with self._lock:
            try:
                latest = self.images.latest(self.store.latest_image)
            except StorageError as exc:
                raise HTTPException(status_code=500, detail=str(exc)) from exc
            return latest.to_dict() if latest else dict(EMPTY_LATEST)

    # --------------------------- Mutation endpoints ------------------------ #

    def add_vertex(self, name: Optional[str]) -> None:
        with self._lock:
            try:
                self.store.add_vertex(name)
            except ValidationError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
            except StorageError as exc:
                raise HTTPException(status_code=500, detail=str(exc)) from exc

    def add_edge(self, source: Optional[str], target: Optional[str]) -> None:
        with self._lock:
            try:
                self.store.add_edge(source, target)
            except ValidationError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
            except StorageError as exc:
                raise HTTPException(status_code=500, detail=str(exc)) from exc

    def reset(self) -> List[str]:
        with self._lock:
            try:
                self.store.reset()
                deleted = self.images.delete_all()
            except StorageError as exc:
                raise HTTPException(status_code=500, detail=str(exc)) from exc
            print(f"[webapp] Reset: {len(deleted)} image(s) deleted")
            return deleted

    def render(self, body: Optional[GraphBody]) -> RenderResult:
        with self._lock:
            try:
                return self._render(body)
            except ValidationError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
            except StorageError as exc:
                raise HTTPException(status_code=500, detail=str(exc)) from exc

    def _render(self, body: Optional[GraphBody]) -> RenderResult:
        supplied = body is not None and (body.vertices is not None or body.edges is not None)
        if supplied:
            if body.vertices is None or body.edges is None:
                raise ValidationError("Vertices and edges are required.")
            doc = self.store.replace_graph(
                [Vertex(name=v.name) for v in body.vertices],
                [Edge(source=e.source, target=e.target) for e in body.edges],
            )
        else:
            doc = self.store.load()

        doc = doc.copy(reset=False)
        unchanged, digest = self.store.is_unchanged(doc)
        if self.options.enable_caching and unchanged:
            latest = self.images.latest(self.store.latest_image)
            if latest is not None:
                return RenderResult(image=latest)

        positioned = circular_layout(doc.vertices)
        png = render_graph(positioned, doc.edges, self.render_options)
        name = self.images.new_image_name(self.store.latest_image)
        self.images.write(name, png)
        self.store.commit_render(doc, digest, name)
        return RenderResult(image=self.images.describe(name), png=png)


def peer_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def client_ip(request: Request) -> str:
    # Reported back to the caller only; the limiter keys on peer_ip.
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return peer_ip(request)

# ============================================================================
# FASTAPI APPLICATION
# ============================================================================

def create_app(
    storage_dir: Optional[Path] = None,
    options: Optional[ServiceOptions] = None,
    public_base_url: str = PUBLIC_BASE_URL,
) -> FastAPI:
    options = options or ServiceOptions.from_env()
    service = GraphService(Path(storage_dir or STORAGE_DIR), options, public_base_url)
    limiter = RateLimiter(options.rate_limit, options.rate_window_ms) if options.enable_rate_limit else None

    app = FastAPI(title="Graph Canvas")
    app.state.service = service
    app.state.limiter = limiter

    if options.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    print(f"[create_app] Storage: {service.storage_dir}")
    print(f"[create_app] Options: {options.to_dict()}")

    @app.exception_handler(StarletteHTTPException)
    async def plain_text_errors(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> PlainTextResponse:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
            for err in exc.errors()
        )
        return PlainTextResponse(f"Invalid request body: {problems}", status_code=400)

    def rate_limited(request: Request) -> None:
        if limiter is None:
            return
        try:
            limiter.hit(peer_ip(request))
        except RateLimitError as exc:
            raise HTTPException(status_code=429, detail=str(exc)) from exc

    # Serve rendered images and sidecars
    app.mount("/storage", StaticFiles(directory=str(service.storage_dir)), name="storage")

    @app.get("/", response_class=HTMLResponse, dependencies=[Depends(rate_limited)])
    def index():
        """Serve the graph viewer page"""
        return FileResponse(str(STATIC_DIR / "index.html"))

    @app.post("/graph")
    def post_graph(body: Optional[GraphBody] = None):
        result = service.render(body)
        if result.cached:
            return result.image.to_dict()
        return Response(
            content=result.png,
            media_type="image/png",
            headers={"X-Image-Path": result.image.path, "X-Image-Url": result.image.url},
        )

    @app.get("/latestImage")
    def latest_image() -> Dict[str, Any]:
        return service.latest()

    @app.post("/addVertice", response_class=PlainTextResponse, dependencies=[Depends(rate_limited)])
    def add_vertice(request: Request, body: Optional[VertexBody] = None) -> str:
        service.add_vertex(body.name if body else None)
        return f"Vertex added successfully from {client_ip(request)}."

    @app.post("/addEdge", response_class=PlainTextResponse, dependencies=[Depends(rate_limited)])
    def add_edge(body: Optional[EdgeBody] = None) -> str:
        service.add_edge(body.source if body else None, body.target if body else None)
        return "Edge added successfully."

    if options.enable_reset:
        @app.post("/reset", response_class=PlainTextResponse, dependencies=[Depends(rate_limited)])
        def reset() -> str:
            service.reset()
            return "Edges file reset and images deleted successfully."

    @app.get("/api/ping")
    def ping() -> Dict[str, Any]:
        return {"ok": True, "options": options.to_dict()}

    return app


def main() -> None:
    import uvicorn
    uvicorn.run(create_app(), host=HOST, port=PORT)


if __name__ == "__main__":
    main()
