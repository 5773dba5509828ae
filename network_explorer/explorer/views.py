import json
import logging
from functools import wraps
from pathlib import Path
from uuid import uuid4

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import render
from django.utils.html import format_html
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from api.network_api.errors import NetworkAnalysisError, RetrievalFailure
from core.network_platform import GraphEngine, PipelineContext, Workspace

DEFAULT_VISUALIZER = "force"

# graph_id -> workspace holding that graph's last pipeline run
WORKSPACES: dict[str, Workspace] = {}
LOGGER = logging.getLogger(__name__)


class BadInput(Exception):
    """Request-level problem; carried to the client as a JSON error."""

    def __init__(self, status: int, error: str, message: str, **extra):
        super().__init__(message)
        self.status = status
        self.error = error
        self.extra = extra


def json_error(status: int, error: str, message: str, **extra) -> JsonResponse:
    return JsonResponse({"ok": False, "status": status, "error": error, "message": message, **extra}, status=status)


def _analysis_error(status: int, exc: NetworkAnalysisError) -> JsonResponse:
    return JsonResponse({"ok": False, "status": status, **exc.to_dict()}, status=status)


def _error_page(status: int, title: str, message: str) -> HttpResponse:
    body = format_html(
        '<!doctype html><html lang="en"><head><meta charset="utf-8"><title>{0}</title></head>'
        '<body style="font-family:sans-serif"><h1 style="font-size:1.1rem">{0}</h1><p>{1}</p></body></html>',
        title,
        message,
    )
    return HttpResponse(body, status=status, content_type="text/html; charset=utf-8")


def _json_object(request: HttpRequest) -> dict:
    try:
        body = json.loads(request.body.decode("utf-8") or "null")
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise BadInput(400, "BadRequest", "Request body is not valid JSON.")
    if not isinstance(body, dict):
        raise BadInput(400, "BadRequest", "Request body must be a JSON object.")
    return body


def _reader_for(engine: GraphEngine, filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    name = engine.registry.datasource_for_extension(suffix) if suffix else None
    if name is None:
        raise BadInput(
            400,
            "UnsupportedFile",
            f"No reader for '{suffix or filename}' files.",
            details={"registered_datasources": engine.registry.list_datasources()},
        )
    return name


def _workspace(graph_id) -> Workspace:
    if not graph_id:
        raise BadInput(400, "BadRequest", "graph_id is required.")
    workspace = WORKSPACES.get(str(graph_id))
    if workspace is None or not workspace.has_graph():
        raise BadInput(404, "NotFound", f"Graph '{graph_id}' was not found.")
    return workspace


def _publish(request: HttpRequest, engine: GraphEngine, context: PipelineContext, filename: str) -> JsonResponse:
    graph_id = str(uuid4())
    WORKSPACES[graph_id] = engine.workspace
    if hasattr(request, "session"):
        # A new selection replaces this session's previous analysis
        previous = request.session.get("active_graph_id")
        if previous and WORKSPACES.pop(previous, None) is not None:
            LOGGER.debug("Discarded previous graph %s.", previous)
        request.session["active_graph_id"] = graph_id
    else:
        LOGGER.warning("No session on request; active graph id not stored.")

    return JsonResponse({
        "ok": True,
        "graph_id": graph_id,
        "meta": {
            "node_count": context.metrics.node_count,
            "edge_count": context.metrics.edge_count,
            "filename": filename,
            "source": context.datasource,
        },
        "analysis": context.to_dict(),
    })


def json_api(view):
    """Turn ``BadInput`` raised inside ``view`` into the JSON error envelope."""

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except BadInput as exc:
            return json_error(exc.status, exc.error, str(exc), **exc.extra)

    return wrapper


def index(request: HttpRequest) -> HttpResponse:
    return render(request, "explorer/index.html", {"page_title": "Network Explorer"})


@csrf_exempt
@require_POST
@json_api
def load_graph_api(request: HttpRequest) -> JsonResponse:
    """Parse and analyse an uploaded file."""
    upload = request.FILES.get("file")
    if upload is None:
        raise BadInput(400, "BadRequest", "missing file", expected={"file": "multipart .gml upload"})
    if upload.size > settings.MAX_UPLOAD_BYTES:
        raise BadInput(413, "PayloadTooLarge", f"Uploads are limited to {settings.MAX_UPLOAD_BYTES} bytes.")

    filename = upload.name or "upload"
    engine = GraphEngine()
    reader = _reader_for(engine, filename)
    text = upload.read().decode("utf-8", errors="replace")

    try:
        context = engine.load(reader, None, text=text, source_name=filename)
    except Exception as exc:
        LOGGER.exception("Unexpected failure analysing upload '%s'.", filename)
        return json_error(500, "InternalError", f"Unexpected graph load failure: {exc}")

    return _publish(request, engine, context, filename)


@csrf_exempt
@require_POST
@json_api
def load_catalog_api(request: HttpRequest) -> JsonResponse:
    """Parse and analyse a network from the server-side catalog directory."""
    name = _json_object(request).get("name")
    if not isinstance(name, str) or not name.strip():
        raise BadInput(400, "BadRequest", "name is required.", expected={"name": "string"})
    # Plain file names only; no path components
    if Path(name).name != name or name in {".", ".."}:
        raise BadInput(400, "BadRequest", f"Invalid network name '{name}'.")

    path = Path(settings.NETWORKS_DIR) / name
    if not path.is_file():
        raise BadInput(404, "NotFound", f"Network '{name}' is not in the catalog.")

    engine = GraphEngine()
    reader = _reader_for(engine, name)
    try:
        context = engine.load(reader, str(path), source_name=name)
    except RetrievalFailure as exc:
        LOGGER.warning("Failed to read catalog network '%s': %s", name, exc)
        return _analysis_error(502, exc)

    return _publish(request, engine, context, name)


@require_GET
@json_api
def graph_analysis_api(request: HttpRequest, graph_id: str) -> JsonResponse:
    context = _workspace(graph_id).get_context()
    return JsonResponse({"ok": True, "graph_id": graph_id, "analysis": context.to_dict()})


@csrf_exempt
@require_POST
@json_api
def graph_neighbors_api(request: HttpRequest) -> JsonResponse:
    """Ids to keep highlighted when a node is clicked, plus its incident edges."""
    body = _json_object(request)
    workspace = _workspace(body.get("graph_id"))

    if body.get("node_id") is None:
        raise BadInput(400, "BadRequest", "node_id is required.")
    node_id = str(body["node_id"])
    if not workspace.knows_id(node_id):
        raise BadInput(404, "NotFound", f"Node '{node_id}' is not part of the graph.")

    return JsonResponse({
        "ok": True,
        "node_id": node_id,
        "neighbors": sorted(workspace.neighbors(node_id)),
        "edges": [edge.to_dict() for edge in workspace.incident_edges(node_id)],
    })


@require_GET
def render_visualizer_api(request: HttpRequest) -> HttpResponse:
    visualizer_id = request.GET.get("visualizer_id", DEFAULT_VISUALIZER).strip().lower()
    graph_id = request.GET.get("graph_id", "").strip()
    if not graph_id:
        return _error_page(400, "Missing graph_id", "Query parameter 'graph_id' is required.")

    workspace = WORKSPACES.get(graph_id)
    if workspace is None or not workspace.has_graph():
        return _error_page(404, "Graph Not Found", f"Graph '{graph_id}' is not loaded.")

    engine = GraphEngine()
    if engine.registry.get_visualizer(visualizer_id) is None:
        available = ", ".join(engine.registry.list_visualizers())
        return _error_page(400, "Invalid visualizer_id", f"Unknown visualizer '{visualizer_id}'. Available: {available}.")

    try:
        html = engine.render(
            visualizer_id,
            workspace.get_context(),
            log_scale=request.GET.get("log_scale", "").lower() in {"1", "true", "yes"},
        )
    except Exception as exc:
        LOGGER.exception("Failed to render visualizer '%s'.", visualizer_id)
        return _error_page(500, "Visualizer Render Error", f"Failed to render '{visualizer_id}': {exc}")

    return HttpResponse(html, content_type="text/html; charset=utf-8")
