from contextlib import asynccontextmanager
from typing import List, Dict, Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from citypath.config import settings
from citypath.models import *
from citypath.helpers import *
# -----------------------------
# App Setup
# -----------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield

app = FastAPI(
    title="City Route Finder API",
    version="0.1.0",
    description=(
        "Shortest routes between city locations using Dijkstra or A*.\n\n"
        "Endpoints provided: /getGraph, /getNodes, /algorithms, /shortestPath, /compare.\n"
        "The graph is fixed; the event log is in-memory and resets on restart."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(NodeNotFound)
async def node_not_found_handler(request: Request, exc: NodeNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc), "node": exc.node_id})

# -----------------------------
# Endpoints
# -----------------------------

@app.get("/healthz")
async def healthz():
    return {"ok": True}

@app.get("/events", response_model=List[Event])
async def get_events(limit: Optional[int] = None):
    """
    Recorded search events, newest first.
    """
    events = STATE.get("events", [])
    if limit is not None:
        events = events[-limit:] if limit > 0 else []
    return events[::-1]

@app.get("/getGraph", response_model=Graph, tags=["graph"])
async def get_graph() -> Graph:
    return CITY_GRAPH

@app.get("/getNodes", response_model=NodesResponse, tags=["graph"])
async def get_nodes() -> NodesResponse:
    return NodesResponse(nodes=sorted(CITY_GRAPH.nodes, key=lambda n: n.id))

@app.get("/algorithms", response_model=Dict[Algorithm, AlgorithmInfo], tags=["search"])
async def get_algorithms() -> Dict[Algorithm, AlgorithmInfo]:
    return ALGORITHM_INFO

# Search endpoints are plain functions so each runs in the worker threadpool
@app.post("/shortestPath", response_model=RouteResponse, tags=["search"])
def shortest_path(req: PathRequest) -> RouteResponse:
    algorithm = req.algorithm or settings.DEFAULT_ALGORITHM
    result = compute_shortest_path(CITY_GRAPH, req.start, req.end, algorithm)
    return RouteResponse(result=result, summary=summarize_route(CITY_GRAPH, result))

@app.get("/compare", response_model=CompareResponse, tags=["search"])
def compare(start: str, end: str) -> CompareResponse:
    return CompareResponse(results=compare_algorithms(CITY_GRAPH, start, end))
