from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from asset_graph import __version__
from asset_graph.graph import GraphError, GraphService, GraphStore, StorageError
from asset_graph.settings import AssetGraphSettings, settings

from .auth import require_api_key
from .schemas import (
    ClassIn,
    ClassOut,
    EdgeCriteriaIn,
    EdgeIn,
    EdgeOut,
    NodeIn,
    NodeOut,
    NodeUpdateIn,
    dump,
)

logger = logging.getLogger(__name__)


def _graph(request: Request) -> GraphService:
    return request.app.state.graph


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def build_graph_router() -> APIRouter:
    r = APIRouter(tags=["graph"], dependencies=[Depends(require_api_key)])

    # --- classes ---

    @r.post("/create_class", status_code=201)
    async def create_class(payload: ClassIn, graph: GraphService = Depends(_graph)):
        logger.debug("create_class payload=%s", payload)
        cls = graph.classes.define(payload.identifier, payload.attributes)
        return dump(ClassOut.of(cls))

    @r.get("/get_class")
    async def list_classes(graph: GraphService = Depends(_graph)):
        return [dump(ClassOut.of(c)) for c in graph.classes.list_all()]

    @r.get("/get_class/{class_id}")
    async def list_class_nodes(class_id: str, graph: GraphService = Depends(_graph)):
        return [dump(NodeOut.of(n)) for n in graph.nodes.list_by_class(class_id)]

    @r.get("/get_class_attributes/{class_id}")
    async def get_class_attributes(class_id: str, graph: GraphService = Depends(_graph)):
        return graph.classes.get_attributes(class_id)

    @r.delete("/delete_class/{class_id}")
    async def delete_class(class_id: str, graph: GraphService = Depends(_graph)):
        graph.classes.remove(class_id)
        return {
            "message": (
                f"Classe '{class_id}', seus ativos associados e vínculos relacionados "
                "foram excluídos com sucesso."
            )
        }

    # --- ativos ---

    @r.post("/create_ativo", status_code=201)
    async def create_node(payload: NodeIn, graph: GraphService = Depends(_graph)):
        node = graph.nodes.create(payload.class_id, payload.identifier, payload.attributes)
        return dump(NodeOut.of(node))

    @r.get("/get_ativo/{node_id}")
    async def get_node(node_id: str, graph: GraphService = Depends(_graph)):
        return dump(NodeOut.of(graph.nodes.get(node_id)))

    @r.put("/update_ativo")
    async def update_node(payload: NodeUpdateIn, graph: GraphService = Depends(_graph)):
        try:
            node = graph.nodes.update(payload.identifier, payload.attributes)
        except StorageError as e:
            logger.error("update of node %s failed: %s", payload.identifier, e)
            return _error(500, f"Erro ao atualizar o ativo: {e.message}")
        return {
            "message": f"Ativo '{node.identifier}' atualizado com sucesso.",
            "ativo": dump(NodeOut.of(node)),
        }

    @r.delete("/delete_ativo/{node_id}")
    async def delete_node(node_id: str, graph: GraphService = Depends(_graph)):
        graph.nodes.remove(node_id)
        return {"message": f"Ativo '{node_id}' e seus vínculos associados foram excluídos com sucesso."}

    # --- vinculos ---

    @r.post("/create_vinculo", status_code=201)
    async def create_edge(payload: EdgeIn, graph: GraphService = Depends(_graph)):
        edge = graph.edges.create(payload.source_id, payload.destination_id, payload.type)
        return dump(EdgeOut.of(edge))

    @r.get("/get_vinculos/{node_id}")
    async def list_node_edges(node_id: str, graph: GraphService = Depends(_graph)):
        return [dump(EdgeOut.of(e)) for e in graph.edges.list_touching(node_id)]

    @r.delete("/delete_vinculos")
    async def delete_edges(
        payload: EdgeCriteriaIn | None = Body(default=None),
        graph: GraphService = Depends(_graph),
    ):
        payload = payload or EdgeCriteriaIn()
        deleted = graph.edges.remove_by_criteria(
            payload.source_id, payload.destination_id, payload.type
        )
        return {"message": f"{deleted} vínculo(s) excluído(s) com sucesso."}

    return r


def create_app(store: GraphStore, *, app_settings: AssetGraphSettings | None = None) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(title="Asset Graph", version=__version__)
    app.state.settings = app_settings
    app.state.graph = GraphService.build(store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GraphError)
    async def graph_error(_request: Request, exc: GraphError):
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(_request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        logger.warning("invalid request: %s", problems)
        return _error(400, f"Requisição inválida: {problems}")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.get("/health")
    async def health():
        return {"ok": True, "version": __version__}

    app.include_router(build_graph_router())
    return app
