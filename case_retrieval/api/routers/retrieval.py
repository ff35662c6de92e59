from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http

from case_retrieval.core.errors import RetrievalError
from case_retrieval.models.retrieval import (
    IndexStatus,
    QueryHit,
    QueryRequest,
    QueryResponse,
    RebuildRequest,
)
from case_retrieval.services.retrieval_service import RetrievalService

router = APIRouter()


def _http_error(e: RetrievalError) -> HTTPException:
    return HTTPException(e.status_code, detail=e.to_dict())


def get_service() -> RetrievalService:
    try:
        return RetrievalService.instance()
    except RetrievalError as e:
        raise _http_error(e)


@router.get("/index", response_model=IndexStatus)
def index_status(svc: RetrievalService = Depends(get_service)):
    return svc.status()


@router.post("/index", response_model=IndexStatus, status_code=http.HTTP_201_CREATED)
def rebuild_index(body: RebuildRequest, svc: RetrievalService = Depends(get_service)):
    """
    Replace the corpus. Request JSON:
    {"passages": ["first paragraph", "second paragraph", ...]}
    A failed rebuild leaves the previous index serving queries.
    """
    try:
        svc.rebuild(body.passages)
    except RetrievalError as e:
        raise _http_error(e)
    return svc.status()


@router.post("/query", response_model=QueryResponse)
def query(body: QueryRequest, svc: RetrievalService = Depends(get_service)):
    """
    Request JSON:
    {"query_text": "Was the accused granted bail?", "k": 3}
    Hits are ordered by ascending squared L2 distance.
    """
    try:
        generation_id, hits = svc.query_with_generation(body.query_text, body.k)
    except RetrievalError as e:
        raise _http_error(e)
    return QueryResponse(
        hits=[QueryHit(text=h.text, distance=h.distance, position=h.position) for h in hits],
        generation_id=generation_id,
    )
