from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Response, status

from graph_layout.errors import MalformedGraphError

from ..schemas import FigureOut, FramePageOut, LayoutListItem, LayoutRunIn, LayoutSummaryOut
from ..store import store


router = APIRouter(prefix="/layouts", tags=["layouts"])


@router.post("/", response_model=LayoutSummaryOut, status_code=status.HTTP_201_CREATED)
def run_layout(payload: LayoutRunIn) -> LayoutSummaryOut:
    try:
        return store.run_layout(payload)
    except MalformedGraphError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/", response_model=list[LayoutListItem])
def list_layouts() -> list[LayoutListItem]:
    return store.list_layouts()


@router.get("/{layout_id}", response_model=LayoutSummaryOut)
def get_layout(layout_id: str) -> LayoutSummaryOut:
    try:
        return store.get_layout(layout_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Layout not found")


@router.get("/{layout_id}/frames", response_model=FramePageOut)
def get_frames(
    layout_id: str,
    start: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=1000),
) -> FramePageOut:
    try:
        return store.get_frames(layout_id, start=start, limit=limit)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Layout not found")


@router.get("/{layout_id}/figure", response_model=FigureOut)
def get_figure(layout_id: str) -> FigureOut:
    try:
        return store.get_figure(layout_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Layout not found")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.delete("/{layout_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_layout(layout_id: str) -> Response:
    ok = store.delete_layout(layout_id)
    if not ok:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Layout not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
