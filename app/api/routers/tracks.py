# app/api/routers/tracks.py
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_access_service
from app.api.errors import to_http
from app.domain.errors import StoreError
from app.domain.schemas import OwnershipOut, StreamTargetOut
from app.services.access_service import AccessService

router = APIRouter(prefix="/tracks", tags=["tracks"])


@router.get("/{track_id}/ownership", response_model=OwnershipOut)
def check_ownership(
    track_id: int,
    user_id: int = Query(..., gt=0),
    svc: AccessService = Depends(get_access_service),
):
    return {"track_id": track_id, "owned": svc.check_ownership(user_id, track_id)}


@router.get("/{track_id}/preview", response_model=StreamTargetOut)
def preview(
    track_id: int,
    svc: AccessService = Depends(get_access_service),
):
    try:
        target = svc.preview(track_id)
    except StoreError as e:
        raise to_http(e)
    return {"track_id": target.track_id, "kind": target.kind.value}


@router.get("/{track_id}/stream", response_model=StreamTargetOut)
def stream(
    track_id: int,
    user_id: int = Query(..., gt=0),
    svc: AccessService = Depends(get_access_service),
):
    """
    Pelny stream dla wlasciciela, w przeciwnym razie preview (nie blad).
    """
    try:
        target = svc.resolve_stream_target(user_id, track_id)
    except StoreError as e:
        raise to_http(e)
    return {"track_id": target.track_id, "kind": target.kind.value}
