"""Endpoints HTTP del roster: lectura completa y update del propio jugador."""

from fastapi import APIRouter, Depends

from ..core import PlayerRecordStore
from ..models import PlayerUpdate
from .dependencies import get_store
from .schemas import PlayerOut, RosterResponse, UpdateRequest, UpdateResponse

router = APIRouter(prefix="/players", tags=["players"])


@router.get("", response_model=RosterResponse)
def list_players(store: PlayerRecordStore = Depends(get_store)):
    """Snapshot completo del roster; vacío si el backend no responde."""
    players = [PlayerOut.model_validate(r.to_dict()) for r in store.read_all()]
    return RosterResponse(players=players)


@router.post("/update", response_model=UpdateResponse)
def update_player(body: UpdateRequest, store: PlayerRecordStore = Depends(get_store)):
    # Los fallos del almacén no son errores HTTP: el cliente reintenta en el siguiente poll.
    result = store.try_update(
        PlayerUpdate(
            user_id=body.user_id,
            x=body.x,
            y=body.y,
            online=body.online,
            notification=body.notification,
        )
    )
    return UpdateResponse(success=result.ok, error=None if result.ok else result.error.value)
