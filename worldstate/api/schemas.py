"""Modelos Pydantic para requests/responses de la API."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field



class HealthResponse(BaseModel):
    status: str


# --- GET /players ---
class PlayerOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    x: int
    y: int
    online: bool
    notification: int
    color: str


class RosterResponse(BaseModel):
    players: list[PlayerOut] = Field(default_factory=list)


# --- POST /players/update ---
class UpdateRequest(BaseModel):
    """Campos propiedad del cliente. El color no se acepta: lo conserva el almacén."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: int = Field(alias="userId")
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)
    online: bool = False
    notification: int = 0


class UpdateResponse(BaseModel):
    success: bool
    error: Optional[str] = None
