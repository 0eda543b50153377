"""Aplicación FastAPI: roster de jugadores vía HTTP (polling, sin push)."""

from fastapi import FastAPI

from .routes import router
from .schemas import HealthResponse

app = FastAPI(
    title="Worldstate API",
    description="Estado compartido de jugadores para clientes que hacen polling",
    version="0.1.0",
)
app.include_router(router)

@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")
