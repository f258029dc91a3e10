from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import Settings
from core.logger import get_logger
from core.state import create_state
from services.controller import MapController
from services.defaults_store import load_default_config
from services.storage import KeyValueStorage
from api.routes import categories, data, health, interaction, markers, scene, zones

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, storage: Optional[KeyValueStorage] = None) -> FastAPI:
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- startup ---
        state = create_state(settings, storage=storage)
        state.defaults = load_default_config(settings.DEFAULTS_PATH)
        controller = MapController(state)
        with state.lock:
            controller.startup()
        app.state.controller = controller
        logger.info("Map annotator ready")
        try:
            yield
        finally:
            # --- shutdown ---
            with state.lock:
                controller.escape()

    app = FastAPI(title="Map Annotator API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(categories.router)
    app.include_router(markers.router)
    app.include_router(zones.router)
    app.include_router(interaction.router)
    app.include_router(data.router)
    app.include_router(scene.router)
    app.include_router(health.router)

    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run("app.main:app", host="127.0.0.1", port=8000)
