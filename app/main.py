import logging

from fastapi import FastAPI

from app.routers.weather import router as weather_router
from config.settings import LOG_LEVEL
from services.farmer_calendar import CalendarConfigError, load_farmer_calendar
from utils.logging_setup import setup_logging

logger = logging.getLogger("fellah")


def create_app() -> FastAPI:
    """Create and configure FastAPI application with the farmer calendar loaded."""
    setup_logging(LOG_LEVEL)
    app = FastAPI(title="Fellah Weather - Farmer Calendar & Forecast")

    @app.on_event("startup")
    async def startup_load_resources():
        """Load the bundled farmer calendar once at startup."""
        logger.info("Loading farmer calendar...")
        try:
            app.state.farmer_calendar = load_farmer_calendar()
        except CalendarConfigError as e:
            logger.exception(f"✗ Failed to load farmer calendar: {e}")
            raise

    # ---------------- ROUTES ----------------

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # ---------------- INCLUDE ROUTERS ----------------

    app.include_router(weather_router)

    return app

app = create_app()


if __name__ == "__main__":
	import uvicorn

	uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=False)
