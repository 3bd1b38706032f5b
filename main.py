"""Application entry point for the Glucose Tracker API.

`create_app` wires the record store, the session table and the meal plan
service onto `app.state`, registers middleware, exception handlers and the
API routers. `app` is the instance served by uvicorn.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.auth import router as auth_router
from api.glucose import router as glucose_router
from api.meal_plans import router as meal_plans_router
from api.notes import router as notes_router
from core.config import CORS_ORIGINS, SEED_DEMO_DATA
from core.error_handlers import register_exception_handlers
from core.exceptions import DatabaseError
from core.logger import get_logger
from core.session import SessionStore
from data.demo_data import seed_demo_data
from database.deps import get_store
from database.store import RecordStore, create_store
from services.meal_plan_service import MealPlanService, create_meal_plan_service

logger = get_logger("main")


def create_app(
    store: Optional[RecordStore] = None,
    meal_plan_service: Optional[MealPlanService] = None,
    sessions: Optional[SessionStore] = None,
    seed_demo: bool = SEED_DEMO_DATA,
) -> FastAPI:
    """Build a configured application.

    Args:
        store: Record store to use; defaults to the configured backend.
        meal_plan_service: Generation service; defaults to one built from config.
        sessions: Session table; defaults to a fresh in-process one.
        seed_demo: Whether to create the demo account on startup.
    """
    if store is None:
        store = create_store()
    if seed_demo:
        seed_demo_data(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Glucose Tracker API starting (store=%s)", store.backend)
        yield
        store.close()

    app = FastAPI(title="Glucose Tracker API", version="1.0.0", lifespan=lifespan)
    app.state.store = store
    app.state.sessions = sessions if sessions is not None else SessionStore()
    app.state.meal_plan_service = (
        meal_plan_service if meal_plan_service is not None else create_meal_plan_service()
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log incoming requests and their responses."""
        logger.info("%s %s", request.method, request.url.path)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Request error: %s %s", request.method, request.url.path)
            raise
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    @app.get("/health")
    def health(store: RecordStore = Depends(get_store)):
        """Return basic health status and storage connectivity.

        Raises:
            DatabaseError: If the store cannot be reached.
        """
        try:
            store.ping()
        except Exception as exc:
            logger.exception("Health check failed")
            raise DatabaseError("Storage health check failed", operation="ping") from exc
        return {"status": "healthy", "storage": store.backend}

    app.include_router(auth_router)
    app.include_router(glucose_router)
    app.include_router(meal_plans_router)
    app.include_router(notes_router)
    return app


app = create_app()


if __name__ == "__main__":
    try:
        import uvicorn
    except ImportError as exc:
        raise RuntimeError("uvicorn is required to run the app. Install with `pip install uvicorn[standard]`.") from exc

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
