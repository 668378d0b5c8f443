import os
import logging
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import firebase_admin
from contextlib import asynccontextmanager

from gamerscove.core.config import settings
from gamerscove.core.exceptions import FriendshipError
from gamerscove.core.log import setup_logging
from gamerscove.api.v1.api import api_router
from gamerscove.db import models  # registers tables on Base.metadata
from gamerscove.db.session import Base, engine
from gamerscove.schemas.enums import StoreBackendEnum

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def init_firebase():
    if firebase_admin._apps:
        logger.info("Firebase app already initialized.")
        return
    logger.info(f"Initializing Firebase Admin SDK (project: {settings.GCP_PROJECT_ID}, emulator: {settings.FIRESTORE_EMULATOR_HOST})")
    if settings.FIRESTORE_EMULATOR_HOST:
        os.environ["FIRESTORE_EMULATOR_HOST"] = settings.FIRESTORE_EMULATOR_HOST
    # Uses FIRESTORE_EMULATOR_HOST when set, Application Default Credentials otherwise.
    firebase_admin.initialize_app(options={'projectId': settings.GCP_PROJECT_ID})


@asynccontextmanager
async def lifespan_context_manager(app: FastAPI):
    # Startup
    logger.info(f"Starting {settings.PROJECT_NAME} with the {settings.STORE_BACKEND.value} relationship store")
    if settings.STORE_BACKEND == StoreBackendEnum.FIRESTORE:
        init_firebase()
    else:
        Base.metadata.create_all(bind=engine)
    yield
    # Shutdown
    logger.info("Main app lifespan shutdown")
    engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Friend requests and friendships for the Gamers Cove platform.",
    version="0.1.0",
    lifespan=lifespan_context_manager
)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(FriendshipError)
async def friendship_error_handler(request: Request, exc: FriendshipError):
    # Every manager-raised error is a client error; the kind travels in "error".
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "error": exc.code},
    )


app.include_router(api_router, prefix=settings.API_PREFIX)

@app.get("/")
async def read_root():
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}

@app.get("/health")
async def health_check():
    return {"status": "ok"}

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    uvicorn.run("gamerscove.main:app", host="0.0.0.0", port=port, log_level=settings.LOG_LEVEL.lower())
