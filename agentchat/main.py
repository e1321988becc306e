# agentchat/main.py
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from agentchat.core import config
from agentchat.core.database import SessionLocal, init_db
from agentchat.core.logging_config import setup_logging
from agentchat.core.seeding import seed_admin, seed_default_settings
from agentchat.routers import (
    admin,
    admin_operations,
    agents,
    auth,
    chat_handler,
    conversations,
    image_upload,
    settings,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables and seed branding defaults plus the bootstrap admin
    init_db()
    db = SessionLocal()
    try:
        seed_default_settings(db)
        seed_admin(db, config.ADMIN_EMAIL, config.ADMIN_PASSWORD)
    finally:
        db.close()
    logger.info("Database ready")
    yield


app = FastAPI(title="AI Agent Chat", lifespan=lifespan)

# Function endpoints also answer OPTIONS themselves with the same headers
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(agents.router, prefix="/agents", tags=["Agents"])
app.include_router(conversations.router, prefix="/conversations", tags=["Conversations"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(settings.router, prefix="/settings", tags=["Settings"])
app.include_router(admin_operations.router, tags=["Functions"])
app.include_router(chat_handler.router, tags=["Functions"])
app.include_router(image_upload.router, tags=["Functions"])

# Uploaded objects are served read-only
os.makedirs(config.STORAGE_DIR, exist_ok=True)
app.mount(config.PUBLIC_STORAGE_PATH, StaticFiles(directory=config.STORAGE_DIR), name="storage")


@app.get("/")
def read_root():
    return {"message": "AI Agent Chat backend is running"}


def main() -> None:
    setup_logging("server")
    uvicorn.run(
        "agentchat.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
