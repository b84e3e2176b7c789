### workspace-menu/app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import CORS_ORIGINS, LOG_LEVEL
from app.db import create_db_and_tables
from app.api import workspace_routes
from app.api.menu_routes import menu_item_routes
from app.services.menu import MenuItemError
import app.models  # registers all models via models/__init__.py

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup / shutdown hooks."""
    log.info("Starting DB setup ...")
    await create_db_and_tables()
    log.info("DB schema created.")
    yield
    log.info("Application shutting down ...")


# Create the FastAPI app
app = FastAPI(
    title="Workspace Menu API",
    version="1.0.0",
    description="API for managing per-workspace menu trees.",
    lifespan=lifespan,
)

# Allow frontend dev (CORS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Menu tree errors -> problem response
@app.exception_handler(MenuItemError)
async def menu_item_error_handler(request: Request, exc: MenuItemError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"errorCode": exc.error_code, "detail": exc.detail},
    )


# Payload shape errors -> 400 with the offending fields
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    params = [
        {"name": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "errorCode": "CONSTRAINT_VIOLATIONS",
            "detail": "Request validation failed",
            "invalidParams": params,
        },
    )


# Routes
app.include_router(workspace_routes.router, prefix="/internal/workspaces", tags=["Workspaces"])
app.include_router(
    menu_item_routes.router,
    prefix="/internal/workspaces/{workspace_id}/menuItems",
    tags=["Menu Items"],
)
