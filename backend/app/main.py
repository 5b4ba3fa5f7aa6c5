import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.api import announcements, assignments, dashboard, houses, maintenance, profiles, reminders, rent
from app.db.database import init_db

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title="Kwa Kamande API",
    description="Property management for Kwa Kamande: houses, tenants, rent collection, maintenance",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.error("Constraint violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": "The change conflicts with existing data."})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "The database request failed. Please try again."})


app.include_router(houses.router, prefix="/api/houses", tags=["houses"])
app.include_router(profiles.router, prefix="/api/profiles", tags=["profiles"])
app.include_router(assignments.router, prefix="/api/assignments", tags=["assignments"])
app.include_router(rent.router, prefix="/api/rent", tags=["rent"])
app.include_router(maintenance.router, prefix="/api/maintenance", tags=["maintenance"])
app.include_router(announcements.router, prefix="/api/announcements", tags=["announcements"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
app.include_router(reminders.router, prefix="/api/reminders", tags=["reminders"])


@app.get("/health")
def health_check():
    return {"status": "ok", "version": "0.1.0"}
