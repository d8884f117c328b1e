# backend/main.py
import os
import sys
import logging
from dotenv import load_dotenv

logging.basicConfig(stream=sys.stdout, level=logging.INFO)
_log = logging.getLogger("env_loader")

# Candidate .env locations (in order)
#  - PROJECT_ROOT/.env
#  - BACKEND_DIR/.env
#  - current working directory .env
BASE_DIR = os.path.dirname(os.path.abspath(__file__))        # backend/
PROJECT_ROOT = os.path.dirname(BASE_DIR)                     # project root (parent of backend)
CWD = os.getcwd()

cand_paths = [
    os.path.join(PROJECT_ROOT, ".env"),
    os.path.join(BASE_DIR, ".env"),
    os.path.join(CWD, ".env"),
]

loaded_from = None
for p in cand_paths:
    if os.path.exists(p):
        # real environment wins over .env
        load_dotenv(p, override=False)
        loaded_from = p
        _log.info("Loaded .env from: %s", p)
        break

if not loaded_from:
    load_dotenv(override=False)
# ---------------------------------------------------------

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import settings
from core.logging import setup_json_logging
from core.request_id import RequestIDMiddleware
from db.init_db import init_db
from services.errors import ServiceError
from api import admin, application, auth, roles, super_admin, video, video_access

setup_json_logging()
logger = logging.getLogger("main")

app = FastAPI(title="Candidate Assessment API")

app.include_router(application.router)
app.include_router(video.router)
app.include_router(video_access.router)
app.include_router(admin.router)
app.include_router(auth.router)
app.include_router(super_admin.router)
app.include_router(roles.router)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("service error on %s: %s", request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


init_db()

app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"ok": True}
