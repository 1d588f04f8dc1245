from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from .deps import get_request_handler, get_storage
from .ingest import RequestHandler
from .logging_config import configure_logging
from .routers import snapshots
from .settings import get_settings
from .storage import StoragePort


@asynccontextmanager
async def lifespan(_: FastAPI):
  configure_logging(get_settings().log_level)
  yield


app = FastAPI(title="Router Production Log", version="0.1.0", lifespan=lifespan)
app.include_router(snapshots.router)


@app.get("/healthz")
def healthcheck(
  handler: RequestHandler = Depends(get_request_handler),
  storage: StoragePort = Depends(get_storage),
):
  return {"status": "ok", "store": handler.store_name, "backend": storage.backend_name}
