from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ..deps import get_request_handler
from ..ingest import RequestHandler

router = APIRouter(prefix="/v1/snapshots", tags=["snapshots"])


@router.post("", response_class=JSONResponse)
async def ingest(request: Request, handler: RequestHandler = Depends(get_request_handler)):
  body = await request.body()
  envelope = await run_in_threadpool(handler.handle, body)
  return JSONResponse(envelope.model_dump())
