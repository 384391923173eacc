"""Payroll file upload endpoint."""

from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import APIRouter, File, Request, UploadFile

from nomina.core.exceptions import UploadError
from nomina.services.batch_persistence import ingest
from nomina.services.uploads import read_upload, save_upload

router = APIRouter(tags=["upload"])

NO_FILE_MESSAGE = 'no file received (field "archivo")'


@router.post("/upload")
async def upload(request: Request, archivo: Optional[UploadFile] = File(None)) -> dict:
    """Store the uploaded TXT, parse it and persist the batch it describes."""
    if archivo is None:
        raise UploadError(NO_FILE_MESSAGE)

    settings = request.app.state.settings
    data = await archivo.read()
    path = await asyncio.to_thread(save_upload, settings.upload.directory, archivo.filename, data)
    content = await asyncio.to_thread(read_upload, path)

    result = await ingest(
        content,
        request.app.state.coordinator,
        strict=settings.strict_parsing,
    )
    return {"ok": True, "batch_id": result.batch_id, "inserted_count": result.inserted_count}
