"""
Request body reading for endpoints that accept attachments.

Vendor, purchase order and memo writes take either multipart form data
(fields plus any number of files) or a plain JSON object without files.
"""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import HTTPException, Request
from starlette.datastructures import FormData, UploadFile


Submission = tuple[dict[str, Any], list[tuple[str, UploadFile]]]


def form_fields(form: FormData) -> dict[str, Any]:
    """Text fields of a form; the last value wins for repeated names."""
    return {key: value for key, value in form.multi_items() if isinstance(value, str)}


def collect_uploads(form: FormData, max_files: int) -> list[tuple[str, UploadFile]]:
    """
    Pick the uploaded files out of a multipart form.

    Empty file inputs (no filename) are skipped.

    Args:
        form: Parsed multipart form
        max_files: Maximum number of files accepted per request

    Returns:
        list[tuple[str, UploadFile]]: (field name, file) pairs in form order

    Raises:
        HTTPException: 400 when more than ``max_files`` files were sent
    """
    uploads = [
        (field, value)
        for field, value in form.multi_items()
        if isinstance(value, UploadFile) and value.filename
    ]
    if len(uploads) > max_files:
        raise HTTPException(
            status_code=400,
            detail=f"Maksimal {max_files} file per unggahan"
        )
    return uploads


@asynccontextmanager
async def read_submission(request: Request, max_files: int) -> AsyncIterator[Submission]:
    """
    Yield the submitted fields and uploads, closing uploaded files on exit.

    Raises:
        HTTPException: 400 for malformed JSON or too many files
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except json.JSONDecodeError as exc:
            raise HTTPException(status_code=400, detail="Body JSON tidak valid") from exc
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Body JSON harus berupa objek")
        yield body, []
        return

    async with request.form() as form:
        yield form_fields(form), collect_uploads(form, max_files)
