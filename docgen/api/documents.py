"""Document API routes.

Merging rendered documents and appending page breaks.
"""

import logging

from fastapi import APIRouter, Depends, File, Response, UploadFile
from fastapi.concurrency import run_in_threadpool

from docgen.api.deps import attachment_headers, get_app_settings, read_upload
from docgen.core.config import DOCX_MIME_TYPE, Settings
from docgen.engine.merger import add_page_break, merge_docx_documents

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post(
    "/merge",
    response_class=Response,
    responses={200: {"content": {DOCX_MIME_TYPE: {}}}},
)
async def merge_documents(
    files: list[UploadFile] | None = File(default=None),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Merge uploaded documents into one, in upload order.

    The first document supplies styles, headers and footers.

    Args:
        files: The DOCX documents to merge.
        settings: Application settings.

    Returns:
        The merged document as a DOCX download.
    """
    buffers = [await read_upload(file, settings) for file in files or []]
    logger.info(f"Merging {len(buffers)} uploaded documents")

    merged = await run_in_threadpool(merge_docx_documents, buffers)

    return Response(
        content=merged,
        media_type=DOCX_MIME_TYPE,
        headers=attachment_headers(None, "merged.docx"),
    )


@router.post(
    "/page-break",
    response_class=Response,
    responses={200: {"content": {DOCX_MIME_TYPE: {}}}},
)
async def append_page_break(
    file: UploadFile,
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Append a page break to the end of a document."""
    content = await read_upload(file, settings)
    updated = await run_in_threadpool(add_page_break, content)

    return Response(
        content=updated,
        media_type=DOCX_MIME_TYPE,
        headers=attachment_headers(file.filename, "document.docx"),
    )
