"""FastAPI dependencies and upload helpers shared by the routers."""

import logging
from urllib.parse import quote

from fastapi import HTTPException, Request, UploadFile, status

from docgen.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

DOCX_ATTACHMENT_HEADER = "attachment; filename=\"{fallback}\"; filename*=UTF-8''{quoted}"


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the app was created with.

    Args:
        request: The current request.

    Returns:
        The application's Settings, or the global settings if the app
        state carries none.
    """
    return getattr(request.app.state, "settings", None) or get_settings()


async def read_upload(file: UploadFile, settings: Settings) -> bytes:
    """Read an uploaded file, enforcing the configured size limit.

    Args:
        file: The uploaded file.
        settings: Application settings.

    Returns:
        The file content.

    Raises:
        HTTPException: 400 if the upload is empty, 413 if it is too large.
    """
    content = await file.read()

    if not content:
        logger.warning(f"Empty upload: {file.filename}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Uploaded file {file.filename} is empty",
        )

    if len(content) > settings.max_template_size_bytes:
        logger.warning(f"Upload too large: {file.filename} ({len(content)} bytes)")
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=(
                f"File size exceeds maximum of "
                f"{settings.max_template_size_bytes / 1024 / 1024:g}MB"
            ),
        )

    return content


def attachment_headers(filename: str | None, default: str) -> dict[str, str]:
    """Build Content-Disposition headers for a DOCX download.

    The header value must stay latin-1 encodable, so the name is sent
    twice: an ASCII fallback in filename and the UTF-8 original
    percent-encoded in filename* (RFC 6266), as Starlette's FileResponse
    does.
    """
    name = filename if filename and filename.lower().endswith(".docx") else default
    fallback = "".join(
        char if char.isascii() and char.isprintable() and char not in '"\\' else "_"
        for char in name
    )
    return {
        "Content-Disposition": DOCX_ATTACHMENT_HEADER.format(
            fallback=fallback, quoted=quote(name, safe="")
        )
    }
