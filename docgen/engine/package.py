"""DOCX package accessor.

A DOCX file is a ZIP archive of named parts (XML markup, media, manifests).
Package loads every part into memory so render and merge can read, replace
and add parts before writing the archive back out exactly once.
"""

import io
import logging
import zipfile

from docgen.core.exceptions import MalformedPackageError, PartNotFoundError

logger = logging.getLogger(__name__)

MAIN_DOCUMENT_PART = "word/document.xml"
CONTENT_TYPES_PART = "[Content_Types].xml"
DOCUMENT_RELS_PART = "word/_rels/document.xml.rels"
MEDIA_PREFIX = "word/media/"

REQUIRED_PARTS: tuple[str, ...] = (MAIN_DOCUMENT_PART, CONTENT_TYPES_PART)


class Package:
    """In-memory named-part container backed by a ZIP archive.

    Parts keep their archive order. Parts that are never overwritten are
    written back byte-for-byte on serialize().
    """

    def __init__(self, parts: dict[str, bytes] | None = None) -> None:
        self._parts: dict[str, bytes] = dict(parts or {})

    @classmethod
    def open(cls, buffer: bytes) -> "Package":
        """Open a byte buffer as a package.

        Args:
            buffer: Raw archive bytes.

        Returns:
            A Package holding every part of the archive.

        Raises:
            MalformedPackageError: If the buffer is not a readable ZIP archive.
        """
        try:
            with zipfile.ZipFile(io.BytesIO(bytes(buffer))) as archive:
                parts = {
                    info.filename: archive.read(info)
                    for info in archive.infolist()
                    if not info.is_dir()
                }
        except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, ValueError) as e:
            raise MalformedPackageError(f"not a valid archive ({e})") from e

        logger.debug(f"Opened package with {len(parts)} parts")
        return cls(parts)

    def has_part(self, path: str) -> bool:
        return path in self._parts

    def get_part(self, path: str) -> bytes:
        """Return the raw bytes of a part.

        Raises:
            PartNotFoundError: If the part is absent.
        """
        try:
            return self._parts[path]
        except KeyError:
            raise PartNotFoundError(path) from None

    def get_text(self, path: str) -> str:
        """Return a part decoded as UTF-8."""
        return self.get_part(path).decode("utf-8")

    def set_part(self, path: str, data: bytes | str) -> None:
        """Overwrite a part or add a new one."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._parts[path] = data

    def list_parts(self, prefix: str = "") -> list[str]:
        """List part paths starting with prefix, in archive order."""
        return [path for path in self._parts if path.startswith(prefix)]

    def require_document_parts(self) -> None:
        """Ensure the main document part and content-types manifest exist.

        Raises:
            PartNotFoundError: Naming the first missing required part.
        """
        for path in REQUIRED_PARTS:
            if path not in self._parts:
                raise PartNotFoundError(path)

    def serialize(self) -> bytes:
        """Write all parts to a new DEFLATE-compressed archive.

        The content-types manifest is written first, as Word expects.
        """
        ordered = sorted(self._parts, key=lambda path: path != CONTENT_TYPES_PART)

        output = io.BytesIO()
        with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for path in ordered:
                archive.writestr(path, self._parts[path])

        return output.getvalue()

    def __len__(self) -> int:
        return len(self._parts)

    def __contains__(self, path: object) -> bool:
        return path in self._parts
