from __future__ import annotations

from http import HTTPStatus
import io
import logging
from pathlib import Path
from typing import Callable

from django.conf import settings
import docx
from pypdf import PdfReader

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ('txt', 'docx', 'pdf')

ProgressCallback = Callable[[int, int], None]


class TextExtractionError(Exception):
    def __init__(self, code: str, message: str, http_status: int = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = int(http_status)


def file_extension(filename: str) -> str:
    return Path(filename or '').suffix.lower().lstrip('.')


def read_text_file(data: bytes) -> str:
    try:
        return data.decode('utf-8-sig')
    except UnicodeDecodeError:
        return data.decode('latin-1')


def read_docx_file(data: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(data))
    except Exception as exc:
        raise TextExtractionError(
            code='unreadable_document',
            message=f'Error processing DOCX: {exc}',
            http_status=HTTPStatus.UNPROCESSABLE_ENTITY,
        ) from exc
    return '\n'.join(paragraph.text for paragraph in document.paragraphs)


def read_pdf_file(data: bytes, progress_callback: ProgressCallback | None = None) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        total_pages = len(reader.pages)
    except Exception as exc:
        raise TextExtractionError(
            code='unreadable_document',
            message=f'Error loading PDF: {exc}',
            http_status=HTTPStatus.UNPROCESSABLE_ENTITY,
        ) from exc

    max_pages = int(getattr(settings, 'SCREENER_MAX_PDF_PAGES', 300))
    if total_pages > max_pages:
        raise TextExtractionError(
            code='too_many_pages',
            message=f'PDF has {total_pages} pages. Max: {max_pages}.',
        )

    if progress_callback:
        progress_callback(0, total_pages)

    page_texts = []
    for index, page in enumerate(reader.pages, start=1):
        try:
            page_texts.append(page.extract_text() or '')
        except Exception as exc:
            logger.warning('Failed to extract text from PDF page %s: %s', index, exc)
            page_texts.append('')
        if progress_callback:
            progress_callback(index, total_pages)

    return '\n\n'.join(page_texts)


def ensure_upload_size(size: int) -> None:
    max_bytes = int(getattr(settings, 'SCREENER_MAX_UPLOAD_BYTES', 10 * 1024 * 1024))
    if size > max_bytes:
        raise TextExtractionError(
            code='file_too_large',
            message=f'File too large. Max: {max_bytes / 1024 / 1024:.1f}MB.',
            http_status=HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
        )


def extract_text(filename: str, data: bytes, progress_callback: ProgressCallback | None = None) -> str:
    extension = file_extension(filename)
    if extension not in SUPPORTED_EXTENSIONS:
        raise TextExtractionError(
            code='unsupported_file_type',
            message=(
                f'Unsupported file type: .{extension or "?"}. '
                'Please upload a .txt, .docx, or .pdf file.'
            ),
            http_status=HTTPStatus.UNSUPPORTED_MEDIA_TYPE,
        )

    ensure_upload_size(len(data))

    if extension == 'txt':
        text = read_text_file(data)
    elif extension == 'docx':
        text = read_docx_file(data)
    else:
        text = read_pdf_file(data, progress_callback=progress_callback)

    text = clip_text(text)
    if not text.strip():
        raise TextExtractionError(
            code='empty_text',
            message=f'No text could be extracted from "{filename}".',
            http_status=HTTPStatus.UNPROCESSABLE_ENTITY,
        )
    return text


def clip_text(text: str) -> str:
    max_chars = int(getattr(settings, 'SCREENER_MAX_TEXT_CHARS', 2_000_000))
    if len(text) > max_chars:
        logger.warning('Manuscript text truncated from %s to %s characters.', len(text), max_chars)
        return text[:max_chars]
    return text


def read_manuscript_path(path: str | Path) -> str:
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise TextExtractionError(
            code='unreadable_file',
            message=f'Error reading file "{path}": {exc}',
        ) from exc
    return extract_text(path.name, data)
