"""
File Upload Utility - Validate resume uploads and extract their text.

Supported formats:
- PDF (.pdf) using PyPDF2
- Word (.docx) using python-docx
- Legacy Word (.doc), best-effort text runs

Max file size: 10MB (settings.max_upload_mb)
"""

import io
import re
from typing import Tuple

from docx import Document
from fastapi import UploadFile
from PyPDF2 import PdfReader

from hirehub.core.config import get_settings
from hirehub.core.errors import ValidationError


PDF_MIME = "application/pdf"
DOC_MIME = "application/msword"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

ALLOWED_MIME_TYPES = {PDF_MIME, DOC_MIME, DOCX_MIME}
ALLOWED_EXTENSIONS = {'.pdf', '.doc', '.docx'}

# printable runs inside a binary .doc
_DOC_TEXT_RUN = re.compile(rb"[\x20-\x7e\r\n\t]{4,}")


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def validate_resume_file(filename: str, content_type: str, size: int) -> None:
    """
    Validate an uploaded resume before anything is stored.

    Raises:
        ValidationError (400) with a descriptive message
    """
    settings = get_settings()

    if not filename:
        raise ValidationError("No file uploaded")

    if content_type not in ALLOWED_MIME_TYPES:
        raise ValidationError("Invalid file type. Please upload PDF or Word documents.")

    ext = get_file_extension(filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"Invalid file extension '{ext}'. Allowed: .pdf, .doc, .docx")

    if size == 0:
        raise ValidationError("Uploaded file is empty")

    if size > settings.max_upload_bytes:
        raise ValidationError(f"File size should be less than {settings.max_upload_mb}MB")


async def read_resume_upload(file: UploadFile) -> Tuple[bytes, str, str]:
    """
    Read and validate an uploaded resume.

    Returns:
        Tuple of (content, filename, content_type)
    """
    content = await file.read()
    filename = file.filename or ""
    content_type = file.content_type or ""
    validate_resume_file(filename, content_type, len(content))
    return content, filename, content_type


def extract_text(content: bytes, filename: str) -> str:
    """Extract plain text based on the file extension."""
    ext = get_file_extension(filename)
    if ext == '.pdf':
        return extract_from_pdf(content)
    if ext == '.docx':
        return extract_from_docx(content)
    if ext == '.doc':
        return extract_from_doc(content)
    raise ValidationError(f"Unsupported file type '{ext}'")


def extract_from_pdf(content: bytes) -> str:
    """Extract text from PDF bytes."""
    reader = PdfReader(io.BytesIO(content))
    text_parts = []
    for page in reader.pages:
        page_text = page.extract_text()
        if page_text:
            text_parts.append(page_text)
    return '\n'.join(text_parts)


def extract_from_docx(content: bytes) -> str:
    """Extract text from DOCX bytes."""
    doc = Document(io.BytesIO(content))
    text_parts = []

    # Extract paragraphs
    for para in doc.paragraphs:
        if para.text.strip():
            text_parts.append(para.text)

    # Extract tables
    for table in doc.tables:
        for row in table.rows:
            row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if row_text:
                text_parts.append(' | '.join(row_text))

    return '\n'.join(text_parts)


def extract_from_doc(content: bytes) -> str:
    """Legacy .doc is binary; keep the readable text runs."""
    runs = _DOC_TEXT_RUN.findall(content)
    return '\n'.join(run.decode('latin-1').strip() for run in runs if run.strip())
