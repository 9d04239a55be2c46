# pdf text extraction using pymupdf
import fitz  # PyMuPDF
from typing import Dict, Any
import logging

from .errors import MalformedDocument

logger = logging.getLogger(__name__)


# open an in-memory pdf, mapping pymupdf failures onto MalformedDocument
def _open_document(data: bytes) -> fitz.Document:
    if not data:
        raise MalformedDocument("PDF appears to be empty or contains only images", "EMPTY_PDF")
    try:
        return fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        logger.error(f"Error opening PDF: {str(e)}")
        raise MalformedDocument(
            "Failed to parse PDF file. Please ensure it is a valid PDF.", "PDF_PARSE_ERROR"
        ) from e


# extract all text from a pdf, page by page
def extract_text(data: bytes) -> str:
    """Extract the text content of a PDF held in memory"""
    doc = _open_document(data)
    try:
        page_texts = [page.get_text() for page in doc]
        page_count = doc.page_count
    except Exception as e:
        logger.error(f"Error reading PDF pages: {str(e)}")
        raise MalformedDocument(
            "Failed to parse PDF file. Please ensure it is a valid PDF.", "PDF_PARSE_ERROR"
        ) from e
    finally:
        doc.close()

    text = "\n".join(page_texts)
    if not text.strip():
        raise MalformedDocument("PDF appears to be empty or contains only images", "EMPTY_PDF")

    logger.info(f"PDF parsed successfully: {page_count} pages, {len(text)} chars")
    return text


# extract metadata like title, author and page count
def extract_metadata(data: bytes) -> Dict[str, Any]:
    """Extract metadata from a PDF held in memory"""
    doc = _open_document(data)
    try:
        metadata = doc.metadata or {}
        return {
            'title': metadata.get('title', ''),
            'author': metadata.get('author', ''),
            'subject': metadata.get('subject', ''),
            'creator': metadata.get('creator', ''),
            'producer': metadata.get('producer', ''),
            'creation_date': metadata.get('creationDate', ''),
            'page_count': doc.page_count
        }
    finally:
        doc.close()
