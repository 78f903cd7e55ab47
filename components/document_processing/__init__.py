"""Document processing component.

This component turns raw park text files into normalized records ready for
embedding. It provides the park file parser, the description extractor, and a
loader for park files kept in a local directory.
"""

from .document_loader import DocumentLoaderError, load_park_documents
from .models import ParsedRecord, RawDocument
from .park_parser import extract_description, parse_document

__all__ = [
    # Document loading
    "DocumentLoaderError",
    "load_park_documents",
    # Parsing
    "extract_description",
    "parse_document",
    # Models
    "ParsedRecord",
    "RawDocument",
]
