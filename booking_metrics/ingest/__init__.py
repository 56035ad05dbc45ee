"""Export ingestion: source read, delimiter detection, header canonicalization."""

from .fetch import FetchError, read_source
from .headers import canonicalize_header, canonicalize_row
from .reader import EmptyExportError, ParsedExport, ParseError, parse_export

__all__ = [
    "EmptyExportError",
    "FetchError",
    "ParseError",
    "ParsedExport",
    "canonicalize_header",
    "canonicalize_row",
    "parse_export",
    "read_source",
]
