"""The interface of engines that operate on PDF files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


class PdfEngineMethodNotSupportedError(NotImplementedError):
    """Raised when an engine does not support a method."""

    def __init__(self, message: str = "method not supported") -> None:
        super().__init__(message)


class PdfSplitModeNotSupportedError(ValueError):
    """Raised when an engine does not support a split mode."""

    def __init__(self, message: str = "split mode not supported") -> None:
        super().__init__(message)


class PdfFormatNotSupportedError(ValueError):
    """Raised when an engine does not support a PDF format conversion."""

    def __init__(self, message: str = "PDF format not supported") -> None:
        super().__init__(message)


class PdfEngineMetadataValueNotSupportedError(ValueError):
    """Raised when a metadata value is not supported."""

    def __init__(self, message: str = "metadata value not supported") -> None:
        super().__init__(message)


SPLIT_MODE_INTERVALS = "intervals"
SPLIT_MODE_PAGES = "pages"

PDF_A_1A = "PDF/A-1a"
PDF_A_1B = "PDF/A-1b"
PDF_A_2A = "PDF/A-2a"
PDF_A_2B = "PDF/A-2b"
PDF_A_2U = "PDF/A-2u"
PDF_A_3A = "PDF/A-3a"
PDF_A_3B = "PDF/A-3b"
PDF_A_3U = "PDF/A-3u"


@dataclass(frozen=True)
class SplitMode:
    """How to split a PDF: by ``intervals`` or ``pages``, with the span to use.

    ``unify`` puts the extracted pages into a single file; only for ``pages``.
    """

    mode: str
    span: str
    unify: bool = False


@dataclass(frozen=True)
class PdfFormats:
    """Target formats of a conversion: a PDF/A variant and PDF/UA compliance."""

    pdf_a: str = ""
    pdf_ua: bool = False


@runtime_checkable
class PdfEngine(Protocol):
    """Operations on PDF files."""

    def merge(self, logger: Any, input_paths: list[str], output_path: str) -> None:
        """Merge the inputs, in order, into ``output_path``."""

    def split(self, logger: Any, mode: SplitMode, input_path: str, output_dir_path: str) -> list[str]:
        """Split a PDF into ``output_dir_path`` and return the output paths."""

    def flatten(self, logger: Any, input_path: str) -> None:
        """Merge annotation appearances into the page content, irreversibly."""

    def convert(self, logger: Any, formats: PdfFormats, input_path: str, output_path: str) -> None:
        """Convert a PDF to the given formats; do nothing without a format."""

    def read_metadata(self, logger: Any, input_path: str) -> dict[str, Any]:
        """Return the metadata of a PDF."""

    def write_metadata(self, logger: Any, metadata: dict[str, Any], input_path: str) -> None:
        """Write metadata into a PDF."""


@runtime_checkable
class PdfEngineProvider(Protocol):
    """A module that supplies a ``PdfEngine``."""

    def pdf_engine(self) -> PdfEngine:
        """Return the engine."""