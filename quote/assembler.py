"""
PDF assembly module.
Merges rendered pages and static annexes into one document, in a fixed order.
"""

import io
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union

from PyPDF2 import PdfReader, PdfWriter

from .results import MergeError

logger = logging.getLogger(__name__)


class DocumentAssembler:
    """Concatenates the pages of several PDF buffers."""

    def merge(self, buffers: Iterable[Optional[bytes]]) -> bytes:
        """
        Merge PDF buffers page by page.

        Empty or missing buffers are skipped; the remaining buffers keep
        their relative order, and each one keeps its own page order.

        Args:
            buffers: Ordered PDF byte buffers (None/b'' allowed)

        Returns:
            Serialized merged PDF

        Raises:
            MergeError: if a non-empty buffer is not a readable PDF
        """
        writer = PdfWriter()

        for index, buffer in enumerate(buffers):
            if not buffer:
                continue
            try:
                reader = PdfReader(io.BytesIO(buffer))
                for page in reader.pages:
                    writer.add_page(page)
            except Exception as exc:
                raise MergeError(f"Buffer {index} is not a readable PDF: {exc}") from exc

        output = io.BytesIO()
        try:
            writer.write(output)
        except Exception as exc:
            raise MergeError(f"Merged document could not be written: {exc}") from exc
        return output.getvalue()


class StaticAssetReader:
    """Reads static files, returning None instead of failing when absent."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def read(self, path: Union[str, Path]) -> Optional[bytes]:
        full_path = self.root / path
        if not full_path.is_file():
            logger.warning("Static asset not found: %s", full_path)
            return None
        return full_path.read_bytes()


class AnnexLibrary:
    """
    Annex PDFs loaded once and shared read-only across requests.

    Args:
        reader: Asset reader used at load time
        annex_sets: Set name -> ordered file names
    """

    def __init__(self, reader: StaticAssetReader, annex_sets: Dict[str, Sequence[str]]):
        self._sets = {
            name: tuple(reader.read(filename) for filename in filenames)
            for name, filenames in annex_sets.items()
        }

    def get(self, name: str) -> Tuple[Optional[bytes], ...]:
        """Buffers of an annex set in file order (missing files are None)."""
        return self._sets.get(name, ())
