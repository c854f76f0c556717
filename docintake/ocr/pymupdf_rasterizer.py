from pathlib import Path

import pymupdf

from docintake.ocr.base import BasePageRasterizer
from docintake.ocr.exceptions import RasterizationError


class PyMuPdfRasterizer(BasePageRasterizer):
    """Renders PDF pages to PNG using PyMuPDF."""

    def __init__(self, dpi: int = 200) -> None:
        self._dpi = dpi

    def rasterize_page(
        self,
        source_path: Path,
        output_dir: Path,
        output_prefix: str,
        page: int = 1,
    ) -> None:
        try:
            with pymupdf.open(str(source_path)) as doc:  # type: ignore[no-untyped-call]
                if page < 1 or page > doc.page_count:
                    raise RasterizationError(
                        f"Page {page} out of range for {source_path.name} "
                        f"({doc.page_count} pages)"
                    )
                pixmap = doc[page - 1].get_pixmap(dpi=self._dpi)
                pixmap.save(str(output_dir / f"{output_prefix}-{page}.png"))
        except RasterizationError:
            raise
        except Exception as exc:
            raise RasterizationError(f"pymupdf rasterization failed: {exc}") from exc
