from pathlib import Path

import pdfplumber

from docintake.ocr.base import BasePageRasterizer
from docintake.ocr.exceptions import RasterizationError


class PdfPlumberRasterizer(BasePageRasterizer):
    """Renders PDF pages to PNG using pdfplumber."""

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
            with pdfplumber.open(source_path) as pdf:
                if page < 1 or page > len(pdf.pages):
                    raise RasterizationError(
                        f"Page {page} out of range for {source_path.name} "
                        f"({len(pdf.pages)} pages)"
                    )
                image = pdf.pages[page - 1].to_image(resolution=self._dpi)
                image.save(output_dir / f"{output_prefix}-{page}.png", format="PNG")
        except RasterizationError:
            raise
        except Exception as exc:
            raise RasterizationError(f"pdfplumber rasterization failed: {exc}") from exc
