"""Best-effort OCR text extraction.

Processing flow:
1. Paginated inputs (PDF, by extension or declared MIME type) are rasterized
   (page 1 only) into the source directory. Only an image that did not exist
   before the rasterizer ran is accepted as its output.
2. The image (or the original raster upload) is passed to the OCR engine.
3. Any rasterization or OCR failure, and any blank OCR result, becomes
   OCR_FAILED_TEXT. Nothing is raised to the caller.
4. The page image created in step 1 is removed once OCR has finished.
"""

from pathlib import Path
from typing import ClassVar

from docintake.logging.logger import Log
from docintake.ocr.base import BaseOcrEngine, BasePageRasterizer, ProgressCallback
from docintake.ocr.exceptions import RasterizationError

OCR_FAILED_TEXT = "OCR Extraction Failed"


class TextExtractor:
    """Extracts plain text from an uploaded file via rasterizer + OCR engine."""

    PAGINATED_EXTENSIONS: ClassVar[frozenset[str]] = frozenset({".pdf"})
    PAGINATED_MIME_TYPES: ClassVar[frozenset[str]] = frozenset({"application/pdf"})
    RASTER_SUFFIX: ClassVar[str] = ".png"

    def __init__(
        self,
        rasterizer: BasePageRasterizer,
        ocr_engine: BaseOcrEngine,
        language: str = "eng",
    ) -> None:
        self._rasterizer = rasterizer
        self._ocr_engine = ocr_engine
        self._language = language

    def is_paginated(self, file_path: Path, mime_type: str | None = None) -> bool:
        if file_path.suffix.lower() in self.PAGINATED_EXTENSIONS:
            return True
        return mime_type is not None and mime_type.lower() in self.PAGINATED_MIME_TYPES

    def extract(
        self,
        file_path: Path,
        mime_type: str | None = None,
        progress: ProgressCallback | None = None,
    ) -> str:
        """Return OCR text for *file_path*, or OCR_FAILED_TEXT when nothing usable."""
        Log.info(f"Extracting text from {file_path.name}")
        raster_path: Path | None = None
        try:
            image_path = file_path
            if self.is_paginated(file_path, mime_type):
                raster_path = self._rasterize_first_page(file_path)
                image_path = raster_path
            text = self._ocr_engine.recognize_text(
                image_path, language=self._language, progress=progress
            )
        except Exception as exc:
            Log.error(f"Text extraction failed for {file_path.name}: {exc}")
            text = ""
        finally:
            if raster_path is not None:
                self._remove_raster(raster_path)

        if not text.strip():
            Log.warning(f"No text recognized in {file_path.name}")
            return OCR_FAILED_TEXT
        Log.info(f"Extracted {len(text)} chars from {file_path.name}")
        return text

    def _rasterize_first_page(self, file_path: Path) -> Path:
        output_dir = file_path.parent
        prefix = file_path.stem
        before = {p.name for p in output_dir.iterdir()}
        self._rasterizer.rasterize_page(file_path, output_dir, prefix, page=1)

        created = sorted(
            p
            for p in output_dir.iterdir()
            if p.name not in before
            and p.name.startswith(prefix)
            and p.name.endswith(self.RASTER_SUFFIX)
        )
        if not created:
            raise RasterizationError(
                f"Page was rasterized, but no new image was found in {output_dir}"
            )
        Log.debug(f"Rasterized {file_path.name} to {created[0].name}")
        return created[0]

    def _remove_raster(self, raster_path: Path) -> None:
        try:
            raster_path.unlink(missing_ok=True)
        except OSError as exc:
            Log.warning(f"Could not remove temporary image {raster_path}: {exc}")
