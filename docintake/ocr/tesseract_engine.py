from pathlib import Path

import pytesseract
from PIL import Image

from docintake.ocr.base import BaseOcrEngine, ProgressCallback
from docintake.ocr.exceptions import RecognitionError


class TesseractOcrEngine(BaseOcrEngine):
    """Recognizes text in images with the Tesseract binary via pytesseract."""

    def __init__(self, tesseract_cmd: str = "") -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize_text(
        self,
        path: Path,
        language: str = "eng",
        progress: ProgressCallback | None = None,
    ) -> str:
        if progress is not None:
            progress(0.0)
        try:
            with Image.open(path) as image:
                text: str = pytesseract.image_to_string(image, lang=language)
        except Exception as exc:
            raise RecognitionError(f"tesseract recognition failed: {exc}") from exc
        if progress is not None:
            progress(1.0)
        return text
