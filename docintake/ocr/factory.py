from docintake.config.settings import Settings
from docintake.ocr.base import BaseOcrEngine, BasePageRasterizer
from docintake.ocr.pdfplumber_rasterizer import PdfPlumberRasterizer
from docintake.ocr.pymupdf_rasterizer import PyMuPdfRasterizer
from docintake.ocr.tesseract_engine import TesseractOcrEngine


class RasterizerFactory:
    """Creates the correct page rasterizer based on settings."""

    ADAPTERS: dict[str, type[PyMuPdfRasterizer] | type[PdfPlumberRasterizer]] = {
        "pymupdf": PyMuPdfRasterizer,
        "pdfplumber": PdfPlumberRasterizer,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePageRasterizer:
        engine = settings.rasterizer_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown rasterizer engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls(dpi=settings.rasterizer_dpi)


class OcrEngineFactory:
    """Creates the OCR engine adapter."""

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrEngine:
        return TesseractOcrEngine(tesseract_cmd=settings.tesseract_cmd)
