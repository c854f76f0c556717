from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

ProgressCallback = Callable[[float], None]


class BasePageRasterizer(ABC):
    """Contract for adapters that render a document page to a raster image."""

    @abstractmethod
    def rasterize_page(
        self,
        source_path: Path,
        output_dir: Path,
        output_prefix: str,
        page: int = 1,
    ) -> None:
        """Render one page of *source_path* as a PNG inside *output_dir*.

        The produced file name starts with *output_prefix* and ends with
        ``.png``. The exact name is adapter-specific and is not returned.

        Raises:
            RasterizationError: if the page cannot be rendered.
        """


class BaseOcrEngine(ABC):
    """Contract for OCR engine adapters."""

    @abstractmethod
    def recognize_text(
        self,
        path: Path,
        language: str = "eng",
        progress: ProgressCallback | None = None,
    ) -> str:
        """Recognize text in the image at *path*.

        Args:
            path: Raster image to read.
            language: Tesseract-style language code.
            progress: Optional callback receiving completion in [0, 1].

        Returns:
            Recognized text, possibly empty.

        Raises:
            RecognitionError: if recognition fails.
        """
