from __future__ import annotations

from pathlib import Path

from PIL import Image

from rasterrotate.raster import Raster

FORMAT_MAPPING: dict[str, str] = {
    ".bmp": "BMP",
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".tiff": "TIFF",
    ".tif": "TIFF",
    ".gif": "GIF",
    ".webp": "WEBP",
}

LOSSY_FORMATS = frozenset({"JPEG", "WEBP"})


class ImageIO:
    @staticmethod
    def open_as_grayscale(image_path: str | Path, grayscale_mode: str = "L") -> Image.Image:
        with Image.open(image_path) as source_image:
            return source_image.convert(grayscale_mode)

    @staticmethod
    def read_raster(image_path: str | Path, grayscale_mode: str = "L") -> Raster:
        grayscale_image = ImageIO.open_as_grayscale(image_path, grayscale_mode)
        raster = Raster.from_image(grayscale_image, grayscale_mode)
        grayscale_image.close()
        return raster.reindex(0, 0)

    @staticmethod
    def save(
        image: Image.Image,
        output_path: str | Path,
        output_format: str = "BMP",
        quality: int = 92,
    ) -> None:
        if output_format in LOSSY_FORMATS:
            image.save(output_path, output_format, quality=quality)
        else:
            image.save(output_path, output_format)

    @staticmethod
    def write_raster(raster: Raster, output_path: str | Path, quality: int = 92) -> None:
        image = raster.to_image()
        ImageIO.save(image, output_path, ImageIO.resolve_format(output_path), quality)
        image.close()

    @staticmethod
    def resolve_format(file_path: str | Path) -> str:
        extension = Path(file_path).suffix.lower()
        return FORMAT_MAPPING.get(extension, "BMP")
