"""Image records consumed by the filter engine.

Records are produced upstream by image processing and the manifest store;
the engine only reads them. Manifest dictionaries use camelCase keys.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


@dataclass(frozen=True)
class ExifData:
    """EXIF metadata extracted from an image.

    Commonly used fields are typed attributes; everything else lives in
    ``raw`` keyed by the exact EXIF tag name (e.g. ``Rating``, ``Copyright``).
    Only non-empty values are stored.
    """

    make: str | None = None
    model: str | None = None
    lens_model: str | None = None
    f_number: float | None = None
    exposure_time: float | None = None
    focal_length: float | None = None
    iso: int | None = None
    gps_latitude: float | None = None
    gps_longitude: float | None = None
    raw: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExifData":
        """Create ExifData from a manifest dict."""
        raw = data.get("raw") or {}
        return cls(
            make=data.get("make"),
            model=data.get("model"),
            lens_model=data.get("lensModel"),
            f_number=_optional_float(data.get("fNumber")),
            exposure_time=_optional_float(data.get("exposureTime")),
            focal_length=_optional_float(data.get("focalLength")),
            iso=_optional_int(data.get("iso")),
            gps_latitude=_optional_float(data.get("gpsLatitude")),
            gps_longitude=_optional_float(data.get("gpsLongitude")),
            raw={str(k): str(v) for k, v in raw.items() if v not in (None, "")},
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "make": self.make,
            "model": self.model,
            "lensModel": self.lens_model,
            "fNumber": self.f_number,
            "exposureTime": self.exposure_time,
            "focalLength": self.focal_length,
            "iso": self.iso,
            "gpsLatitude": self.gps_latitude,
            "gpsLongitude": self.gps_longitude,
        }
        data = {k: v for k, v in data.items() if v is not None}
        if self.raw:
            data["raw"] = dict(self.raw)
        return data


@dataclass(frozen=True)
class ImageRecord:
    """A single image in the pool.

    Attributes:
        filename: File name, unique within its source directory
        source_path: Path relative to the source root, forward slashes
        width: Pixel width (0 if unknown)
        height: Pixel height (0 if unknown)
        file_size: Size of the source file in bytes (0 if unknown)
        date_taken: Capture time, or None
        exif: EXIF metadata, or None for images without EXIF
    """

    filename: str
    source_path: str = ""
    width: int = 0
    height: int = 0
    file_size: int = 0
    date_taken: datetime | None = None
    exif: ExifData | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ImageRecord":
        """Create an ImageRecord from a manifest dict."""
        exif = data.get("exif")
        source_path = str(data.get("sourcePath", "")).replace("\\", "/")
        filename = data.get("filename") or source_path.rsplit("/", 1)[-1]
        return cls(
            filename=filename,
            source_path=source_path,
            width=int(data.get("width") or 0),
            height=int(data.get("height") or 0),
            file_size=int(data.get("fileSize") or 0),
            date_taken=_parse_datetime(data.get("dateTaken")),
            exif=ExifData.from_dict(exif) if exif is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "filename": self.filename,
            "sourcePath": self.source_path,
            "width": self.width,
            "height": self.height,
            "fileSize": self.file_size,
        }
        if self.date_taken is not None:
            data["dateTaken"] = self.date_taken.isoformat()
        if self.exif is not None:
            data["exif"] = self.exif.to_dict()
        return data

    @property
    def folder(self) -> str:
        """Directory part of ``source_path`` ('' for images at the root)."""
        if "/" not in self.source_path:
            return ""
        return self.source_path.rsplit("/", 1)[0]
