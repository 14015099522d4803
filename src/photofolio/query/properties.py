"""Property resolution against image records.

Maps a dotted path such as ``filename``, ``exif.iso`` or ``exif.raw.Rating``
to a ``Value``. Absent data resolves to NULL so that "missing" can be told
apart from "zero"; unknown names are errors so that typos surface instead
of silently matching nothing.
"""

from collections.abc import Callable, Sequence

from photofolio.models import ExifData, ImageRecord
from photofolio.query.errors import EvaluationError, UnknownPropertyError
from photofolio.query.values import NULL, Value, ValueKind


def _positive(value: int) -> Value:
    return Value.number(value) if value else NULL


def _optional_string(value: str | None) -> Value:
    return Value.string(value) if value else NULL


def _optional_number(value: float | int | None) -> Value:
    return Value.number(value) if value is not None else NULL


# Direct ImageRecord fields (case-sensitive)
DIRECT_FIELDS: dict[str, Callable[[ImageRecord], Value]] = {
    "filename": lambda r: Value.string(r.filename),
    "sourcePath": lambda r: Value.string(r.source_path),
    "width": lambda r: _positive(r.width),
    "height": lambda r: _positive(r.height),
    "fileSize": lambda r: _positive(r.file_size),
    "dateTaken": lambda r: (
        Value.date_time(r.date_taken) if r.date_taken is not None else NULL
    ),
}

# Typed ExifData attributes, keyed by their filter name
EXIF_FIELDS: dict[str, Callable[[ExifData], Value]] = {
    "make": lambda e: _optional_string(e.make),
    "model": lambda e: _optional_string(e.model),
    "lensModel": lambda e: _optional_string(e.lens_model),
    "fNumber": lambda e: _optional_number(e.f_number),
    "exposureTime": lambda e: _optional_number(e.exposure_time),
    "focalLength": lambda e: _optional_number(e.focal_length),
    "iso": lambda e: _optional_number(e.iso),
    "gpsLatitude": lambda e: _optional_number(e.gps_latitude),
    "gpsLongitude": lambda e: _optional_number(e.gps_longitude),
}

EXIF_ROOT = "exif"
RAW_SEGMENT = "raw"


def is_known_root(name: str) -> bool:
    """True if ``name`` can start a property path."""
    return name == EXIF_ROOT or name in DIRECT_FIELDS


def raw_value(text: str | None) -> Value:
    """Wrap a raw EXIF dictionary string.

    The result is a STRING flagged as raw; comparison and sorting coerce it
    to a number or boolean on demand. Empty strings are treated as absent.
    """
    if not text:
        return NULL
    return Value(ValueKind.STRING, text, raw=True)


def validate_path(path: Sequence[str], position: int | None = None) -> None:
    """Check that ``path`` names a property that exists for image records.

    Raises:
        UnknownPropertyError: If the root segment is not a known property
        EvaluationError: If the path is malformed below a known root
    """
    if not path:
        raise EvaluationError("Empty property path", position)

    root = path[0]
    if not is_known_root(root):
        raise UnknownPropertyError(root, position)

    dotted = ".".join(path)

    if root in DIRECT_FIELDS:
        if len(path) > 1:
            raise EvaluationError(
                f"Property '{root}' has no field '{path[1]}'", position
            )
        return

    if len(path) == 1:
        raise EvaluationError(
            "Property 'exif' requires a field name (e.g. exif.make)", position
        )

    field = path[1]
    if field == RAW_SEGMENT:
        if len(path) != 3:
            raise EvaluationError(
                f"Raw EXIF access must name exactly one tag: '{dotted}'", position
            )
        return

    if field not in EXIF_FIELDS:
        raise EvaluationError(f"Unknown EXIF field '{field}' in '{dotted}'", position)
    if len(path) > 2:
        raise EvaluationError(f"Property 'exif.{field}' has no field '{path[2]}'", position)


def resolve(
    path: Sequence[str],
    record: ImageRecord,
    position: int | None = None,
) -> Value:
    """Resolve a property path against one image record.

    Args:
        path: Path segments, e.g. ``("exif", "raw", "Rating")``
        record: The image to read from
        position: Source offset of the path, for error reporting

    Returns:
        The resolved value; NULL for absent data

    Raises:
        EvaluationError: For unknown or malformed paths
    """
    validate_path(path, position)

    root = path[0]
    if root in DIRECT_FIELDS:
        return DIRECT_FIELDS[root](record)

    exif = record.exif
    if exif is None:
        return NULL

    if path[1] == RAW_SEGMENT:
        # Keys are exact EXIF tag names; no case folding
        return raw_value(exif.raw.get(path[2]))

    return EXIF_FIELDS[path[1]](exif)
