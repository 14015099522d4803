"""Load the image manifest and gallery definitions from disk."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from photofolio.core.types import SortDirection
from photofolio.gallery.types import GalleryDefinition
from photofolio.models import ImageRecord
from photofolio.sorting.sorter import extract_display_name, sort_natural

logger = logging.getLogger(__name__)

INDEX_FILENAME = "_index.md"
FRONT_MATTER_DELIMITER = "---"


class ManifestError(Exception):
    """A manifest or gallery definition file could not be read."""

    def __init__(self, file: Path, message: str):
        self.file = file
        self.message = message
        super().__init__(f"{file}: {message}")


def load_manifest(path: Path) -> list[ImageRecord]:
    """Read the image pool from a YAML or JSON manifest.

    The file holds an ``images`` list of camelCase image dicts::

        images:
          - filename: a.jpg
            sourcePath: Events/a.jpg
            dateTaken: 2024-06-21T10:00:00
            exif: {make: Canon, iso: 800, raw: {Rating: "5"}}

    Raises:
        ManifestError: If the file cannot be parsed or has the wrong shape
    """
    try:
        with path.open(encoding="utf-8") as fh:
            if path.suffix.lower() == ".json":
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ManifestError(path, f"Cannot read manifest: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, dict) or not isinstance(data.get("images", []), list):
        raise ManifestError(path, "Manifest must be a mapping with an 'images' list")

    records = []
    for index, entry in enumerate(data.get("images") or []):
        if not isinstance(entry, dict):
            raise ManifestError(path, f"images[{index}] is not a mapping")
        try:
            records.append(ImageRecord.from_dict(entry))
        except (TypeError, ValueError) as exc:
            raise ManifestError(path, f"images[{index}]: {exc}") from exc

    logger.info("Loaded %d image(s) from %s", len(records), path)
    return records


def parse_front_matter(text: str) -> dict[str, Any]:
    """Return the YAML mapping between the leading ``---`` lines, if any.

    Raises:
        yaml.YAMLError: If the front matter is not valid YAML
        ValueError: If the front matter is not a mapping
    """
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}

    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_DELIMITER:
            break
    else:
        return {}

    data = yaml.safe_load("\n".join(lines[1:end]))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Front matter must be a mapping")
    return data


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _read_definition(source_dir: Path, folder: Path) -> GalleryDefinition:
    rel_path = folder.relative_to(source_dir).as_posix()
    front_matter: dict[str, Any] = {}

    index_file = folder / INDEX_FILENAME
    if index_file.is_file():
        try:
            front_matter = parse_front_matter(index_file.read_text(encoding="utf-8"))
        except (yaml.YAMLError, ValueError) as exc:
            raise ManifestError(index_file, f"Invalid front matter: {exc}") from exc

    return GalleryDefinition(
        path=rel_path,
        title=_optional_text(front_matter.get("title"))
        or extract_display_name(folder.name),
        filter=_optional_text(front_matter.get("filter")),
        sort=_optional_text(front_matter.get("sort")),
        hidden=bool(front_matter.get("hidden", False)),
    )


def load_gallery_definitions(
    source_dir: Path,
    direction: SortDirection = SortDirection.ASC,
) -> list[GalleryDefinition]:
    """Read every gallery folder below ``source_dir``.

    Folders whose name starts with ``.`` or ``_`` are skipped. Definitions
    are returned in natural path order (``2 Wedding`` before ``10 Portraits``),
    reversed for a descending ``direction``.

    Raises:
        ManifestError: If the directory is missing or a front matter block
            is invalid
    """
    if not source_dir.is_dir():
        raise ManifestError(source_dir, "Source directory does not exist")

    folders = [
        p
        for p in source_dir.rglob("*")
        if p.is_dir()
        and not any(
            part.startswith((".", "_")) for part in p.relative_to(source_dir).parts
        )
    ]

    definitions = [_read_definition(source_dir, folder) for folder in folders]
    return sort_natural(definitions, lambda d: d.path, direction)
