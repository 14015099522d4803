"""Gallery definitions and build results."""

from dataclasses import dataclass, field

from photofolio.models import ImageRecord


@dataclass(frozen=True)
class GalleryDefinition:
    """A gallery folder and its ``_index.md`` front matter.

    Attributes:
        path: Folder path relative to the source root, forward slashes
        title: Display title (front matter ``title`` or the folder name
            without its sort prefix)
        filter: Filter expression; None for a traditional gallery
        sort: Sort override (``field`` or ``field:direction``), or None
        hidden: Excluded from navigation, still rendered
    """

    path: str
    title: str
    filter: str | None = None
    sort: str | None = None
    hidden: bool = False

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def is_filtered(self) -> bool:
        return bool(self.filter and self.filter.strip())


@dataclass
class GalleryResult:
    """Outcome of building one gallery."""

    gallery: GalleryDefinition
    images: list[ImageRecord] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.error is not None:
            return f"[ERROR] {self.gallery.path}: {self.error}"
        return f"[OK] {self.gallery.path}: {len(self.images)} image(s)"
