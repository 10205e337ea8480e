"""On-disk catalog storage.

Catalogs live at ``<locale_dir>/<locale>/messages.<ext>`` in one of three
formats (:class:`~icuflow.enums.CatalogFormat`):

- ``json``: full record per message (defaults, translation, origin, obsolete)
- ``minimal``: message id mapped to its translation (``messages.json``)
- ``po``: gettext PO via Babel. Origins become ``#:`` locations, defaults an
  extracted ``#.`` comment, obsolete messages ``#~`` entries (PO stores no
  locations for those)

The json and minimal formats share ``messages.json``; either layout is read
back by both.

A store may name a ``prev_format``: when no catalog in the current format
exists yet, the previous one is read instead, which converts a project from
one format to another on the next write.

Security:
    Locale codes containing path separators or ".." are rejected.

Python 3.12+. Uses Babel for PO files.
"""

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from babel.messages.catalog import Catalog as PoCatalog
from babel.messages.catalog import Message as PoMessage
from babel.messages.pofile import PoFileError, read_po, write_po

from icuflow.constants import CATALOG_BASENAME
from icuflow.diagnostics import CatalogFormatError, ErrorTemplate
from icuflow.enums import CatalogFormat
from icuflow.locale_utils import is_locale_code

from .types import Catalog, CatalogEntry, Catalogs

__all__ = ["CatalogStore"]

logger = logging.getLogger(__name__)

_DEFAULTS_COMMENT = "defaults: "


# ============================================================================
# FORMAT CODECS
# ============================================================================


def _entry(value: object) -> CatalogEntry:
    """Entry from a full record or a bare translation string."""
    match value:
        case None:
            return CatalogEntry()
        case str():
            return CatalogEntry(translation=value)
        case Mapping():
            return CatalogEntry.from_dict(value)
    msg = f"unexpected catalog value of type {type(value).__name__}"
    raise TypeError(msg)


def _read_json(path: Path) -> Catalog:
    """Read a json or minimal catalog; either layout is accepted."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        msg = "expected a JSON object"
        raise ValueError(msg)
    return {message_id: _entry(value) for message_id, value in data.items()}


def _write_json(path: Path, catalog: Mapping[str, CatalogEntry]) -> None:
    data = {message_id: entry.to_dict() for message_id, entry in catalog.items()}
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def _write_minimal(path: Path, catalog: Mapping[str, CatalogEntry]) -> None:
    data = {message_id: entry.translation for message_id, entry in catalog.items()}
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def _po_defaults(message: PoMessage) -> str | None:
    for comment in (*message.auto_comments, *message.user_comments):
        if comment.startswith(_DEFAULTS_COMMENT):
            return comment[len(_DEFAULTS_COMMENT) :]
    return None


def _po_entry(message: PoMessage, *, obsolete: bool) -> CatalogEntry:
    return CatalogEntry(
        translation=str(message.string or ""),
        defaults=_po_defaults(message),
        origin=tuple((filename, lineno or 0) for filename, lineno in message.locations),
        obsolete=obsolete,
    )


def _read_po(path: Path) -> Catalog:
    with path.open("rb") as f:
        po = read_po(f, abort_invalid=True)

    catalog: Catalog = {}
    for message in po:
        if not message.id:
            continue  # header
        catalog[str(message.id)] = _po_entry(message, obsolete=False)
    for message_id, message in po.obsolete.items():
        catalog[str(message_id)] = _po_entry(message, obsolete=True)
    return catalog


def _write_po(path: Path, catalog: Mapping[str, CatalogEntry]) -> None:
    po = PoCatalog(fuzzy=False)
    for message_id, entry in catalog.items():
        comments = [] if entry.defaults is None else [f"{_DEFAULTS_COMMENT}{entry.defaults}"]
        if entry.obsolete:
            # Obsolete entries keep comments as translator comments only
            po.obsolete[message_id] = PoMessage(
                message_id,
                entry.translation,
                locations=list(entry.origin),
                user_comments=comments,
            )
        else:
            po.add(
                message_id,
                entry.translation,
                locations=list(entry.origin),
                auto_comments=comments,
            )

    with path.open("wb") as f:
        write_po(f, po, width=0)


type _Reader = Callable[[Path], Catalog]
type _Writer = Callable[[Path, Mapping[str, CatalogEntry]], None]

# format -> (file extension, reader, writer)
_FORMATS: dict[CatalogFormat, tuple[str, _Reader, _Writer]] = {
    CatalogFormat.JSON: ("json", _read_json, _write_json),
    CatalogFormat.MINIMAL: ("json", _read_json, _write_minimal),
    CatalogFormat.PO: ("po", _read_po, _write_po),
}


def _catalog_format(name: str | CatalogFormat) -> CatalogFormat:
    try:
        return CatalogFormat(name)
    except ValueError:
        raise CatalogFormatError(ErrorTemplate.unknown_catalog_format(str(name))) from None


# ============================================================================
# STORE
# ============================================================================


@dataclass(frozen=True, slots=True)
class CatalogStore:
    """Reads and writes per-locale catalogs below a locale directory.

    Example:
        >>> store = CatalogStore("locale", format="po")
        >>> store.catalog_path("cs")
        PosixPath('locale/cs/messages.po')

    Attributes:
        locale_dir: Directory holding one subdirectory per locale
        format: Format used for writing (and preferred for reading)
        prev_format: Format read when no catalog in ``format`` exists

    Raises:
        CatalogFormatError: If a format name is unknown
    """

    locale_dir: Path
    format: CatalogFormat = CatalogFormat.JSON
    prev_format: CatalogFormat | None = None

    def __post_init__(self) -> None:
        """Normalize path and format names given as strings."""
        object.__setattr__(self, "locale_dir", Path(self.locale_dir))
        object.__setattr__(self, "format", _catalog_format(self.format))
        if self.prev_format is not None:
            object.__setattr__(self, "prev_format", _catalog_format(self.prev_format))

    @staticmethod
    def _validate_locale(locale: str) -> None:
        """Reject locale codes that would escape the locale directory."""
        if not locale:
            msg = "Locale code cannot be empty"
            raise ValueError(msg)
        if ".." in locale or "/" in locale or "\\" in locale:
            msg = f"Path separators not allowed in locale: '{locale}'"
            raise ValueError(msg)

    def catalog_path(self, locale: str, catalog_format: CatalogFormat | None = None) -> Path:
        """Path of a locale's catalog file in the given (default: current) format."""
        self._validate_locale(locale)
        extension = _FORMATS[catalog_format or self.format][0]
        return self.locale_dir / locale / f"{CATALOG_BASENAME}.{extension}"

    def get_locales(self) -> tuple[str, ...]:
        """Locale subdirectories of the locale directory, sorted."""
        if not self.locale_dir.is_dir():
            return ()
        return tuple(
            sorted(
                entry.name
                for entry in self.locale_dir.iterdir()
                if entry.is_dir() and is_locale_code(entry.name)
            )
        )

    @staticmethod
    def get_locale(path: str | Path) -> str | None:
        """Locale a catalog file belongs to, from its directory name.

        Example:
            >>> CatalogStore.get_locale("en_US/messages.po")
            'en_US'
            >>> CatalogStore.get_locale("messages.po") is None
            True
        """
        parent = Path(path).parent.name
        return parent if parent and is_locale_code(parent) else None

    def read(self, locale: str) -> Catalog | None:
        """Read a locale's catalog; None when no catalog file exists.

        Raises:
            CatalogFormatError: If the file exists but cannot be decoded
        """
        candidates = [self.format]
        if self.prev_format is not None and self.prev_format != self.format:
            candidates.append(self.prev_format)

        for catalog_format in candidates:
            path = self.catalog_path(locale, catalog_format)
            if not path.is_file():
                continue
            _, reader, _ = _FORMATS[catalog_format]
            try:
                catalog = reader(path)
            except (ValueError, TypeError, KeyError, PoFileError) as e:
                raise CatalogFormatError(ErrorTemplate.catalog_unreadable(str(path), str(e))) from e
            logger.debug("Read %d messages from %s", len(catalog), path)
            return catalog
        return None

    def read_all(self) -> dict[str, Catalog | None]:
        """Read catalogs of all locales (None for locales without one)."""
        return {locale: self.read(locale) for locale in self.get_locales()}

    def write(self, locale: str, catalog: Mapping[str, CatalogEntry]) -> Path:
        """Write a locale's catalog in the current format.

        Returns:
            Path of the written file
        """
        path = self.catalog_path(locale)
        path.parent.mkdir(parents=True, exist_ok=True)
        _, _, writer = _FORMATS[self.format]
        writer(path, catalog)
        logger.info("Wrote %d messages to %s", len(catalog), path)
        return path

    def write_all(self, catalogs: Catalogs) -> tuple[Path, ...]:
        """Write every locale of a merge result."""
        return tuple(self.write(locale, catalog) for locale, catalog in catalogs.items())
