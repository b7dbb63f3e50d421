"""Extractors mapping a document path to its lowercased body text."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union
from xml.etree import ElementTree as ET
import codecs
import gzip
import io
import logging
import re
import zipfile

from bs4 import BeautifulSoup
from pypdf import PdfReader

from unigramlm.config import (
    DOCX_SUFFIXES,
    GZIP_SUFFIXES,
    HTML_SUFFIXES,
    PDF_SUFFIXES,
    XML_SUFFIXES,
    ZIP_SUFFIXES,
    get_config,
)


_LOGGER = logging.getLogger(__name__)

_TAG_RE = re.compile(get_config().TAG_PATTERN)

# Leading whitespace and comments may precede the root element.
_PROLOGUE = r"\s*(?:<!--.*?-->\s*)*"
_HTML_START_RE = re.compile(_PROLOGUE + r"<(?:!doctype\s+html|html[\s>])", re.IGNORECASE | re.DOTALL)
_XML_START_RE = re.compile(_PROLOGUE + r"<\?xml", re.IGNORECASE | re.DOTALL)

_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)

_DOCX_BODY = "word/document.xml"
_WORD_NS = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"

PathLike = Union[str, Path]


class ExtractionError(RuntimeError):
    """Raised by `DocumentExtractor.read_body` when a document cannot be read."""


def strip_tags(text: str) -> str:
    """Delete every ``<...>`` substring once, without inserting whitespace."""

    return _TAG_RE.sub("", text)


def decode_text(data: bytes) -> str:
    """Decode ``data`` as UTF-8 (BOM tolerated), falling back to Latin-1.

    Data starting with a UTF-16 byte order mark is decoded as UTF-16.
    """

    cfg = get_config()
    if data.startswith(_UTF16_BOMS):
        return data.decode("utf-16")
    try:
        return data.decode(cfg.TEXT_ENCODING + "-sig")
    except UnicodeDecodeError:
        return data.decode(cfg.FALLBACK_ENCODING)


def _read_bytes(path: Path) -> bytes:
    if not path.is_file():
        raise ExtractionError(f"Not a regular file: {path}")
    with path.open("rb") as f:
        return f.read()


class DocumentExtractor(ABC):
    """Abstract base class for document extractors.

    Subclasses implement `parse`, which turns the bytes of one document into
    raw body text and may raise. `read_body` loads a file and hands it to
    `parse`; `extract` adds lowercasing, tag stripping and the failure policy:
    any error is logged and turned into an empty string so one bad document
    never aborts a corpus run.
    """

    name: str = "base"

    @abstractmethod
    def parse(self, data: bytes, name: str = "") -> str:
        """Return the body text of the document held in ``data``.

        ``name`` is the file or archive member name, used only as a format
        hint.
        """

    def read_body(self, path: Path) -> str:
        """Return the body text of the document at ``path``."""

        return self.parse(_read_bytes(path), path.name)

    def extract(self, path: PathLike) -> str:
        path = Path(path)
        try:
            body = self.read_body(path)
        except Exception as e:  # any I/O or parse failure yields no text
            _LOGGER.warning("Failed to extract %s: %s", path, e)
            return ""
        return strip_tags(body.lower())


class PlainTextExtractor(DocumentExtractor):
    name = "text"

    def parse(self, data: bytes, name: str = "") -> str:
        return decode_text(data)


class HtmlExtractor(DocumentExtractor):
    name = "html"

    # Elements whose text is not part of the rendered body
    NON_CONTENT_TAGS: tuple[str, ...] = ("script", "style", "noscript", "head", "template")

    # Elements that start a new line of text; inline elements join their text
    BLOCK_TAGS: tuple[str, ...] = (
        "address", "article", "aside", "blockquote", "br", "caption", "dd", "div",
        "dl", "dt", "fieldset", "figcaption", "figure", "footer", "form", "h1",
        "h2", "h3", "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol",
        "p", "pre", "section", "table", "tbody", "td", "tfoot", "th", "thead",
        "tr", "ul",
    )

    def parse(self, data: bytes, name: str = "") -> str:
        return self.html_to_text(decode_text(data))

    def html_to_text(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup(list(self.NON_CONTENT_TAGS)):
            tag.decompose()
        for tag in soup(list(self.BLOCK_TAGS)):
            tag.insert_before("\n")
            tag.insert_after("\n")
        base = soup.body if soup.body else soup
        return base.get_text()


def _xml_text(element: ET.Element) -> str:
    # Mixed content (text beside child elements) is inline and joined as is;
    # element-only content is structural and gets a line break per child.
    children = list(element)
    mixed = bool((element.text or "").strip()) or any((c.tail or "").strip() for c in children)
    sep = "" if mixed else "\n"
    parts = [element.text or ""]
    for child in children:
        parts.append(_xml_text(child))
        parts.append(child.tail or "")
    return sep.join(parts)


class XmlExtractor(DocumentExtractor):
    name = "xml"

    def parse(self, data: bytes, name: str = "") -> str:
        return _xml_text(ET.fromstring(data))


class PdfExtractor(DocumentExtractor):
    name = "pdf"

    def parse(self, data: bytes, name: str = "") -> str:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
        return "\n".join(pages)


class DocxExtractor(DocumentExtractor):
    name = "docx"

    # Run-level elements that stand for whitespace
    BREAKS: dict[str, str] = {
        f"{_WORD_NS}tab": "\t",
        f"{_WORD_NS}br": "\n",
        f"{_WORD_NS}cr": "\n",
    }

    def parse(self, data: bytes, name: str = "") -> str:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            try:
                xml_data = zf.read(_DOCX_BODY)
            except KeyError as e:
                raise ExtractionError(f"DOCX missing {_DOCX_BODY}: {name}") from e
        root = ET.fromstring(xml_data)

        paragraphs: list[str] = []
        for para in root.iter(f"{_WORD_NS}p"):
            pieces: list[str] = []
            for node in para.iter():
                if node.tag == f"{_WORD_NS}t":
                    pieces.append(node.text or "")
                elif node.tag in self.BREAKS:
                    pieces.append(self.BREAKS[node.tag])
            text = "".join(pieces)
            if text.strip():
                paragraphs.append(text)
        return "\n".join(paragraphs)


class ArchiveExtractor(DocumentExtractor):
    """Base for containers whose members are documents in their own right.

    Each member is parsed by ``detector`` according to its own format;
    binary members contribute nothing.
    """

    def __init__(self, detector: Optional["AutoDetectExtractor"] = None) -> None:
        self._detector = detector

    @property
    def detector(self) -> "AutoDetectExtractor":
        if self._detector is None:
            self._detector = AutoDetectExtractor()
        return self._detector

    def _member_text(self, data: bytes, member: str) -> str:
        try:
            return self.detector.parse(data, member)
        except Exception as e:  # a bad member does not spoil the rest of the archive
            _LOGGER.warning("Failed to extract member %s: %s", member, e)
            return ""


class ZipTextExtractor(ArchiveExtractor):
    name = "zip"

    def parse(self, data: bytes, name: str = "") -> str:
        texts: list[str] = []
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                text = self._member_text(zf.read(info), info.filename)
                if text:
                    texts.append(text)
        return "\n".join(texts)


class GzipTextExtractor(ArchiveExtractor):
    name = "gzip"

    def parse(self, data: bytes, name: str = "") -> str:
        payload = gzip.decompress(data)
        inner = Path(name)
        inner_name = inner.stem if inner.suffix.lower() in GZIP_SUFFIXES else name
        return self._member_text(payload, inner_name)


class AutoDetectExtractor(DocumentExtractor):
    """Pick a format-specific extractor per document.

    Detection order: leading magic bytes, then a binary check, then file
    suffix, then a sniff of the first bytes for HTML/XML prologues; anything
    else is plain text. Binary documents yield no text. Delegates are created
    on first use and reused for later documents.
    """

    name = "auto"

    def __init__(self) -> None:
        self._delegates: dict[str, DocumentExtractor] = {}

    def parse(self, data: bytes, name: str = "") -> str:
        fmt = self.detect_format(data, name)
        _LOGGER.debug("Detected %s as %s", name or "<bytes>", fmt)
        if fmt == "binary":
            return ""
        return self._delegate(fmt).parse(data, name)

    def detect_format(self, data: bytes, name: str = "") -> str:
        head = data[: get_config().SNIFF_BYTES]
        suffix = Path(name).suffix.lower()

        if head.startswith(b"%PDF-"):
            return "pdf"
        if head.startswith(b"PK\x03\x04"):
            return "docx" if self._is_docx(data) else "zip"
        if head.startswith(b"\x1f\x8b"):
            return "gzip"
        if head.startswith(_UTF16_BOMS):
            return "text"
        if b"\x00" in head:
            return "binary"

        if suffix in HTML_SUFFIXES:
            return "html"
        if suffix in XML_SUFFIXES:
            return "xml"
        if suffix in PDF_SUFFIXES:
            return "pdf"
        if suffix in DOCX_SUFFIXES:
            return "docx"
        if suffix in ZIP_SUFFIXES:
            return "zip"
        if suffix in GZIP_SUFFIXES:
            return "gzip"

        sniff = head.decode("ascii", errors="ignore")
        if _HTML_START_RE.match(sniff):
            return "html"
        if _XML_START_RE.match(sniff):
            return "xml"
        return "text"

    @staticmethod
    def _is_docx(data: bytes) -> bool:
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as zf:
                return _DOCX_BODY in zf.namelist()
        except zipfile.BadZipFile:
            return False

    def _delegate(self, fmt: str) -> DocumentExtractor:
        extractor = self._delegates.get(fmt)
        if extractor is None:
            extractor = _EXTRACTORS[fmt](self) if fmt in _ARCHIVES else get_extractor(fmt)
            self._delegates[fmt] = extractor
        return extractor


_EXTRACTORS: dict[str, type[DocumentExtractor]] = {
    cls.name: cls
    for cls in (
        AutoDetectExtractor,
        PlainTextExtractor,
        HtmlExtractor,
        XmlExtractor,
        PdfExtractor,
        DocxExtractor,
        ZipTextExtractor,
        GzipTextExtractor,
    )
}

_ARCHIVES = frozenset(name for name, cls in _EXTRACTORS.items() if issubclass(cls, ArchiveExtractor))


def extractor_names() -> list[str]:
    """Short names accepted by `get_extractor`."""

    return list(_EXTRACTORS)


def get_extractor(extractor_name: str) -> DocumentExtractor:
    """Build an extractor from its short name or class name."""

    mapping: dict[str, type[DocumentExtractor]] = dict(_EXTRACTORS)
    mapping.update({cls.__name__: cls for cls in _EXTRACTORS.values()})
    if extractor_name not in mapping:
        raise ValueError(f"Unknown extractor: {extractor_name}")
    return mapping[extractor_name]()
