import logging
import math
import time
from dataclasses import dataclass
from io import BytesIO

from pypdf import PdfWriter
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject

from core.common.errors import ArtifactGenerationError
from core.common.storage_utils import save_bytes
from core.knowledge.sanitize import PDF_TEXT_ENCODING, sanitize_text
from core.websites.domains import slugify_domain

logger = logging.getLogger(__name__)

PAGE_WIDTH = 595.28  # A4 in points
PAGE_HEIGHT = 841.89
MARGIN = 50
CONTENT_WIDTH = PAGE_WIDTH - MARGIN * 2

HEADER_SIZE = 18
HEADING_SIZE = 14
BODY_SIZE = 11
LINE_HEIGHT = 14

# Approximate Helvetica advance width as a fraction of font size (not real glyph metrics).
CHAR_WIDTH_FACTOR = 0.55

HEADER_COLOR = (0.15, 0.15, 0.2)
HEADING_COLOR = (0.1, 0.1, 0.4)
BODY_COLOR = (0, 0, 0)

FONT_KEY = "/F1"


@dataclass(frozen=True)
class ArtifactInput:
    domain: str
    title: str
    description: str
    content: str
    knowledge_base: str


def chars_per_line(font_size=BODY_SIZE, width=CONTENT_WIDTH) -> int:
    return math.floor(width / (font_size * CHAR_WIDTH_FACTOR))


def wrap_text(text: str, max_chars: int) -> list:
    lines = []
    current = ""
    for word in (text or "").split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) > max_chars:
            if current:
                lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def artifact_filename(domain: str, now_ms: int) -> str:
    return f"knowledge_{slugify_domain(domain)}_{now_ms}.pdf"


def _fmt(n) -> str:
    return f"{n:.2f}".rstrip("0").rstrip(".")


class _Page:
    """Collects text-show operators for one page."""

    def __init__(self):
        self.ops = []

    def draw_text(self, text, x, y, size, color):
        data = sanitize_text(text).encode(PDF_TEXT_ENCODING, errors="ignore")
        if not data:
            return
        r, g, b = color
        self.ops.append(
            f"BT {FONT_KEY} {_fmt(size)} Tf {_fmt(r)} {_fmt(g)} {_fmt(b)} rg "
            f"{_fmt(x)} {_fmt(y)} Td <{data.hex()}> Tj ET"
        )

    def content_bytes(self) -> bytes:
        return "\n".join(self.ops).encode("ascii")


class KnowledgePdfLayout:
    """
    Heuristic layout: character-budget word wrap, fixed line height,
    new page (with the title header repeated) whenever the cursor would cross the bottom margin.
    """

    def __init__(self, title: str):
        self.header = f"{sanitize_text(title)} - Website Knowledge Base"
        self.pages = []
        self.cursor_y = 0.0
        self.page = None
        self._new_page()

    def _new_page(self):
        self.page = _Page()
        self.pages.append(self.page)
        self.page.draw_text(self.header, MARGIN, PAGE_HEIGHT - MARGIN, HEADER_SIZE, HEADER_COLOR)
        self.cursor_y = PAGE_HEIGHT - MARGIN - 30

    def _ensure_room(self, needed: float):
        if self.cursor_y - needed < MARGIN:
            self._new_page()

    def section(self, heading: str, body: str):
        self._ensure_room(HEADING_SIZE + 6 + LINE_HEIGHT)
        self.page.draw_text(heading, MARGIN, self.cursor_y, HEADING_SIZE, HEADING_COLOR)
        self.cursor_y -= HEADING_SIZE + 6

        for line in wrap_text(sanitize_text(body), chars_per_line()):
            if self.cursor_y < MARGIN + LINE_HEIGHT:
                self._new_page()
            self.page.draw_text(line, MARGIN, self.cursor_y, BODY_SIZE, BODY_COLOR)
            self.cursor_y -= LINE_HEIGHT
        self.cursor_y -= 10


def _font_resources() -> DictionaryObject:
    font = DictionaryObject({
        NameObject("/Type"): NameObject("/Font"),
        NameObject("/Subtype"): NameObject("/Type1"),
        NameObject("/BaseFont"): NameObject("/Helvetica"),
        NameObject("/Encoding"): NameObject("/WinAnsiEncoding"),
    })
    return DictionaryObject({
        NameObject("/Font"): DictionaryObject({NameObject(FONT_KEY): font}),
    })


def build_pdf_bytes(data: ArtifactInput) -> bytes:
    layout = KnowledgePdfLayout(data.title)
    layout.section("Domain", data.domain)
    layout.section("Description", data.description)
    layout.section("Content (excerpt)", data.content)
    layout.section("Knowledge Base", data.knowledge_base)

    writer = PdfWriter()
    for laid_out in layout.pages:
        page = writer.add_blank_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        page[NameObject("/Resources")] = _font_resources()
        stream = DecodedStreamObject()
        stream.set_data(laid_out.content_bytes())
        page.replace_contents(stream)

    buf = BytesIO()
    writer.write(buf)
    return buf.getvalue()


def render_knowledge_pdf(data: ArtifactInput, now=None, location=None) -> str:
    """
    Render the knowledge PDF and return its filesystem path.
    Files accumulate under ARTIFACT_DIR; nothing prunes them.
    """
    now_ms = int((now if now is not None else time.time()) * 1000)
    name = artifact_filename(data.domain, now_ms)
    try:
        pdf_bytes = build_pdf_bytes(data)
        path = save_bytes(pdf_bytes, name, location=location)
    except Exception as e:
        logger.exception("PDF generation failed for %s", data.domain)
        raise ArtifactGenerationError() from e

    logger.info("Generated knowledge PDF for %s at %s (%d bytes)", data.domain, path, len(pdf_bytes))
    return path
