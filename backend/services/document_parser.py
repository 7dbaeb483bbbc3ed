"""Format-specific raw text and hyperlink extraction for PDF and DOCX resumes.

Hyperlinks come only from the format's own link model: PDF link annotations
with a URI action, and anchors in the DOCX-to-HTML rendering. Nothing here
pattern-matches URLs out of plain text.
"""

import asyncio
import io
import logging

import pdfplumber

from models.schemas.raw_extraction import Hyperlink, RawExtraction
from services.errors import LegacyFormatUnsupported, UnsupportedFormat

logger = logging.getLogger(__name__)

# Below this many non-whitespace characters a PDF is treated as image-only
MIN_MEANINGFUL_CHARS = 10

# Relaxed settings for the single text re-attempt
_RELAXED_LAPARAMS = {"all_texts": True, "detect_vertical": True}
_RELAXED_TEXT_KWARGS = {"x_tolerance": 3, "y_tolerance": 5, "layout": True}


def detect_format(filename: str) -> str:
    """Return 'pdf' or 'docx' for a filename, raising for anything else."""
    lower = (filename or "").lower()
    if lower.endswith(".pdf"):
        return "pdf"
    if lower.endswith(".docx"):
        return "docx"
    if lower.endswith(".doc"):
        raise LegacyFormatUnsupported(filename)
    raise UnsupportedFormat(filename)


async def extract_document(content: bytes, filename: str) -> RawExtraction:
    """Extract text and hyperlinks from a resume, choosing the branch by extension."""
    fmt = detect_format(filename)
    if fmt == "pdf":
        return await asyncio.to_thread(extract_pdf, content)
    return await asyncio.to_thread(extract_docx, content)


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------

def _meaningful_length(text: str) -> int:
    return sum(1 for ch in text if not ch.isspace())


def _pdf_name(obj) -> str:
    """Decode a pdfminer name object (PSLiteral) or bytes into a str."""
    name = getattr(obj, "name", obj)
    if isinstance(name, bytes):
        return name.decode("latin-1")
    return str(name) if name is not None else ""


def infer_link_label(url: str) -> str:
    lower = url.lower()
    if "linkedin.com" in lower:
        return "LinkedIn"
    if "github.com" in lower:
        return "GitHub"
    if "portfolio" in lower or "website" in lower:
        return "Portfolio"
    return "Link"


def _anchor_text(page, annot: dict) -> str:
    """Text printed under the annotation rectangle, if any."""
    px0, ptop, px1, pbottom = page.bbox
    x0 = max(annot["x0"], px0)
    x1 = min(annot["x1"], px1)
    top = max(annot["top"], ptop)
    bottom = min(annot["bottom"], pbottom)
    if x1 <= x0 or bottom <= top:
        return ""
    text = page.crop((x0, top, x1, bottom)).extract_text() or ""
    return " ".join(text.split())


def _page_hyperlinks(page) -> list[Hyperlink]:
    links: list[Hyperlink] = []
    for annot in page.annots:
        data = annot.get("data") or {}
        if _pdf_name(data.get("Subtype")) != "Link":
            continue
        url = annot.get("uri")
        if not url:
            # Internal destination (Dest / GoTo), not an external URL
            logger.debug("Skipping internal link on page %s", annot.get("page_number"))
            continue
        if isinstance(url, bytes):
            url = url.decode("latin-1")
        try:
            anchor = _anchor_text(page, annot)
        except Exception as e:
            logger.debug("Could not read anchor text for %s: %s", url, e)
            anchor = ""
        links.append(Hyperlink(anchor_text=anchor or infer_link_label(url), url=url.strip()))
    return links


def _pdf_text(pdf, **kwargs) -> str:
    pages = [page.extract_text(**kwargs) or "" for page in pdf.pages]
    return "\n".join(pages).strip()


def extract_pdf(pdf_bytes: bytes) -> RawExtraction:
    """Extract page text and link annotations from a PDF.

    Annotation failures degrade to no hyperlinks. Text under
    MIN_MEANINGFUL_CHARS gets one relaxed re-attempt, then resolves to "".
    """
    hyperlinks: list[Hyperlink] = []
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        for page in pdf.pages:
            try:
                hyperlinks.extend(_page_hyperlinks(page))
            except Exception as e:
                logger.warning("Annotation extraction failed on page %s: %s", page.page_number, e)
        text = _pdf_text(pdf)

    if _meaningful_length(text) < MIN_MEANINGFUL_CHARS:
        logger.info("Primary PDF text extraction yielded %d chars, retrying with relaxed options", len(text))
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes), laparams=_RELAXED_LAPARAMS) as pdf:
                text = "\n".join(
                    line.rstrip() for line in _pdf_text(pdf, **_RELAXED_TEXT_KWARGS).splitlines()
                ).strip()
        except Exception as e:
            logger.warning("Relaxed PDF text extraction failed: %s", e)
        if _meaningful_length(text) < MIN_MEANINGFUL_CHARS:
            logger.warning("PDF appears to be image-based; no text extracted (OCR not supported)")
            text = ""

    logger.info("PDF extraction: %d chars, %d hyperlinks", len(text), len(hyperlinks))
    return RawExtraction(text=text, hyperlinks=hyperlinks)


# ---------------------------------------------------------------------------
# DOCX
# ---------------------------------------------------------------------------

def extract_text_docx(docx_bytes: bytes) -> str:
    """Extract all text from a DOCX file, paragraphs first, then table cells."""
    from docx import Document

    doc = Document(io.BytesIO(docx_bytes))
    lines = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            for cell in row.cells:
                lines.extend(p.text for p in cell.paragraphs)
    return "\n".join(lines).strip()


def extract_hyperlinks_docx(docx_bytes: bytes) -> list[Hyperlink]:
    """Render the DOCX to HTML and collect its external anchors."""
    import mammoth
    from bs4 import BeautifulSoup

    html = mammoth.convert_to_html(io.BytesIO(docx_bytes)).value
    soup = BeautifulSoup(html or "", "html.parser")
    links: list[Hyperlink] = []
    for a in soup.find_all("a", href=True):
        href = a["href"].strip()
        if not href or href.startswith("#"):
            continue
        links.append(Hyperlink(anchor_text=a.get_text(" ", strip=True), url=href))
    return links


def extract_docx(docx_bytes: bytes) -> RawExtraction:
    text = extract_text_docx(docx_bytes)
    try:
        hyperlinks = extract_hyperlinks_docx(docx_bytes)
    except Exception as e:
        logger.warning("DOCX hyperlink extraction failed, falling back to text only: %s", e)
        hyperlinks = []
    logger.info("DOCX extraction: %d chars, %d hyperlinks", len(text), len(hyperlinks))
    return RawExtraction(text=text, hyperlinks=hyperlinks)
