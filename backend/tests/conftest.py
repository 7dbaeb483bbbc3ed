"""Shared test configuration: document builders and pipeline test doubles."""

import asyncio
import io

import pytest
from docx import Document
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from models.schemas.extraction_result import ExtractionResult
from models.schemas.raw_extraction import Hyperlink

SAMPLE_RESUME = """Jane Smith
Senior Software Engineer
jane.smith@example.com | (415) 555-0142 | San Francisco, CA
LinkedIn: janesmith

Summary
Backend engineer with eight years of experience designing distributed systems and APIs.

Experience
Senior Software Engineer
Acme Corp
Dec 2023 - Feb 2025
- Built payment APIs in Python and PostgreSQL
- Cut deploy time by 40% with Docker

Education
Bachelor of Science in Computer Science
State University, 2016

Skills: Python, Go, Docker, Kubernetes

Certifications
AWS Certified Solutions Architect certification

Interests: hiking, chess, open source
"""

LLM_RESPONSE = """```json
{
  "name": "Jane Smith",
  "email": "jane.smith@example.com",
  "phone": "(415) 555-0142",
  "linkedinUrl": null,
  "githubUrl": null,
  "portfolioUrl": null,
  "location": "San Francisco, CA",
  "title": "Senior Software Engineer",
  "summary": "Backend engineer with eight years of experience.",
  "experience": [
    {
      "jobTitle": "Senior Software Engineer",
      "company": "Acme Corp",
      "duration": "Dec 2023 - Feb 2025",
      "startDate": "2023-12",
      "endDate": "2025-02",
      "techUsed": ["Python", "PostgreSQL"],
      "description": "Payments backend",
      "achievements": ["Cut deploy time by 40%"]
    }
  ],
  "education": [
    {
      "degree": "Bachelor of Science",
      "field": "Computer Science",
      "university": "State University",
      "year": 2016
    }
  ],
  "projects": [],
  "achievements": [],
  "certifications": [],
  "skills": ["Python", "Go", "Docker", "Kubernetes"],
  "interests": ["hiking"],
  "languages": [],
  "salary": null,
  "availability": null,
  "remotePreference": "Hybrid",
  "visaStatus": null
}
```"""


# ---------------------------------------------------------------------------
# PDF builder
# ---------------------------------------------------------------------------

_PAGE_HEIGHT = 792
_TOP_BASELINE = 720
_LEADING = 14


def _pdf_string(value: str) -> str:
    return value.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _baseline(line_index: int) -> int:
    return _TOP_BASELINE - _LEADING * line_index


def build_pdf(lines: list[str], links: list[tuple[int, str | None]] = ()) -> bytes:
    """Single-page Helvetica PDF.

    ``links`` are (line index, URI) pairs; a None URI becomes an internal
    GoTo link to the page itself.
    """
    if lines:
        body = " T* ".join(f"({_pdf_string(line)}) Tj" for line in lines)
        stream = f"BT /F1 12 Tf {_LEADING} TL 72 {_TOP_BASELINE} Td {body} ET"
    else:
        stream = ""

    annot_ids = [6 + i for i in range(len(links))]
    annots = f" /Annots [{' '.join(f'{n} 0 R' for n in annot_ids)}]" if links else ""

    objects = [
        "<< /Type /Catalog /Pages 2 0 R >>",
        "<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 {_PAGE_HEIGHT}] "
        f"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R{annots} >>",
        "<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        f"<< /Length {len(stream)} >>\nstream\n{stream}\nendstream",
    ]
    for line_index, uri in links:
        y = _baseline(line_index)
        rect = f"/Rect [70 {y - 3} 300 {y + 10}]"
        if uri is None:
            objects.append(f"<< /Type /Annot /Subtype /Link {rect} /Border [0 0 0] /Dest [3 0 R /Fit] >>")
        else:
            objects.append(
                f"<< /Type /Annot /Subtype /Link {rect} /Border [0 0 0] "
                f"/A << /S /URI /URI ({_pdf_string(uri)}) >> >>"
            )

    out = io.BytesIO()
    out.write(b"%PDF-1.4\n")
    offsets = []
    for number, obj in enumerate(objects, start=1):
        offsets.append(out.tell())
        out.write(f"{number} 0 obj\n{obj}\nendobj\n".encode("latin-1"))
    xref_offset = out.tell()
    out.write(f"xref\n0 {len(objects) + 1}\n".encode("latin-1"))
    out.write(b"0000000000 65535 f \n")
    for offset in offsets:
        out.write(f"{offset:010d} 00000 n \n".encode("latin-1"))
    out.write(
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n".encode("latin-1")
    )
    return out.getvalue()


# ---------------------------------------------------------------------------
# DOCX builder
# ---------------------------------------------------------------------------

def _add_hyperlink(paragraph, text: str, url: str | None = None, anchor: str | None = None) -> None:
    hyperlink = OxmlElement("w:hyperlink")
    if url is not None:
        r_id = paragraph.part.relate_to(url, RT.HYPERLINK, is_external=True)
        hyperlink.set(qn("r:id"), r_id)
    if anchor is not None:
        hyperlink.set(qn("w:anchor"), anchor)
    run = OxmlElement("w:r")
    t = OxmlElement("w:t")
    t.text = text
    run.append(t)
    hyperlink.append(run)
    paragraph._p.append(hyperlink)


def build_docx(
    paragraphs: list[str],
    links: list[tuple[str, str]] = (),
    bookmarks: list[tuple[str, str]] = (),
    table: list[list[str]] | None = None,
) -> bytes:
    """DOCX with plain paragraphs, external hyperlinks (text, url) and
    internal bookmark links (text, anchor name)."""
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    for text, url in links:
        _add_hyperlink(doc.add_paragraph(), text, url=url)
    for text, name in bookmarks:
        _add_hyperlink(doc.add_paragraph(), text, anchor=name)
    if table:
        grid = doc.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                grid.cell(r, c).text = value
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Collaborator doubles
# ---------------------------------------------------------------------------

class StubModelClient:
    """Returns a canned response (or raises) and records every call."""

    def __init__(self, response: str = "", error: Exception | None = None, delay: float = 0.0) -> None:
        self.response = response
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, str, int]] = []

    async def complete(self, system: str, prompt: str, max_tokens: int) -> str:
        self.calls.append((system, prompt, max_tokens))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.response


class RecordingDebugSink:
    def __init__(self) -> None:
        self.logs: list[tuple[str, str, list[Hyperlink]]] = []
        self.results: list[ExtractionResult] = []
        self.failed: list[tuple[str, str, Exception]] = []

    def append_extraction_log(self, filename, text, hyperlinks) -> None:
        self.logs.append((filename, text, hyperlinks))

    def write_result(self, result) -> None:
        self.results.append(result)

    def write_failed_response(self, filename, raw_response, error) -> None:
        self.failed.append((filename, raw_response, error))


@pytest.fixture
def pdf_builder():
    return build_pdf


@pytest.fixture
def docx_builder():
    return build_docx


@pytest.fixture
def sample_resume() -> str:
    return SAMPLE_RESUME


@pytest.fixture
def llm_response() -> str:
    return LLM_RESPONSE


@pytest.fixture
def recording_sink() -> RecordingDebugSink:
    return RecordingDebugSink()


@pytest.fixture
def stub_client_factory():
    return StubModelClient


@pytest.fixture
def resume_pdf() -> bytes:
    """PDF rendering of the sample resume with a LinkedIn annotation and an internal link."""
    lines = SAMPLE_RESUME.splitlines()
    lines[3] = "LinkedIn Profile"
    return build_pdf(lines, links=[(3, "https://www.linkedin.com/in/jane-smith"), (0, None)])
