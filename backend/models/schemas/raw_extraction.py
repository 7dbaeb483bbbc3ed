"""Document extractor output: raw text plus natively discovered hyperlinks."""

from models.schemas.base import SchemaModel


class Hyperlink(SchemaModel):
    """A link found through the document's own link mechanism.

    PDF link annotations or DOCX anchors only, never a URL matched in plain text.
    """
    anchor_text: str = ""
    url: str


class RawExtraction(SchemaModel):
    text: str = ""
    hyperlinks: list[Hyperlink] = []  # document order, duplicates kept
