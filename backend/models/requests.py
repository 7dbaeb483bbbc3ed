from pydantic import BaseModel, Field

from models.schemas.raw_extraction import Hyperlink


class ParseTextRequest(BaseModel):
    text: str = Field(..., max_length=50000, description="Plain text resume content")
    hyperlinks: list[Hyperlink] = Field(default=[], description="Hyperlinks already discovered in the source document")
    filename: str = Field(default="", max_length=255, description="Name of the source document, if any")
