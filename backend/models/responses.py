from models.schemas.base import SchemaModel
from models.schemas.extraction_result import ExtractionResult


class ExtractionResponse(SchemaModel):
    result: ExtractionResult | None = None
    candidate_id: str | None = None
    error: str | None = None
