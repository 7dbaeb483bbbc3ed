from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_resume_parser
from config import settings
from models.requests import ParseTextRequest
from models.responses import ExtractionResponse
from models.schemas.extraction_result import BatchResult
from services.document_parser import detect_format
from services.errors import DocumentParseError, LegacyFormatUnsupported, PersistenceFailure, UnsupportedFormat
from services.pipeline.orchestrator import ResumeParser

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


async def _read_upload(upload: UploadFile) -> bytes:
    content = await upload.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large: {upload.filename}. Max size: {settings.max_upload_size_mb}MB",
        )
    return content


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
    }


@router.post("/resumes/parse", response_model=ExtractionResponse)
@limiter.limit("20/minute")
async def parse_resume(
    request: Request,
    resume_file: UploadFile = File(...),
    persist: bool = Form(False),
    parser: ResumeParser = Depends(get_resume_parser),
):
    filename = resume_file.filename or ""
    try:
        detect_format(filename)
    except (UnsupportedFormat, LegacyFormatUnsupported) as e:
        raise HTTPException(status_code=400, detail=str(e))

    content = await _read_upload(resume_file)

    try:
        if persist:
            result, candidate_id = await parser.parse_and_save(content, filename)
        else:
            result, candidate_id = await parser.parse_resume(content, filename), None
    except DocumentParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceFailure as e:
        body = ExtractionResponse(result=e.result, error=str(e))
        return JSONResponse(status_code=502, content=body.model_dump(mode="json", by_alias=True))

    return ExtractionResponse(result=result, candidate_id=candidate_id)


@router.post("/resumes/parse/text", response_model=ExtractionResponse)
@limiter.limit("20/minute")
async def parse_resume_text(
    request: Request,
    body: ParseTextRequest,
    parser: ResumeParser = Depends(get_resume_parser),
):
    result = await parser.extract_profile(body.text, body.hyperlinks, body.filename)
    return ExtractionResponse(result=result)


@router.post("/resumes/batch", response_model=BatchResult)
@limiter.limit("5/minute")
async def parse_resume_batch(
    request: Request,
    files: list[UploadFile] = File(...),
    parser: ResumeParser = Depends(get_resume_parser),
):
    if len(files) > settings.max_batch_files:
        raise HTTPException(
            status_code=400,
            detail=f"Too many files. Max per batch: {settings.max_batch_files}",
        )

    uploads = [(f.filename or "", await _read_upload(f)) for f in files]
    return await parser.parse_resumes(uploads)
