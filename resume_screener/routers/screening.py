from typing import List, Tuple

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.datastructures import UploadFile

from resume_screener.models.ai_settings import LLMSettings, get_llm_settings
from resume_screener.models.models import ResumeUpload, ScreeningResult
from resume_screener.services.completion import CompletionClient, get_completion_client
from resume_screener.services.graph import run_screening
from resume_screener.services.ranking import export_filename, matches_to_csv, rank_matches, render_markdown
from resume_screener.utils.exceptions import InputValidationError
from resume_screener.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)

RESUME_FIELD_PREFIX = "resume_"


def _resume_sort_key(item: Tuple[int, str, object]):
    position, key, _ = item
    suffix = key[len(RESUME_FIELD_PREFIX):]
    # resume_<i> orders by i; anything non-numeric keeps its form position after those
    return (0, int(suffix), position) if suffix.isdecimal() else (1, 0, position)


async def read_resume_uploads(form) -> List[ResumeUpload]:
    entries = [
        (position, key, value)
        for position, (key, value) in enumerate(form.multi_items())
        if key.startswith(RESUME_FIELD_PREFIX)
    ]
    uploads = []
    for _, key, value in sorted(entries, key=_resume_sort_key):
        if isinstance(value, UploadFile):
            uploads.append(ResumeUpload(
                name=value.filename or key,
                content_type=value.content_type,
                data=await value.read(),
            ))
        else:
            uploads.append(ResumeUpload(name=key, content_type="text/plain", data=str(value).encode("utf-8")))
    return uploads


@router.post("/screen-resumes", response_model=ScreeningResult)
async def screen_resumes(
    request: Request,
    client: CompletionClient = Depends(get_completion_client),
    settings: LLMSettings = Depends(get_llm_settings),
):
    """Screen uploaded resumes (resume_0..resume_n) against jobDescription."""
    form = await request.form()

    job_description = form.get("jobDescription")
    if not isinstance(job_description, str) or not job_description.strip():
        raise InputValidationError("Job description is required", field="jobDescription")

    uploads = await read_resume_uploads(form)
    if not uploads:
        raise InputValidationError("At least one resume file is required", field="resume_0")

    logger.info(f"Screening {len(uploads)} resume(s)")
    return await run_screening(job_description, uploads, client, settings)


@router.post("/screen-resumes/export")
async def export_results(result: ScreeningResult, format: str = Query("csv", pattern="^(csv|markdown)$")):
    """Ranked export of a validated screening result."""
    if format == "markdown":
        return PlainTextResponse(render_markdown(result), media_type="text/markdown")

    filename = export_filename()
    return Response(
        content=matches_to_csv(rank_matches(result)),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
