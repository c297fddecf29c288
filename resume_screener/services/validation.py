from typing import Any, Sequence, Union

from pydantic import ValidationError

from resume_screener.models.models import ScreeningResult
from resume_screener.utils.exceptions import SchemaValidationError
from resume_screener.utils.logging_config import get_logger

logger = get_logger(__name__)


def format_loc(loc: Sequence[Union[str, int]]) -> str:
    """('matches', 1, 'matchScore') -> 'matches.1.matchScore'"""
    return ".".join(str(part) for part in loc) or "<root>"


def validate_screening_result(payload: Any) -> ScreeningResult:
    try:
        return ScreeningResult.model_validate(payload)
    except ValidationError as e:
        errors = [
            {"field": format_loc(err["loc"]), "type": err["type"], "message": err["msg"]}
            for err in e.errors()
        ]
        first = errors[0]
        logger.warning(f"Screening result failed schema validation: {len(errors)} error(s), first at {first['field']}")
        raise SchemaValidationError(
            f"Invalid screening result at '{first['field']}': {first['message']}",
            field=first["field"],
            errors=errors,
            cause=e,
        ) from e
