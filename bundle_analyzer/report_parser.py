import json
import logging
from typing import Any

from pydantic import ValidationError

from bundle_analyzer.schemas import AnalysisReport

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 100


class ResponseFormatError(Exception):
    def __init__(self, raw: str):
        self.raw = raw
        self.excerpt = f"{raw[:EXCERPT_LENGTH]}..."
        super().__init__(f"Model response is not valid JSON: {self.excerpt!r}")


class SchemaViolationError(Exception):
    pass


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {name!r}")


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    loc = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{loc}: {first['msg']}"


def parse_report(raw: str, *, strict: bool = False) -> Any:
    """Parse the model completion as JSON; in strict mode also check the report schema."""
    try:
        parsed = json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, TypeError) as exc:
        logger.error(f"Model response is not valid JSON ({exc}): {raw!r}")
        raise ResponseFormatError(raw or "") from exc

    if strict:
        try:
            AnalysisReport.model_validate(parsed)
        except ValidationError as exc:
            detail = _describe(exc)
            logger.error(f"Model response violates report schema - {detail}")
            raise SchemaViolationError(detail) from exc

    return parsed
