import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from bundle_analyzer.prompts import (
    ANALYSIS_PROMPT_TEMPLATE,
    PROGRAM_HEADER_TEMPLATE,
    FILE_BEGIN_TEMPLATE,
    FILE_END_TEMPLATE,
)
from bundle_analyzer.schemas import CodeFile

logger = logging.getLogger(__name__)


def _format_file(file_name: str, content: str) -> str:
    return (
        FILE_BEGIN_TEMPLATE.format(file_name=file_name)
        + f"{content}\n"
        + FILE_END_TEMPLATE.format(file_name=file_name)
    )


def _iso_timestamp(now: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a trailing Z."""
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_program_context(title: str, files: Iterable[CodeFile]) -> str:
    """Concatenate all files, in order, under a program header."""
    parts: list[str] = [PROGRAM_HEADER_TEMPLATE.format(title=title)]
    count = 0
    for code_file in files:
        parts.append(_format_file(code_file.file_name, code_file.content))
        count += 1

    context = "".join(parts)
    logger.debug(f"Built program context: {count} files, {len(context)} chars")
    return context


def render_prompt(
    title: str,
    files: Iterable[CodeFile],
    *,
    language: str,
    now: Optional[datetime] = None,
) -> str:
    """Render the full evaluation prompt for a program bundle."""
    if now is None:
        now = datetime.now(timezone.utc)
    processed_at = _iso_timestamp(now)

    # Values are substituted once, so braces inside file content are left alone.
    return ANALYSIS_PROMPT_TEMPLATE.format(
        language=language,
        run_date=processed_at.split("T")[0],
        processed_at=processed_at,
        program=build_program_context(title, files),
    )
