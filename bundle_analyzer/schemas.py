from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TITLE = "Untitled program"


class CodeFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName", min_length=1)
    content: str = ""


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Any shape is accepted; only a non-empty "title" key is read.
    program_meta: Any = Field(default=None, alias="programMeta")
    code_files: list[CodeFile] = Field(alias="codeFiles", min_length=1)

    @property
    def title(self) -> str:
        if not isinstance(self.program_meta, dict):
            return DEFAULT_TITLE
        title = self.program_meta.get("title")
        if title is None or title == "":
            return DEFAULT_TITLE
        return title if isinstance(title, str) else str(title)


class AnalysisResponse(BaseModel):
    status: Literal["success"] = "success"
    analysis: Any


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    message: str
    detail: Optional[str] = None


class ValidationErrorResponse(BaseModel):
    error: str


# --- Expected shape of the model's report (only enforced in strict mode) ---


class DetectionCheck(BaseModel):
    detected: bool
    issues: list[str]


class ValidityCheck(BaseModel):
    valid: bool
    issues: list[str]


class ReportDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scam_check: DetectionCheck = Field(alias="scamCheck")
    validity_check: ValidityCheck = Field(alias="validityCheck")
    sensational_check: DetectionCheck = Field(alias="sensationalCheck")
    data_collection_check: DetectionCheck = Field(alias="dataCollectionCheck")
    logic_check: DetectionCheck = Field(alias="logicCheck")


class AnalysisReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    run_id: str = Field(alias="runId")
    status: Literal["SUCCESS", "ERROR"]
    processed_at: str = Field(alias="processedAt")
    final_decision: Literal["SCAM_DETECTED", "INVALID_FORMAT", "CONTENT_WARNING", "CLEAN"] = Field(
        alias="finalDecision"
    )
    summary: str
    report_details: ReportDetails = Field(alias="reportDetails")
