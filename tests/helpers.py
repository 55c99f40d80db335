"""Shared test doubles and sample payloads."""

VALID_REPORT = {
    "runId": "analysis-2025-01-01-ABCDEF123",
    "status": "SUCCESS",
    "processedAt": "2025-01-01T00:00:00.000Z",
    "finalDecision": "CLEAN",
    "summary": "Nothing suspicious.",
    "reportDetails": {
        "scamCheck": {"detected": False, "issues": ["None"]},
        "validityCheck": {"valid": True, "issues": ["All files are valid"]},
        "sensationalCheck": {"detected": False, "issues": ["None"]},
        "dataCollectionCheck": {"detected": False, "issues": ["None"]},
        "logicCheck": {"detected": False, "issues": ["None"]},
    },
}


class FakeGateway:
    """Records prompts and returns a canned completion (or raises)."""

    def __init__(self, response: str = "{}", error: Exception | None = None):
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    async def send(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response
