ANALYSIS_PROMPT_TEMPLATE = """\
You are a code analysis system. Analyze the program code files provided below and answer the following five questions clearly.

1. Does this program code contain **financial fraud (scam) or malicious code** (data theft, calls to malicious URLs, etc.)?
2. Are these code files **syntactically valid code**?
3. Does this program code contain **suggestive or obscene wording**? (e.g. variable names, comments, strings)
4. Does this program code **collect sensitive user information**? (e.g. personally identifiable information, financial information)
5. Does this program code contain **logic errors**, or places where **comments or function names do not match the actual behavior**?

**Write every answer in {language}, and respond ONLY with a raw JSON object, without Markdown code blocks.**

--- JSON output format (required) ---
{{
  "runId": "analysis-{run_date}-XXXXXXXXX",
  "status": "SUCCESS" or "ERROR",
  "processedAt": "{processed_at}",
  "finalDecision": "SCAM_DETECTED" or "INVALID_FORMAT" or "CONTENT_WARNING" or "CLEAN",
  "summary": "A summary of the analysis of the whole program.",
  "reportDetails": {{
    "scamCheck": {{
      "detected": true or false,
      "issues": ["Scam or malicious code problems, or 'None'"]
    }},
    "validityCheck": {{
      "valid": true or false,
      "issues": ["Syntax validity problems, or 'All files are valid'"]
    }},
    "sensationalCheck": {{
      "detected": true or false,
      "issues": ["Suggestive wording problems, or 'None'"]
    }},
    "dataCollectionCheck": {{
      "detected": true or false,
      "issues": ["Sensitive data collection problems, or 'None'"]
    }},
    "logicCheck": {{
      "detected": true or false,
      "issues": ["Logic errors or code/comment mismatches, or 'None'"]
    }}
  }}
}}

--- finalDecision rules (required) ---
1. If 'scamCheck.detected' is true, "SCAM_DETECTED"
2. If 'validityCheck.valid' is false, "INVALID_FORMAT"
3. If 'sensationalCheck.detected' is true or 'dataCollectionCheck.detected' is true or 'logicCheck.detected' is true, "CONTENT_WARNING"
4. "CLEAN" only if none of 1, 2 and 3 apply and every check passed

--- Program code to analyze ---
{program}
---
"""

PROGRAM_HEADER_TEMPLATE = "--- Program title: {title} ---\n\n"
FILE_BEGIN_TEMPLATE = "--- File: {file_name} ---\n"
FILE_END_TEMPLATE = "--- End of file: {file_name} ---\n\n"
