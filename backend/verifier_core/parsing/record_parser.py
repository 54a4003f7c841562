"""
Normalize a level lookup response body into a VerifierRecord.

The body is loosely structured: every sub-field is optional and a missing or
mistyped field falls back to a default. Only a body that is not a JSON object
at all is an error.

Accepted field names (live API name first):
  submissions list : "verifications" | "submissions"
  proof link       : "video_url" | "link"
  submitter object : "submitted_by" | "submitter"
  display name     : "global_name" | "displayName"
  handle           : "name" | "handle"
"""
import json
import logging
import time
from typing import Any, Hashable, List, Optional, Sequence, Union

from verifier_core.models.verifier_record import VerifierRecord

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"

_SUBMISSION_LIST_FIELDS = ("verifications", "submissions")
_PROOF_LINK_FIELDS = ("video_url", "link")
_SUBMITTER_FIELDS = ("submitted_by", "submitter")
_DISPLAY_NAME_FIELDS = ("global_name", "displayName")
_HANDLE_FIELDS = ("name", "handle")


class RecordParseError(ValueError):
    """Response body is not a well-formed JSON object."""


def _first_present(data: dict, fields: Sequence[str]) -> Any:
    for name in fields:
        if name in data:
            return data[name]
    return None


def _first_non_empty_str(data: dict, fields: Sequence[str]) -> str:
    """First value that is a string with non-whitespace content, returned unmodified."""
    for name in fields:
        value = data.get(name)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def _first_dict(data: dict, fields: Sequence[str]) -> Optional[dict]:
    for name in fields:
        value = data.get(name)
        if isinstance(value, dict):
            return value
    return None


def _decode(raw_body: Union[str, bytes, dict]) -> dict:
    if isinstance(raw_body, dict):
        return raw_body
    if isinstance(raw_body, (bytes, bytearray)):
        try:
            raw_body = raw_body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RecordParseError(f"Body is not UTF-8: {e}") from e
    if not isinstance(raw_body, str):
        raise RecordParseError(f"Unsupported body type: {type(raw_body).__name__}")
    try:
        data = json.loads(raw_body)
    except json.JSONDecodeError as e:
        raise RecordParseError(f"Body is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise RecordParseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def resolve_submitter_name(submission: dict) -> str:
    """Display name, else handle, else 'Unknown'."""
    submitter = _first_dict(submission, _SUBMITTER_FIELDS)
    if submitter is None:
        return UNKNOWN_NAME
    return (
        _first_non_empty_str(submitter, _DISPLAY_NAME_FIELDS)
        or _first_non_empty_str(submitter, _HANDLE_FIELDS)
        or UNKNOWN_NAME
    )


def parse_record(
    raw_body: Union[str, bytes, dict],
    key: Hashable,
    fetched_at: Optional[float] = None,
) -> VerifierRecord:
    """
    Build a VerifierRecord from a response body.
    Raises RecordParseError only when the body is not a JSON object.
    """
    data = _decode(raw_body)

    legacy = data.get("legacy")
    if not isinstance(legacy, bool):
        legacy = False

    submissions = _first_present(data, _SUBMISSION_LIST_FIELDS)
    if not isinstance(submissions, list):
        submissions = []

    names: List[str] = []
    proof_url = ""
    for submission in submissions:
        if not isinstance(submission, dict):
            logger.debug("PARSE skipping non-object submission key=%s", key)
            continue
        if not proof_url:
            proof_url = _first_non_empty_str(submission, _PROOF_LINK_FIELDS)
        name = resolve_submitter_name(submission)
        if name not in names:
            names.append(name)

    return VerifierRecord(
        key=key,
        names=tuple(names),
        proof_url=proof_url,
        legacy=legacy,
        fetched_at=time.time() if fetched_at is None else fetched_at,
    )
