"""
Label text for a resolve outcome.
"""
from verifier_core.models.verifier_record import ResolveOutcome, ResolveStatus

NOT_FOUND_TEXT = "Not on AREDL"
UNAVAILABLE_TEXT = "Error fetching"


def verified_by_text(outcome: ResolveOutcome) -> str:
    """'Verified by: A & B' for positive records; only the first two names are shown."""
    if outcome.status is ResolveStatus.UNAVAILABLE or outcome.record is None:
        return UNAVAILABLE_TEXT
    if outcome.status is ResolveStatus.NOT_FOUND:
        return NOT_FOUND_TEXT
    return f"Verified by: {outcome.record.display_name}"


def proof_link(outcome: ResolveOutcome) -> str:
    if outcome.record is None:
        return ""
    return outcome.record.proof_url
