"""
Types shared by the remote transport and the fetch coordinator.
"""
from dataclasses import dataclass
from typing import Callable, Optional, Union

Body = Union[str, bytes, dict]


@dataclass
class RemoteResponse:
    """Result of one remote GET. status_code is None when the request never completed."""
    status_code: Optional[int]
    body: Optional[Body] = None
    error: str = ""  # transport error message, for logging

    @property
    def ok(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300 and not self.error


# Performs the remote call for one key; must eventually return or raise.
FetchFn = Callable[[], RemoteResponse]
