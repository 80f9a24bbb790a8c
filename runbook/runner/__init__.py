from .runner import Runner
from .types import EXIT_FAILURE, EXIT_OK, RunOutcome, RunState, exit_status_for

__all__ = [
    "Runner",
    "RunOutcome",
    "RunState",
    "EXIT_OK",
    "EXIT_FAILURE",
    "exit_status_for",
]
