"""
Loop controller exceptions.

LoopAborted is the hard failure returned to the caller when a step's
research request cannot be satisfied. The underlying error is kept
unchanged (as `.error` and as `__cause__`).
"""

from research_loop.models.research_models import LoopSession


class LoopAborted(Exception):
    """
    Raised when a research request fails and the session is abandoned.

    Attributes:
        step_number: 1-based number of the step that failed
        subject: Subject that could not be researched
        error: Underlying error from the research operation
        session: Session as it stood when aborted (termination_reason=aborted);
            contains the steps completed before the failure
    """

    def __init__(
        self,
        step_number: int,
        subject: str,
        error: Exception,
        session: LoopSession,
    ) -> None:
        self.step_number = step_number
        self.subject = subject
        self.error = error
        self.session = session
        super().__init__(
            f"Research failed at step {step_number} ({subject!r}): {error}"
        )
