"""
Research data models.

ResearchArtifact and ResearchStep are frozen: once produced they are
never mutated. LoopSession is built by the loop controller when the
loop ends and is immutable from then on.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from research_loop.models.enums import TerminationReason


class Source(BaseModel):
    """A cited web source backing a research summary."""
    model_config = ConfigDict(frozen=True)

    uri: str = Field(..., min_length=1, description="Source URL")
    title: str = Field(..., min_length=1, description="Source title")


class ResearchArtifact(BaseModel):
    """Summary-and-sources result of investigating a subject."""
    model_config = ConfigDict(frozen=True)

    summary: str = Field(..., description="Plain-text research summary")
    sources: tuple[Source, ...] = Field(
        default=(),
        description="Ordered list of cited sources",
    )


class ResearchStep(BaseModel):
    """One completed research step of a loop session."""
    model_config = ConfigDict(frozen=True)

    sequence_number: int = Field(..., ge=1, description="1-based position in the session")
    subject: str = Field(..., description="Subject researched in this step")
    artifact: ResearchArtifact
    next_subject: Optional[str] = Field(
        default=None,
        description="Follow-up subject proposed from this step's summary",
    )


class LoopSession(BaseModel):
    """
    Ordered record of all steps executed in one run.

    steps[i].sequence_number == i + 1 for every step.
    """
    model_config = ConfigDict(frozen=True)

    requested_step_count: int = Field(..., ge=1)
    steps: tuple[ResearchStep, ...] = ()
    termination_reason: TerminationReason

    @property
    def initial_subject(self) -> Optional[str]:
        return self.steps[0].subject if self.steps else None

    @property
    def completed_early(self) -> bool:
        return len(self.steps) < self.requested_step_count
