# ABOUTME: Pydantic models for the step-generation contract and dream/step request bodies.
# ABOUTME: ActionStepsPayload re-validates the gateway's function-call arguments (5-7 steps).

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_STEPS = 5
MAX_STEPS = 7
MAX_DREAM_LENGTH = 2000


class Domain(str, Enum):
    """Context a dream belongs to; biases step generation."""

    STARTUP = "startup"
    PERSONAL = "personal"
    ACADEMIC = "academic"


class ActionStep(BaseModel):
    """One ordered, actionable unit of a dream's roadmap."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, description="Short, action-oriented title")
    description: str = Field(
        min_length=1, description="Detailed explanation of what to do and why"
    )

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ActionStepsPayload(BaseModel):
    """Arguments of the create_action_steps function call."""

    steps: list[ActionStep] = Field(min_length=MIN_STEPS, max_length=MAX_STEPS)


class GenerationRequest(BaseModel):
    """A validated dream submission. Built per request, never stored."""

    dream: str
    domain: Domain


class StepsResponse(BaseModel):
    steps: list[ActionStep]


class DreamCreateRequest(BaseModel):
    dream: str = Field(min_length=1, max_length=MAX_DREAM_LENGTH)
    domain: Domain
    steps: list[ActionStep] = Field(min_length=MIN_STEPS, max_length=MAX_STEPS)


class StepUpdateRequest(BaseModel):
    completed: bool
