# ABOUTME: Step generator: validates a dream + domain, asks the AI gateway for 5-7 ordered steps, re-validates them.
# ABOUTME: generate_steps() is stateless; every failure surfaces as a core.errors.GenerationError subclass.

import logging
import time

from pydantic import ValidationError

from core.config import GatewaySettings
from core.errors import ConfigurationError, InvalidInputError, MalformedResponseError
from core.schemas import (
    MAX_DREAM_LENGTH,
    ActionStep,
    ActionStepsPayload,
    Domain,
    GenerationRequest,
)
from core.telemetry import log_generation
from dreamplanner.gateway import (
    build_chat_payload,
    extract_tool_arguments,
    extract_usage,
    post_chat_completion,
)

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """You are an expert goal-planning assistant that breaks down ambitious dreams into actionable, realistic steps.
Your task is to analyze the user's dream and create a clear, step-by-step roadmap to achieve it."""

STEP_RULES = """Return EXACTLY 5-7 actionable steps. Each step should be:
- Specific and actionable
- Realistic and achievable
- Ordered from foundational to advanced
- Clear about what success looks like"""

# One clause per domain; adding a Domain member means adding a row here.
DOMAIN_EMPHASIS: dict[Domain, str] = {
    Domain.STARTUP: "Focus on business fundamentals, product development, user acquisition, and scaling",
    Domain.PERSONAL: "Focus on skill development, habit formation, resource gathering, and personal growth",
    Domain.ACADEMIC: "Focus on learning pathways, research methods, knowledge building, and academic milestones",
}


def _sanitize_dream(raw: str) -> str:
    """Strip null bytes and surrounding whitespace."""
    return raw.replace("\x00", "").strip()


def validate_request(dream: object, domain: object) -> GenerationRequest:
    """Raise InvalidInputError unless dream is non-blank text and domain is a known Domain value."""
    if not isinstance(dream, str) or not _sanitize_dream(dream):
        raise InvalidInputError("Please describe your dream.")
    if len(_sanitize_dream(dream)) > MAX_DREAM_LENGTH:
        raise InvalidInputError(
            f"Dream is too long. Keep it under {MAX_DREAM_LENGTH} characters."
        )
    try:
        parsed_domain = Domain(domain)
    except ValueError:
        allowed = ", ".join(d.value for d in Domain)
        raise InvalidInputError(
            f"Unsupported domain: {domain!r}. Expected one of: {allowed}."
        ) from None
    return GenerationRequest(dream=_sanitize_dream(dream), domain=parsed_domain)


def build_system_prompt(domain: Domain) -> str:
    return (
        f"{SYSTEM_INSTRUCTION}\n\n"
        f"For {domain.value} goals:\n- {DOMAIN_EMPHASIS[domain]}\n\n"
        f"{STEP_RULES}"
    )


def build_user_prompt(dream: str) -> str:
    return f'Break down this dream into actionable steps: "{dream}"'


def parse_steps(arguments: str) -> list[ActionStep]:
    """Validate function-call arguments; anything but 5-7 complete steps is a MalformedResponseError."""
    try:
        payload = ActionStepsPayload.model_validate_json(arguments)
    except ValidationError as exc:
        raise MalformedResponseError(
            f"Tool call arguments violate the steps contract: {exc.error_count()} error(s)"
        ) from exc
    return payload.steps


def generate_steps(
    dream: str, domain: Domain | str, settings: GatewaySettings
) -> list[ActionStep]:
    """Return the gateway's ordered action steps for a dream. Logs telemetry JSON to stdout.

    Input is validated and the credential checked before any network call.
    """
    request = validate_request(dream, domain)
    if not settings.api_key:
        logger.error("AI gateway API key is not configured")
        raise ConfigurationError("AI gateway API key is missing")

    logger.info("Generating steps for a %s dream", request.domain.value)
    payload = build_chat_payload(
        settings.model,
        build_system_prompt(request.domain),
        build_user_prompt(request.dream),
    )

    start = time.perf_counter()
    prompt_tokens = 0
    completion_tokens = 0
    try:
        envelope = post_chat_completion(settings, payload)
        prompt_tokens, completion_tokens = extract_usage(envelope)
        steps = parse_steps(extract_tool_arguments(envelope))
    except Exception as exc:
        log_generation(
            domain=request.domain.value,
            latency_ms=(time.perf_counter() - start) * 1000,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            step_count=None,
            outcome=exc.__class__.__name__,
        )
        raise

    log_generation(
        domain=request.domain.value,
        latency_ms=(time.perf_counter() - start) * 1000,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        step_count=len(steps),
        outcome="ok",
    )
    return steps
