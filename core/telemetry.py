# ABOUTME: Step-generation telemetry: one structured JSON line per gateway call, plus cost estimate.
# ABOUTME: Gemini 2.5 Flash pricing: $0.075/1M input, $0.30/1M output.

import json
from dataclasses import dataclass
from datetime import datetime, timezone


# Gemini 2.5 Flash pricing per 1M tokens (USD)
INPUT_COST_PER_1M = 0.075
OUTPUT_COST_PER_1M = 0.30


def estimate_cost_usd(prompt_tokens: int, completion_tokens: int) -> float:
    """Estimate cost in USD for Gemini 2.5 Flash."""
    return (prompt_tokens / 1_000_000) * INPUT_COST_PER_1M + (
        completion_tokens / 1_000_000
    ) * OUTPUT_COST_PER_1M


@dataclass
class GenerationLogEntry:
    """Structured telemetry entry for one step-generation call."""

    timestamp: str
    domain: str
    latency_ms: float
    prompt_tokens: int
    completion_tokens: int
    estimated_cost_usd: float
    step_count: int | None
    outcome: str

    def to_json(self) -> str:
        return json.dumps(
            {
                "timestamp": self.timestamp,
                "event": "generate_steps",
                "domain": self.domain,
                "latency_ms": round(self.latency_ms, 2),
                "prompt_tokens": self.prompt_tokens,
                "completion_tokens": self.completion_tokens,
                "estimated_cost_usd": f"{self.estimated_cost_usd:.6f}",
                "step_count": self.step_count,
                "outcome": self.outcome,
                "success": self.outcome == "ok",
            }
        )


def log_generation(
    *,
    domain: str,
    latency_ms: float,
    prompt_tokens: int,
    completion_tokens: int,
    step_count: int | None,
    outcome: str,
) -> None:
    """Print a structured JSON log line to stdout. outcome is "ok" or the error class name."""
    entry = GenerationLogEntry(
        timestamp=datetime.now(tz=timezone.utc).isoformat(),
        domain=domain,
        latency_ms=latency_ms,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        estimated_cost_usd=estimate_cost_usd(prompt_tokens, completion_tokens),
        step_count=step_count,
        outcome=outcome,
    )
    print(entry.to_json(), flush=True)
