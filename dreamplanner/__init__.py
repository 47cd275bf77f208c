# ABOUTME: Dream planner package; turns a dream + domain into 5-7 ordered action steps via the AI gateway.
# ABOUTME: Use generate_steps() from dreamplanner.generator for API integration.

from dreamplanner.generator import generate_steps

__all__ = ["generate_steps"]
