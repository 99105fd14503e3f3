"""Menu application services."""

from .usage_gate import UsageGate

__all__ = ["UsageGate"]
