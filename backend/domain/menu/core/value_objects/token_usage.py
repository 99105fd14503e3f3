"""Token usage and cost value objects.

TokenUsage is the cumulative usage reported back to clients.
CostModel converts raw token counts into money with fixed linear rates.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class TokenUsage:
    """Value object for generative model token usage and its cost.

    Attributes:
        prompt_tokens: Tokens sent to the model.
        completion_tokens: Tokens produced by the model.
        total_tokens: prompt + completion (as reported by the provider).
        cost_usd: Cost in US dollars.
        cost_aud: Cost in Australian dollars.

    Examples:
        >>> a = TokenUsage(100, 50, 150, 0.00075, 0.001125)
        >>> b = TokenUsage.zero()
        >>> (a + b).total_tokens
        150

    Raises:
        ValueError: If any count or cost is negative.
    """

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cost_usd: float = 0.0
    cost_aud: float = 0.0

    def __post_init__(self) -> None:
        """Validate usage invariants."""
        for name in ("prompt_tokens", "completion_tokens", "total_tokens"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.cost_usd < 0 or self.cost_aud < 0:
            raise ValueError("Costs must be non-negative")

    @classmethod
    def zero(cls) -> "TokenUsage":
        return cls()

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        if not isinstance(other, TokenUsage):
            return NotImplemented
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
            cost_usd=self.cost_usd + other.cost_usd,
            cost_aud=self.cost_aud + other.cost_aud,
        )

    def to_dict(self) -> Dict[str, float]:
        """Serialize with the snake_case keys clients expect."""
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
            "cost_usd": self.cost_usd,
            "cost_aud": self.cost_aud,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "TokenUsage":
        return cls(
            prompt_tokens=int(data.get("prompt_tokens", 0)),
            completion_tokens=int(data.get("completion_tokens", 0)),
            total_tokens=int(data.get("total_tokens", 0)),
            cost_usd=float(data.get("cost_usd", 0.0)),
            cost_aud=float(data.get("cost_aud", 0.0)),
        )


@dataclass(frozen=True)
class CostModel:
    """Fixed linear pricing for generative model calls.

    The AUD figure is derived from USD with a constant multiplier, not a
    live exchange rate.

    Attributes:
        prompt_usd_per_1k: USD per 1000 prompt tokens.
        completion_usd_per_1k: USD per 1000 completion tokens.
        aud_multiplier: USD -> AUD conversion factor.
        generation_prompt_tokens: Estimated prompt tokens of one dish generation.
        generation_completion_tokens: Estimated completion tokens of one dish generation.
        generation_cost_usd: Estimated USD cost of one dish generation.

    Examples:
        >>> model = CostModel()
        >>> model.price(1000, 1000).cost_usd
        0.0125
    """

    prompt_usd_per_1k: float = 0.0025
    completion_usd_per_1k: float = 0.01
    aud_multiplier: float = 1.5
    generation_prompt_tokens: int = 200
    generation_completion_tokens: int = 400
    generation_cost_usd: float = 0.004

    def __post_init__(self) -> None:
        if self.prompt_usd_per_1k < 0 or self.completion_usd_per_1k < 0:
            raise ValueError("Token rates must be non-negative")
        if self.aud_multiplier <= 0:
            raise ValueError("aud_multiplier must be positive")

    def price(
        self,
        prompt_tokens: int,
        completion_tokens: int,
        total_tokens: int = 0,
    ) -> TokenUsage:
        """
        Price a single model call.

        Args:
            prompt_tokens: Prompt tokens reported by the provider
            completion_tokens: Completion tokens reported by the provider
            total_tokens: Total reported by the provider (computed when 0)

        Returns:
            TokenUsage with USD and AUD cost
        """
        cost_usd = (prompt_tokens / 1000) * self.prompt_usd_per_1k + (
            completion_tokens / 1000
        ) * self.completion_usd_per_1k
        return TokenUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens or prompt_tokens + completion_tokens,
            cost_usd=cost_usd,
            cost_aud=cost_usd * self.aud_multiplier,
        )

    def generation_estimate(self) -> TokenUsage:
        """Fixed usage increment charged for each generated dish record."""
        return TokenUsage(
            prompt_tokens=self.generation_prompt_tokens,
            completion_tokens=self.generation_completion_tokens,
            total_tokens=self.generation_prompt_tokens + self.generation_completion_tokens,
            cost_usd=self.generation_cost_usd,
            cost_aud=self.generation_cost_usd * self.aud_multiplier,
        )
