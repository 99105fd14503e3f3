"""MenuExtraction entity - output of the OCR step."""

from dataclasses import dataclass, field
from typing import List, Optional

from domain.menu.core.value_objects.token_usage import TokenUsage


@dataclass(frozen=True)
class MenuExtraction:
    """
    Dish names read off a menu photo.

    Attributes:
        is_korean_menu: Whether the photo shows a Korean menu
        extracted_names: Literal Korean names, in reading order (at most 3)
        total_detected: True number of items visible, which may exceed
            len(extracted_names); None when the model did not report it
        token_usage: Usage and cost of the OCR call
    """

    is_korean_menu: bool
    extracted_names: List[str] = field(default_factory=list)
    total_detected: Optional[int] = None
    token_usage: TokenUsage = field(default_factory=TokenUsage.zero)

    def __post_init__(self) -> None:
        if self.total_detected is not None and self.total_detected < 0:
            raise ValueError(f"total_detected cannot be negative, got {self.total_detected}")

    def detected_count(self) -> int:
        """Best known item count: the reported total or the names returned."""
        return max(self.total_detected or 0, len(self.extracted_names))
