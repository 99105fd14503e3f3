"""Image search entities.

Ephemeral objects that only live during the image lookup of a single dish.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ImageAccuracy(str, Enum):
    """Coarse label of how likely an image depicts the named dish."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ImageCandidate:
    """
    Raw search hit as returned by a provider.

    Only the metadata a provider actually exposes is filled in; the
    scorer treats missing text as empty.

    Attributes:
        url: Direct image URL
        title: Result title (Korean search surfaces)
        alt_text: Alt text / description (stock providers)
        tags: Comma separated tags (Pixabay)
        source: Originating site name or URL
        photographer: Photographer or uploader name
        description: Long description (Unsplash)
    """

    url: str
    title: str = ""
    alt_text: str = ""
    tags: str = ""
    source: str = ""
    photographer: str = ""
    description: str = ""


@dataclass(frozen=True)
class ImageResult:
    """
    Best image picked by a provider for a dish.

    Attributes:
        url: Image URL
        provider: Provider name (naver, pexels, pixabay, unsplash)
        relevance_score: Heuristic score of the chosen candidate
        accuracy: Accuracy tier derived from the score
        query: Query that produced the candidate
        title: Candidate title or alt text, for logs and debugging
    """

    url: str
    provider: str
    relevance_score: int
    accuracy: ImageAccuracy
    query: Optional[str] = None
    title: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("Image URL cannot be empty")
