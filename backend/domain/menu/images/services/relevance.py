"""Image relevance scoring.

Pure functions mapping (candidate metadata, target dish) to an integer
score and an accuracy tier. No network access, so every heuristic can be
unit tested without live providers.

Scorers per provider family:
- score_korean_candidate: Korean search surface (title/source/URL origin)
- score_stock_photo: alt text + photographer (Pexels)
- score_tagged_photo: tag list (Pixabay)
- score_default_photo: alt/description + query ingredient (Unsplash)
"""

from typing import Callable, Iterable, Optional, Sequence, Tuple

from domain.menu.images.entities.image_result import ImageAccuracy, ImageCandidate

Scorer = Callable[[ImageCandidate], int]

TRUSTED_KOREAN_DOMAINS: Tuple[str, ...] = (
    "blogfiles.naver.net",
    "postfiles.naver.net",
    "blog.naver.com",
)

# Hosts that refuse hotlinking (mostly 403 on external fetch)
BLOCKED_URL_MARKERS: Tuple[str, ...] = (
    "shopping.phinf.naver.net",
    "shop1.phinf.naver.net",
    "commerce.",
    "shopping.",
)

# (query keywords, alt keywords) boosted when both sides match
_INGREDIENT_MATCHES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (("shrimp",), ("shrimp", "prawn")),
    (("crab",), ("crab",)),
    (("squid",), ("squid", "octopus")),
    (("chicken",), ("chicken",)),
    (("beef",), ("beef",)),
)


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(k in text for k in keywords)


def is_blocked_url(url: str) -> bool:
    """True if the URL points at a host known to block external fetches."""
    return _contains_any(url, BLOCKED_URL_MARKERS)


def is_trusted_korean_source(url: str) -> bool:
    """True if the URL comes from a Korean blog host."""
    return _contains_any(url, TRUSTED_KOREAN_DOMAINS)


def score_korean_candidate(candidate: ImageCandidate) -> int:
    """
    Score a hit from the Korean search surface.

    Weights:
        +10 trusted Korean blog origin
        +3  title mentions food, dish or restaurant (음식/요리/맛집)
        +2  title mentions Korea or tradition (한국/전통)
        +2  source is a blog, recipe or restaurant site
        +1  Pinterest image host
        -2  title mentions people, buildings or scenery (사람/건물/풍경)

    Example:
        >>> score_korean_candidate(ImageCandidate(
        ...     url="https://blogfiles.naver.net/a.jpg", title="비빔밥 맛집"))
        13
    """
    title = candidate.title.lower()
    source = candidate.source.lower()
    url = candidate.url

    score = 0
    if is_trusted_korean_source(url):
        score += 10
    if _contains_any(title, ("음식", "요리", "맛집")):
        score += 3
    if _contains_any(title, ("한국", "전통")):
        score += 2
    if _contains_any(source, ("blog", "recipe", "restaurant")):
        score += 2
    if "pinimg.com" in url:
        score += 1
    if _contains_any(title, ("사람", "건물", "풍경")):
        score -= 2
    return score


def score_stock_photo(candidate: ImageCandidate, english_name: str) -> int:
    """Score a stock photo by its alt text and photographer."""
    alt = candidate.alt_text.lower()
    photographer = candidate.photographer.lower()
    name = english_name.lower()

    score = 0
    if _contains_any(alt, ("korean", "korea")):
        score += 3
    if _contains_any(alt, ("food", "dish", "meal")):
        score += 2
    if name and name in alt:
        score += 4
    if _contains_any(photographer, ("korean", "asia")):
        score += 1
    return score


def score_tagged_photo(candidate: ImageCandidate, english_name: str) -> int:
    """Score a stock photo by its comma separated tags."""
    tags = candidate.tags.lower()
    name = english_name.lower()

    score = 0
    if _contains_any(tags, ("korean", "korea")):
        score += 3
    if _contains_any(tags, ("food", "dish", "cuisine")):
        score += 2
    if name and name in tags:
        score += 4
    if _contains_any(tags, ("traditional", "authentic")):
        score += 1
    return score


def score_default_photo(candidate: ImageCandidate, query: str) -> int:
    """
    Score a photo from the default stock provider.

    Ingredient keywords get the largest boost, but only when the query
    itself asked for that ingredient.
    """
    alt = candidate.alt_text.lower()
    desc = candidate.description.lower()
    query_lower = query.lower()

    score = 0
    if "food" in alt or "food" in desc:
        score += 3
    if "korean" in alt or "korean" in desc:
        score += 3
    if _contains_any(alt, ("dish", "meal", "cuisine")):
        score += 2
    if _contains_any(alt, ("restaurant", "cooking")):
        score += 2

    for query_keys, alt_keys in _INGREDIENT_MATCHES:
        if _contains_any(query_lower, query_keys) and _contains_any(alt, alt_keys):
            score += 4

    if _contains_any(alt, ("person", "people", "man", "woman")):
        score -= 2
    if _contains_any(alt, ("building", "street", "city")):
        score -= 2
    if _contains_any(alt, ("nature", "landscape", "sky")):
        score -= 2
    return score


def pick_best(
    candidates: Sequence[ImageCandidate],
    scorer: Scorer,
) -> Optional[Tuple[ImageCandidate, int]]:
    """
    Highest scoring candidate, ties resolved by original result order.

    Returns:
        (candidate, score) or None if there are no candidates
    """
    best: Optional[Tuple[ImageCandidate, int]] = None
    for candidate in candidates:
        score = scorer(candidate)
        # strict ">" keeps the earliest candidate on ties
        if best is None or score > best[1]:
            best = (candidate, score)
    return best


def korean_accuracy(url: str, score: int) -> ImageAccuracy:
    """Accuracy of a Korean search hit; blog origin is always high."""
    if is_trusted_korean_source(url):
        return ImageAccuracy.HIGH
    if score < 2:
        return ImageAccuracy.LOW
    if score < 4:
        return ImageAccuracy.MEDIUM
    return ImageAccuracy.HIGH


def stock_accuracy(score: int) -> ImageAccuracy:
    """Accuracy tiers shared by the keyed stock providers."""
    if score >= 5:
        return ImageAccuracy.HIGH
    if score < 2:
        return ImageAccuracy.LOW
    return ImageAccuracy.MEDIUM


def default_accuracy(score: int) -> ImageAccuracy:
    """Accuracy tiers of the default stock provider."""
    if score < 2:
        return ImageAccuracy.LOW
    if score < 4:
        return ImageAccuracy.MEDIUM
    return ImageAccuracy.HIGH
