"""Search query variants per image provider.

Each list goes from the most specific phrasing to the most generic one;
providers stop at the first query that yields results.
"""

from typing import List, Tuple

# (English name keywords, search terms) checked in order, first match wins
_DEFAULT_TERM_RULES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    # main ingredients
    (("squid", "octopus"), ("korean squid", "korean seafood")),
    (("shrimp",), ("korean shrimp", "korean prawns")),
    (("crab",), ("korean crab", "soy marinated crab")),
    (("chicken",), ("korean chicken", "chicken stew")),
    (("beef",), ("korean beef", "bulgogi")),
    (("pork",), ("korean pork",)),
    (("fish",), ("korean fish",)),
    (("tofu",), ("korean tofu",)),
    # dish types
    (("stew", "soup"), ("korean stew", "korean soup")),
    (("rice", "bibimbap"), ("korean rice", "bibimbap")),
    (("noodle",), ("korean noodles",)),
    (("set", "meal"), ("korean set meal", "korean banchan")),
    (("bbq", "grilled"), ("korean bbq", "korean grill")),
)
_DEFAULT_TERMS: Tuple[str, ...] = ("korean food", "korean cuisine")

GENERIC_FALLBACK_QUERY = "korean food traditional cuisine"


def korean_queries(korean_name: str, english_name: str) -> List[str]:
    """Korean-language variants for the Korean search surface."""
    return [
        korean_name,
        f"{korean_name} 음식",
        f"{korean_name} 요리",
        f"한국 {english_name}",
        f"{english_name} 한국음식",
    ]


def alternate_korean_queries(korean_name: str, english_name: str) -> List[str]:
    """Recipe oriented rephrasings tried when the first Korean hit failed validation."""
    return [
        f"{korean_name} 레시피",
        f"{korean_name} 만들기",
        f"맛있는 {korean_name}",
        f"전통 {korean_name}",
        f"{english_name} recipe korean",
    ]


def pexels_queries(english_name: str) -> List[str]:
    return [
        f"korean {english_name}",
        f"{english_name} korean food",
        f"traditional korean {english_name}",
        "korean cuisine",
        "korean food dish",
    ]


def pixabay_queries(english_name: str) -> List[str]:
    return [
        f"korean {english_name}",
        f"korean food {english_name}",
        "korean cuisine",
        "korean traditional food",
    ]


def default_search_terms(english_name: str) -> List[str]:
    """
    Map an English dish name to broader search terms.

    Example:
        >>> default_search_terms("Spicy Stir-fried Squid")
        ['korean squid', 'korean seafood']
    """
    name = english_name.lower()
    for keywords, terms in _DEFAULT_TERM_RULES:
        if any(k in name for k in keywords):
            return list(terms)
    return list(_DEFAULT_TERMS)


def default_queries(english_name: str) -> List[str]:
    """Queries for the default stock provider, three per search term."""
    queries: List[str] = []
    for term in default_search_terms(english_name):
        queries.extend([f"{term} dish", f"{term} restaurant", f"traditional {term}"])
    return queries
