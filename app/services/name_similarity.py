# app/services/name_similarity.py
"""
Name matching used by the free item fairness rules.

Two free products count as the same "fairness category" when their names
are similar, e.g. "Marigold Sapling" and "Marigold Seeds".

Known over-match: any two multi-word names sharing a first word are similar,
so "Free Item 1" and "Free Item 2" collide. Kept as-is until product decides
whether that grouping is intended.
"""

# Containment only counts when the names differ by at most this many chars
MAX_CONTAINMENT_LENGTH_DIFF = 10


def _normalize(name: str) -> str:
    return name.lower().strip()


def _first_word(normalized: str) -> str:
    return normalized.split(" ")[0]


def are_product_names_similar(name1: str | None, name2: str | None) -> bool:
    """
    Decide whether two product names belong to the same fairness category.

    Similar when, after lowercasing and trimming:
      - the names are identical, or
      - both have more than one word and share the first word, or
      - one contains the other and their lengths differ by <= 10.

    Missing or empty names are never similar.
    """
    if not name1 or not name2:
        return False

    n1 = _normalize(name1)
    n2 = _normalize(name2)

    if n1 == n2:
        return True

    both_multi_word = " " in n1 and " " in n2
    first_words_match = _first_word(n1) == _first_word(n2)
    one_contains_other = n1 in n2 or n2 in n1

    return (first_words_match and both_multi_word) or (
        one_contains_other and abs(len(n1) - len(n2)) <= MAX_CONTAINMENT_LENGTH_DIFF
    )


def product_category(name: str | None) -> str:
    """
    Main category of a product name: its first word, lowercased.

    "Marigold Sapling" -> "marigold"
    """
    if not name:
        return ""
    return name.split(" ")[0].lower()
