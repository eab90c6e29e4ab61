"""Edit-distance similarity used by fuzzy search."""

# A word fuzzy-matches a text when similarity is strictly above this value
FUZZY_THRESHOLD = 0.6


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert, delete and substitute each cost 1)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, 1):
        current = [i]
        for j, char_b in enumerate(b, 1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(min(
                    previous[j - 1] + 1,  # substitute
                    current[j - 1] + 1,   # insert
                    previous[j] + 1,      # delete
                ))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Normalized similarity in [0, 1].

    ``(len(longer) - distance(longer, shorter)) / len(longer)``; two empty
    strings are identical.
    """
    longer, shorter = (a, b) if len(a) > len(b) else (b, a)
    if not longer:
        return 1.0
    return (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)


def is_fuzzy_match(word: str, text: str) -> bool:
    return similarity(word, text) > FUZZY_THRESHOLD
