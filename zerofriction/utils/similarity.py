"""Edit-distance similarity for "did you mean" suggestions."""


def levenshtein_distance(str1: str, str2: str) -> int:
    """Minimum number of single-character edits turning str1 into str2.

    Insertion, deletion and substitution all cost 1.
    """
    if len(str1) < len(str2):
        str1, str2 = str2, str1

    previous = list(range(len(str2) + 1))
    for i, ch1 in enumerate(str1, start=1):
        current = [i]
        for j, ch2 in enumerate(str2, start=1):
            cost = 0 if ch1 == ch2 else 1
            current.append(min(
                current[j - 1] + 1,
                previous[j] + 1,
                previous[j - 1] + cost,
            ))
        previous = current

    return previous[-1]


def similarity(str1: str, str2: str) -> float:
    """Normalized similarity in [0, 1]: (max_len - distance) / max_len.

    Two empty strings are identical by convention (1.0).
    """
    longest = max(len(str1), len(str2))
    if longest == 0:
        return 1.0

    return (longest - levenshtein_distance(str1, str2)) / longest
