"""Vector helpers shared by the analytics services."""

import math
from decimal import Decimal
from typing import Hashable, Mapping, Union

Number = Union[int, float, Decimal]


def cosine_similarity(
    first: Mapping[Hashable, Number],
    second: Mapping[Hashable, Number],
) -> float:
    """
    Cosine similarity of two sparse vectors.

    Dot product over shared keys divided by the product of both Euclidean
    magnitudes. Returns 0.0 when either vector has zero magnitude.
    """
    dot_product = sum(
        float(value) * float(second[key])
        for key, value in first.items()
        if key in second
    )
    magnitude_first = math.sqrt(sum(float(value) ** 2 for value in first.values()))
    magnitude_second = math.sqrt(sum(float(value) ** 2 for value in second.values()))
    if magnitude_first == 0 or magnitude_second == 0:
        return 0.0
    return dot_product / (magnitude_first * magnitude_second)
