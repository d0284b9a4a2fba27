"""Weighted fusion of score maps and deterministic ranking."""

from librec.domain.records import ScoreMap


def fuse(
    scores_a: ScoreMap,
    scores_b: ScoreMap,
    weight_a: float,
    weight_b: float,
) -> ScoreMap:
    """Weighted sum over the union of keys; a missing key contributes 0."""
    return {
        item_id: scores_a.get(item_id, 0) * weight_a + scores_b.get(item_id, 0) * weight_b
        for item_id in scores_a.keys() | scores_b.keys()
    }


def rank(scores: ScoreMap, limit: int | None = None) -> list[tuple[int, float]]:
    """Highest score first, ties broken by item id ascending."""
    ordered = sorted(scores.items(), key=lambda kv: (-kv[1], kv[0]))
    return ordered if limit is None else ordered[:limit]
