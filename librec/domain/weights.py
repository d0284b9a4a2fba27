"""
Fixed constants of the hybrid recommender.

These are design constants, not runtime settings. Changing any of them
changes the ranking semantics, so they live here rather than in config.
"""

# ── Content signal (history distribution, also item-to-item similarity) ──
CATEGORY_WEIGHT = 0.6
AUTHOR_WEIGHT = 0.4

# ── Score fusion ──────────────────────────────────
COLLABORATIVE_WEIGHT = 0.7
CONTENT_WEIGHT = 0.3

# ── Neighbor discovery ────────────────────────────
# Distinct shared history items another reader needs to count as a neighbor.
MIN_NEIGHBOR_OVERLAP = 2
MAX_NEIGHBORS = 20

# ── Similar items ─────────────────────────────────
# Candidate pool is capped at SIMILAR_POOL_FACTOR * limit before scoring.
SIMILAR_POOL_FACTOR = 2
