"""Greedy author/tag diversity pass over a score-sorted candidate list."""

from collections import defaultdict

from ...config import DEFAULT_RANKING_CONFIG, RankingConfig
from ...models import ScoredCandidate


def apply_diversity_sampling(
    scored: list[ScoredCandidate],
    limit: int,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[ScoredCandidate]:
    """Keep candidates in order while capping repeats per author and per tag.

    *scored* must already be sorted by descending score.  A candidate is
    skipped when its author already fills ``max_posts_per_author`` slots or
    any of its tags already fills ``max_posts_per_tag`` slots.  Skipped
    candidates are never revisited.  Stops once
    ``diversity_pool_multiplier * limit`` candidates are kept.
    """
    max_size = limit * config.diversity_pool_multiplier
    result: list[ScoredCandidate] = []
    if max_size <= 0:
        return result

    author_counts: dict[str, int] = defaultdict(int)
    tag_counts: dict[str, int] = defaultdict(int)

    for item in scored:
        post = item.post

        if author_counts[post.author_id] >= config.max_posts_per_author:
            continue

        if any(tag_counts[tag] >= config.max_posts_per_tag for tag in post.tags):
            continue

        result.append(item)
        author_counts[post.author_id] += 1
        for tag in post.tags:
            tag_counts[tag] += 1

        if len(result) >= max_size:
            break

    return result
