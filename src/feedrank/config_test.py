import pytest
from pydantic import ValidationError

from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .models import RANK_BONUS, AuthorRank


def test_defaults():
    config = DEFAULT_RANKING_CONFIG
    assert config.weights.recency == 0.20
    assert config.weights.engagement == 0.25
    assert config.half_life_hours == 24.0
    assert config.min_score == 0.1
    assert (config.max_posts_per_author, config.max_posts_per_tag) == (2, 3)
    assert (config.candidate_pool_multiplier, config.diversity_pool_multiplier) == (3, 2)


def test_config_is_immutable():
    with pytest.raises(ValidationError):
        DEFAULT_RANKING_CONFIG.min_score = 10.0


def test_alternate_tuning_leaves_default_untouched():
    tuned = DEFAULT_RANKING_CONFIG.model_copy(update={"max_posts_per_author": 5})
    assert tuned.max_posts_per_author == 5
    assert DEFAULT_RANKING_CONFIG.max_posts_per_author == 2


def test_rejects_non_positive_half_life():
    with pytest.raises(ValidationError):
        RankingConfig(half_life_hours=0)


def test_rank_bonus_covers_every_tier_in_order():
    bonuses = [rank.bonus for rank in AuthorRank]
    assert set(RANK_BONUS) == set(AuthorRank)
    assert bonuses == sorted(bonuses)
    assert bonuses[0] == 0.0
    assert bonuses[-1] == 0.5
