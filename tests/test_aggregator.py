"""Tests for combining platform scores."""

from analyzers.base import Platform
from scoring.aggregator import DEFAULT_PLATFORM_WEIGHTS, combine, resolve_weights

SCORES = {
    Platform.GOOGLE_AIO: 80,
    Platform.CHATGPT: 60,
    Platform.PERPLEXITY: 40,
    Platform.BING_COPILOT: 100,
    Platform.CLAUDE: 100,
}


def test_default_weights():
    assert DEFAULT_PLATFORM_WEIGHTS[Platform.GOOGLE_AIO] == 0.45
    assert DEFAULT_PLATFORM_WEIGHTS[Platform.CHATGPT] == 0.35
    assert DEFAULT_PLATFORM_WEIGHTS[Platform.PERPLEXITY] == 0.20
    assert DEFAULT_PLATFORM_WEIGHTS[Platform.BING_COPILOT] == 0.0
    assert DEFAULT_PLATFORM_WEIGHTS[Platform.CLAUDE] == 0.0
    assert DEFAULT_PLATFORM_WEIGHTS[Platform.GEMINI] == 0.0


def test_combine_with_defaults_ignores_zero_weight_platforms():
    # 0.45 * 80 + 0.35 * 60 + 0.20 * 40 = 65
    assert combine(SCORES) == 65


def test_combine_subset_renormalizes():
    assert combine(SCORES, subset=[Platform.CHATGPT]) == 60
    assert combine(SCORES, subset=[Platform.GOOGLE_AIO, Platform.PERPLEXITY]) == 68


def test_combine_zero_weight_subset_is_zero():
    assert combine(SCORES, subset=[Platform.CLAUDE, Platform.BING_COPILOT]) == 0
    assert combine(SCORES, subset=[]) == 0


def test_combine_missing_scores_count_as_zero():
    assert combine({Platform.GOOGLE_AIO: 100}) == 45


def test_combine_clamps_negative_weights():
    weights = {Platform.GOOGLE_AIO: -1.0, Platform.CHATGPT: 1.0}
    assert combine(SCORES, weights) == 60


def test_combine_uses_weights_as_given():
    weights = {Platform.CLAUDE: 1.0}
    assert combine(SCORES, weights) == 100
    assert combine(SCORES, {}) == 0


def test_combine_ignores_unknown_subset_entries():
    assert combine(SCORES, subset=["bogus", Platform.CHATGPT, Platform.CHATGPT]) == 60


def test_resolve_weights_overrides_by_name():
    weights = resolve_weights({"claude": 0.5, Platform.GOOGLE_AIO: 0.1})

    assert weights[Platform.CLAUDE] == 0.5
    assert weights[Platform.GOOGLE_AIO] == 0.1
    assert weights[Platform.CHATGPT] == 0.35
    assert len(weights) == len(Platform)


def test_resolve_weights_does_not_mutate_defaults():
    resolve_weights({"chatgpt": 0.9})
    assert DEFAULT_PLATFORM_WEIGHTS[Platform.CHATGPT] == 0.35


def test_single_platform_subset_ignores_other_weights():
    assert combine({"a": 80, "b": 60}, weights={"a": 1, "b": 1}, subset=["a"]) == 80
