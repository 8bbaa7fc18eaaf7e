from __future__ import annotations

import pytest
from pydantic import ValidationError

from exam_gateway.catalog import CATALOG, AbilityCatalog, AbilityKey
from exam_gateway.settings import Settings
from exam_gateway.weakness.radar import NEUTRAL_SCORE, build_radar, round_half_up
from exam_gateway.weakness.ranker import rank_weaknesses


def _scores(radar):
    return {entry.category: entry.score for entry in radar}


def test_radar_covers_catalog_in_order():
    radar = build_radar(CATALOG, {}, lambda key: False)
    assert [entry.category for entry in radar] == [key.value for key in CATALOG.keys()]
    assert all(entry.score == NEUTRAL_SCORE for entry in radar)
    assert radar[0].tag == CATALOG.get(AbilityKey.VOCAB).tag


def test_radar_neutral_without_missed_question():
    means = {AbilityKey.VOCAB: 0.0, AbilityKey.GRAMMAR: 5.0}
    scores = _scores(build_radar(CATALOG, means, lambda key: False))
    assert scores["vocab"] == 3
    assert scores["grammar"] == 3


def test_radar_rounds_mean_when_missed():
    means = {AbilityKey.VOCAB: 1.5, AbilityKey.GRAMMAR: 4.4, AbilityKey.DETAIL: 2.5}
    scores = _scores(build_radar(CATALOG, means, lambda key: True))
    assert scores["vocab"] == 2
    assert scores["grammar"] == 4
    assert scores["detail"] == 3
    assert scores["tone"] == 3


def test_radar_clamps_to_scale():
    means = {AbilityKey.VOCAB: 9.0, AbilityKey.GRAMMAR: -2.0}
    scores = _scores(build_radar(CATALOG, means, lambda key: True))
    assert scores["vocab"] == 5
    assert scores["grammar"] == 0


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_ranker_filters_sorts_and_truncates():
    means = {
        AbilityKey.VOCAB: 2.0,
        AbilityKey.GRAMMAR: 1.0,
        AbilityKey.DETAIL: 2.9,
        AbilityKey.TONE: 0.5,
        AbilityKey.INFERENCE: 1.5,
        AbilityKey.PURPOSE: 3.0,
    }
    appeared = set(means)
    ranked = rank_weaknesses(means, appeared)
    assert [key for key, _ in ranked] == [AbilityKey.TONE, AbilityKey.GRAMMAR, AbilityKey.INFERENCE, AbilityKey.VOCAB]


def test_ranker_requires_appearance():
    means = {AbilityKey.VOCAB: 1.0, AbilityKey.GRAMMAR: 2.0}
    ranked = rank_weaknesses(means, {AbilityKey.GRAMMAR})
    assert ranked == [(AbilityKey.GRAMMAR, 2.0)]


def test_ranker_ties_keep_encounter_order():
    means = {AbilityKey.TONE: 2.0, AbilityKey.VOCAB: 2.0, AbilityKey.DETAIL: 2.0}
    ranked = rank_weaknesses(means, set(means))
    assert [key for key, _ in ranked] == [AbilityKey.TONE, AbilityKey.VOCAB, AbilityKey.DETAIL]


def test_ranker_empty_when_nothing_weak():
    means = {AbilityKey.VOCAB: 3.0, AbilityKey.GRAMMAR: 4.5}
    assert rank_weaknesses(means, set(means)) == []


def test_ranker_never_exceeds_four():
    means = {key: 1.0 for key in CATALOG.keys()}
    ranked = rank_weaknesses(means, set(means), limit=6)
    assert len(ranked) == 4


def test_weakness_limit_setting_is_bounded(monkeypatch):
    monkeypatch.setenv("WEAKNESS_LIMIT", "6")
    with pytest.raises(ValidationError):
        Settings()


def test_catalog_rejects_duplicate_keys():
    vocab = CATALOG.get(AbilityKey.VOCAB)
    with pytest.raises(ValueError):
        AbilityCatalog((vocab, vocab))
