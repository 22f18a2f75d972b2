"""Tests for card.py"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from american_mahjong.core.card import ANY, SAME_SUIT, CardConfig, HandPattern, TileRequirement
from american_mahjong.core.tile import TileType


CARD_DATA = {
    "year": 2024,
    "version": 1,
    "patterns": [
        {
            "id": "p1", "name": "All Pungs", "category": "Consecutive Run", "points": 25,
            "tiles": [
                {"type": "bamboo", "count": 3, "specific": [1], "jokerAllowed": True},
                {"type": "bamboo", "count": 3, "specific": [2]},
                {"type": "bamboo", "count": 3, "specific": [3]},
                {"type": "bamboo", "count": 3, "specific": [4]},
                {"type": "bamboo", "count": 2, "specific": [5]},
            ],
        },
        {
            "id": "p2", "name": "Seven Pairs", "category": "Singles and Pairs", "points": 50,
            "tiles": [{"type": "any", "count": 2}] * 7,
        },
    ],
}


class TestTileRequirement:
    def test_type_converted(self):
        req = TileRequirement("dot", 3)
        assert req.type == TileType.DOT

    def test_special_types_kept(self):
        assert TileRequirement("any", 2).type == ANY
        assert TileRequirement("same_suit", 2).type == SAME_SUIT

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            TileRequirement("sticks", 3)

    def test_value_list(self):
        assert TileRequirement("dot", 3, specific=[1]).value_list == (1,)
        assert TileRequirement("dot", 3, values=[1, 2]).value_list == (1, 2)
        assert TileRequirement("dot", 3).value_list == ()

    def test_from_dict_joker_spellings(self):
        a = TileRequirement.from_dict({"type": "dot", "count": 3, "jokerAllowed": True})
        b = TileRequirement.from_dict({"type": "dot", "count": 3, "joker_allowed": True})
        c = TileRequirement.from_dict({"type": "dot", "count": 3})
        assert a.joker_allowed and b.joker_allowed
        assert not c.joker_allowed


class TestCardConfig:
    def test_from_dict(self):
        card = CardConfig.from_dict(CARD_DATA)
        assert card.year == 2024
        assert card.version == "1"
        assert len(card.patterns) == 2
        assert isinstance(card.patterns[0], HandPattern)
        assert card.patterns[0].tiles[0].joker_allowed
        assert not card.patterns[0].tiles[1].joker_allowed

    def test_total_required(self):
        card = CardConfig.from_dict(CARD_DATA)
        assert all(p.total_required == 14 for p in card.patterns)

    def test_get_pattern(self):
        card = CardConfig.from_dict(CARD_DATA)
        assert card.get_pattern("p2").name == "Seven Pairs"
        assert card.get_pattern("missing") is None

    def test_patterns_are_tuples(self):
        card = CardConfig(2024, "1", [HandPattern("x", "X", "c", 10, [TileRequirement("dot", 14)])])
        assert isinstance(card.patterns, tuple)
        assert isinstance(card.patterns[0].tiles, tuple)
