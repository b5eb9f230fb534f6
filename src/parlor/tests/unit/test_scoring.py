import pytest

from parlor.logic.enums import MeldType
from parlor.logic.scoring import BASE_POINTS, calculate_win_score, score_hand
from parlor.logic.state import Meld
from parlor.tests.helpers.tiles import tile, tiles


class TestScoreHand:
    def test_self_drawn_hand_scores_base(self):
        assert score_hand(tiles(man="123456789", pin="234", sou="55"), []) == BASE_POINTS

    def test_discard_win_scores_base(self):
        hand = tiles(man="123456789", pin="23", sou="55")
        assert score_hand(hand, [], tile("4p")) == BASE_POINTS

    def test_hand_with_melds(self):
        chow = Meld(meld_type=MeldType.CHOW, tiles=tuple(tiles(man="123")), from_seat=3)
        kong = Meld(meld_type=MeldType.CONCEALED_KONG, tiles=tuple(tiles(pin="1111")))
        hand = tiles(man="456789", sou="55")

        assert score_hand(hand, [chow, kong]) == BASE_POINTS

    def test_rejects_incomplete_hand(self):
        with pytest.raises(ValueError, match="not complete"):
            score_hand(tiles(man="1357", pin="2468", sou="135799"), [])

    def test_rejects_discard_that_does_not_complete(self):
        with pytest.raises(ValueError, match="not complete"):
            score_hand(tiles(man="123456789", pin="23", sou="55"), [], tile("7p"))


class TestWinScore:
    def test_adds_kong_record(self):
        assert calculate_win_score(BASE_POINTS, kong_record=3) == BASE_POINTS + 3

    def test_no_kongs(self):
        assert calculate_win_score(BASE_POINTS, 0) == BASE_POINTS
