import pytest

from pipelines.transformers.pitching import (
    innings_to_decimal,
    summarize_offense,
    summarize_recent_form,
)


def split(day: str, innings: str, er: int, hits: int, walks: int, ks: int, bf: int) -> dict:
    return {
        "date": day,
        "stat": {
            "inningsPitched": innings,
            "earnedRuns": er,
            "hits": hits,
            "baseOnBalls": walks,
            "strikeOuts": ks,
            "battersFaced": bf,
        },
    }


class TestInningsToDecimal:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("6.1", 6 + 1 / 3),
            ("6.2", 6 + 2 / 3),
            ("7.0", 7.0),
            ("7", 7.0),
            (5, 5.0),
            (None, 0.0),
            ("", 0.0),
            ("abc", 0.0),
        ],
    )
    def test_conversion(self, raw, expected):
        assert innings_to_decimal(raw) == pytest.approx(expected)


class TestSummarizeRecentForm:
    def test_uses_three_most_recent_appearances(self):
        splits = [
            split("2025-05-20", "6.0", 0, 3, 1, 8, 22),
            split("2025-04-02", "1.0", 9, 9, 9, 0, 20),
            split("2025-05-26", "7.0", 1, 4, 1, 9, 25),
            split("2025-05-14", "5.0", 2, 5, 2, 6, 22),
        ]

        form = summarize_recent_form(splits)

        assert form.innings_pitched == pytest.approx(18.0)
        assert form.era == pytest.approx(3 * 9 / 18)
        assert form.whip == pytest.approx((4 + 12) / 18)
        assert form.strikeout_rate == pytest.approx(23 / 69)
        assert form.walk_rate == pytest.approx(4 / 69)
        assert form.hits_per_nine == pytest.approx(12 * 9 / 18)

    def test_partial_innings(self):
        form = summarize_recent_form([split("2025-06-01", "6.1", 1, 2, 0, 7, 21)])
        assert form.innings_pitched == pytest.approx(19 / 3)
        assert form.era == pytest.approx(9 / (19 / 3))

    def test_zero_innings_defaults(self):
        form = summarize_recent_form([split("2025-06-01", "0.0", 3, 3, 2, 0, 0)])
        assert form.era == 99.0
        assert form.whip == 5.0
        assert form.hits_per_nine == 9.0
        assert form.strikeout_rate == 0.0
        assert form.walk_rate == 0.0

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            summarize_recent_form([])


def test_summarize_offense():
    offense = summarize_offense({"avg": ".245", "ops": ".712", "atBats": "5000", "strikeOuts": 1200})
    assert offense.batting_average == pytest.approx(0.245)
    assert offense.on_base_plus_slugging == pytest.approx(0.712)
    assert offense.strikeout_rate == pytest.approx(0.24)


def test_summarize_offense_without_at_bats():
    offense = summarize_offense({"avg": "-.--", "ops": None})
    assert offense.batting_average == 0.0
    assert offense.on_base_plus_slugging == 0.0
    assert offense.strikeout_rate == 0.0
