"""Tests for the interactive date prompts, driven by scripted answers."""

from datetime import date

from dates import DateConfig
from prompts import interactive_date_configs, is_valid_date

TODAY = date(2029, 12, 1)


def _answers(*values):
    it = iter(values)
    return lambda prompt: next(it)


class TestIsValidDate:
    def test_valid(self):
        assert is_valid_date("2030-01-10", TODAY)
        assert is_valid_date("2029-12-01", TODAY)

    def test_invalid(self):
        assert not is_valid_date("2029-11-30", TODAY)
        assert not is_valid_date("2030-02-30", TODAY)
        assert not is_valid_date("10/01/2030", TODAY)
        assert not is_valid_date("", TODAY)


class TestInteractiveFlow:
    def test_same_dates_for_all(self):
        cfg = interactive_date_configs(
            ["Paris", "Rome"], ask=_answers("1", "1", "2030-01-10", "2030-01-17"), today=TODAY
        )
        assert cfg == DateConfig.specific("2030-01-10", "2030-01-17")

    def test_invalid_answers_are_asked_again(self, capsys):
        ask = _answers("5", "1", "2", "bad", "2030-01-31", "0", "1")
        cfg = interactive_date_configs(["Paris"], ask=ask, today=TODAY)

        assert cfg.checkin == date(2030, 1, 31)
        assert cfg.checkout == date(2030, 2, 28)
        out = capsys.readouterr().out
        assert "Please enter 1, 2 or 3" in out
        assert "Invalid date" in out
        assert "Please enter a number between 1 and 12" in out

    def test_dates_per_city(self):
        ask = _answers(
            "2",
            "2030-01-10", "2030-01-12",
            "2030-02-01", "2030-01-31", "2030-02-05",
        )
        configs = interactive_date_configs(["Paris", "Rome"], ask=ask, today=TODAY)

        assert configs == [
            DateConfig.specific("2030-01-10", "2030-01-12"),
            DateConfig.specific("2030-02-01", "2030-02-05"),
        ]

    def test_month_mode(self):
        cfg = interactive_date_configs(["Paris"], month=6, ask=_answers("3"), today=TODAY)
        assert cfg == DateConfig.for_month(6)

    def test_month_mode_defaults_to_next_month(self):
        cfg = interactive_date_configs(["Paris"], ask=_answers("3"), today=TODAY)
        assert cfg == DateConfig.for_month(1)


def test_prompts_take_date_types_from_dates_module():
    import dates
    import prompts

    assert prompts.DateConfigs is dates.DateConfigs
    assert not hasattr(prompts, "orchestrator")
