from __future__ import annotations

import pytest

from weatherbar.formatter import compass_index, compass_label, fahrenheit_to_celsius, render
from weatherbar.models.observation import Observation

FULL_TEMPLATE = (
    "%station-id%: %temperature-fahrenheit%F/%temperature-celsius%C "
    "%barometer%mb %wind-speed%mph %wind-direction% %wind-cardinal%"
)


def _obs(**kwargs: object) -> Observation:
    values: dict[str, object] = {
        "station_id": "KSEA",
        "temperature": 55.0,
        "pressure": 1015.3,
        "wind_speed": 5.0,
        "wind_direction": 10.0,
    }
    values.update(kwargs)
    return Observation.model_validate(values)


class TestCompass:
    @pytest.mark.parametrize(
        ("degrees", "label"),
        [
            (0.0, "N"),
            (11.24, "N"),
            (11.26, "NNE"),
            (45.0, "NE"),
            (90.0, "E"),
            (180.0, "S"),
            (270.0, "W"),
            (337.5, "NNW"),
            (348.74, "NNW"),
            (348.75, "N"),
        ],
    )
    def test_label(self, degrees: float, label: str) -> None:
        assert compass_label(degrees).strip() == label

    def test_full_circle_wraps(self) -> None:
        assert compass_index(360.0) == compass_index(0.0)

    def test_labels_are_three_characters(self) -> None:
        assert all(len(compass_label(d)) == 3 for d in range(0, 360, 5))


class TestTemperature:
    def test_freezing(self) -> None:
        assert fahrenheit_to_celsius(32.0) == 0.0

    def test_boiling(self) -> None:
        assert fahrenheit_to_celsius(212.0) == 100.0

    def test_negative_forty(self) -> None:
        assert fahrenheit_to_celsius(-40.0) == pytest.approx(-40.0)


class TestRender:
    def test_fixed_station_example(self) -> None:
        obs = _obs(temperature=55.0, wind_direction=10)
        assert render("%temperature-fahrenheit%F %wind-cardinal%", obs) == "55.0F   N"

    def test_all_placeholders(self) -> None:
        line = render(FULL_TEMPLATE, _obs(temperature=50.0, wind_speed=5.5, wind_direction=225))
        assert line == "KSEA: 50.0F/10.0C 1015.30mb 5.5mph 225  SW"

    def test_legacy_celsius_spelling(self) -> None:
        assert render("%temperature-celcius%", _obs(temperature=212.0)) == "100.0"

    def test_rendering_is_repeatable(self) -> None:
        obs = _obs()
        assert render(FULL_TEMPLATE, obs) == render(FULL_TEMPLATE, obs)

    def test_each_render_starts_from_template(self) -> None:
        first = render(FULL_TEMPLATE, _obs(temperature=40.0))
        second = render(FULL_TEMPLATE, _obs(temperature=60.0))
        assert "40.0F" in first
        assert "60.0F" in second
        assert "40.0F" not in second

    def test_missing_values(self) -> None:
        obs = Observation.model_validate({"station_id": "KSEA", "temp_f": "NA", "wind_degrees": ""})
        assert render("%temperature-fahrenheit%|%temperature-celsius%|%wind-cardinal%", obs) == "--|--| --"

    @pytest.mark.parametrize("value", ["Infinity", "-inf", float("inf")])
    def test_infinite_values_render_missing(self, value: object) -> None:
        obs = Observation.model_validate({"station_id": "KSEA", "wind_degrees": value, "temp_f": value})
        assert obs.wind_direction is None
        assert obs.temperature is None
        assert render("%wind-cardinal%|%wind-direction%|%temperature-fahrenheit%", obs) == " --|--|--"

    def test_text_without_placeholders_untouched(self) -> None:
        assert render("weather", _obs()) == "weather"
