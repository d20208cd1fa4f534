import pytest

from simwx.ingestors.decoder import ResponseDecoder
from simwx.state import WeatherState

FULL_RESPONSE = """<response version="1.2">
<request_index>71114711</request_index>
<data_source name="metars"/>
<request type="retrieve"/>
<errors/>
<warnings/>
<time_taken_ms>249</time_taken_ms>
<data num_results="1">
<METAR>
<raw_text>KL18 222035Z AUTO 23009G16KT 10SM CLR A2990 RMK AO2</raw_text>
<station_id>KL18</station_id>
<latitude>33.35</latitude>
<longitude>-117.25</longitude>
<altim_in_hg>29.899607</altim_in_hg>
</METAR>
</data>
</response>
"""

EMPTY_RESPONSE = """<response version="1.2">
<errors/>
<warnings/>
<time_taken_ms>7</time_taken_ms>
<data num_results="0"/>
</response>
"""

ERROR_RESPONSE = """<response version="1.2">
<errors>
<error>Query must be constrained by time</error>
</errors>
<warnings/>
<time_taken_ms>0</time_taken_ms>
</response>
"""


class RecordingSink:
    def __init__(self):
        self.calls = []

    def set_weather(self, pressure_hpa, latitude, longitude, station_id, raw_text):
        self.calls.append(
            {
                "pressure_hpa": pressure_hpa,
                "latitude": latitude,
                "longitude": longitude,
                "station_id": station_id,
                "raw_text": raw_text,
            }
        )


def test_decode_full_response():
    sink = RecordingSink()

    result = ResponseDecoder(sink).decode(FULL_RESPONSE)

    assert result.found is True
    observation = result.observation
    assert observation.pressure_hpa == pytest.approx(1012.52, abs=0.01)
    assert observation.station_id == "KL18"
    assert observation.raw_text == "KL18 222035Z AUTO 23009G16KT 10SM CLR A2990 RMK AO2"
    assert observation.latitude == pytest.approx(33.35)
    assert observation.longitude == pytest.approx(-117.25)
    assert len(sink.calls) == 1
    assert sink.calls[0]["station_id"] == "KL18"
    assert sink.calls[0]["pressure_hpa"] == observation.pressure_hpa


def test_decode_empty_result_is_not_found():
    sink = RecordingSink()

    result = ResponseDecoder(sink).decode(EMPTY_RESPONSE)

    assert result.found is False
    assert result.observation is None
    assert result.service_error is None
    assert sink.calls == []


def test_decode_bare_empty_data_tag():
    sink = RecordingSink()

    result = ResponseDecoder(sink).decode('<data num_results="0"/>')

    assert result.found is False
    assert sink.calls == []


def test_decode_error_response():
    sink = RecordingSink()

    result = ResponseDecoder(sink).decode(ERROR_RESPONSE)

    assert result.found is False
    assert result.service_error == "Query must be constrained by time"
    assert sink.calls == []


def test_decode_error_wins_over_field_tags():
    sink = RecordingSink()
    buffer = ERROR_RESPONSE + FULL_RESPONSE

    result = ResponseDecoder(sink).decode(buffer)

    assert result.found is False
    assert result.service_error == "Query must be constrained by time"
    assert sink.calls == []


def test_decode_empty_error_tag_is_ignored():
    sink = RecordingSink()

    result = ResponseDecoder(sink).decode(
        "<errors><error></error></errors><altim_in_hg>30.00</altim_in_hg>"
    )

    assert result.found is True
    assert len(sink.calls) == 1


def test_decode_pressure_only():
    sink = RecordingSink()

    result = ResponseDecoder(sink).decode("<METAR><altim_in_hg>29.92</altim_in_hg></METAR>")

    assert result.found is True
    assert result.observation.pressure_hpa == pytest.approx(29.92 * 33.8639)
    assert sink.calls == [
        {
            "pressure_hpa": pytest.approx(1013.21, abs=0.01),
            "latitude": None,
            "longitude": None,
            "station_id": None,
            "raw_text": None,
        }
    ]


def test_decode_ignores_non_numeric_coordinates():
    sink = RecordingSink()
    buffer = FULL_RESPONSE.replace("<latitude>33.35<", "<latitude>N/A<")

    result = ResponseDecoder(sink).decode(buffer)

    assert result.found is True
    assert result.observation.latitude is None
    assert result.observation.longitude == pytest.approx(-117.25)
    assert result.observation.station_id == "KL18"


def test_decode_non_numeric_pressure_is_not_found():
    sink = RecordingSink()
    buffer = FULL_RESPONSE.replace("29.899607", "missing")

    result = ResponseDecoder(sink).decode(buffer)

    assert result.found is False
    assert sink.calls == []


def test_decode_publishes_into_weather_state():
    state = WeatherState()

    ResponseDecoder(state).decode(FULL_RESPONSE)

    latest = state.latest()
    assert latest is not None
    assert latest.station_id == "KL18"
    assert latest.pressure_hpa == pytest.approx(1012.52, abs=0.01)


def test_decode_missing_raw_text_keeps_later_fields():
    sink = RecordingSink()
    buffer = FULL_RESPONSE.replace(
        "<raw_text>KL18 222035Z AUTO 23009G16KT 10SM CLR A2990 RMK AO2</raw_text>\n", ""
    )

    result = ResponseDecoder(sink).decode(buffer)

    assert result.found is True
    assert result.observation.raw_text is None
    assert result.observation.station_id == "KL18"
    assert result.observation.latitude == pytest.approx(33.35)
    assert result.observation.longitude == pytest.approx(-117.25)
    assert len(sink.calls) == 1


def test_decode_missing_station_id_keeps_other_fields():
    sink = RecordingSink()
    buffer = FULL_RESPONSE.replace("<station_id>KL18</station_id>\n", "")

    result = ResponseDecoder(sink).decode(buffer)

    assert result.found is True
    assert result.observation.station_id is None
    assert result.observation.raw_text.startswith("KL18 222035Z")
    assert result.observation.latitude == pytest.approx(33.35)
    assert result.observation.longitude == pytest.approx(-117.25)
    assert sink.calls[0]["station_id"] is None
