from unittest import TestCase
from unittest.mock import MagicMock
from datetime import date

import requests
from django.test import override_settings
from parameterized import parameterized

from adapters.fred import FredAdapter, parse_observation_value


def mock_session(payload=None, error=None) -> MagicMock:
    session = MagicMock(spec=requests.Session)
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value.json.return_value = payload
    return session


class TestParseObservationValue(TestCase):
    @parameterized.expand(
        [
            ["number", "4.25", 4.25],
            ["negative", "-0.5", -0.5],
            ["missing", ".", None],
            ["none", None, None],
            ["garbage", "n/a", None],
            ["nan", "nan", None],
        ]
    )
    def test_parse_observation_value(self, _, raw, expected):
        self.assertEqual(parse_observation_value(raw), expected)


class TestFredAdapter(TestCase):
    def test_fetch_history_success(self):
        session = mock_session(
            {
                "observations": [
                    {"date": "2020-01-01", "value": "100.0"},
                    {"date": "2020-01-02", "value": "."},
                    {"date": "2020-01-03", "value": "200.0"},
                ]
            }
        )
        adapter = FredAdapter(api_key="key", session=session)

        data = adapter.fetch_history("DGS10", observation_start=date(2019, 1, 1))

        self.assertEqual([p.date for p in data], ["2020-01-01", "2020-01-03"])
        self.assertEqual([p.value for p in data], [100.0, 200.0])
        params = session.get.call_args.kwargs["params"]
        self.assertEqual(params["series_id"], "DGS10")
        self.assertEqual(params["observation_start"], "2019-01-01")
        self.assertEqual(params["sort_order"], "asc")

    def test_fetch_history_is_cached(self):
        session = mock_session({"observations": [{"date": "2020-01-01", "value": "1"}]})
        adapter = FredAdapter(api_key="key", session=session)

        adapter.fetch_history("DGS2")
        adapter.fetch_history("DGS2")

        session.get.assert_called_once()

    @override_settings(FRED_API_KEY=None)
    def test_missing_api_key(self):
        session = mock_session({"observations": []})
        adapter = FredAdapter(session=session)

        self.assertEqual(adapter.fetch_history("DGS10"), [])
        session.get.assert_not_called()

    @parameterized.expand(
        [
            ["no_observations", {"seriess": []}],
            ["rate_limited", {"error_code": 429, "error_message": "Too Many Requests"}],
            ["not_a_dict", ["unexpected"]],
        ]
    )
    def test_bad_payload(self, _, payload):
        adapter = FredAdapter(api_key="key", session=mock_session(payload))
        self.assertEqual(adapter.fetch_history("DGS10"), [])

    def test_request_error(self):
        session = mock_session(error=requests.ConnectionError("down"))
        adapter = FredAdapter(api_key="key", session=session)

        self.assertEqual(adapter.fetch_history("DGS10"), [])

    def test_close(self):
        session = mock_session({"observations": []})
        FredAdapter(api_key="key", session=session).close()
        session.close.assert_called_once()
