from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from weather_harvest.errors import FetchFailedError
from weather_harvest.models.config_models import DEFAULT_SOURCE_URL, SourceConfig
from weather_harvest.models.resume_point import MonthQuery
from weather_harvest.web.client import DEFAULT_USER_AGENT, MonthPageClient, build_session


def _session(response: MagicMock | None = None, error: Exception | None = None) -> MagicMock:
    session = MagicMock(spec=requests.Session)
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return session


def _response(status: int = 200, content: bytes = b"<html></html>") -> MagicMock:
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status
    resp.content = content
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Server Error")
    return resp


def test_fetch_month_builds_query_params():
    session = _session(_response(content=b"<html>ok</html>"))
    client = MonthPageClient(SourceConfig(), session=session)

    body = client.fetch_month(MonthQuery(2024, 6))

    assert body == b"<html>ok</html>"
    session.get.assert_called_once_with(
        DEFAULT_SOURCE_URL,
        params={
            "gid": "683499",
            "station": "4621",
            "month": "6",
            "year": "2024",
            "language": "romanian",
            "country": "romania",
        },
        timeout=None,
    )


def test_fetch_month_uses_configured_source():
    session = _session(_response())
    source = SourceConfig(url="https://example.test/history/", gid="1", station="2", timeout=12.5)
    MonthPageClient(source, session=session).fetch_month(MonthQuery(2023, 12))
    args, kwargs = session.get.call_args
    assert args == ("https://example.test/history/",)
    assert kwargs["params"]["gid"] == "1"
    assert kwargs["params"]["month"] == "12"
    assert kwargs["timeout"] == 12.5


def test_fetch_month_transport_error():
    session = _session(error=requests.ConnectionError("name resolution failed"))
    client = MonthPageClient(SourceConfig(), session=session)
    with pytest.raises(FetchFailedError) as e:
        client.fetch_month(MonthQuery(2024, 6))
    assert e.value.query == MonthQuery(2024, 6)
    assert isinstance(e.value.cause, requests.ConnectionError)


def test_fetch_month_http_error_status():
    session = _session(_response(status=503))
    client = MonthPageClient(SourceConfig(), session=session)
    with pytest.raises(FetchFailedError, match="503"):
        client.fetch_month(MonthQuery(2024, 6))


def test_build_session_user_agent(monkeypatch):
    monkeypatch.delenv("WEATHER_HARVEST_USER_AGENT", raising=False)
    assert build_session().headers["User-Agent"] == DEFAULT_USER_AGENT
    monkeypatch.setenv("WEATHER_HARVEST_USER_AGENT", "my-bot/2.0")
    assert build_session().headers["User-Agent"] == "my-bot/2.0"


def test_client_context_manager_closes_session():
    session = _session(_response())
    with MonthPageClient(SourceConfig(), session=session):
        pass
    session.close.assert_called_once()
