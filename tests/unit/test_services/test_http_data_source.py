"""Tests for HttpDataSource."""

import asyncio
import json
from unittest.mock import MagicMock

import pytest
import requests

URL = "http://localhost:3000/fetchrows"


def make_response(status=200, body=None, text=None):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    if text is not None:
        response.json.side_effect = json.JSONDecodeError("Expecting value", text, 0)
    else:
        response.json.return_value = body
    return response


def make_source(response=None, side_effect=None, **kwargs):
    from scrollfeed.services.http_data_source import HttpDataSource

    session = MagicMock()
    session.headers = {}
    if side_effect is not None:
        session.post.side_effect = side_effect
    else:
        session.post.return_value = response
    return HttpDataSource(URL, session=session, **kwargs), session


def test_fetch_rows_posts_json_payload():
    source, session = make_source(make_response(body=[{"number": 5}]))

    rows = asyncio.run(source.fetch_rows({"rowIndex": 5, "searchText": "bo"}))

    assert rows == [{"number": 5}]
    session.post.assert_called_once()
    args, kwargs = session.post.call_args
    assert args == (URL,)
    assert kwargs["json"] == {"rowIndex": 5, "searchText": "bo"}
    assert kwargs["timeout"] is None
    assert session.headers == {}


def test_fetch_rows_passes_configured_timeout():
    source, session = make_source(make_response(body=[]), request_timeout=2.5)

    asyncio.run(source.fetch_rows({"rowIndex": 0}))

    assert session.post.call_args.kwargs["timeout"] == 2.5


def test_empty_array_is_returned_as_is():
    source, _ = make_source(make_response(body=[]))

    assert asyncio.run(source.fetch_rows({"rowIndex": 13})) == []


def test_non_2xx_raises_transport_failure():
    from scrollfeed.core.errors import TransportFailure

    source, _ = make_source(make_response(status=503, body={"error": "busy"}))

    with pytest.raises(TransportFailure) as excinfo:
        asyncio.run(source.fetch_rows({"rowIndex": 0}))

    assert excinfo.value.status == 503
    assert excinfo.value.url == URL
    assert excinfo.value.payload == {"rowIndex": 0}


def test_network_error_raises_transport_failure():
    from scrollfeed.core.errors import TransportFailure

    source, _ = make_source(
        side_effect=requests.exceptions.ConnectionError("refused")
    )

    with pytest.raises(TransportFailure) as excinfo:
        asyncio.run(source.fetch_rows({"rowIndex": 0}))

    assert excinfo.value.status is None
    assert isinstance(excinfo.value.__cause__, requests.exceptions.ConnectionError)


def test_unparseable_body_raises_transport_failure():
    from scrollfeed.core.errors import TransportFailure

    source, _ = make_source(make_response(text="<html>oops</html>"))

    with pytest.raises(TransportFailure):
        asyncio.run(source.fetch_rows({"rowIndex": 0}))


def test_non_array_body_raises_transport_failure():
    from scrollfeed.core.errors import TransportFailure

    source, _ = make_source(make_response(body={"rows": []}))

    with pytest.raises(TransportFailure) as excinfo:
        asyncio.run(source.fetch_rows({"rowIndex": 0}))

    assert "expected a JSON array" in str(excinfo.value)


def test_close_leaves_injected_session_open():
    source, session = make_source(make_response(body=[]))

    source.close()

    session.close.assert_not_called()


def test_close_owned_session(monkeypatch):
    from scrollfeed.services import http_data_source

    session = MagicMock()
    session.headers = {}
    monkeypatch.setattr(http_data_source.requests, "Session", lambda: session)

    source = http_data_source.HttpDataSource(URL)
    source.close()

    session.close.assert_called_once()


def test_controller_recovers_from_http_failure():
    from scrollfeed.core.errors import TransportFailure
    from scrollfeed.domain.fetch import FetchState
    from scrollfeed.managers.pagination_controller import PaginationController

    source, _ = make_source(make_response(status=500))
    errors = []

    async def scenario():
        controller = PaginationController(
            source, lambda: [], lambda rows: None, on_error=errors.append
        )
        controller.reset_and_refetch()
        await controller.wait_idle()
        return controller.state

    assert asyncio.run(scenario()) is FetchState.IDLE
    assert isinstance(errors[0], TransportFailure)
    assert errors[0].status == 500
