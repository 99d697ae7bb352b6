"""Tests for ukboundary.cli single-shot mode."""

import json

import httpx
import pytest
import respx

from conftest import make_record
from ukboundary import cli
from ukboundary.search import DEFAULT_BASE_URL


@pytest.fixture(autouse=True)
def no_delay(monkeypatch):
    monkeypatch.setattr(cli, "_DELAY", 0.0)


@pytest.fixture
def mock_nominatim():
    with respx.mock(base_url=DEFAULT_BASE_URL, assert_all_called=False) as mock:
        yield mock


def _respond_for(query: str, records: list):
    def respond(request: httpx.Request) -> httpx.Response:
        if request.url.params["q"] == query:
            return httpx.Response(200, json=records)
        return httpx.Response(200, json=[])

    return respond


@pytest.mark.asyncio
async def test_single_lookup_prints_fields(mock_nominatim, capsys):
    record = make_record("SW1A, London", postcode="SW1A")
    mock_nominatim.get("/search").mock(side_effect=_respond_for("SW1A, United Kingdom", [record]))

    code = await cli._run(["SW1A 0AA"])

    out = capsys.readouterr().out
    assert code == 0
    assert "fragment: SW1A" in out
    assert "postal_code" in out


@pytest.mark.asyncio
async def test_single_lookup_geojson(mock_nominatim, capsys):
    record = make_record("SW1A, London", postcode="SW1A")
    mock_nominatim.get("/search").mock(side_effect=_respond_for("SW1A, United Kingdom", [record]))

    code = await cli._run(["SW1A", "--geojson"])

    feature = json.loads(capsys.readouterr().out)
    assert code == 0
    assert feature["type"] == "Feature"
    assert feature["geometry"]["type"] == "Polygon"


@pytest.mark.asyncio
async def test_no_boundary_found(mock_nominatim, capsys):
    mock_nominatim.get("/search").mock(return_value=httpx.Response(200, json=[]))

    code = await cli._run(["SE21"])

    assert code == 1
    assert "SE21, SE2, SE" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_blank_postcode(mock_nominatim, capsys):
    route = mock_nominatim.get("/search")

    code = await cli._run(["   "])

    assert code == 1
    assert "Please enter a postcode." in capsys.readouterr().err
    assert not route.called


@pytest.mark.asyncio
async def test_flag_before_postcode(mock_nominatim, capsys):
    record = make_record("SW1A, London", postcode="SW1A")
    route = mock_nominatim.get("/search").mock(
        side_effect=_respond_for("SW1A, United Kingdom", [record])
    )

    code = await cli._run(["--geojson", "SW1A"])

    feature = json.loads(capsys.readouterr().out)
    assert code == 0
    assert feature["properties"]["name"] == "SW1A"
    queries = [call.request.url.params["q"] for call in route.calls]
    assert queries == ["SW1A, United Kingdom"]


@pytest.mark.asyncio
async def test_interactive_loop(mock_nominatim, monkeypatch, capsys):
    record = make_record("SW1A, London", postcode="SW1A")
    mock_nominatim.get("/search").mock(side_effect=_respond_for("SW1A, United Kingdom", [record]))
    answers = iter(["SW1A", "  ", "q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    code = await cli._run([])

    out = capsys.readouterr().out
    assert code == 0
    assert "Boundary found for 'SW1A'" in out
    assert "Please enter a postcode." in out
    assert "Bye!" in out
