"""Tests for OpenWeatherClient requests and error translation."""

from __future__ import annotations

from unittest.mock import MagicMock

import aiohttp
import pytest

from talk_weatherbot.errors import (
    ProviderConnectionError,
    ProviderResponseError,
    ProviderTimeout,
)
from talk_weatherbot.transport import OpenWeatherClient
from talk_weatherbot.transport.openweather import DIRECT_GEOCODING_API, ONE_CALL_API

from .conftest import create_mock_response, one_call_payload


@pytest.fixture
def client(mock_session: MagicMock) -> OpenWeatherClient:
    """Create a client on the mocked session."""
    return OpenWeatherClient(mock_session, "test-key")


class TestGetCoordinates:
    """Tests for get_coordinates()."""

    async def test_returns_matches(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """Geocoding matches are returned as decoded."""
        matches = [{"name": "London", "lat": 51.5, "lon": -0.13, "country": "GB"}]
        mock_session.get.return_value = create_mock_response(json_data=matches)

        assert await client.get_coordinates("London") == matches

        call_args = mock_session.get.call_args
        assert call_args.args[0] == DIRECT_GEOCODING_API
        assert call_args.kwargs["params"] == {
            "q": "London",
            "limit": 5,
            "appid": "test-key",
        }

    async def test_joins_state_and_country(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """State and country codes are appended to the query."""
        mock_session.get.return_value = create_mock_response(json_data=[])

        await client.get_coordinates("Paris", "TX", "US")

        assert mock_session.get.call_args.kwargs["params"]["q"] == "Paris,TX,US"

    async def test_empty_result(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """An unknown location yields an empty list."""
        mock_session.get.return_value = create_mock_response(json_data=[])

        assert await client.get_coordinates("Nargothrond") == []

    async def test_unexpected_body_is_empty(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """A non-list body is treated as no match."""
        mock_session.get.return_value = create_mock_response(json_data={"cod": "400"})

        assert await client.get_coordinates("London") == []

    async def test_non_200_raises_response_error(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """Non-200 responses raise ProviderResponseError with the status."""
        mock_session.get.return_value = create_mock_response(status=401)

        with pytest.raises(ProviderResponseError) as exc_info:
            await client.get_coordinates("London")

        assert exc_info.value.status == 401

    async def test_timeout_raises_provider_timeout(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """Timeouts raise ProviderTimeout."""
        mock_session.get.side_effect = TimeoutError("Request timed out")

        with pytest.raises(ProviderTimeout, match="Geocoding request timed out"):
            await client.get_coordinates("London")

    async def test_client_error_raises_connection_error(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """aiohttp ClientError raises ProviderConnectionError."""
        mock_session.get.side_effect = aiohttp.ClientError("Connection refused")

        with pytest.raises(ProviderConnectionError, match="Geocoding request failed"):
            await client.get_coordinates("London")


class TestGetCurrentWeatherData:
    """Tests for get_current_weather_data()."""

    async def test_requests_one_call(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """The One Call API is queried without minutely and hourly data."""
        payload = one_call_payload()
        mock_session.get.return_value = create_mock_response(json_data=payload)

        result = await client.get_current_weather_data(51.5, -0.13, "metric", "de")

        assert result == payload
        call_args = mock_session.get.call_args
        assert call_args.args[0] == ONE_CALL_API
        assert call_args.kwargs["params"] == {
            "lat": 51.5,
            "lon": -0.13,
            "exclude": "minutely,hourly",
            "units": "metric",
            "lang": "de",
            "appid": "test-key",
        }

    async def test_defaults(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """Standard units and German are the defaults."""
        mock_session.get.return_value = create_mock_response(json_data={})

        await client.get_current_weather_data(0.0, 0.0)

        params = mock_session.get.call_args.kwargs["params"]
        assert params["units"] == "standard"
        assert params["lang"] == "de"

    async def test_uses_10_second_timeout(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """Requests use a 10 second timeout."""
        mock_session.get.return_value = create_mock_response(json_data={})

        await client.get_current_weather_data(0.0, 0.0)

        timeout = mock_session.get.call_args.kwargs.get("timeout")
        assert timeout is not None
        assert timeout.total == 10

    async def test_non_200_raises_response_error(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """Non-200 responses raise ProviderResponseError."""
        mock_session.get.return_value = create_mock_response(status=500)

        with pytest.raises(
            ProviderResponseError, match="Weather data request failed with status 500"
        ):
            await client.get_current_weather_data(0.0, 0.0)

    async def test_timeout_raises_provider_timeout(
        self, client: OpenWeatherClient, mock_session: MagicMock
    ) -> None:
        """Timeouts raise ProviderTimeout."""
        mock_session.get.side_effect = TimeoutError()

        with pytest.raises(ProviderTimeout, match="Weather data request timed out"):
            await client.get_current_weather_data(0.0, 0.0)
