"""HTTP client for the OpenWeather geocoding and One Call APIs."""

from __future__ import annotations

from typing import Any, Final

import aiohttp

from ..errors import (
    ProviderConnectionError,
    ProviderResponseError,
    ProviderTimeout,
)

ONE_CALL_API: Final = "https://api.openweathermap.org/data/3.0/onecall"
DIRECT_GEOCODING_API: Final = "https://api.openweathermap.org/geo/1.0/direct"


class OpenWeatherClient:
    """HTTP client wrapper for the OpenWeather API."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str,
        *,
        one_call_url: str = ONE_CALL_API,
        geocoding_url: str = DIRECT_GEOCODING_API,
        timeout: float = 10.0,
    ) -> None:
        self._session = session
        self._api_key = api_key
        self._one_call_url = one_call_url
        self._geocoding_url = geocoding_url
        self._timeout = timeout

    async def get_current_weather_data(
        self,
        latitude: float,
        longitude: float,
        units: str = "standard",
        language: str = "de",
    ) -> dict[str, Any]:
        """Fetch current weather and the daily forecast via the One Call API.

        Minutely and hourly forecasts are excluded.

        Args:
            latitude: Geographical coordinate (latitude) of the location
            longitude: Geographical coordinate (longitude) of the location
            units: Unit system ("metric", "imperial" or "standard")
            language: Language of the condition descriptions

        Returns:
            Decoded One Call response.

        Raises:
            ProviderResponseError: If the API returns a non-200 status
            ProviderTimeout: If the request times out
            ProviderConnectionError: If the network request fails
        """
        params = {
            "lat": latitude,
            "lon": longitude,
            "exclude": "minutely,hourly",
            "units": units,
            "lang": language,
            "appid": self._api_key,
        }
        data: dict[str, Any] = await self._get_json(
            self._one_call_url, params, "Weather data"
        )
        return data

    async def get_coordinates(
        self,
        location_name: str,
        state_code: str | None = None,
        country_code: str | None = None,
        *,
        limit: int = 5,
    ) -> list[dict[str, Any]]:
        """Fetch the geographical coordinates of a named location.

        Args:
            location_name: City name of the location
            state_code: State code (only for the US)
            country_code: ISO 3166 country code
            limit: Maximum number of matches

        Returns:
            Matches with name, local_names, lat, lon and country. An empty
            list means the location is unknown.
        """
        query = ",".join(
            part for part in (location_name, state_code, country_code) if part is not None
        )
        params = {"q": query, "limit": limit, "appid": self._api_key}
        data = await self._get_json(self._geocoding_url, params, "Geocoding")
        if not isinstance(data, list):
            return []
        return data

    async def _get_json(self, url: str, params: dict[str, Any], what: str) -> Any:
        try:
            async with self._session.get(
                url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                if resp.status != 200:
                    raise ProviderResponseError(
                        resp.status, f"{what} request failed with status {resp.status}"
                    )
                return await resp.json()
        except TimeoutError as err:
            raise ProviderTimeout(f"{what} request timed out") from err
        except aiohttp.ClientError as err:
            raise ProviderConnectionError(f"{what} request failed") from err
