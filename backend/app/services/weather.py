from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from app.core.config import settings
from app.core.logging_setup import logger
from app.utils.weather_suggestion import build_weather_suggestion


class WeatherErrorKind(str, Enum):
    WEATHER_API_ERROR = "WEATHER_API_ERROR"
    CITY_NOT_FOUND = "CITY_NOT_FOUND"
    WEATHER_SERVICE_UNAVAILABLE = "WEATHER_SERVICE_UNAVAILABLE"


@dataclass(frozen=True)
class WeatherReading:
    temperature: float
    condition_code: str
    condition: str
    currently: str
    city: str
    suggestion: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WeatherError:
    error: WeatherErrorKind
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error.value, "message": self.message}


WeatherResult = WeatherReading | WeatherError


class WeatherProvider(Protocol):
    """Consulta o clima atual de uma cidade. Nunca lança exceção: falhas viram WeatherError."""

    def get_weather(self, city: str) -> WeatherResult:
        ...


class HGBrasilWeatherClient:
    """Cliente HTTP da API de clima da HG Brasil."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        api_key: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url or settings.weather_api_url).rstrip("/")
        self._api_key = api_key if api_key is not None else (settings.weather_api_key or "")
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client()

    def build_url(self, city: str) -> str:
        return f"{self._base_url}?key={quote(self._api_key, safe='')}&city_name={quote(city, safe='')}"

    def get_weather(self, city: str) -> WeatherResult:
        url = self.build_url(city)
        try:
            response = self._http.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Falha ao consultar clima para %s: %s", city, exc)
            return self._unavailable()

        if not response.is_success:
            logger.warning("API do tempo respondeu %s para %s", response.status_code, city)
            return WeatherError(
                error=WeatherErrorKind.WEATHER_API_ERROR,
                message=f"Erro na API do tempo: {response.status_code}",
            )

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Resposta inválida da API do tempo para %s: %s", city, exc)
            return self._unavailable()

        results = payload.get("results") if isinstance(payload, dict) else None
        if not results:
            return WeatherError(
                error=WeatherErrorKind.CITY_NOT_FOUND,
                message="Cidade não encontrada na API do tempo",
            )

        try:
            temperature = float(results["temp"])
            condition = str(results["description"])
            reading = WeatherReading(
                temperature=temperature,
                condition_code=str(results.get("condition_code", "")),
                condition=condition,
                currently=str(results.get("currently", "")),
                city=str(results.get("city", city)),
                suggestion=build_weather_suggestion(temperature, condition),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Resultado de clima malformado para %s: %s", city, exc)
            return self._unavailable()
        return reading

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    @staticmethod
    def _unavailable() -> WeatherError:
        return WeatherError(
            error=WeatherErrorKind.WEATHER_SERVICE_UNAVAILABLE,
            message="Serviço de clima temporariamente indisponível",
        )
