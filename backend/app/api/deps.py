from typing import Annotated

from fastapi import Depends, Request
from sqlmodel import Session

from app.db.session import get_session
from app.repositories.contact import SQLContactStore
from app.services.contact import ContactService
from app.services.weather import HGBrasilWeatherClient, WeatherProvider


def get_db() -> Session:
    yield from get_session()


def get_weather_provider(request: Request) -> WeatherProvider:
    provider = getattr(request.app.state, "weather_client", None)
    if provider is None:
        provider = HGBrasilWeatherClient()
        request.app.state.weather_client = provider
    return provider


def get_contact_service(
    session: Annotated[Session, Depends(get_db)],
    weather: Annotated[WeatherProvider, Depends(get_weather_provider)],
) -> ContactService:
    return ContactService(SQLContactStore(session), weather)
