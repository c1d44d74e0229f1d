from app.services.contact import ContactService
from app.services.weather import HGBrasilWeatherClient

__all__ = [
    "ContactService",
    "HGBrasilWeatherClient",
]
