from app.utils.weather_suggestion import build_weather_suggestion, is_rainy, is_sunny

__all__ = [
    "build_weather_suggestion",
    "is_rainy",
    "is_sunny",
]
