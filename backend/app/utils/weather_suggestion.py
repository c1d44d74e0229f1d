from __future__ import annotations

COLD_MAX_TEMPERATURE = 18
HOT_MIN_TEMPERATURE = 30

RAINY_TERMS = ("chuva", "chuvisco", "garoa", "precipitação", "rain", "drizzle", "precipitation")
SUNNY_TERMS = ("limpo", "sol", "ensolarado", "claro", "clear", "sun", "sunny")

HOT_CHOCOLATE = "Ofereça um chocolate quente ao seu contato..."
ICE_CREAM = "Convide seu contato para tomar um sorvete"
BEACH = "Convide seu contato para ir à praia com esse calor!"
MOVIE = "Convide seu contato para ver um filme"
OUTDOOR_ACTIVITY = "Convide seu contato para fazer alguma atividade ao ar livre"


def is_rainy(condition: str) -> bool:
    normalized = (condition or "").lower()
    return any(term in normalized for term in RAINY_TERMS)


def is_sunny(condition: str) -> bool:
    normalized = (condition or "").lower()
    return any(term in normalized for term in SUNNY_TERMS)


def build_weather_suggestion(temperature: float, condition: str) -> str:
    """Sugere um programa para o contato a partir da temperatura e da condição do tempo.

    Frio (<= 18) vence qualquer condição; calor começa em 30, inclusive.
    """
    rainy = is_rainy(condition)
    sunny = is_sunny(condition)

    if temperature <= COLD_MAX_TEMPERATURE:
        return HOT_CHOCOLATE

    if temperature >= HOT_MIN_TEMPERATURE:
        if rainy:
            return ICE_CREAM
        if sunny:
            return BEACH
        return ICE_CREAM

    if rainy:
        return MOVIE
    if sunny:
        return OUTDOOR_ACTIVITY
    return OUTDOOR_ACTIVITY
