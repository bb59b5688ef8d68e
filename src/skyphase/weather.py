"""Weather condition → rainy flag used to pick the overcast palette."""

import re

# Condition names as reported by common weather APIs, normalized to lower_snake_case.
RAINY_CONDITIONS: frozenset[str] = frozenset(
    {
        "drizzle",
        "rain",
        "heavy_rain",
        "sun_showers",
        "isolated_thunderstorms",
        "scattered_thunderstorms",
        "strong_storms",
        "thunderstorms",
        "freezing_drizzle",
        "freezing_rain",
        "sleet",
        "wintry_mix",
        "hail",
        "hurricane",
        "tropical_storm",
    }
)


def normalize_condition(condition: str) -> str:
    """Map "heavyRain", "Heavy Rain" and "heavy-rain" to "heavy_rain"."""
    snake = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", condition.strip())
    return re.sub(r"[\s\-]+", "_", snake).lower()


def is_rainy_condition(condition: str | None) -> bool:
    """True for precipitation and storm conditions. Unknown or missing conditions are not rainy."""
    if not condition:
        return False
    return normalize_condition(condition) in RAINY_CONDITIONS
