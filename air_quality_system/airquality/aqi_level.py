"""
AQI level module for the Air Quality system.

Maps an AQI integer to its EPA health category: label, display colors, icon
and health recommendations. The mapping is a pure function of the integer and
is independent of how the AQI was computed.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AQILevel:
    """
    One EPA AQI category.

    Attributes:
        key: Stable identifier (e.g. "UNHEALTHY_SENSITIVE")
        label: Display label
        min: Lowest AQI in the category
        max: Highest AQI in the category
        color: Background color (CSS hsl)
        text_color: Foreground color to use on ``color``
        icon: Emoji shown on cards
    """

    key: str
    label: str
    min: int
    max: int
    color: str
    text_color: str
    icon: str


GOOD = AQILevel("GOOD", "Good", 0, 50, "hsl(123, 50%, 50%)", "white", "😊")
MODERATE = AQILevel("MODERATE", "Moderate", 51, 100, "hsl(60, 100%, 50%)", "black", "😐")
UNHEALTHY_SENSITIVE = AQILevel(
    "UNHEALTHY_SENSITIVE", "Unhealthy for Sensitive Groups", 101, 150, "hsl(39, 100%, 50%)", "white", "😷"
)
UNHEALTHY = AQILevel("UNHEALTHY", "Unhealthy", 151, 200, "hsl(4, 90%, 58%)", "white", "😨")
VERY_UNHEALTHY = AQILevel("VERY_UNHEALTHY", "Very Unhealthy", 201, 300, "hsl(291, 64%, 50%)", "white", "😰")
HAZARDOUS = AQILevel("HAZARDOUS", "Hazardous", 301, 500, "hsl(0, 90%, 35%)", "white", "💀")

AQI_LEVELS = (GOOD, MODERATE, UNHEALTHY_SENSITIVE, UNHEALTHY, VERY_UNHEALTHY, HAZARDOUS)

HEALTH_RECOMMENDATIONS = {
    "GOOD": (
        "Air quality is good - enjoy outdoor activities!",
        "Perfect time for exercise and outdoor recreation",
        "Windows can be opened for fresh air",
    ),
    "MODERATE": (
        "Air quality is acceptable for most people",
        "Sensitive individuals should consider limiting prolonged outdoor exertion",
        "Generally safe for outdoor activities",
    ),
    "UNHEALTHY_SENSITIVE": (
        "Sensitive groups should greatly reduce outdoor exercise",
        "Consider wearing a mask if you have respiratory issues",
        "Close windows to avoid letting outdoor air pollution indoors",
    ),
    "UNHEALTHY": (
        "Everyone should avoid outdoor exertion",
        "Wear an air pollution mask outdoors",
        "Keep windows closed and use air purifiers",
        "Public at risk for eye, skin, and throat irritation",
    ),
    "VERY_UNHEALTHY": (
        "Everyone should avoid outdoor exercise",
        "Wear a pollution mask outdoors",
        "Stay indoors and limit activities",
        "Turn on air purifiers - ventilation discouraged",
    ),
    "HAZARDOUS": (
        "Avoid exercise and remain indoors",
        "Everyone at high risk of strong irritation",
        "Wear pollution mask if you must go outside",
        "May trigger cardiovascular and respiratory illnesses",
    ),
}

# Weather icon codes from the provider mapped to emoji
WEATHER_ICONS = {
    "01d": "☀️", "01n": "🌙",
    "02d": "⛅", "02n": "☁️",
    "03d": "☁️", "03n": "☁️",
    "04d": "☁️", "04n": "☁️",
    "09d": "🌧️", "09n": "🌧️",
    "10d": "🌦️", "10n": "🌧️",
    "11d": "⛈️", "11n": "⛈️",
    "13d": "❄️", "13n": "❄️",
    "50d": "🌫️", "50n": "🌫️",
}


def get_aqi_level(aqi: int) -> AQILevel:
    """
    Returns the EPA category for an AQI value.

    Values above 500 stay Hazardous.
    """
    if aqi <= 50:
        return GOOD
    if aqi <= 100:
        return MODERATE
    if aqi <= 150:
        return UNHEALTHY_SENSITIVE
    if aqi <= 200:
        return UNHEALTHY
    if aqi <= 300:
        return VERY_UNHEALTHY
    return HAZARDOUS


def get_health_recommendations(aqi: int) -> tuple[str, ...]:
    return HEALTH_RECOMMENDATIONS[get_aqi_level(aqi).key]


def weather_icon(code: str) -> str:
    return WEATHER_ICONS.get(code, "🌡️")
