"""
Open-Meteo Extractor

Fetches the hourly forecast for a venue and reduces it to daily means.
"""

from datetime import date
from typing import Optional

from core.resilience import open_meteo_circuit, resilient_request, upstream_call
from core.settings import settings
from pipelines.extractors.base import ExtractorError, WeatherExtractor
from schemas.prediction import Venue, WeatherSnapshot


HOURLY_FIELDS = {
    "temperature": "temperature_2m",
    "humidity": "relativehumidity_2m",
    "wind_speed": "windspeed_10m",
    "wind_direction": "winddirection_10m",
}


class MissingCoordinatesError(ExtractorError):
    """The venue has no latitude/longitude to look up."""


class NoWeatherDataError(ExtractorError):
    """The forecast had no hourly samples for the day."""


def average_hourly(hourly: Optional[dict]) -> WeatherSnapshot:
    """
    Average each hourly series over the day.

    Series are truncated to the shortest one so every mean covers the same
    hours. Missing (null) samples are skipped.

    Raises:
        NoWeatherDataError: If there is no hourly block, or any series has no
            non-null samples
    """
    if not hourly:
        raise NoWeatherDataError("Forecast has no hourly block")

    series = {name: hourly.get(key) or [] for name, key in HOURLY_FIELDS.items()}
    count = min(len(values) for values in series.values())
    if count == 0:
        raise NoWeatherDataError("Forecast has no hourly samples")

    means = {}
    for name, values in series.items():
        samples = [v for v in values[:count] if v is not None]
        if not samples:
            raise NoWeatherDataError(f"Forecast has no {HOURLY_FIELDS[name]} samples")
        means[name] = sum(samples) / len(samples)
    return WeatherSnapshot(**means)


class OpenMeteoExtractor(WeatherExtractor):
    """
    Extractor for the Open-Meteo forecast API.

    Requests temperatures in Fahrenheit and wind in mph, matching the units
    the scoring formula is tuned for.
    """

    def __init__(self, base_url: Optional[str] = None):
        super().__init__("open_meteo")
        self.base_url = base_url or settings.open_meteo_base_url

    @upstream_call(open_meteo_circuit)
    def get_weather(self, venue: Venue, day: date) -> WeatherSnapshot:
        """
        Fetch the hourly forecast at a venue and average it for one day.

        Args:
            venue: Venue with coordinates
            day: Local calendar day of the game

        Returns:
            WeatherSnapshot of daily means

        Raises:
            MissingCoordinatesError: If the venue has no coordinates
            NoWeatherDataError: If the forecast has no samples for the day
        """
        if not venue.has_coordinates:
            raise MissingCoordinatesError(f"Venue {venue.id} has no coordinates")

        params = {
            "latitude": f"{venue.latitude:.4f}",
            "longitude": f"{venue.longitude:.4f}",
            "hourly": ",".join(HOURLY_FIELDS.values()),
            "temperature_unit": "fahrenheit",
            "windspeed_unit": "mph",
            "start_date": day.isoformat(),
            "end_date": day.isoformat(),
            "timezone": "auto",
        }

        self.log.debug("request_start", venue_id=venue.id, day=day.isoformat())
        response = resilient_request(
            "GET",
            self.base_url,
            timeout=settings.http_timeout,
            params=params,
        )
        snapshot = average_hourly(response.json().get("hourly"))

        self.log.info(
            "weather_complete",
            venue_id=venue.id,
            temperature=round(snapshot.temperature, 1),
            wind_speed=round(snapshot.wind_speed, 1),
        )
        return snapshot
