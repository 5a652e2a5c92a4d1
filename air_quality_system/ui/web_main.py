"""
Web UI module for the Air Quality system.

This module provides a Streamlit-based web interface for the Nepal air-quality
monitor. Pages: Cities (overview cards), City detail (pollutants, weather,
health advice and hourly forecast), Current location (any coordinates),
Rankings (world cities), Favorites, AQI calculator, and Learn (AQI scale).
"""

import sys
from pathlib import Path
from typing import Optional

# Add project root to Python path to enable imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import streamlit as st
from streamlit_autorefresh import st_autorefresh
import pandas as pd
import numpy as np

from airquality.air_quality_service import AirQualityService
from airquality.aqi_converter import PM25_BREAKPOINTS, calculate_aqi_result
from airquality.aqi_level import AQI_LEVELS, get_aqi_level, get_health_recommendations, weather_icon
from airquality.config import Settings
from airquality.exceptions import AirQualityError
from airquality.logging_setup import configure_logging
from airquality.main_pollutant import POLLUTANT_THRESHOLDS, pollutant_ratios, select_main_pollutant
from airquality.pollutant_reading import POLLUTANT_FIELDS
from airquality.reports import CityDetail, CityWithData


# Initialize settings, logging and the service once per session
if "air_quality_service" not in st.session_state:
    settings = Settings.from_env()
    configure_logging(settings.log_dir)
    st.session_state.settings = settings
    st.session_state.air_quality_service = AirQualityService.from_settings(settings)

if "selected_city_id" not in st.session_state:
    st.session_state.selected_city_id = None


POLLUTANT_LABELS = {
    "co": "CO",
    "no": "NO",
    "no2": "NO₂",
    "o3": "O₃",
    "so2": "SO₂",
    "pm2_5": "PM2.5",
    "pm10": "PM10",
    "nh3": "NH₃",
}


def get_service() -> AirQualityService:
    return st.session_state.air_quality_service


def render_aqi_badge(aqi: int) -> None:
    """Renders a colored AQI badge using the EPA category colors."""
    level = get_aqi_level(aqi)
    st.markdown(
        f"<div style='background:{level.color};color:{level.text_color};"
        f"padding:0.6rem 1rem;border-radius:0.75rem;text-align:center;'>"
        f"<span style='font-size:2rem;font-weight:700'>{aqi}</span><br/>"
        f"{level.icon} {level.label}</div>",
        unsafe_allow_html=True,
    )


def render_unavailable(message: str, error: Optional[Exception] = None) -> None:
    """Shows the user-facing 'data unavailable' state."""
    st.warning(f"⚠️ Data unavailable: {message}")
    if error is not None:
        st.caption(str(error))


def city_label(entry: CityWithData) -> str:
    if entry.air_quality is None:
        return f"{entry.city.name} ({entry.city.province}) · no data"
    return f"{entry.city.name} ({entry.city.province}) · AQI {entry.air_quality.aqi}"


def pollutants_frame(detail: CityDetail) -> pd.DataFrame:
    """Builds the pollutant table with each ranked pollutant's normalised ratio."""
    pollutants = detail.air_quality.pollutants
    ratios = pollutant_ratios(pollutants)
    ratio_by_field = {candidate.field: ratios[candidate.name] for candidate in POLLUTANT_THRESHOLDS}
    rows = []
    for field in POLLUTANT_FIELDS:
        label = POLLUTANT_LABELS[field]
        rows.append({
            "Pollutant": label,
            "Concentration": round(getattr(pollutants, field), 2),
            "Unit": "mg/m³" if field == "co" else "µg/m³",
            "Threshold ratio": round(ratio_by_field[field], 2) if field in ratio_by_field else None,
        })
    return pd.DataFrame(rows)


def forecast_frame(detail: CityDetail) -> pd.DataFrame:
    """Builds a time-indexed frame of projected AQI, PM2.5 and temperature."""
    if not detail.hourly_forecast:
        return pd.DataFrame(columns=["AQI", "PM2.5", "Temperature"])
    frame = pd.DataFrame(
        {
            "AQI": [forecast.aqi for forecast in detail.hourly_forecast],
            "PM2.5": [forecast.pollutants.pm2_5 for forecast in detail.hourly_forecast],
            "Temperature": [forecast.temperature for forecast in detail.hourly_forecast],
        },
        index=pd.to_datetime([forecast.time for forecast in detail.hourly_forecast]),
    )
    frame.index.name = "Time"
    return frame


def page_cities() -> None:
    """Overview of every monitored city."""
    service = get_service()
    st.header("🏔️ Nepal Cities")

    col_refresh, col_province = st.columns([1, 1])
    with col_refresh:
        if st.button("🔄 Refresh all cities") or st.session_state.get("live_mode", False):
            with st.spinner("Fetching latest readings..."):
                summary = service.refresh_all()
            if summary.failed:
                st.warning(summary.message)
            else:
                st.success(summary.message)
    with col_province:
        province_filter = st.selectbox(
            "Province",
            ["All"] + sorted({entry.city.province for entry in service.list_cities()}),
        )

    cities = service.list_cities()
    if province_filter != "All":
        cities = [entry for entry in cities if entry.city.province == province_filter]

    with_data = [entry for entry in cities if entry.has_data]
    if with_data:
        aqi_values = np.array([entry.air_quality.aqi for entry in with_data])
        m1, m2, m3 = st.columns(3)
        m1.metric("Cities with data", f"{len(with_data)}/{len(cities)}")
        m2.metric("Median AQI", int(np.median(aqi_values)))
        m3.metric("Worst AQI", int(aqi_values.max()))

    table = []
    for entry in cities:
        aq = entry.air_quality
        table.append({
            "City": entry.city.name,
            "Province": entry.city.province,
            "AQI": aq.aqi if aq else None,
            "Level": aq.level.label if aq else "No data",
            "Main pollutant": aq.main_pollutant if aq else "",
            "Temp (°C)": entry.weather.temperature if entry.weather else None,
            "★": "★" if entry.is_favorite else "",
        })
    st.dataframe(pd.DataFrame(table), use_container_width=True, hide_index=True)

    if not with_data:
        st.info("No readings yet. Use 'Refresh all cities' or open a city to fetch its data.")


def page_city_detail() -> None:
    """Detail view of one city with refresh, forecast and health advice."""
    service = get_service()
    cities = service.list_cities()
    by_id = {entry.city.id: entry for entry in cities}
    ids = [entry.city.id for entry in cities]

    default_index = ids.index(st.session_state.selected_city_id) if st.session_state.selected_city_id in by_id else 0
    city_id = st.selectbox(
        "City",
        ids,
        index=default_index,
        format_func=lambda cid: city_label(by_id[cid]),
    )
    st.session_state.selected_city_id = city_id

    force = st.checkbox("Bypass cache", help="Fetch from the provider even if data is recent")
    if st.button("🔄 Refresh city data") or by_id[city_id].air_quality is None:
        try:
            with st.spinner("Fetching latest readings..."):
                result = service.refresh_city(city_id, force=force)
            st.caption(result.message)
        except AirQualityError as e:
            render_unavailable("could not refresh this city.", e)

    detail = service.get_city_detail(city_id)
    st.header(f"{detail.city.name}")
    st.caption(detail.city.province)

    if detail.air_quality is None:
        render_unavailable("no air-quality reading has been stored yet.")
        return

    left_col, right_col = st.columns(2)
    with left_col:
        render_aqi_badge(detail.air_quality.aqi)
        st.write(f"**Main pollutant:** {detail.air_quality.main_pollutant}")
        st.caption(f"Measured {detail.air_quality.timestamp:%Y-%m-%d %H:%M} UTC")

        with st.expander("💡 Health recommendations", expanded=True):
            for recommendation in get_health_recommendations(detail.air_quality.aqi):
                st.write(f"- {recommendation}")

    with right_col:
        if detail.weather is not None:
            weather = detail.weather
            st.subheader(f"{weather_icon(weather.icon)} {weather.description.capitalize()}")
            w1, w2 = st.columns(2)
            w1.metric("Temperature", f"{weather.temperature} °C", help=f"Feels like {weather.feels_like} °C")
            w2.metric("Humidity", f"{weather.humidity}%")
            w1.metric("Wind", f"{weather.wind_speed} km/h")
            w2.metric("Pressure", f"{weather.pressure} hPa")

        label = st.text_input("Favorite label", value="Home", key=f"favorite_label_{city_id}")
        if st.button("⭐ Add to favorites"):
            try:
                service.add_favorite(city_id, label)
                st.success(f"{detail.city.name} saved as '{label}'")
            except AirQualityError as e:
                st.error(str(e))

    st.subheader("Pollutants")
    st.dataframe(pollutants_frame(detail), use_container_width=True, hide_index=True)

    st.subheader("Hourly forecast")
    frame = forecast_frame(detail)
    if frame.empty:
        st.info("No forecast available.")
    else:
        st.line_chart(frame[["AQI"]])
        st.caption("Forecast air quality is projected from the current reading and is indicative only.")
        with st.expander("Forecast table"):
            st.dataframe(frame.round(1), use_container_width=True)

    with st.expander("View raw JSON"):
        st.json(detail.to_dict())


def page_location() -> None:
    """Air quality for arbitrary coordinates."""
    service = get_service()
    st.header("📍 Current Location")

    col_lat, col_lon = st.columns(2)
    lat = col_lat.number_input("Latitude", min_value=-90.0, max_value=90.0, value=27.7172, format="%.4f")
    lon = col_lon.number_input("Longitude", min_value=-180.0, max_value=180.0, value=85.3240, format="%.4f")

    if st.button("Check air quality"):
        try:
            with st.spinner("Fetching location data..."):
                location = service.get_location(lat, lon)
        except AirQualityError as e:
            render_unavailable("could not fetch data for this location.", e)
            return

        st.subheader(location.name)
        st.caption(location.province)
        left_col, right_col = st.columns(2)
        with left_col:
            render_aqi_badge(location.air_quality.aqi)
            st.write(f"**Main pollutant:** {location.air_quality.main_pollutant}")
        with right_col:
            st.metric("Temperature", f"{location.weather.temperature} °C")
            st.metric("Wind", f"{location.weather.wind_speed} km/h")
        for recommendation in get_health_recommendations(location.air_quality.aqi):
            st.write(f"- {recommendation}")


def page_rankings() -> None:
    """Cleanest and most polluted reference cities worldwide."""
    service = get_service()
    st.header("🌍 Global Rankings")

    if st.button("Load rankings") or "rankings" in st.session_state:
        if "rankings" not in st.session_state:
            with st.spinner("Fetching world cities..."):
                st.session_state.rankings = service.get_rankings()
        rankings = st.session_state.rankings

        if rankings.total_cities == 0:
            render_unavailable("no city could be fetched.")
            return

        left_col, right_col = st.columns(2)
        with left_col:
            st.subheader("Cleanest")
            st.dataframe(pd.DataFrame([entry.to_dict() for entry in rankings.cleanest]), hide_index=True)
        with right_col:
            st.subheader("Most polluted")
            st.dataframe(pd.DataFrame([entry.to_dict() for entry in rankings.polluted]), hide_index=True)
        st.caption(f"{rankings.total_cities} cities · updated {rankings.last_updated:%H:%M:%S} UTC")

        if st.button("Reload"):
            del st.session_state.rankings
            st.rerun()


def page_favorites() -> None:
    """Pinned cities with their latest AQI."""
    service = get_service()
    st.header("⭐ Favorites")

    favorites = service.list_favorites()
    if not favorites:
        st.info("No favorites yet. Add one from a city's detail page.")
        return

    for view in favorites:
        aq = view.city.air_quality
        col_label, col_aqi, col_remove = st.columns([3, 2, 1])
        col_label.write(f"{view.favorite.icon or '📍'} **{view.favorite.custom_label}** · {view.city.city.name}")
        col_aqi.write(f"AQI {aq.aqi} ({aq.level.label})" if aq else "No data")
        if col_remove.button("Remove", key=f"remove_{view.favorite.id}"):
            service.remove_favorite(view.favorite.id)
            st.rerun()


def page_calculator() -> None:
    """Interactive PM2.5 to AQI conversion and main-pollutant check."""
    st.header("🧮 AQI Calculator")

    pm25 = st.number_input("PM2.5 (µg/m³)", min_value=0.0, max_value=1000.0, value=35.0, step=0.1)
    result = calculate_aqi_result(pm25)
    render_aqi_badge(result.aqi)

    st.subheader("Main pollutant")
    cols = st.columns(3)
    values = {
        "pm2_5": pm25,
        "pm10": cols[0].number_input("PM10", min_value=0.0, value=50.0),
        "o3": cols[1].number_input("O₃", min_value=0.0, value=60.0),
        "no2": cols[2].number_input("NO₂", min_value=0.0, value=20.0),
        "so2": cols[0].number_input("SO₂", min_value=0.0, value=10.0),
        "co": cols[1].number_input("CO", min_value=0.0, value=0.5),
    }
    st.write(f"**Main pollutant:** {select_main_pollutant(values)}")
    st.bar_chart(pd.Series(pollutant_ratios(values), name="Threshold ratio"))


def page_learn() -> None:
    """The EPA AQI scale and PM2.5 breakpoints."""
    st.header("📘 Understanding the AQI")
    levels = pd.DataFrame([
        {"Range": f"{level.min}-{level.max}", "Level": f"{level.icon} {level.label}"}
        for level in AQI_LEVELS
    ])
    st.dataframe(levels, hide_index=True, use_container_width=True)

    breakpoints = pd.DataFrame([
        {
            "PM2.5 low (µg/m³)": bp.conc_low,
            "PM2.5 high (µg/m³)": bp.conc_high,
            "AQI low": bp.aqi_low,
            "AQI high": bp.aqi_high,
        }
        for bp in PM25_BREAKPOINTS
    ])
    st.subheader("PM2.5 breakpoints")
    st.dataframe(breakpoints, hide_index=True, use_container_width=True)
    st.caption("Concentrations above 325.4 µg/m³ are reported as AQI 500 (Hazardous).")


PAGES = {
    "Cities": page_cities,
    "City detail": page_city_detail,
    "Current location": page_location,
    "Rankings": page_rankings,
    "Favorites": page_favorites,
    "AQI calculator": page_calculator,
    "Learn": page_learn,
}


def main() -> None:
    """
    Main function that runs the Streamlit web interface.

    Sets up the page, the sidebar navigation and optional live auto-refresh,
    then renders the selected page.
    """
    st.set_page_config(page_title="Nepal Air Quality", page_icon="🌫️", layout="wide")
    st.title("Nepal Air Quality")

    settings: Settings = st.session_state.settings
    if not settings.has_api_key:
        st.sidebar.error("OPENWEATHER_API_KEY is not set; live data is unavailable.")

    page = st.sidebar.radio("Page", list(PAGES))

    if st.sidebar.button("Clear Cache", help="Force the next refresh to call the provider"):
        get_service().clear_cache()
        st.session_state.pop("rankings", None)
        st.sidebar.success("Cache cleared")

    # Live mode re-runs the script on the cache interval so refreshes pick up new data
    st.session_state.live_mode = st.sidebar.toggle("Live mode", value=False)
    if st.session_state.live_mode:
        st_autorefresh(interval=settings.cache_ttl_seconds * 1000, limit=None, key="live_refresh")
        st.sidebar.info(f"🔄 Live mode active: updates every {settings.cache_ttl_seconds} seconds")

    PAGES[page]()


if __name__ == "__main__":
    main()
