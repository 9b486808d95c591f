"""Borewell registration page (Streamlit entry point)."""
import pydeck as pdk
import streamlit as st

from app.core.browser_geolocation import BrowserGeolocationProvider
from app.core.client import BorewellClient
from app.core.config import LOG_LEVEL
from app.core.geolocation import LocationProbe
from app.core.models import Outcome, Purpose
from app.core.registration import RegistrationForm
from app.core.validation import parse_number
from app.utils.error_handler import handle_streamlit_errors
from app.utils.error_tracking import setup_error_tracking
from app.utils.logging import setup_logging

# Draft field -> widget key
FIELD_KEYS = {
    "latitude": "lat_input",
    "longitude": "lon_input",
    "owner_name": "owner_input",
    "village": "village_input",
    "block": "block_input",
    "district": "district_input",
    "purpose": "purpose_input",
    "land_parcel_id": "parcel_input",
    "has_been_drilled": "drilled_input",
    "actual_depth_m": "depth_input",
    "actual_outcome": "outcome_input",
}


def get_form() -> RegistrationForm:
    """Create the form and start the device probe once per browser session."""
    if "registration_form" not in st.session_state:
        provider = BrowserGeolocationProvider()
        probe = LocationProbe(provider)
        form = RegistrationForm(probe, BorewellClient())
        st.session_state.geo_provider = provider
        st.session_state.registration_form = form
        probe.start()
    else:
        st.session_state.geo_provider.poll()
    return st.session_state.registration_form


def sync_field(form: RegistrationForm, field: str):
    form.set_field(field, st.session_state[FIELD_KEYS[field]])


def render_location_map(latitude: float, longitude: float, accuracy=None):
    """Show a small map around the draft location."""
    layers = [
        pdk.Layer(
            "ScatterplotLayer",
            data=[{"lon": longitude, "lat": latitude, "name": "Borewell"}],
            get_position=["lon", "lat"],
            get_color=[34, 197, 94, 220],
            get_radius=max(accuracy or 0, 20),
            radius_min_pixels=6,
            radius_max_pixels=40,
            pickable=True
        )
    ]
    view_state = pdk.ViewState(longitude=longitude, latitude=latitude, zoom=14, pitch=0)
    st.pydeck_chart(pdk.Deck(
        map_style=None,
        initial_view_state=view_state,
        layers=layers,
        tooltip={"text": "{name}"}
    ))


def render_result(form: RegistrationForm):
    result = form.last_result
    st.success(f"Saved borewell ID: **#{result.id}**")
    st.markdown(f"Location: **{result.location_text}**")
    st.markdown(f"Model snapshot at registration: **{result.model_version_text}**")
    if result.predicted_feasible is not None:
        st.markdown(f"Predicted feasible: **{'Yes' if result.predicted_feasible else 'No'}**")
    if result.predicted_depth_m is not None:
        st.markdown(f"Predicted depth: **{result.predicted_depth_m:.1f} m**")
    st.caption(
        "Note: current backend stores only lat/long + model prediction; "
        "additional fields are for future versions and dataset design."
    )


@handle_streamlit_errors()
def render_page() -> bool:
    """Draw the page; returns True when it must be redrawn after a submission."""
    form = get_form()
    geo = form.geolocation

    # Widgets read their value from the draft, which seeding may have changed
    for field, key in FIELD_KEYS.items():
        st.session_state[key] = getattr(form.draft, field)

    st.title("💧 Borewell Registration")
    st.markdown(
        "Log existing borewells with accurate location and outcomes to power "
        "RaKsh's AI models and governance analytics."
    )

    st.subheader("Location (latitude, longitude)")
    col1, col2, col3 = st.columns([2, 2, 2])
    with col1:
        st.text_input("Latitude", key=FIELD_KEYS["latitude"], placeholder="e.g. 22.720000",
                      on_change=sync_field, args=(form, "latitude"))
    with col2:
        st.text_input("Longitude", key=FIELD_KEYS["longitude"], placeholder="e.g. 75.860000",
                      on_change=sync_field, args=(form, "longitude"))
    with col3:
        st.button(
            "Detecting..." if geo.loading else "Use my current location",
            disabled=not form.can_use_device_location,
            on_click=form.use_device_location,
            key="use_device_location",
            width="stretch"
        )
        if geo.accuracy:
            st.caption(f"Accuracy ~ {round(geo.accuracy)} m")

    latitude = parse_number(form.draft.latitude)
    longitude = parse_number(form.draft.longitude)
    if latitude is not None and longitude is not None and -90 <= latitude <= 90 and -180 <= longitude <= 180:
        render_location_map(latitude, longitude, geo.accuracy)

    st.subheader("Owner & address")
    col1, col2 = st.columns(2)
    with col1:
        st.text_input("Owner name", key=FIELD_KEYS["owner_name"], placeholder="Farmer / Institution name",
                      on_change=sync_field, args=(form, "owner_name"))
        st.text_input("Block / Tehsil", key=FIELD_KEYS["block"], placeholder="Block / Tehsil",
                      on_change=sync_field, args=(form, "block"))
    with col2:
        st.text_input("Village", key=FIELD_KEYS["village"], placeholder="Village name",
                      on_change=sync_field, args=(form, "village"))
        st.text_input("District", key=FIELD_KEYS["district"], placeholder="District",
                      on_change=sync_field, args=(form, "district"))

    col1, col2 = st.columns(2)
    with col1:
        st.selectbox("Primary purpose", options=list(Purpose), format_func=lambda p: p.label,
                     key=FIELD_KEYS["purpose"], on_change=sync_field, args=(form, "purpose"))
    with col2:
        st.text_input("Land parcel ID (optional)", key=FIELD_KEYS["land_parcel_id"],
                      placeholder="Khasra / survey no. if available",
                      on_change=sync_field, args=(form, "land_parcel_id"))

    st.checkbox(
        "This borewell has already been drilled (ground truth available)",
        key=FIELD_KEYS["has_been_drilled"],
        on_change=sync_field, args=(form, "has_been_drilled")
    )
    if form.draft.has_been_drilled:
        col1, col2 = st.columns(2)
        with col1:
            st.text_input("Actual drilled depth (m)", key=FIELD_KEYS["actual_depth_m"], placeholder="e.g. 120",
                          on_change=sync_field, args=(form, "actual_depth_m"))
        with col2:
            st.selectbox("Outcome", options=list(Outcome), format_func=lambda o: o.label,
                         key=FIELD_KEYS["actual_outcome"], on_change=sync_field, args=(form, "actual_outcome"))

    st.divider()
    st.button(
        "Saving record..." if form.submit_requested else "Save borewell record",
        key="save_record",
        type="primary",
        disabled=not form.can_submit,
        on_click=form.request_submit
    )
    if form.submit_requested:
        with st.spinner("Saving record..."):
            form.run_requested_submit()
        return True

    if form.last_error:
        st.error(form.last_error)
    if form.last_result:
        render_result(form)
    return False


setup_logging(LOG_LEVEL)
setup_error_tracking()

st.set_page_config(
    page_title="Borewell Registration",
    page_icon="💧",
    layout="wide"
)

if render_page():
    # Redraw with the submit control enabled again
    st.rerun()
