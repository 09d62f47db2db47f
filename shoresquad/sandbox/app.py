"""Main Streamlit application entry point for ShoreSquad.

Run with: streamlit run shoresquad/sandbox/app.py

The page is a thin presentation layer: it reads the controller's ViewModel
and forwards button clicks to controller operations.
"""

import logging

import streamlit as st
from dotenv import load_dotenv
from streamlit_folium import st_folium
from streamlit_js_eval import get_geolocation

from shoresquad.app.controllers.app_controller import AppStateController
from shoresquad.app.view import ViewModel
from shoresquad.sandbox.session import Session
from shoresquad.shared.core.logging_config import configure_logging
from shoresquad.shared.infrastructure.geolocation import BrowserGeolocationProvider
from shoresquad.shared.infrastructure.maps import FoliumMapWidget

load_dotenv()

logger = logging.getLogger(__name__)

SEVERITY_RENDERERS = {
    "success": st.success,
    "error": st.error,
    "info": st.info,
}


def main():
    """Main Streamlit application entry point."""
    st.set_page_config(
        page_title="ShoreSquad",
        page_icon="🌊",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    if 'logging_configured' not in st.session_state:
        configure_logging()
        st.session_state['logging_configured'] = True

    session = Session()
    controller = session.initialize()
    controller.tick()

    render_sidebar(session, controller)
    view = controller.view()
    render_logs(session, view)
    render_notifications(view)
    render_stats(view)

    col1, col2 = st.columns([1, 2])
    with col1:
        render_cleanup_list(session, controller, view)
        render_forecast(view)
    with col2:
        render_map(controller, view)

    render_crews(session, controller, view)


def render_sidebar(session: Session, controller: AppStateController):
    with st.sidebar:
        st.title("🌊 ShoreSquad")
        st.markdown("---")

        if st.button("🎉 Join the Squad"):
            session.run(controller, controller.notify("Welcome to ShoreSquad! 🎉", "success"))
        if st.button("➕ Start a Crew"):
            session.run(controller, controller.notify("Create a crew to get started!", "info"))
        if st.button("🌊 Save the Ocean"):
            session.run(controller, controller.notify("Let's save the ocean! 🌊", "success"))

        st.markdown("---")
        if st.button("📍 Find My Location"):
            session.location_requested = True

        if session.location_requested:
            result = get_geolocation()
            # None until the browser answers; the component triggers a rerun
            if result is not None:
                session.location_requested = False
                controller.geolocation = BrowserGeolocationProvider(result)
                session.run(controller, controller.locate_user())

        if st.button("🔄 Reset to Seed Data"):
            session.run(controller, controller.reset())


def render_logs(session: Session, view: ViewModel):
    """Toast warnings raised since the last run; keep the rest in the sidebar."""
    fresh = [entry for entry in view.logs if entry.ts > session.last_log_ts]
    for entry in fresh:
        if entry.level in ("warning", "error"):
            st.toast(entry.message, icon="⚠️")
    if fresh:
        session.last_log_ts = fresh[-1].ts

    if view.logs:
        with st.sidebar.expander(f"Activity log ({len(view.logs)})"):
            for entry in reversed(view.logs):
                st.caption(f"{entry.level.upper()}: {entry.message}")


def render_notifications(view: ViewModel):
    for notification in view.notifications:
        SEVERITY_RENDERERS.get(notification.severity, st.info)(notification.message)


def render_stats(view: ViewModel):
    stats = view.stats
    cols = st.columns(4)
    cols[0].metric("Cleanups Completed", stats.total_cleanups)
    cols[1].metric("Crew Members", stats.total_crew)
    cols[2].metric("Plastic Collected (kg)", f"{stats.plastic_collected:g}")
    cols[3].metric("Beaches Cleaned", stats.beaches_clean)


def render_cleanup_list(session: Session, controller: AppStateController, view: ViewModel):
    st.subheader("Upcoming Cleanups")
    if not view.cleanups:
        st.info("No cleanups scheduled yet.")
        return

    for cleanup in view.cleanups:
        with st.container(border=True):
            st.markdown(f"**{cleanup.name}**")
            st.caption(f"📅 {cleanup.date} · 👥 {cleanup.crew_size} people")
            st.caption(cleanup.weather)
            if st.button("Show on map", key=f"select_{cleanup.id}"):
                session.run(controller, controller.select_cleanup(cleanup.id))
                st.rerun()


def render_forecast(view: ViewModel):
    if not view.forecast:
        return
    st.subheader("Beach Weather")
    cols = st.columns(len(view.forecast))
    for col, day in zip(cols, view.forecast):
        col.metric(day.day, f"{day.temp_c:g}°C", help=f"UV: {day.uv}")
        col.caption(f"{day.icon} {day.condition}")


def render_map(controller: AppStateController, view: ViewModel):
    st.subheader("Cleanup Map")
    widget = controller.map_engine.widget
    if not view.map_available or not isinstance(widget, FoliumMapWidget):
        st.warning("Map unavailable. Cleanups are still listed on the left.")
        return

    st_folium(widget.build_map(), width=700, height=500, returned_objects=[])


def render_crews(session: Session, controller: AppStateController, view: ViewModel):
    st.subheader("Crews")
    if not view.crews:
        st.info("No crews yet.")
        return

    cols = st.columns(len(view.crews))
    for col, crew in zip(cols, view.crews):
        with col.container(border=True):
            st.markdown(f"<span style='color:{crew.color};font-weight:600'>{crew.name}</span>",
                        unsafe_allow_html=True)
            st.write(f"**{crew.members}** members")
            st.caption(f"✅ {crew.completed_cleanups} cleanups completed")
            st.caption(f"📍 Next: {crew.next_cleanup}")
            if st.button("Join Crew", key=f"join_{crew.id}"):
                session.run(controller, controller.join_crew(crew.id))
                st.rerun()


if __name__ == "__main__":
    main()
