"""Session state management wrapper for the Streamlit page.

Each browser session gets its own AppStateController, kept in
st.session_state across reruns.
"""

import asyncio
import uuid
from typing import Any, Awaitable, Optional, TypeVar

import streamlit as st

from shoresquad.app.controllers.app_controller import AppStateController
from shoresquad.shared.core.configuration import SystemConfig, ValidationLevel, get_config

T = TypeVar("T")


class Session:
    """Wrapper around st.session_state for type safety and centralized management."""

    @property
    def controller(self) -> Optional[AppStateController]:
        """Get the controller for this browser session."""
        return st.session_state.get('controller')

    @controller.setter
    def controller(self, value: Optional[AppStateController]):
        st.session_state['controller'] = value

    @property
    def config(self) -> SystemConfig:
        config = st.session_state.get('config')
        if config is None:
            config = get_config(ValidationLevel.LENIENT)
            st.session_state['config'] = config
        return config

    @property
    def location_requested(self) -> bool:
        return st.session_state.get('location_requested', False)

    @location_requested.setter
    def location_requested(self, value: bool):
        st.session_state['location_requested'] = value

    @property
    def storage_scope(self) -> str:
        """Id of this browser session's storage slot.

        Kept in the URL (``?squad=...``) so a page reload finds the same slot,
        while other visitors get slots of their own.
        """
        scope = st.query_params.get('squad')
        if not scope:
            scope = uuid.uuid4().hex
            st.query_params['squad'] = scope
        return scope

    @property
    def last_log_ts(self) -> float:
        return st.session_state.get('last_log_ts', 0.0)

    @last_log_ts.setter
    def last_log_ts(self, value: float):
        st.session_state['last_log_ts'] = value

    def initialize(self) -> AppStateController:
        """Create and initialize the controller on the first run of a session."""
        if self.controller is None:
            controller = AppStateController.from_config(
                self.config,
                auto_expire=False,
                storage_scope=self.storage_scope,
            )
            self.run(controller, controller.initialize())
            self.controller = controller
        return self.controller

    def run(self, controller: AppStateController, action: Awaitable[T]) -> T:
        """Run one controller action to completion, including bus handlers.

        Streamlit reruns the script per interaction, so each action gets its
        own short-lived event loop.
        """
        async def _run() -> Any:
            result = await action
            await controller.bus.wait_until_idle()
            return result

        return asyncio.run(_run())

