import copy
import logging
from typing import Any, MutableMapping, Optional

import streamlit as st

from remedy_finder.infrastructure.storage.json_store import JsonFileKeyValueStore


logger = logging.getLogger(__name__)


class SessionStateKeyValueStore:
    """
    Key-value store living in st.session_state, so it lasts for one browser
    session only. Outside a Streamlit run it uses a plain dict.
    """

    def __init__(self, state: Optional[MutableMapping] = None):
        self._state = state

    @property
    def state(self) -> MutableMapping:
        if self._state is None:
            try:
                self._state = st.session_state
            except RuntimeError as e:
                logger.warning("Streamlit session state unavailable (%s); using memory", e)
                self._state = {}
        return self._state

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self.state:
            return default
        return copy.deepcopy(self.state[key])

    def set(self, key: str, value: Any) -> None:
        self.state[key] = copy.deepcopy(value)


def create_local_store(settings, state: Optional[MutableMapping] = None):
    """
    Store for the history and selected-symptoms slots.

    Defaults to the browser session so visitors never see each other's
    searches. A shared JSON file is used only when HISTORY_STORAGE=file.
    """
    if settings.history_storage == "file":
        logger.info("Search history shared through %s", settings.history_path)
        return JsonFileKeyValueStore(settings.history_path)
    return SessionStateKeyValueStore(state)
