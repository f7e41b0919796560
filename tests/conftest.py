import json

import httpx
import pytest

from shlinkrun.host import PluginInitContext, PublicApi
from shlinkrun.settings import ShlinkSettings
from shlinkrun.types import Theme


class RecordingApi(PublicApi):
    """Host API fake that records clipboard writes and error dialogs."""

    def __init__(self, theme=Theme.DARK):
        super().__init__()
        self.theme = theme
        self.clipboard = []
        self.errors = []

    def get_current_theme(self):
        return self.theme

    def set_theme(self, theme):
        old, self.theme = self.theme, theme
        self.theme_changed.emit(old, theme)

    def copy_to_clipboard(self, text):
        self.clipboard.append(text)

    def show_error(self, message, title):
        self.errors.append((title, message))


class ShlinkServer:
    """``httpx.MockTransport`` handler that records requests and replays a canned response."""

    def __init__(self, status_code=201, body=None):
        self.status_code = status_code
        self.body = body if body is not None else {"shortUrl": "https://s.io/abc"}
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_payload(self):
        return json.loads(self.requests[-1].content)

    def transport(self):
        return httpx.MockTransport(self)


@pytest.fixture
def api():
    """Fixture that provides a recording host API."""
    return RecordingApi()


@pytest.fixture
def init_context(api):
    return PluginInitContext(api=api)


@pytest.fixture
def server():
    return ShlinkServer()


@pytest.fixture
def one_instance():
    return ShlinkSettings(hosts="https://s.io", keys="K")


@pytest.fixture
def two_instances():
    return ShlinkSettings(
        hosts="https://s.io\rhttps://short.example.org/",
        keys="K1\rK2",
        tags="launcher\rwork",
    )
