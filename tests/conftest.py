import pytest

from as511.testutil import ScriptedTransport

MARKERS = ["codec", "handshake", "protocol", "client", "transport", "util", "cli"]


def pytest_configure(config: pytest.Config) -> None:
    for marker in MARKERS:
        config.addinivalue_line("markers", f"{marker}: {marker} tests")


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()
