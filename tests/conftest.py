import pytest

from hackathon_core import (
    CoreSettings,
    FixedClock,
    HackathonApplicationService,
    NotificationDispatcher,
)
from hackathon_core.memory import (
    InMemoryApplicationStore,
    InMemoryHackathonDirectory,
    InMemoryUserDirectory,
)

from factories import ACME, ALICE, BOB, CERT_BASE, GLOBEX, NOW, RecordingSink, make_hackathon


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture()
def users() -> InMemoryUserDirectory:
    return InMemoryUserDirectory([ALICE, BOB, ACME, GLOBEX])


@pytest.fixture()
def hackathons() -> InMemoryHackathonDirectory:
    return InMemoryHackathonDirectory([make_hackathon()])


@pytest.fixture()
def store() -> InMemoryApplicationStore:
    return InMemoryApplicationStore()


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def service(store, hackathons, sink, clock) -> HackathonApplicationService:
    return HackathonApplicationService(
        store,
        hackathons,
        dispatcher=NotificationDispatcher(sink),
        clock=clock,
        settings=CoreSettings(certificate_base_url=CERT_BASE),
    )
