"""Collaborator interfaces consumed by the service layer."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol, Sequence

from .types import Application, Hackathon, Identity

if TYPE_CHECKING:
    from .notifications import NotificationEvent


class IdentityResolver(Protocol):
    def resolve(self, authorization: str | None) -> Identity | None:
        ...


class UserDirectory(Protocol):
    def get_by_id(self, user_id: str) -> Identity | None:
        ...

    def get_by_email(self, email: str) -> Identity | None:
        ...


class HackathonDirectory(Protocol):
    def get(self, hackathon_id: str) -> Hackathon | None:
        ...

    def save(self, hackathon: Hackathon) -> None:
        ...


class ApplicationStore(Protocol):
    def get(self, application_id: str) -> Application | None:
        ...

    def save(self, application: Application) -> None:
        ...

    def delete(self, application_id: str) -> None:
        ...

    def find_by_hackathon_and_applicant(
        self, hackathon_id: str, applicant_id: str
    ) -> Sequence[Application]:
        ...

    def find_by_applicant(self, applicant_id: str) -> Sequence[Application]:
        ...

    def find_by_hackathon(self, hackathon_id: str) -> Sequence[Application]:
        ...

    def new_id(self) -> str:
        ...


class NotificationSink(Protocol):
    # Fire-and-forget; implementations may raise, callers never propagate it.
    def emit(self, event: NotificationEvent) -> None:
        ...


class Clock(Protocol):
    def now(self) -> datetime:
        ...

