"""In-memory collaborators (reference adapters, used by the tests).

Objects are deep-copied on the way in and out so callers cannot mutate stored
state without going through save(). Iteration follows insertion order, which
is the "storage order" that ranking ties fall back to.
"""
from __future__ import annotations

import uuid
from copy import deepcopy
from typing import Dict, List

from .types import Application, Hackathon, Identity


class InMemoryUserDirectory:
    def __init__(self, users: List[Identity] | None = None):
        self._by_id: Dict[str, Identity] = {}
        for user in users or []:
            self.add(user)

    def add(self, user: Identity) -> None:
        self._by_id[user.id] = user

    def get_by_id(self, user_id: str) -> Identity | None:
        return self._by_id.get(user_id)

    def get_by_email(self, email: str) -> Identity | None:
        for user in self._by_id.values():
            if user.email.lower() == email.lower():
                return user
        return None


class InMemoryHackathonDirectory:
    def __init__(self, hackathons: List[Hackathon] | None = None):
        self._items: Dict[str, Hackathon] = {}
        for hackathon in hackathons or []:
            self.save(hackathon)

    def get(self, hackathon_id: str) -> Hackathon | None:
        item = self._items.get(hackathon_id)
        return deepcopy(item) if item is not None else None

    def save(self, hackathon: Hackathon) -> None:
        self._items[hackathon.id] = deepcopy(hackathon)


class InMemoryApplicationStore:
    def __init__(self):
        self._items: Dict[str, Application] = {}

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def get(self, application_id: str) -> Application | None:
        item = self._items.get(application_id)
        return deepcopy(item) if item is not None else None

    def save(self, application: Application) -> None:
        self._items[application.id] = deepcopy(application)

    def delete(self, application_id: str) -> None:
        self._items.pop(application_id, None)

    def _select(self, **match) -> List[Application]:
        return [
            deepcopy(app)
            for app in self._items.values()
            if all(getattr(app, k) == v for k, v in match.items())
        ]

    def find_by_hackathon_and_applicant(
        self, hackathon_id: str, applicant_id: str
    ) -> List[Application]:
        return self._select(hackathon_id=hackathon_id, applicant_id=applicant_id)

    def find_by_applicant(self, applicant_id: str) -> List[Application]:
        return self._select(applicant_id=applicant_id)

    def find_by_hackathon(self, hackathon_id: str) -> List[Application]:
        return self._select(hackathon_id=hackathon_id)

    def __len__(self) -> int:
        return len(self._items)
