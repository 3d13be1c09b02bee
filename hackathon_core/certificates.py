"""Deterministic certificate URLs derived from application identity."""
from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import quote

from .types import Application


@dataclass(frozen=True)
class CertificateUrls:
    # Individual mode: application_url set, member_urls empty.
    # Team mode: application_url None, one entry per member e-mail.
    application_url: str | None
    member_urls: dict[str, str] = field(default_factory=dict)


def certificate_url(base_url: str, application_id: str, email: str | None = None) -> str:
    url = f"{base_url}?applicationId={quote(str(application_id), safe='-_.')}"
    if email:
        url += f"&email={quote(email, safe='@.-_')}"
    return url


def certificate_urls_for(application: Application, base_url: str) -> CertificateUrls:
    if application.as_team:
        member_urls = {
            member.email: certificate_url(base_url, application.id, member.email)
            for member in application.team_members
            if member.email
        }
        return CertificateUrls(application_url=None, member_urls=member_urls)
    return CertificateUrls(application_url=certificate_url(base_url, application.id))


def apply_certificate_urls(application: Application, base_url: str) -> Application:
    """Write generated URLs onto the application (in place) and return it."""
    urls = certificate_urls_for(application, base_url)
    if application.as_team:
        for member in application.team_members:
            if member.email:
                member.certificate_url = urls.member_urls[member.email]
    else:
        application.certificate_url = urls.application_url
    return application
