from hackathon_core import CoreSettings, ReviewLimits
from hackathon_core.config import get_settings


def test_defaults():
    settings = CoreSettings()
    assert settings.strict_phase_resolution is True
    assert settings.certificate_base_url.endswith("/api/certificates/view")
    assert ReviewLimits.MAX_REUPLOADS == 2
    assert ReviewLimits.SHOWCASE_MAX_RANK == 3


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HACKATHON_STRICT_PHASE_RESOLUTION", "false")
    monkeypatch.setenv("HACKATHON_CERTIFICATE_BASE_URL", "https://certs.example.com/view")
    settings = CoreSettings()
    assert settings.strict_phase_resolution is False
    assert settings.certificate_base_url == "https://certs.example.com/view"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
