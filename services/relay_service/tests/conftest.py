"""Fixtures for relay tests: round-trip settings and a fake WeCom backend."""

from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import RelaySettings, load_settings
from app.main import create_app

from fakes import FakeWeCom


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> RelaySettings:
    """Secret S1, corp C/K, agent A, recipient left unset."""
    monkeypatch.delenv("WECOM_TOUID", raising=False)
    monkeypatch.delenv("WECOM_API_BASE_URL", raising=False)
    return load_settings(
        _env_file=None,
        auth_key="S1",
        wecom_cid="C",
        wecom_secret="K",
        wecom_aid="A",
    )


@pytest.fixture
def fake_wecom() -> FakeWeCom:
    return FakeWeCom()


@pytest.fixture
def client(settings: RelaySettings, fake_wecom: FakeWeCom) -> Iterator[TestClient]:
    application = create_app(settings, transport=httpx.MockTransport(fake_wecom))
    with TestClient(application) as test_client:
        yield test_client
