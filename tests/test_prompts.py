from __future__ import annotations

import pytest

from traefik_portainer import prompts
from traefik_portainer.shell import ProvisionError


def _answers(monkeypatch, values):
    answers = iter(values)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in ("PORTAINER_DOMAIN", "TRAEFIK_DOMAIN", "LE_EMAIL", "TRAEFIK_USER", "INSTALL_DIR"):
        monkeypatch.delenv(name, raising=False)


def test_prompt_input_falls_back_to_default(monkeypatch) -> None:
    _answers(monkeypatch, ["", "  custom  "])
    assert prompts.prompt_input("User", "admin") == "admin"
    assert prompts.prompt_input("User", "admin") == "custom"


def test_prompt_domain_reasks_until_valid(monkeypatch) -> None:
    _answers(monkeypatch, ["", "not a domain", "portainer.example.com"])
    assert prompts.prompt_domain("Portainer domain") == "portainer.example.com"


def test_prompt_email_reasks_until_valid(monkeypatch) -> None:
    _answers(monkeypatch, ["admin", "admin@example.com"])
    assert prompts.prompt_email("E-mail") == "admin@example.com"


@pytest.mark.parametrize("answer, expected", [("y", True), ("Y", True), ("", False), ("n", False), ("yes", False)])
def test_confirm_defaults_to_no(monkeypatch, answer, expected) -> None:
    _answers(monkeypatch, [answer])
    assert prompts.confirm("Continue?") is expected


def test_gather_settings_applies_defaults(monkeypatch) -> None:
    _answers(monkeypatch, ["portainer.example.com", "traefik.example.com", "admin@example.com", "", ""])
    passwords = iter(["", "s3cret"])
    monkeypatch.setattr(prompts, "getpass", lambda prompt="": next(passwords))

    settings = prompts.gather_settings()

    assert settings.portainer_domain == "portainer.example.com"
    assert settings.traefik_domain == "traefik.example.com"
    assert settings.le_email == "admin@example.com"
    assert settings.traefik_user == "admin"
    assert settings.traefik_password == "s3cret"
    assert settings.install_dir == "/opt/traefik-portainer"


def test_gather_settings_uses_environment_defaults(monkeypatch) -> None:
    monkeypatch.setenv("PORTAINER_DOMAIN", "p.example.org")
    monkeypatch.setenv("INSTALL_DIR", "/srv/stack")
    _answers(monkeypatch, ["", "t.example.org", "ops@example.org", "ops", ""])
    monkeypatch.setattr(prompts, "getpass", lambda prompt="": "pw")

    settings = prompts.gather_settings()

    assert settings.portainer_domain == "p.example.org"
    assert settings.traefik_user == "ops"
    assert settings.install_dir == "/srv/stack"


def test_declined_confirmation_cancels(monkeypatch, settings) -> None:
    _answers(monkeypatch, ["n"])
    with pytest.raises(ProvisionError, match="cancelled"):
        prompts.confirm_settings(settings)


def test_summary_never_shows_password(settings) -> None:
    assert all("s3cret" not in line for line in settings.summary_lines())
