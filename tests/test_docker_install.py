from __future__ import annotations

import pytest

from traefik_portainer import docker_install
from traefik_portainer.shell import ProvisionError

from conftest import FakeRunner, completed


def test_detect_distro_strips_quotes(tmp_path) -> None:
    os_release = tmp_path / "os-release"
    os_release.write_text(
        'PRETTY_NAME="Ubuntu 24.04 LTS"\n'
        'ID=ubuntu\n'
        'VERSION_CODENAME="noble"\n'
        '# comment\n'
    )
    assert docker_install.detect_distro(str(os_release)) == ("ubuntu", "noble")


def test_detect_distro_without_id_is_fatal(tmp_path) -> None:
    os_release = tmp_path / "os-release"
    os_release.write_text('NAME="Mystery"\n')
    with pytest.raises(ProvisionError):
        docker_install.detect_distro(str(os_release))


def test_install_is_skipped_when_compose_already_works(monkeypatch) -> None:
    runner = FakeRunner()
    monkeypatch.setattr(docker_install, "run_command", runner)

    docker_install.install_docker()

    assert runner.calls == [["docker", "compose", "version"]]


def test_add_docker_repository_writes_sources_list(monkeypatch, tmp_path) -> None:
    downloads = []
    monkeypatch.setattr(docker_install, "download_file", lambda url, dest, mode: downloads.append((url, dest, mode)))
    keyring = str(tmp_path / "docker.asc")
    sources = tmp_path / "docker.list"

    line = docker_install.add_docker_repository("debian", "bookworm", "arm64", keyring=keyring, sources_list=str(sources))

    assert downloads == [("https://download.docker.com/linux/debian/gpg", keyring, 0o644)]
    assert sources.read_text() == line
    assert line == (
        f"deb [arch=arm64 signed-by={keyring}] https://download.docker.com/linux/debian bookworm stable\n"
    )


class _ComposeAppearsRunner(FakeRunner):
    """`docker compose version` fails until systemctl has been called."""

    def __call__(self, cmd, **kwargs):
        if cmd[:3] == ["docker", "compose", "version"]:
            self.calls.append(list(cmd))
            started = any(call[0] == "systemctl" for call in self.calls)
            return completed(0 if started else 1)
        return super().__call__(cmd, **kwargs)


def _prepare_fresh_host(monkeypatch, tmp_path, runner):
    os_release = tmp_path / "os-release"
    os_release.write_text("ID=ubuntu\nVERSION_CODENAME=jammy\n")
    monkeypatch.setattr(docker_install, "run_command", runner)
    monkeypatch.setattr(docker_install, "add_docker_repository", lambda *args, **kwargs: "")
    return str(os_release)


def test_fresh_install_uses_apt_packages(monkeypatch, tmp_path) -> None:
    runner = _ComposeAppearsRunner({("dpkg",): completed(stdout="amd64\n")})
    os_release = _prepare_fresh_host(monkeypatch, tmp_path, runner)

    docker_install.install_docker(os_release)

    installs = [call for call in runner.calls if call[:2] == ["apt-get", "install"]]
    assert installs[-1][-5:] == [
        "docker-ce", "docker-ce-cli", "containerd.io", "docker-buildx-plugin", "docker-compose-plugin",
    ]
    assert ["systemctl", "enable", "--now", "docker"] in runner.calls


def test_plugin_download_fallback(monkeypatch, tmp_path) -> None:
    runner = _ComposeAppearsRunner({
        ("dpkg",): completed(stdout="arm64\n"),
        ("apt-get", "install", "-y", "docker-ce", "docker-ce-cli", "containerd.io", "docker-buildx-plugin"): completed(1),
    })
    os_release = _prepare_fresh_host(monkeypatch, tmp_path, runner)
    fetched = []
    monkeypatch.setattr(docker_install, "download_file", lambda url, dest, mode: fetched.append((url, dest, mode)))

    docker_install.install_docker(os_release)

    assert fetched == [(
        "https://github.com/docker/compose/releases/latest/download/docker-compose-linux-aarch64",
        "/usr/lib/docker/cli-plugins/docker-compose",
        0o755,
    )]


def test_engine_failure_is_fatal(monkeypatch, tmp_path) -> None:
    runner = _ComposeAppearsRunner({
        ("dpkg",): completed(stdout="amd64\n"),
        ("apt-get", "install", "-y", "docker-ce"): completed(1),
    })
    os_release = _prepare_fresh_host(monkeypatch, tmp_path, runner)

    with pytest.raises(ProvisionError):
        docker_install.install_docker(os_release)


def test_missing_compose_after_install_is_fatal(monkeypatch, tmp_path) -> None:
    runner = FakeRunner({
        ("docker", "compose", "version"): completed(1),
        ("dpkg",): completed(stdout="amd64\n"),
    })
    os_release = _prepare_fresh_host(monkeypatch, tmp_path, runner)

    with pytest.raises(ProvisionError):
        docker_install.install_docker(os_release)
