from __future__ import annotations

import subprocess

import pytest

from traefik_portainer.config import StackSettings


@pytest.fixture
def settings(tmp_path) -> StackSettings:
    return StackSettings(
        portainer_domain="portainer.example.com",
        traefik_domain="traefik.example.com",
        le_email="admin@example.com",
        traefik_user="admin",
        traefik_password="s3cret",
        install_dir=str(tmp_path / "stack"),
    )


class FakeRunner:
    """Records commands and answers them from a {tuple(prefix): CompletedProcess} table."""

    def __init__(self, responses=None, default_returncode=0):
        self.calls = []
        self.responses = responses or {}
        self.default_returncode = default_returncode

    def __call__(self, cmd, check=True, capture_output=False, cwd=None, timeout=None, input_text=None):
        self.calls.append(list(cmd))
        result = None
        for prefix, response in self.responses.items():
            if tuple(cmd[: len(prefix)]) == prefix:
                result = response
                break
        if result is None:
            result = subprocess.CompletedProcess(cmd, self.default_returncode, stdout="", stderr="")
        if check and result.returncode != 0:
            raise subprocess.CalledProcessError(result.returncode, cmd)
        return result


def completed(returncode=0, stdout="", stderr="") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess([], returncode, stdout=stdout, stderr=stderr)
