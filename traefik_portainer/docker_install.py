import os
import subprocess

import requests

from .config import (
    COMPOSE_ARCH_MAP,
    COMPOSE_PLUGIN_PATH,
    COMPOSE_PLUGIN_URL,
    DOCKER_KEYRING,
    DOCKER_REPO_BASE,
    DOCKER_SOURCES_LIST,
)
from .output import print_error, print_info, print_success, print_warn
from .shell import ProvisionError, run_command

LEGACY_PACKAGES = ["docker", "docker-engine", "docker.io", "containerd", "runc"]
PREREQ_PACKAGES = ["ca-certificates", "curl", "gnupg"]
ENGINE_PACKAGES = ["docker-ce", "docker-ce-cli", "containerd.io"]
PLUGIN_PACKAGES = ["docker-buildx-plugin", "docker-compose-plugin"]


def docker_compose_available():
    try:
        result = run_command(["docker", "compose", "version"], check=False, capture_output=True)
    except FileNotFoundError:
        return False
    return result.returncode == 0


def detect_distro(os_release_path="/etc/os-release"):
    """Return (ID, VERSION_CODENAME) from an os-release file."""
    values = {}
    with open(os_release_path, "r") as fhand:
        for line in fhand:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            values[key] = value.strip().strip('"').strip("'")
    distro_id = values.get("ID")
    if not distro_id:
        raise ProvisionError(f"Could not detect distribution ID from {os_release_path}")
    return distro_id, values.get("VERSION_CODENAME", "")


def dpkg_architecture():
    result = run_command(["dpkg", "--print-architecture"], capture_output=True)
    return result.stdout.strip()


def apt_get(*args, check=True):
    return run_command(["apt-get", *args], check=check)


def download_file(url, dest, mode):
    response = requests.get(url, timeout=60)
    response.raise_for_status()
    os.makedirs(os.path.dirname(dest), exist_ok=True)
    with open(dest, "wb") as fhand:
        fhand.write(response.content)
    os.chmod(dest, mode)


def add_docker_repository(distro_id, codename, arch, keyring=DOCKER_KEYRING, sources_list=DOCKER_SOURCES_LIST):
    download_file(f"{DOCKER_REPO_BASE}/{distro_id}/gpg", keyring, 0o644)
    repo_line = (
        f"deb [arch={arch} signed-by={keyring}] "
        f"{DOCKER_REPO_BASE}/{distro_id} {codename} stable\n"
    )
    with open(sources_list, "w") as fhand:
        fhand.write(repo_line)
    return repo_line


def install_compose_plugin_binary(arch, dest=COMPOSE_PLUGIN_PATH):
    release_arch = COMPOSE_ARCH_MAP.get(arch, "x86_64")
    download_file(COMPOSE_PLUGIN_URL.format(arch=release_arch), dest, 0o755)
    print_success(f"Fallback: docker compose plugin installed at {dest}")


def install_docker(os_release_path="/etc/os-release"):
    if docker_compose_available():
        print_success("Docker and docker compose already installed, skipping installation.")
        return

    print_info("Installing Docker (official repository) and the docker compose plugin...")
    try:
        apt_get("update", "-y")
        apt_get("remove", "-y", *LEGACY_PACKAGES, check=False)
        apt_get("install", "-y", *PREREQ_PACKAGES)

        distro_id, codename = detect_distro(os_release_path)
        print_info(f"Detected distro: {distro_id} (repo: /linux/{distro_id})")
        arch = dpkg_architecture()
        add_docker_repository(distro_id, codename, arch)
        apt_get("update", "-y")
    except (subprocess.CalledProcessError, requests.RequestException, OSError) as e:
        raise ProvisionError(f"Failed to prepare the Docker apt repository: {e}") from e

    if apt_get("install", "-y", *ENGINE_PACKAGES, *PLUGIN_PACKAGES, check=False).returncode == 0:
        print_success("Docker engine + docker compose plugin installed via apt.")
    else:
        print_error("Could not install the docker compose plugin via apt. Trying fallback (plugin download)...")
        if apt_get("install", "-y", *ENGINE_PACKAGES, check=False).returncode != 0:
            raise ProvisionError("Failed to install the Docker engine.")
        try:
            install_compose_plugin_binary(arch)
        except (requests.RequestException, OSError) as e:
            raise ProvisionError(f"Failed to download the docker compose plugin: {e}") from e

    if run_command(["systemctl", "enable", "--now", "docker"], check=False).returncode != 0:
        print_warn("systemctl could not enable the docker service.")

    if not docker_compose_available():
        raise ProvisionError("'docker compose' is not available after installation. Check manually.")
    print_success("Docker and docker compose ready.")
