import os
from dataclasses import dataclass

DEFAULT_INSTALL_DIR = "/opt/traefik-portainer"
DEFAULT_TRAEFIK_USER = "admin"

TRAEFIK_IMAGE = "traefik:v2.11"
PORTAINER_IMAGE = "portainer/portainer-ce:latest"
HTPASSWD_IMAGE = "httpd:2.4-alpine"

TRAEFIK_CONTAINER = "traefik"
PORTAINER_CONTAINER = "portainer"
CERT_RESOLVER = "myresolver"
DOCKER_NETWORK = "traefik"

COMPOSE_FILENAME = "docker-compose.yml"
USERS_FILENAME = "traefik_usersfile"
ACME_DIRNAME = "letsencrypt"
ACME_FILENAME = "acme.json"

ROUTE_PATTERN = "Adding route.*portainer"
ACME_PATTERN = "ACME:.*obtained certificate|Certificate obtained"
ACME_ERROR_PATTERN = "acme.*error"

LOG_TAIL = 200
FINAL_LOG_TAIL = 100
HTTP_PROBE_TIMEOUT = 10
LOG_FETCH_TIMEOUT = 30

PUBLIC_IP_ENDPOINTS = [
    "https://ifconfig.co",
    "https://ifconfig.me",
]

DOCKER_REPO_BASE = "https://download.docker.com/linux"
DOCKER_KEYRING = "/etc/apt/keyrings/docker.asc"
DOCKER_SOURCES_LIST = "/etc/apt/sources.list.d/docker.list"
COMPOSE_PLUGIN_URL = "https://github.com/docker/compose/releases/latest/download/docker-compose-linux-{arch}"
COMPOSE_PLUGIN_PATH = "/usr/lib/docker/cli-plugins/docker-compose"

# dpkg architecture -> docker compose release suffix
COMPOSE_ARCH_MAP = {
    "amd64": "x86_64",
    "arm64": "aarch64",
    "armhf": "armv7",
}

TRAEFIK_MIGRATION_URL = "https://doc.traefik.io/traefik/migration/v2-to-v3/"


def env_int(name, default):
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def route_timeout():
    return env_int("ROUTE_TIMEOUT", 120)

def acme_timeout():
    return env_int("ACME_TIMEOUT", 240)

def poll_interval():
    return env_int("POLL_INTERVAL", 5)

def hook_url():
    return os.environ.get("HOOK_URL", "")


@dataclass
class StackSettings:
    portainer_domain: str
    traefik_domain: str
    le_email: str
    traefik_user: str
    traefik_password: str
    install_dir: str = DEFAULT_INSTALL_DIR

    @property
    def compose_path(self):
        return os.path.join(self.install_dir, COMPOSE_FILENAME)

    @property
    def users_file_path(self):
        return os.path.join(self.install_dir, USERS_FILENAME)

    @property
    def acme_path(self):
        return os.path.join(self.install_dir, ACME_DIRNAME, ACME_FILENAME)

    def summary_lines(self):
        return [
            f"  Portainer domain    : {self.portainer_domain}",
            f"  Traefik domain      : {self.traefik_domain}",
            f"  Let's Encrypt email : {self.le_email}",
            f"  Traefik user        : {self.traefik_user}",
            f"  Install dir         : {self.install_dir}",
        ]
