import os
import textwrap

import yaml

from .config import (
    CERT_RESOLVER,
    COMPOSE_FILENAME,
    DOCKER_NETWORK,
    PORTAINER_CONTAINER,
    PORTAINER_IMAGE,
    TRAEFIK_CONTAINER,
    TRAEFIK_IMAGE,
    USERS_FILENAME,
)
from .output import print_info, print_success
from .shell import ProvisionError


def generate_compose(settings):
    """
    Returns the docker-compose.yml document for the Traefik + Portainer stack.
    """

    # ========== TOKEN DEFINITIONS ==========
    tokens = {
        "__TRAEFIK_IMAGE__": TRAEFIK_IMAGE,
        "__PORTAINER_IMAGE__": PORTAINER_IMAGE,
        "__TRAEFIK_CONTAINER__": TRAEFIK_CONTAINER,
        "__PORTAINER_CONTAINER__": PORTAINER_CONTAINER,
        "__NETWORK__": DOCKER_NETWORK,
        "__RESOLVER__": CERT_RESOLVER,
        "__USERS_FILE__": USERS_FILENAME,
        "__LE_EMAIL__": settings.le_email,
        "__TRAEFIK_DOMAIN__": settings.traefik_domain,
        "__PORTAINER_DOMAIN__": settings.portainer_domain,
    }

    # ========== BASE TEMPLATE ==========
    compose_template = textwrap.dedent("""\
    version: "3.9"

    services:
      traefik:
        image: __TRAEFIK_IMAGE__
        container_name: __TRAEFIK_CONTAINER__
        restart: always
        command:
          - --api.dashboard=true
          - --api.insecure=false
          - --providers.docker=true
          - --providers.docker.network=__NETWORK__
          - --providers.docker.exposedbydefault=false
          - --entrypoints.web.address=:80
          - --entrypoints.websecure.address=:443
          - --entrypoints.web.http.redirections.entryPoint.to=websecure
          - --entrypoints.web.http.redirections.entryPoint.scheme=https
          - --certificatesresolvers.__RESOLVER__.acme.tlschallenge=true
          - --certificatesresolvers.__RESOLVER__.acme.email=__LE_EMAIL__
          - --certificatesresolvers.__RESOLVER__.acme.storage=/letsencrypt/acme.json
        ports:
          - "80:80"
          - "443:443"
        volumes:
          - /var/run/docker.sock:/var/run/docker.sock:ro
          - ./letsencrypt:/letsencrypt
          - ./__USERS_FILE__:/__USERS_FILE__:ro
        labels:
          - "traefik.enable=true"
          - "traefik.http.routers.traefik.rule=Host(`__TRAEFIK_DOMAIN__`)"
          - "traefik.http.routers.traefik.entrypoints=websecure"
          - "traefik.http.routers.traefik.tls.certresolver=__RESOLVER__"
          - "traefik.http.routers.traefik.service=api@internal"
          - "traefik.http.middlewares.traefik-auth.basicauth.usersfile=/__USERS_FILE__"
          - "traefik.http.routers.traefik.middlewares=traefik-auth"
        networks:
          - __NETWORK__

      portainer:
        image: __PORTAINER_IMAGE__
        container_name: __PORTAINER_CONTAINER__
        restart: always
        command: -H unix:///var/run/docker.sock
        volumes:
          - /var/run/docker.sock:/var/run/docker.sock
          - ./portainer_data:/data
        labels:
          - "traefik.enable=true"
          - "traefik.http.routers.portainer.rule=Host(`__PORTAINER_DOMAIN__`)"
          - "traefik.http.routers.portainer.entrypoints=websecure"
          - "traefik.http.routers.portainer.tls.certresolver=__RESOLVER__"
          - "traefik.http.services.portainer.loadbalancer.server.port=9000"
        networks:
          - __NETWORK__

    volumes:
      portainer_data:

    networks:
      __NETWORK__:
        driver: bridge
    """)

    final = compose_template
    for token, value in tokens.items():
        final = final.replace(token, value)
    return final


def validate_compose(text, settings):
    """Parse the rendered document and check both Host rules made it in verbatim."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ProvisionError(f"Rendered docker-compose.yml is not valid YAML: {e}") from e

    services = (document or {}).get("services") or {}
    for name in ("traefik", "portainer"):
        if name not in services:
            raise ProvisionError(f"Rendered docker-compose.yml has no '{name}' service")

    expected = {
        "traefik": f"traefik.http.routers.traefik.rule=Host(`{settings.traefik_domain}`)",
        "portainer": f"traefik.http.routers.portainer.rule=Host(`{settings.portainer_domain}`)",
    }
    for name, label in expected.items():
        if label not in (services[name].get("labels") or []):
            raise ProvisionError(f"Rendered docker-compose.yml is missing the router rule for {name}")
    return document


def write_compose(install_dir, text):
    print_info("Writing docker-compose.yml ...")
    path = os.path.join(install_dir, COMPOSE_FILENAME)
    with open(path, "w") as fhand:
        fhand.write(text)
    print_success(f"docker-compose.yml created at {path}")
    return path
