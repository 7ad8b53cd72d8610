import os
import re
from getpass import getpass

from .config import DEFAULT_INSTALL_DIR, DEFAULT_TRAEFIK_USER, StackSettings
from .output import print_error, print_info
from .shell import ProvisionError

DOMAIN_RE = re.compile(r"^[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def prompt_input(prompt, default=None):
    if default:
        prompt_full = f"{prompt} [{default}]: "
    else:
        prompt_full = f"{prompt}: "
    value = input(prompt_full).strip()
    if not value and default:
        return default
    return value


def prompt_validated(prompt, pattern, error, default=None):
    while True:
        value = prompt_input(prompt, default)
        if value and pattern.match(value):
            return value
        print_error(error.format(value=value))


def prompt_domain(prompt, default=None):
    return prompt_validated(
        prompt, DOMAIN_RE, "Invalid domain '{value}'. Use a full hostname such as portainer.example.com.", default
    )


def prompt_email(prompt, default=None):
    return prompt_validated(
        prompt, EMAIL_RE, "Invalid e-mail '{value}'.", default
    )


def prompt_password(prompt):
    while True:
        value = getpass(f"{prompt}: ")
        if value:
            return value
        print_error("Password cannot be empty.")


def confirm(prompt):
    """Default is No; only an explicit y/Y accepts."""
    answer = input(f"{prompt} (y/N): ").strip() or "N"
    return answer in ("y", "Y")


def gather_settings():
    print("=== Automatic Traefik + Portainer installation (Ubuntu/Debian) ===")
    portainer_domain = prompt_domain(
        "Portainer domain (e.g. portainer.yourdomain.com)", os.environ.get("PORTAINER_DOMAIN")
    )
    traefik_domain = prompt_domain(
        "Traefik dashboard domain (e.g. traefik.yourdomain.com)", os.environ.get("TRAEFIK_DOMAIN")
    )
    le_email = prompt_email(
        "Let's Encrypt e-mail (e.g. admin@yourdomain.com)", os.environ.get("LE_EMAIL")
    )
    traefik_user = prompt_input(
        "Traefik dashboard user (HTTP Basic Auth)", os.environ.get("TRAEFIK_USER") or DEFAULT_TRAEFIK_USER
    )
    traefik_password = prompt_password(f"Password for {traefik_user}")
    install_dir = prompt_input(
        "Install directory", os.environ.get("INSTALL_DIR") or DEFAULT_INSTALL_DIR
    )
    return StackSettings(
        portainer_domain=portainer_domain,
        traefik_domain=traefik_domain,
        le_email=le_email,
        traefik_user=traefik_user,
        traefik_password=traefik_password,
        install_dir=os.path.abspath(install_dir),
    )


def confirm_settings(settings):
    print_info("Summary:")
    for line in settings.summary_lines():
        print(line)
    print()
    if not confirm("Continue?"):
        raise ProvisionError("Operation cancelled by user.")
