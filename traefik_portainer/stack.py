import subprocess

from .config import LOG_FETCH_TIMEOUT, PORTAINER_CONTAINER, TRAEFIK_CONTAINER
from .output import print_error, print_info, print_success
from .shell import ProvisionError, run_command


def compose(install_dir, *args, check=True, capture_output=False, timeout=None):
    return run_command(
        ["docker", "compose", *args],
        check=check,
        capture_output=capture_output,
        cwd=install_dir,
        timeout=timeout,
    )


def remove_conflicting_containers():
    print_info("Removing old containers (if any) and starting the stack...")
    run_command(
        ["docker", "rm", "-f", TRAEFIK_CONTAINER, PORTAINER_CONTAINER],
        check=False,
        capture_output=True,
    )


def start_stack(install_dir):
    if compose(install_dir, "up", "-d", "--remove-orphans", check=False).returncode != 0:
        raise ProvisionError("Failed to start the stack with docker compose. Check logs: docker compose logs")


def stack_status(install_dir):
    result = compose(install_dir, "ps", check=False, capture_output=True)
    return result.stdout or ""


def verify_stack_running(install_dir):
    status = stack_status(install_dir)
    if "Up" in status or "running" in status:
        print_success("Containers traefik and portainer are UP.")
        return status
    print_error("Containers are not running. Status:")
    print(status)
    raise ProvisionError("Stack containers did not come up.")


def compose_logs(install_dir, service=TRAEFIK_CONTAINER, tail=200):
    """Last `tail` log lines of a service; empty string when they cannot be read."""
    try:
        result = compose(
            install_dir, "logs", f"--tail={tail}", service,
            check=False, capture_output=True, timeout=LOG_FETCH_TIMEOUT,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return ""
    return (result.stdout or "") + (result.stderr or "")
