import os
import sys
import textwrap
from dotenv import load_dotenv
load_dotenv()  # This loads environment variables from a .env file in the current directory

from .config import FINAL_LOG_TAIL, TRAEFIK_CONTAINER, TRAEFIK_MIGRATION_URL, hook_url
from .output import configure_logging, print_error, print_info, print_section, print_success
from .shell import ProvisionError, require_root
from . import (
    connectivity,
    credentials,
    docker_install,
    firewall,
    generate_compose,
    post_status,
    prompts,
    stack,
    wait_for,
)

__version__ = "1.0.0"


def troubleshooting_notes(install_dir):
    return textwrap.dedent(f"""
    Possible causes and fixes:
      * DNS has not propagated to the VPS public IP (check your DNS provider).
      * Cloud firewall rules (e.g. Oracle Cloud VCN / Security Lists) do not allow 80/443 -> open 0.0.0.0/0.
      * If Traefik could not obtain an ACME certificate, check the Traefik logs:
          docker compose logs -f traefik
      * Make sure you browse to exactly the configured Host. The hostname must match the
        Host() label in docker-compose.yml.

    Useful commands:
      cd "{install_dir}"
      docker compose ps
      docker compose logs -f traefik
      docker compose logs -f portainer
    """)


def provision(settings, hook=""):
    """Run every step after input gathering. Fatal failures raise ProvisionError."""
    post_status.notify(hook, "provisioning", "starting", "Beginning Traefik + Portainer setup")

    # --- 1. Docker engine + compose plugin ---
    print_section("[1/7] Docker")
    docker_install.install_docker()
    post_status.notify(hook, "provisioning", "docker_ready", "Docker installed")

    # --- 2. Install dir, certificate store, credentials ---
    print_section("[2/7] Files")
    print_info(f"Creating directories in {settings.install_dir} ...")
    try:
        os.makedirs(settings.install_dir, exist_ok=True)
        credentials.prepare_acme_store(settings.install_dir)
        line = credentials.generate_htpasswd_line(settings.traefik_user, settings.traefik_password)
        credentials.write_users_file(settings.users_file_path, line)

        # --- 3. Compose document ---
        print_section("[3/7] docker-compose.yml")
        document = generate_compose.generate_compose(settings)
        generate_compose.validate_compose(document, settings)
        generate_compose.write_compose(settings.install_dir, document)
    except OSError as e:
        raise ProvisionError(f"Could not write stack files in {settings.install_dir}: {e}") from e

    # --- 4. Local firewall ---
    print_section("[4/7] Firewall")
    firewall.configure_firewall()

    # --- 5. Start stack ---
    print_section("[5/7] Stack")
    stack.remove_conflicting_containers()
    stack.start_stack(settings.install_dir)
    stack.verify_stack_running(settings.install_dir)
    post_status.notify(hook, "provisioning", "stack_started", "Containers are up")

    # --- 6. Readiness ---
    print_section("[6/7] Readiness")
    print_success("Services started. Waiting for Traefik to detect the route and issue a certificate (may take up to 4 minutes)...")
    public_ip = connectivity.get_public_ip()
    print_info(f"Your public IP is: {public_ip} - make sure your domains point to this IP")

    route_ok = wait_for.wait_for_route(settings.install_dir)
    post_status.notify(hook, "provisioning", "route", "Route added" if route_ok else "Route not confirmed")
    cert_ok = wait_for.wait_for_certificate(settings.install_dir)
    post_status.notify(hook, "provisioning", "certificate", "Certificate obtained" if cert_ok else "Certificate not confirmed")

    # --- 7. Diagnostics ---
    print_section("[7/7] Diagnostics")
    connectivity.run_connectivity_checks(settings)
    print()
    print(stack.stack_status(settings.install_dir))
    print(stack.compose_logs(settings.install_dir, TRAEFIK_CONTAINER, FINAL_LOG_TAIL))

    print_success("Installer finished. If the browser still shows 'Not Found', check the notes below.")
    print_info(f"Note: before a future upgrade to Traefik v3, see {TRAEFIK_MIGRATION_URL} (label/config changes).")
    print(troubleshooting_notes(settings.install_dir))
    post_status.notify(hook, "completed", "completed", "Setup completed")
    return route_ok and cert_ok


def main():
    configure_logging()
    hook = hook_url()
    try:
        require_root()
        settings = prompts.gather_settings()
        prompts.confirm_settings(settings)
        provision(settings, hook)
    except ProvisionError as e:
        print_error(str(e))
        post_status.notify(hook, "failed", "failed", str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print()
        print_error("Interrupted.")
        sys.exit(130)
    except EOFError:
        print()
        print_error("Input closed before all answers were given.")
        sys.exit(1)
    return 0
