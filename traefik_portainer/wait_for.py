import re
import time

from . import stack
from .config import (
    ACME_ERROR_PATTERN,
    ACME_PATTERN,
    LOG_TAIL,
    ROUTE_PATTERN,
    TRAEFIK_CONTAINER,
    acme_timeout,
    poll_interval,
    route_timeout,
)
from .output import print_error, print_info, print_success


def wait_for(install_dir, pattern, timeout, service=TRAEFIK_CONTAINER, interval=None, tail=LOG_TAIL,
             clock=time.monotonic, sleep=time.sleep):
    """
    Poll the service logs until `pattern` shows up (case-insensitive).

    Returns False once more than `timeout` seconds have passed, so the
    total wait is bounded by timeout + interval plus one log fetch.
    """
    if interval is None:
        interval = poll_interval()
    regex = re.compile(pattern, re.IGNORECASE)
    start = clock()
    while True:
        if regex.search(stack.compose_logs(install_dir, service, tail)):
            return True
        if clock() - start > timeout:
            return False
        sleep(interval)


def matching_lines(text, pattern):
    regex = re.compile(pattern, re.IGNORECASE)
    return [line for line in text.splitlines() if regex.search(line)]


def wait_for_route(install_dir, timeout=None, **kwargs):
    timeout = route_timeout() if timeout is None else timeout
    if wait_for(install_dir, ROUTE_PATTERN, timeout, **kwargs):
        print_success("Traefik added a route for portainer.")
        return True
    print_error(f"Traefik did not add a route for portainer within {timeout}s. Traefik logs (last lines):")
    print(stack.compose_logs(install_dir, TRAEFIK_CONTAINER, LOG_TAIL))
    return False


def wait_for_certificate(install_dir, timeout=None, **kwargs):
    timeout = acme_timeout() if timeout is None else timeout
    print_info(f"Waiting for the ACME (Let's Encrypt) result (up to {timeout}s)...")
    if wait_for(install_dir, ACME_PATTERN, timeout, **kwargs):
        print_success("ACME certificate obtained (Let's Encrypt).")
        return True

    print_error("No ACME certificate confirmation in the Traefik logs (it may take longer or be blocked).")
    logs = stack.compose_logs(install_dir, TRAEFIK_CONTAINER, LOG_TAIL)
    errors = matching_lines(logs, ACME_ERROR_PATTERN)
    if errors:
        for line in errors:
            print(line)
        print_error("ACME errors were found. Check above.")
    print(logs)
    return False
