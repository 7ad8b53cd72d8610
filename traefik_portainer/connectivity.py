import warnings

import dns.exception
import dns.resolver
import requests

from .config import HTTP_PROBE_TIMEOUT, PUBLIC_IP_ENDPOINTS
from .output import print_info


def get_public_ip(endpoints=PUBLIC_IP_ENDPOINTS):
    for url in endpoints:
        try:
            response = requests.get(url, timeout=HTTP_PROBE_TIMEOUT, headers={"User-Agent": "curl/8"})
            if response.status_code == 200 and response.text.strip():
                return response.text.strip()
        except requests.RequestException:
            continue
    return "not detected"


def resolve_domain(domain, nameservers=None):
    """A records for `domain`, empty list when resolution fails."""
    resolver = dns.resolver.Resolver()
    if nameservers:
        resolver.nameservers = nameservers
    try:
        answers = resolver.resolve(domain, 'A')
    except dns.exception.DNSException:
        return []
    return sorted(rdata.to_text() for rdata in answers)


def probe_http(url, verify=True):
    """HEAD `url` without following redirects; returns a one-line result."""
    try:
        with warnings.catch_warnings():
            # https probe skips certificate checks while ACME may still be pending
            warnings.simplefilter("ignore")
            response = requests.head(url, timeout=HTTP_PROBE_TIMEOUT, allow_redirects=False, verify=verify)
    except requests.RequestException as e:
        return f"failed: {e}"
    result = f"HTTP {response.status_code} {response.reason or ''}".rstrip()
    location = response.headers.get("Location")
    if location:
        result += f" -> {location}"
    return result


def run_connectivity_checks(settings):
    print_info("Quick tests:")

    print_info("Checking server-side DNS:")
    for domain in (settings.portainer_domain, settings.traefik_domain):
        addresses = resolve_domain(domain)
        print(f"  DNS {domain} -> {', '.join(addresses) or '(no answer)'}")

    print_info("HTTP and HTTPS test requests:")
    http_url = f"http://{settings.portainer_domain}"
    https_url = f"https://{settings.portainer_domain}"
    print(f">>> {http_url} (expect 301/redirect or 200)")
    print(f"    {probe_http(http_url)}")
    print(f">>> {https_url} (may fail if ACME is not ready yet)")
    print(f"    {probe_http(https_url, verify=False)}")
