from .output import print_info, print_success, print_warn
from .shell import command_exists, run_command

WEB_PORTS = ["80/tcp", "443/tcp"]


def configure_firewall():
    """Open 80/443 in ufw when present. Never fatal."""
    if not command_exists("ufw"):
        print_info(
            "ufw not found, skipped local firewall configuration. "
            "Make sure ports 80/443 are open at your cloud provider."
        )
        return False

    print_info("Configuring UFW (opening 80 and 443)...")
    status = run_command(["ufw", "status"], check=False, capture_output=True)
    if "inactive" in (status.stdout or "").lower():
        print_info("UFW is inactive. Only adding rules (not enabling it).")

    for port in WEB_PORTS:
        if run_command(["ufw", "allow", port], check=False).returncode != 0:
            print_warn(f"ufw could not allow {port}")
    run_command(["ufw", "reload"], check=False)
    print_success("UFW rules updated (80/443).")
    return True
