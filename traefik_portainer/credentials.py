import os
import subprocess

from .config import ACME_DIRNAME, ACME_FILENAME, HTPASSWD_IMAGE
from .output import print_info, print_success
from .shell import ProvisionError, run_command

USERS_FILE_MODE = 0o400
ACME_FILE_MODE = 0o600


def generate_htpasswd_line(user, password, image=HTPASSWD_IMAGE):
    """Return a bcrypt "user:hash" line produced by the httpd image."""
    print_info("Generating htpasswd (bcrypt) for the Traefik user...")
    try:
        result = run_command(
            ["docker", "run", "--rm", image, "htpasswd", "-nbB", user, password],
            capture_output=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        raise ProvisionError(f"Failed to generate htpasswd with the {image} image.") from e
    line = result.stdout.replace("\r", "").replace("\n", "")
    if not line.startswith(f"{user}:"):
        raise ProvisionError(f"Unexpected htpasswd output from the {image} image.")
    return line


def write_users_file(path, line):
    # a previous run leaves the file read-only
    if os.path.exists(path):
        os.chmod(path, 0o600)
    with open(path, "w") as fhand:
        fhand.write(line + "\n")
    os.chmod(path, USERS_FILE_MODE)
    print_success(f"Users file created at {path}")


def prepare_acme_store(install_dir):
    acme_dir = os.path.join(install_dir, ACME_DIRNAME)
    os.makedirs(acme_dir, exist_ok=True)
    acme_path = os.path.join(acme_dir, ACME_FILENAME)
    # keep certificates issued by an earlier run
    with open(acme_path, "a"):
        pass
    os.chmod(acme_path, ACME_FILE_MODE)
    return acme_path
