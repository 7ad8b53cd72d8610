import logging
import os
import shutil
import subprocess

logger = logging.getLogger(__name__)


class ProvisionError(Exception):
    """Fatal provisioning failure; aborts the run with exit status 1."""


def run_command(cmd, check=True, capture_output=False, cwd=None, timeout=None, input_text=None):
    """
    Execute a command without a shell.

    :param cmd: Command as a list of arguments.
    :param check: If True, raise CalledProcessError on non-zero exit.
    :param capture_output: Capture stdout and stderr if True.
    :param cwd: Working directory for the command.
    :param timeout: Seconds before TimeoutExpired is raised.
    :param input_text: Text fed to the command's stdin.
    :return: CompletedProcess instance.
    """
    logger.debug(f"Executing command: {' '.join(cmd)}")
    return subprocess.run(
        cmd,
        check=check,
        capture_output=capture_output,
        text=True,
        cwd=cwd,
        timeout=timeout,
        input=input_text,
    )


def command_exists(cmd):
    return shutil.which(cmd) is not None


def require_root():
    if os.geteuid() != 0:
        raise ProvisionError(
            "Run this installer as root: sudo install-traefik-portainer"
        )
