"""SSH host key verification policy.

Translates the explicit "skip host key check" opt-in into what each kind of
ssh client understands.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Accept any host key and never persist it.
SKIP_HOST_KEY_CHECK_ARGS: tuple[str, ...] = (
    "-o", "StrictHostKeyChecking=no",
    "-o", f"UserKnownHostsFile={os.devnull}",
)


def host_key_arguments(skip_host_key_check: bool) -> list[str]:
    """Get ssh client options for the host key policy.

    Returns:
        Options disabling verification, or an empty list to keep the
        client's own defaults
    """
    if not skip_host_key_check:
        return []
    logger.warning(
        "SSH host key verification DISABLED for this session - "
        "vulnerable to MITM attacks."
    )
    return list(SKIP_HOST_KEY_CHECK_ARGS)


def resolve_known_hosts(
    known_hosts_path: str | None,
    skip_host_key_check: bool = False,
) -> str | None | tuple[()]:
    """Resolve the ``known_hosts`` argument for asyncssh.

    Args:
        known_hosts_path: Path to a known_hosts file, 'none' to disable
            verification, or None for the default location
        skip_host_key_check: Explicit per-session opt-out

    Returns:
        None to disable verification, a path string, or ``()`` to let
        asyncssh use ~/.ssh/known_hosts

    Raises:
        FileNotFoundError: If a custom known_hosts path does not exist
    """
    if skip_host_key_check or (
        known_hosts_path and known_hosts_path.lower() == "none"
    ):
        logger.warning(
            "SSH host key verification DISABLED - vulnerable to MITM attacks."
        )
        return None

    if known_hosts_path:
        path = Path(os.path.expanduser(known_hosts_path))
        if not path.exists():
            raise FileNotFoundError(
                f"SSH host key verification required but specified "
                f"known_hosts file not found: {path}\n\n"
                f"To fix this:\n"
                f"1. Add host keys: ssh-keyscan <hostname> >> {path}\n"
                f"2. Or use default location: unset SSHFORGE_KNOWN_HOSTS\n"
                f"3. Or skip verification for the session (NOT RECOMMENDED)"
            )
        return str(path)

    return ()
