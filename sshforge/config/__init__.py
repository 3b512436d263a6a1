"""Configuration module for sshforge.

Provides focused pieces for different configuration concerns:
- Settings: Environment variable configuration
- host_keys: Host key verification policy for both transports
"""

from sshforge.config.host_keys import host_key_arguments, resolve_known_hosts
from sshforge.config.settings import Settings

__all__ = ["Settings", "host_key_arguments", "resolve_known_hosts"]
