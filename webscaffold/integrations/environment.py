"""Host and user facts shown by the management console."""

from __future__ import annotations

import os
import platform
import socket
from pathlib import Path

from webscaffold.resolver import current_user


class HostEnvironment:
    """Collects system, user and path information, grouped by section."""

    def collect(self) -> dict[str, dict[str, str]]:
        return {
            "System Information": {
                "Hostname": socket.gethostname(),
                "OS": platform.system(),
                "Kernel": platform.release(),
                "Architecture": platform.machine(),
            },
            "User Information": {
                "User": current_user(),
                "Home": str(Path.home()),
                "Shell": os.environ.get("SHELL", ""),
            },
            "Path Information": {
                "Current Directory": os.getcwd(),
                "PATH": "\n".join(p for p in os.environ.get("PATH", "").split(os.pathsep) if p),
            },
        }
