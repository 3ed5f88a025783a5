# agentsync Platform Detection Utilities
# Platform identification used to pick filesystem backends

import platform

# Platform name mapping: system name -> agentsync platform name
_PLATFORM_MAP: dict[str, str] = {
    "Darwin": "macos",
    "Linux": "linux",
    "Windows": "windows",
}


def get_current_platform() -> str:
    """
    Get the current platform identifier.

    Returns:
        Platform string: "macos", "linux", or "windows".
    """
    system = platform.system()
    return _PLATFORM_MAP.get(system, system.lower())


def is_windows() -> bool:
    """Check if running on Windows."""
    return get_current_platform() == "windows"
