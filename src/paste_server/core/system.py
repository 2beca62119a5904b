from pathlib import Path

import platformdirs


APP_NAME = "paste-server"


def get_xdg_config_home() -> Path:
    """Get the XDG_CONFIG_HOME directory using platformdirs.

    Returns:
        Path to the user config directory (cross-platform).
    """
    return Path(platformdirs.user_config_dir())


def get_xdg_data_home() -> Path:
    """Get the XDG_DATA_HOME directory using platformdirs.

    Returns:
        Path to the user data directory (cross-platform).
    """
    return Path(platformdirs.user_data_dir())


def get_paste_server_config_dir() -> Path:
    return get_xdg_config_home() / APP_NAME


def get_paste_server_data_dir() -> Path:
    return get_xdg_data_home() / APP_NAME
