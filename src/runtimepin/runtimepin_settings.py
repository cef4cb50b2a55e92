"""
Defines the default filesystem locations and names used by runtimepin.
"""

from pathlib import PurePath


class RuntimePinSettings:
    """
    Provides the various settings for runtimepin.
    """

    CA_BUNDLE_ENV_VAR = "RUNTIMEPIN_CA_BUNDLE"
    CONFIG_ENV_VAR = "RUNTIMEPIN_CONFIG"
    SYSTEM_CONFIG_PATH = "/etc/runtimepin.toml"
    DIST_HOST = "nodejs.org"

    @staticmethod
    def get_install_root() -> str:
        """
        Returns the directory the runtime is installed into
        """
        return str(PurePath("/usr", "local", "lib", "nodejs"))

    @staticmethod
    def get_bin_directory() -> str:
        """
        Returns the shared directory that holds the launcher symlinks
        """
        return str(PurePath("/usr", "local", "bin"))

    @staticmethod
    def get_legacy_directory() -> str:
        """
        Returns the directory of the system-wide version-manager installation that is replaced by runtimepin
        """
        return str(PurePath("/usr", "local", "nvm"))
