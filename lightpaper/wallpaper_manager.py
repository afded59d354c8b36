"""Wallpaper application via desktop IPC (KDE Plasma D-Bus, hyprpaper)."""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from lightpaper.config import Method


logger = logging.getLogger(__name__)

PLASMA_SCRIPT = """
var allDesktops = desktops();
for (var i = 0; i < allDesktops.length; i++) {{
    var d = allDesktops[i];
    d.wallpaperPlugin = "org.kde.image";
    d.currentConfigGroup = Array("Wallpaper", "org.kde.image", "General");
    d.writeConfig("Image", "file://{path}");
}}
"""


class WallpaperManager(ABC):
    """Applies a wallpaper through a desktop backend."""

    @abstractmethod
    def set_wallpaper(self, path: Path) -> bool:
        """
        Set the active wallpaper.

        Args:
            path: Path to wallpaper file

        Returns:
            True if successful, False otherwise
        """

    def _run_command(self, cmd: list[str]) -> bool:
        """
        Execute a backend command.

        Args:
            cmd: Command as list of strings

        Returns:
            True if successful, False otherwise
        """
        try:
            subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=5
            )
            return True
        except subprocess.CalledProcessError as e:
            logger.error(f"Command failed: {cmd[0]} {cmd[1] if len(cmd) > 1 else ''}\n{e.stderr or e.stdout}")
            return False
        except subprocess.TimeoutExpired:
            logger.error(f"Command timed out: {cmd[0]}")
            return False
        except FileNotFoundError:
            logger.error(f"Command not found: {cmd[0]}")
            return False


class KdeWallpaperManager(WallpaperManager):
    """Sets the wallpaper on every KDE Plasma desktop via D-Bus."""

    def build_script(self, path: Path) -> str:
        escaped = str(path).replace("\\", "\\\\").replace('"', '\\"')
        return PLASMA_SCRIPT.format(path=escaped)

    def set_wallpaper(self, path: Path) -> bool:
        if not path.exists():
            logger.error(f"Wallpaper file not found: {path}")
            return False

        logger.info(f"Setting wallpaper: {path.name}")
        success = self._run_command([
            'dbus-send',
            '--session',
            '--dest=org.kde.plasmashell',
            '--type=method_call',
            '--print-reply',
            '/PlasmaShell',
            'org.kde.PlasmaShell.evaluateScript',
            f'string:{self.build_script(path)}',
        ])

        if success:
            logger.info(f"Wallpaper changed to: {path.name}")
        else:
            logger.error(f"Failed to set wallpaper: {path.name}")
        return success


class HyprpaperWallpaperManager(WallpaperManager):
    """Sets the wallpaper through hyprpaper IPC."""

    def __init__(self, monitor: str = ""):
        """
        Initialize hyprpaper manager.

        Args:
            monitor: Monitor name (empty string = all monitors)
        """
        self.monitor = monitor

    def set_wallpaper(self, path: Path) -> bool:
        if not path.exists():
            logger.error(f"Wallpaper file not found: {path}")
            return False

        # Preload is unsupported on hyprpaper 0.8.x; the wallpaper command loads it anyway
        if not self._run_command(['hyprctl', 'hyprpaper', 'preload', str(path)]):
            logger.debug(f"Preload not supported or failed: {path.name} (non-fatal)")

        # Format is "monitor,path"
        wallpaper_arg = f"{self.monitor},{path}"
        logger.info(f"Setting wallpaper: {path.name}")

        success = self._run_command(['hyprctl', 'hyprpaper', 'wallpaper', wallpaper_arg])

        if success:
            logger.info(f"Wallpaper changed to: {path.name}")
        else:
            logger.error(f"Failed to set wallpaper: {path.name}")
        return success


def create_wallpaper_manager(method: Method) -> WallpaperManager:
    """Create the backend for a configured method."""
    if method.name == 'hyprpaper':
        return HyprpaperWallpaperManager(method.monitor)
    return KdeWallpaperManager()
