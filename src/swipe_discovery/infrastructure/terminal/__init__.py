"""Line-oriented terminal front-end."""

from swipe_discovery.infrastructure.terminal.app import TerminalApp

__all__ = ["TerminalApp"]
