"""Application configuration.

Passed once to ``App(config)``; ``listen()`` and ``perch run`` may
override host and port at start time.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Settings read when the app freezes and while it serves.

    Every field has a default::

        app = App(AppConfig(port=3000, traceback_style="full"))
    """

    # Binding and process model for pounce
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False  # restarts on file changes, single worker
    workers: int = 1
    reload_dirs: tuple[str, ...] = ()

    # Request bodies beyond this raise PayloadTooLarge (413)
    max_content_length: int = 16 * 1024 * 1024

    # Logging
    log_level: str = "info"
    traceback_style: str = "compact"  # compact | full | minimal; PERCH_TRACEBACK overrides
