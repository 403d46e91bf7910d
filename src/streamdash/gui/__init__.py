"""Qt integration for streamdash.

Only :mod:`qt_ticker` lives here; it imports PySide6 lazily so the core
pipeline stays usable on machines without Qt.
"""

__all__ = ["QtTickSource"]


def __getattr__(name: str):
    if name == "QtTickSource":
        from .qt_ticker import QtTickSource

        return QtTickSource
    raise AttributeError(name)
