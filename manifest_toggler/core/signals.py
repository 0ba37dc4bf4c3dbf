# manifest_toggler/core/signals.py
from PyQt6.QtCore import QObject, pyqtSignal


class GlobalSignals(QObject):
    """
    A singleton class for application-wide signals.
    Lets low-level utilities report problems without holding a reference
    to any ViewModel.
    """

    # Emits: message (str), level (str, e.g., 'info', 'warning', 'error')
    toast_requested = pyqtSignal(str, str)


# Create a single, global instance that can be imported anywhere
global_signals = GlobalSignals()
