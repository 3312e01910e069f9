from enum import Enum

from PySide6.QtCore import QEvent, QObject, Signal


class InputMethod(str, Enum):
    KEYBOARD = "keyboard"
    MOUSE = "mouse"


class InputMethodTracker(QObject):
    """
    Remembers whether the operator last used the keyboard or the mouse.
    Install on the QApplication; purely cosmetic (focus highlight style).
    """

    changed = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._method = InputMethod.MOUSE

    @property
    def method(self) -> InputMethod:
        return self._method

    def _set(self, method: InputMethod):
        if method is not self._method:
            self._method = method
            self.changed.emit(method.value)

    def eventFilter(self, obj, event):
        t = event.type()
        if t == QEvent.KeyPress:
            self._set(InputMethod.KEYBOARD)
        elif t == QEvent.MouseButtonPress:
            self._set(InputMethod.MOUSE)
        return False
