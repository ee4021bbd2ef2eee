import pytest

from grid_editor.editor_session import EditorSession


@pytest.fixture
def session():
    """A fresh 9x9 editor session."""
    return EditorSession(9)


@pytest.fixture
def small_session():
    """A fresh 4x4 editor session."""
    return EditorSession(4)


@pytest.fixture
def paint():
    """Returns a helper that paints a fresh selection through the given cells."""
    def _paint(target, *cells, ctrl_like=False):
        first, rest = cells[0], cells[1:]
        target.pointer_down(first, ctrl_like=ctrl_like)
        for cell in rest:
            target.pointer_move(cell)
        target.pointer_up()
    return _paint
