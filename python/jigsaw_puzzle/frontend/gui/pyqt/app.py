"""PyQt6 GUI frontend: fully self-contained.

Includes main menu, puzzle selection, gameplay and the congratulations
screen.  The board is a single custom-painted widget that forwards mouse
events to the game engine and repaints whenever the engine notifies.
"""

from __future__ import annotations

import random
import sys

from PIL import Image
from PyQt6.QtCore import QPointF, QRectF, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import (
    QColor,
    QCursor,
    QFont,
    QIcon,
    QImage,
    QKeyEvent,
    QMouseEvent,
    QPainter,
    QPaintEvent,
    QPen,
    QPixmap,
    QResizeEvent,
    QTransform,
    QWheelEvent,
)
from PyQt6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSpacerItem,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from jigsaw_puzzle.backend.engine.gameplay import PuzzleGame
from jigsaw_puzzle.backend.engine.gamestate import StateEvent
from jigsaw_puzzle.backend.models.geometry import Point, Rect
from jigsaw_puzzle.backend.models.piece import PieceState, snap_rotation
from jigsaw_puzzle.backend.models.puzzle import Puzzle
from jigsaw_puzzle.config import PILE_GAP, PILE_TOP_MARGIN, RELAYOUT_DELAY_MS

# ---------------------------------------------------------------------------
# Colours
# ---------------------------------------------------------------------------
_BG = "#ffffff"
_CANVAS = "#e1e1e1"
_GRID = "#c8c8c8"
_PILE = "#f2f2f2"
_TEXT = "#282828"
_SUBTEXT = "#787878"
_GREEN = "#34a853"
_GREEN_H = "#58c474"
_GRAY = "#969696"
_GRAY_H = "#afafaf"

_GLOBAL_CSS = f"""
    QMainWindow, QWidget#page {{ background: {_BG}; }}
    QLabel {{ color: {_TEXT}; }}
"""

_MARGIN = 24
_PILE_FRACTION = 0.2
_REF_W, _REF_H = 100, 75


def _styled_btn(
    text: str,
    *,
    bg: str = _GREEN,
    hover: str = _GREEN_H,
    fg: str = "#ffffff",
    font_size: int = 18,
    min_w: int = 0,
    min_h: int = 52,
    radius: int = 10,
) -> QPushButton:
    btn = QPushButton(text)
    btn.setFont(QFont("Helvetica", font_size, QFont.Weight.Bold))
    btn.setMinimumHeight(min_h)
    if min_w:
        btn.setMinimumWidth(min_w)
    btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
    btn.setCursor(Qt.CursorShape.PointingHandCursor)
    btn.setStyleSheet(
        f"QPushButton {{ background:{bg}; color:{fg};"
        f" border:none; border-radius:{radius}px; padding:6px 18px; }}"
        f" QPushButton:hover {{ background:{hover}; }}"
    )
    return btn


def _back_btn() -> QPushButton:
    return _styled_btn(
        "←", bg=_BG, hover=_CANVAS, fg=_GREEN, font_size=22, min_w=64, min_h=40
    )


def _to_pixmap(image: Image.Image) -> QPixmap:
    rgba = image.convert("RGBA")
    w, h = rgba.size
    qimg = QImage(rgba.tobytes(), w, h, 4 * w, QImage.Format.Format_RGBA8888)
    # QImage does not own the buffer; copy before it goes out of scope.
    return QPixmap.fromImage(qimg.copy())


def _fit(size: tuple[int, int], box: QRectF) -> QRectF:
    """Largest rect with the aspect ratio of *size* centred inside *box*."""
    w, h = size
    scale = min(box.width() / w, box.height() / h)
    fw, fh = w * scale, h * scale
    c = box.center()
    return QRectF(c.x() - fw / 2, c.y() - fh / 2, fw, fh)


def _qrect(rect: Rect) -> QRectF:
    return QRectF(rect.x, rect.y, rect.width, rect.height)


# ═══════════════════════════════════════════════════════════════════════════
# Pages
# ═══════════════════════════════════════════════════════════════════════════


class _MenuPage(QWidget):
    """Title with play and exit buttons."""

    def __init__(self) -> None:
        super().__init__()
        self.setObjectName("page")

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(20)

        title = QLabel("Puzzle Game")
        title.setFont(QFont("Helvetica", 40, QFont.Weight.Bold))
        title.setStyleSheet(f"color:{_GREEN};")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(title)

        self.play_btn = _styled_btn("Play", min_w=200)
        root.addWidget(self.play_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self.exit_btn = _styled_btn("Exit", bg=_GRAY, hover=_GRAY_H, min_w=200)
        root.addWidget(self.exit_btn, alignment=Qt.AlignmentFlag.AlignCenter)


class _ChoosePage(QWidget):
    """The one available puzzle, shown as a clickable thumbnail."""

    def __init__(self, preview: QPixmap) -> None:
        super().__init__()
        self.setObjectName("page")

        root = QVBoxLayout(self)
        root.setContentsMargins(_MARGIN // 2, 12, _MARGIN // 2, 12)

        top = QHBoxLayout()
        self.back_btn = _back_btn()
        top.addWidget(self.back_btn)
        top.addStretch(1)
        root.addLayout(top)

        root.addStretch(1)
        title = QLabel("Choose a puzzle")
        title.setFont(QFont("Helvetica", 22, QFont.Weight.Bold))
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(title)
        root.addSpacerItem(QSpacerItem(0, 16))

        self.puzzle_btn = QPushButton()
        self.puzzle_btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.puzzle_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        thumb = preview.scaled(
            360, 270,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.puzzle_btn.setIcon(QIcon(thumb))
        self.puzzle_btn.setIconSize(thumb.size())
        self.puzzle_btn.setStyleSheet(
            f"QPushButton {{ border:3px solid {_GREEN}; padding:0; }}"
        )
        root.addWidget(self.puzzle_btn, alignment=Qt.AlignmentFlag.AlignCenter)
        root.addStretch(2)


class _BoardWidget(QWidget):
    """Canvas grid plus pile column, painted from the engine's state."""

    completed = pyqtSignal()

    def __init__(self, puzzle: Puzzle, game: PuzzleGame) -> None:
        super().__init__()
        self._puzzle = puzzle
        self.game = game
        self._final = _to_pixmap(puzzle.final_image)
        self._pixmaps = {p.id: _to_pixmap(p.image) for p in puzzle.pieces}
        self._scaled: dict[tuple[str, int], QPixmap] = {}
        self._scaled_size = (0, 0)
        self._drag: tuple[str, float, float] | None = None  # id, dx, dy
        self._pile_scroll = 0.0
        self.zoomed = False

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        # debounced: a burst of resizes flushes the pile layout once
        self._layout_timer = QTimer(self)
        self._layout_timer.setSingleShot(True)
        self._layout_timer.setInterval(RELAYOUT_DELAY_MS)
        self._layout_timer.timeout.connect(self._flush_layout)
        self._unsubscribe = game.subscribe(self._on_state_event)

    # -- engine wiring --

    def _on_state_event(self, event: StateEvent, piece_id: str | None) -> None:
        self.update()
        if event is StateEvent.COMPLETED:
            # leave the current mouse handler before switching pages
            QTimer.singleShot(0, self.completed.emit)

    def detach(self) -> None:
        self._unsubscribe()

    def _flush_layout(self) -> None:
        if self.game.flush_layout():
            self.update()

    # -- geometry --

    def _regions(self) -> tuple[QRectF, QRectF]:
        w, h = self.width(), self.height()
        pile_w = max(140, int(w * _PILE_FRACTION))
        pile = QRectF(w - pile_w - _MARGIN, 0, pile_w, h - _MARGIN)
        avail = QRectF(_MARGIN, 0, pile.left() - 2 * _MARGIN, h - _MARGIN)
        return _fit(self._puzzle.final_image.size, avail), pile

    def apply_geometry(self) -> None:
        canvas, pile = self._regions()
        count = len(self.game.state.pile_pieces)
        content = PILE_TOP_MARGIN + count * (self.game.piece_size.height + PILE_GAP)
        self._pile_scroll = max(0.0, min(self._pile_scroll, content - pile.height()))
        self.game.set_canvas_area(
            Rect(canvas.x(), canvas.y(), canvas.width(), canvas.height())
        )
        self.game.set_pile_area(
            Rect(pile.x(), pile.y() - self._pile_scroll, pile.width(), pile.height())
        )
        self._layout_timer.start()

    def resizeEvent(self, event: QResizeEvent | None) -> None:  # noqa: N802
        super().resizeEvent(event)
        if self.width() > 0 and self.height() > 0:
            self.apply_geometry()

    # -- pieces --

    def _piece_pixmap(self, piece: PieceState) -> QPixmap:
        size = self.game.piece_size
        w, h = max(1, round(size.width)), max(1, round(size.height))
        if (w, h) != self._scaled_size:
            # every piece shares one size, so older scales are dead
            self._scaled.clear()
            self._scaled_size = (w, h)
        key = (piece.id, piece.current_rotation)
        pm = self._scaled.get(key)
        if pm is None:
            pm = self._pixmaps[piece.id].scaled(
                w, h,
                Qt.AspectRatioMode.IgnoreAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            )
            pm = pm.transformed(
                QTransform().rotate(90 * piece.current_rotation),
                Qt.TransformationMode.SmoothTransformation,
            )
            self._scaled[key] = pm
        return pm

    def _piece_rect(self, piece: PieceState) -> QRectF:
        pm = self._piece_pixmap(piece)
        return QRectF(
            piece.position.x - pm.width() / 2,
            piece.position.y - pm.height() / 2,
            pm.width(),
            pm.height(),
        )

    def _piece_under(self, pos: QPointF) -> PieceState | None:
        # hit-test against the positions the next drag will see
        self.game.flush_layout()
        _, pile = self._regions()
        for piece in reversed(self.game.state.pile_pieces):
            if piece.is_in_pile and not pile.contains(pos):
                continue
            if self._piece_rect(piece).contains(pos):
                return piece
        return None

    def rotate_at(self, pos: QPointF) -> None:
        if self._drag is not None:
            piece = self.game.piece(self._drag[0])
        else:
            piece = self._piece_under(pos)
        if piece is not None:
            self.game.rotate(piece.id, snap_rotation(piece.current_rotation, 90))

    # -- painting --

    def paintEvent(self, event: QPaintEvent | None) -> None:  # noqa: N802
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        canvas, pile = self._regions()
        state = self.game.state

        p.fillRect(canvas, QColor(_CANVAS))
        p.setPen(QPen(QColor(_GRID), 1))
        if state.cell_centers:
            for r in range(state.rows):
                for c in range(state.columns):
                    p.drawRect(_qrect(state.cell_rect(r, c)))

        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(QColor(_PILE))
        p.drawRoundedRect(pile, 8, 8)

        for piece in state:
            if piece.is_placed:
                p.drawPixmap(self._piece_rect(piece).topLeft(), self._piece_pixmap(piece))

        dragged = None
        p.save()
        p.setClipRect(pile)
        for piece in state.pile_pieces:
            if piece.id == self.game.dragged_id:
                dragged = piece
                continue
            p.drawPixmap(self._piece_rect(piece).topLeft(), self._piece_pixmap(piece))
        p.restore()
        if dragged is not None:
            p.drawPixmap(self._piece_rect(dragged).topLeft(), self._piece_pixmap(dragged))

        if self.zoomed:
            p.fillRect(self.rect(), QColor(0, 0, 0, 204))
            p.drawPixmap(
                _fit(self._puzzle.final_image.size, QRectF(self.rect())).toRect(),
                self._final,
            )
        p.end()

    # -- mouse --

    def mousePressEvent(self, event: QMouseEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        if self.zoomed:
            self.zoomed = False
            self.update()
            return
        pos = event.position()
        if event.button() == Qt.MouseButton.RightButton:
            self.rotate_at(pos)
            return
        if event.button() != Qt.MouseButton.LeftButton:
            return
        piece = self._piece_under(pos)
        if piece is not None and self.game.start_drag(piece.id):
            self._drag = (
                piece.id,
                piece.position.x - pos.x(),
                piece.position.y - pos.y(),
            )

    def mouseMoveEvent(self, event: QMouseEvent | None) -> None:  # noqa: N802
        if event is None or self._drag is None:
            return
        pid, dx, dy = self._drag
        pos = event.position()
        self.game.update_drag_position(pid, Point(pos.x() + dx, pos.y() + dy))

    def mouseReleaseEvent(self, event: QMouseEvent | None) -> None:  # noqa: N802
        if event is None or event.button() != Qt.MouseButton.LeftButton:
            return
        if self._drag is None:
            return
        pid, dx, dy = self._drag
        self._drag = None
        pos = event.position()
        self.game.end_drag(pid, Point(pos.x() + dx, pos.y() + dy))
        self.apply_geometry()

    def wheelEvent(self, event: QWheelEvent | None) -> None:  # noqa: N802
        if event is None or self._drag is not None:
            return
        _, pile = self._regions()
        if pile.contains(event.position()):
            self._pile_scroll -= event.angleDelta().y() / 3
            self.apply_geometry()
            # scrolling is a user action: move the pile now
            self._layout_timer.stop()
            self._flush_layout()

    def keyPressEvent(self, event: QKeyEvent | None) -> None:  # noqa: N802
        if event is not None and event.key() == Qt.Key.Key_R:
            self.rotate_at(QPointF(self.mapFromGlobal(QCursor.pos())))
        else:
            super().keyPressEvent(event)


class _GamePage(QWidget):
    """Header (back button, progress, reference image) above the board."""

    def __init__(self, puzzle: Puzzle, rng: random.Random) -> None:
        super().__init__()
        self.setObjectName("page")
        self.game = PuzzleGame(puzzle, rng=rng)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 8, 0, 0)
        root.setSpacing(8)

        top = QHBoxLayout()
        top.setContentsMargins(_MARGIN // 2, 0, _MARGIN, 0)
        self.back_btn = _back_btn()
        top.addWidget(self.back_btn)

        self._progress = QLabel()
        self._progress.setFont(QFont("Helvetica", 12))
        self._progress.setStyleSheet(f"color:{_SUBTEXT};")
        self._progress.setAlignment(Qt.AlignmentFlag.AlignCenter)
        top.addWidget(self._progress, 1)

        self.ref_btn = QPushButton()
        self.ref_btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.ref_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        ref = _to_pixmap(puzzle.final_image).scaled(
            _REF_W, _REF_H,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.ref_btn.setIcon(QIcon(ref))
        self.ref_btn.setIconSize(ref.size())
        self.ref_btn.setStyleSheet("QPushButton { border:none; padding:0; }")
        self.ref_btn.clicked.connect(self._zoom)
        top.addWidget(self.ref_btn)
        root.addLayout(top)

        self.board = _BoardWidget(puzzle, self.game)
        root.addWidget(self.board, 1)

        self.game.subscribe(self._on_state_event)
        self._sync()

    def _on_state_event(self, event: StateEvent, piece_id: str | None) -> None:
        if event in (StateEvent.PLACED, StateEvent.COMPLETED):
            self._sync()

    def _sync(self) -> None:
        state = self.game.state
        self._progress.setText(
            f"{state.placed_count} / {len(state)} placed     "
            "drag: left button     rotate: right button / R     scroll pile: wheel"
        )

    def _zoom(self) -> None:
        self.board.zoomed = True
        self.board.update()


class _CongratsPage(QWidget):
    """Final image growing into view under a banner; any click continues."""

    clicked = pyqtSignal()

    def __init__(self, final: QPixmap, size: tuple[int, int]) -> None:
        super().__init__()
        self.setObjectName("page")
        self._final = final
        self._size = size
        self._scale = 0.1

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._grow)
        self._timer.start(16)

    def _grow(self) -> None:
        self._scale = min(1.0, self._scale + 0.9 * 16 / 1000)
        if self._scale >= 1.0:
            self._timer.stop()
        self.update()

    def paintEvent(self, event: QPaintEvent | None) -> None:  # noqa: N802
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        full = _fit(self._size, QRectF(self.rect()))
        c = full.center()
        w, h = full.width() * self._scale, full.height() * self._scale
        p.drawPixmap(QRectF(c.x() - w / 2, c.y() - h / 2, w, h).toRect(), self._final)

        font = QFont("Helvetica", 36, QFont.Weight.Bold)
        p.setFont(font)
        text = "Great Job!"
        bounds = p.fontMetrics().boundingRect(text)
        banner = QRectF(0, 0, bounds.width() + 40, bounds.height() + 24)
        banner.moveCenter(QPointF(self.rect().center()))
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(QColor(0, 0, 0, 128))
        p.drawRoundedRect(banner, 10, 10)
        p.setPen(QColor("#ffffff"))
        p.drawText(banner, Qt.AlignmentFlag.AlignCenter, text)
        p.end()

    def mousePressEvent(self, event: QMouseEvent | None) -> None:  # noqa: N802
        self.clicked.emit()


# ═══════════════════════════════════════════════════════════════════════════
# Main window
# ═══════════════════════════════════════════════════════════════════════════

_IDX_MENU = 0
_IDX_CHOOSE = 1
_IDX_GAME = 2
_IDX_CONGRATS = 3


class _MainWindow(QMainWindow):
    def __init__(self, puzzle: Puzzle, seed: int | None) -> None:
        super().__init__()
        self._puzzle = puzzle
        self._rng = random.Random(seed)
        self._final = _to_pixmap(puzzle.final_image)

        self.setWindowTitle("Puzzle Game")
        self.setStyleSheet(_GLOBAL_CSS)
        self.setMinimumSize(800, 560)
        self.resize(1180, 820)

        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        self._menu = _MenuPage()
        self._menu.play_btn.clicked.connect(self._show_choose)
        self._menu.exit_btn.clicked.connect(self.close)
        self._stack.addWidget(self._menu)  # 0

        self._choose = _ChoosePage(self._final)
        self._choose.back_btn.clicked.connect(self._show_menu)
        self._choose.puzzle_btn.clicked.connect(self._on_play)
        self._stack.addWidget(self._choose)  # 1

        # placeholders (replaced dynamically)
        self._game_page: _GamePage | None = None
        self._stack.addWidget(QWidget())  # 2
        self._stack.addWidget(QWidget())  # 3

        self._stack.setCurrentIndex(_IDX_MENU)

    # -- navigation ---

    def _replace(self, idx: int, page: QWidget) -> None:
        old = self._stack.widget(idx)
        self._stack.removeWidget(old)
        old.deleteLater()
        self._stack.insertWidget(idx, page)
        self._stack.setCurrentIndex(idx)

    def _show_menu(self) -> None:
        self._stack.setCurrentIndex(_IDX_MENU)

    def _show_choose(self) -> None:
        self._stack.setCurrentIndex(_IDX_CHOOSE)

    def _on_play(self) -> None:
        if self._game_page is not None:
            self._game_page.board.detach()
        page = _GamePage(self._puzzle, self._rng)
        page.back_btn.clicked.connect(self._show_choose)
        page.board.completed.connect(self._show_congrats)
        self._game_page = page
        self._replace(_IDX_GAME, page)
        page.board.setFocus()

    def _show_congrats(self) -> None:
        page = _CongratsPage(self._final, self._puzzle.final_image.size)
        page.clicked.connect(self._show_menu)
        self._replace(_IDX_CONGRATS, page)

    # -- keyboard ---

    def keyPressEvent(self, event: QKeyEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        key = event.key()
        idx = self._stack.currentIndex()

        if idx == _IDX_MENU:
            if key == Qt.Key.Key_Return:
                self._show_choose()
            elif key in (Qt.Key.Key_Q, Qt.Key.Key_Escape):
                self.close()
        elif idx == _IDX_CHOOSE:
            if key == Qt.Key.Key_Return:
                self._on_play()
            elif key == Qt.Key.Key_Escape:
                self._show_menu()
        elif idx == _IDX_GAME:
            if key == Qt.Key.Key_Escape:
                self._show_choose()
        elif idx == _IDX_CONGRATS:
            self._show_menu()
        else:
            super().keyPressEvent(event)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(puzzle: Puzzle, seed: int | None = None) -> None:
    """Launch the PyQt6 GUI (opens directly to the menu)."""
    qapp = QApplication.instance() or QApplication(sys.argv)
    window = _MainWindow(puzzle, seed)
    window.show()
    qapp.exec()
