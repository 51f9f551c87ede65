"""Pygame GUI frontend: fully self-contained.

Includes main menu, puzzle selection, gameplay and the congratulations
screen.  Pieces are dragged with the left button and rotated with the
right button (or ``R`` while hovering); the mouse wheel scrolls the pile.
"""

from __future__ import annotations

import enum
import logging
import random

import pygame
from PIL import Image

from jigsaw_puzzle.backend.engine.gameplay import PuzzleGame
from jigsaw_puzzle.backend.engine.gamestate import StateEvent
from jigsaw_puzzle.backend.models.geometry import Point, Rect
from jigsaw_puzzle.backend.models.piece import PieceState, snap_rotation
from jigsaw_puzzle.backend.models.puzzle import Puzzle
from jigsaw_puzzle.config import PILE_GAP, PILE_TOP_MARGIN, RELAYOUT_DELAY_MS

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
COL_BG = (255, 255, 255)
COL_CANVAS = (225, 225, 225)
COL_GRID = (200, 200, 200)
COL_PILE = (242, 242, 242)
COL_TEXT = (40, 40, 40)
COL_SUBTEXT = (120, 120, 120)
COL_GREEN = (52, 168, 83)
COL_GREEN_H = (88, 196, 116)
COL_GRAY = (150, 150, 150)
COL_GRAY_H = (175, 175, 175)
COL_WHITE = (255, 255, 255)
COL_SHADE = (0, 0, 0, 204)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 1180, 820
HEADER_H = 70
MARGIN = 24
PILE_FRACTION = 0.2  # share of the window width given to the pile column
REF_W, REF_H = 100, 75
FPS = 60


# ---------------------------------------------------------------------------
# Screen enum
# ---------------------------------------------------------------------------
class _Screen(enum.Enum):
    MENU = "menu"
    CHOOSE = "choose"
    PLAYING = "playing"
    CONGRATS = "congrats"


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_GREEN,
        hover: tuple = COL_GREEN_H,
        fg: tuple = COL_WHITE,
        radius: int = 10,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        c = self.hover if self._hot else self.bg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------
def _to_surface(image: Image.Image) -> pygame.Surface:
    rgba = image.convert("RGBA")
    return pygame.image.frombytes(rgba.tobytes(), rgba.size, "RGBA").convert_alpha()


def _to_pg_rect(rect: Rect) -> pygame.Rect:
    return pygame.Rect(round(rect.x), round(rect.y), round(rect.width), round(rect.height))


def _fit(size: tuple[int, int], box: pygame.Rect) -> pygame.Rect:
    """Largest rect with the aspect ratio of *size* centred inside *box*."""
    w, h = size
    scale = min(box.width / w, box.height / h)
    fw, fh = max(1, int(w * scale)), max(1, int(h * scale))
    return pygame.Rect(box.centerx - fw // 2, box.centery - fh // 2, fw, fh)


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(self, puzzle: Puzzle, seed: int | None = None) -> None:
        self._puzzle = puzzle
        self._rng = random.Random(seed)

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H), pygame.RESIZABLE)
        pygame.display.set_caption("Puzzle Game")
        self._clock = pygame.time.Clock()

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 44, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 26, bold=True)
        self._f_btn = pygame.font.SysFont("Helvetica", 24, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 14)

        # Full-resolution artwork, converted once
        self._final_surf = _to_surface(puzzle.final_image)
        self._piece_surfs = {p.id: _to_surface(p.image) for p in puzzle.pieces}
        self._scaled: dict[tuple[str, int], pygame.Surface] = {}
        self._scaled_size = (0, 0)

        self._screen = _Screen.MENU
        self._game: PuzzleGame | None = None
        self._unsubscribe = None
        self._completed = False
        self._zoomed = False
        self._drag: tuple[str, float, float] | None = None  # id, dx, dy
        self._pile_scroll = 0.0
        self._layout_due: int | None = None
        self._congrats_started = 0

        self._build_btns()

    # ── buttons ─────────────────────────────────────────────────────────────

    def _build_btns(self) -> None:
        w, h = self._surf.get_size()
        self._play_btn = _Btn((w // 2 - 100, h // 2 - 20, 200, 56), "Play", self._f_btn)
        self._exit_btn = _Btn(
            (w // 2 - 100, h // 2 + 56, 200, 56), "Exit", self._f_btn,
            bg=COL_GRAY, hover=COL_GRAY_H,
        )
        self._back_btn = _Btn(
            (MARGIN // 2, (HEADER_H - 40) // 2, 64, 40), "<", self._f_btn,
            bg=COL_BG, hover=COL_CANVAS, fg=COL_GREEN,
        )
        thumb = _fit(self._puzzle.final_image.size, pygame.Rect(0, 0, 360, 270))
        thumb.center = (w // 2, h // 2)
        self._thumb_rect = thumb
        self._menu_all = [self._play_btn, self._exit_btn]

    # ── geometry ────────────────────────────────────────────────────────────

    def _regions(self) -> tuple[pygame.Rect, pygame.Rect]:
        """Return (canvas, pile) screen regions for the current window size."""
        w, h = self._surf.get_size()
        pile_w = max(140, int(w * PILE_FRACTION))
        pile = pygame.Rect(w - pile_w - MARGIN, HEADER_H, pile_w, h - HEADER_H - MARGIN)
        avail = pygame.Rect(MARGIN, HEADER_H, pile.left - 2 * MARGIN, h - HEADER_H - MARGIN)
        canvas = _fit(self._puzzle.final_image.size, avail)
        return canvas, pile

    def _apply_geometry(self) -> None:
        """Push the current window geometry into the game and schedule a relayout."""
        game = self._game
        if game is None:
            return
        canvas, pile = self._regions()
        self._clamp_scroll(pile)
        game.set_canvas_area(Rect(canvas.x, canvas.y, canvas.width, canvas.height))
        game.set_pile_area(
            Rect(pile.x, pile.y - self._pile_scroll, pile.width, pile.height)
        )
        self._layout_due = pygame.time.get_ticks() + RELAYOUT_DELAY_MS

    def _clamp_scroll(self, pile: pygame.Rect) -> None:
        game = self._game
        assert game is not None
        count = len(game.state.pile_pieces)
        step = game.piece_size.height + PILE_GAP
        content = PILE_TOP_MARGIN + count * step
        self._pile_scroll = max(0.0, min(self._pile_scroll, content - pile.height))

    def _piece_surface(self, piece: PieceState) -> pygame.Surface:
        size = self._game.piece_size  # type: ignore[union-attr]
        w, h = max(1, round(size.width)), max(1, round(size.height))
        if (w, h) != self._scaled_size:
            # every piece shares one size, so older scales are dead
            self._scaled.clear()
            self._scaled_size = (w, h)
        key = (piece.id, piece.current_rotation)
        surf = self._scaled.get(key)
        if surf is None:
            surf = pygame.transform.smoothscale(self._piece_surfs[piece.id], (w, h))
            # Quarter turns are clockwise; pygame rotates counter-clockwise.
            surf = pygame.transform.rotate(surf, -90 * piece.current_rotation)
            self._scaled[key] = surf
        return surf

    def _piece_rect(self, piece: PieceState) -> pygame.Rect:
        surf = self._piece_surface(piece)
        rect = surf.get_rect()
        rect.center = (round(piece.position.x), round(piece.position.y))
        return rect

    def _ref_rect(self) -> pygame.Rect:
        w, _ = self._surf.get_size()
        return pygame.Rect(w - REF_W - MARGIN, (HEADER_H - REF_H) // 2, REF_W, REF_H)

    def _piece_under(self, pos: tuple[int, int]) -> PieceState | None:
        """Topmost unplaced piece under *pos* (pile pieces only inside the pile)."""
        game = self._game
        assert game is not None
        # hit-test against the positions the next drag will see
        game.flush_layout()
        _, pile = self._regions()
        for piece in reversed(game.state.pile_pieces):
            if piece.is_in_pile and not pile.collidepoint(pos):
                continue
            if self._piece_rect(piece).collidepoint(pos):
                return piece
        return None

    # ── drawing ─────────────────────────────────────────────────────────────

    def _blit_center(self, rendered: pygame.Surface, y: int) -> None:
        w = self._surf.get_width()
        self._surf.blit(rendered, ((w - rendered.get_width()) // 2, y))

    def _draw_menu(self) -> None:
        self._surf.fill(COL_BG)
        self._blit_center(
            self._f_big.render("Puzzle Game", True, COL_GREEN),
            self._play_btn.rect.top - 120,
        )
        for b in self._menu_all:
            b.draw(self._surf)

    def _draw_choose(self) -> None:
        self._surf.fill(COL_BG)
        self._back_btn.draw(self._surf)
        self._blit_center(
            self._f_title.render("Choose a puzzle", True, COL_TEXT),
            self._thumb_rect.top - 60,
        )
        thumb = pygame.transform.smoothscale(self._final_surf, self._thumb_rect.size)
        self._surf.blit(thumb, self._thumb_rect.topleft)
        pygame.draw.rect(self._surf, COL_GREEN, self._thumb_rect, width=3)

    def _draw_game(self) -> None:
        self._surf.fill(COL_BG)
        game = self._game
        assert game is not None
        canvas, pile = self._regions()

        # canvas and grid
        pygame.draw.rect(self._surf, COL_CANVAS, canvas)
        state = game.state
        if state.cell_centers:
            for r in range(state.rows):
                for c in range(state.columns):
                    pygame.draw.rect(
                        self._surf, COL_GRID, _to_pg_rect(state.cell_rect(r, c)), width=1
                    )

        # pile background
        pygame.draw.rect(self._surf, COL_PILE, pile, border_radius=8)

        # placed pieces, then the pile (clipped), then the dragged piece on top
        dragged = None
        for piece in state:
            if piece.is_placed:
                self._surf.blit(self._piece_surface(piece), self._piece_rect(piece))
        self._surf.set_clip(pile)
        for piece in state.pile_pieces:
            if piece.id == game.dragged_id:
                dragged = piece
                continue
            self._surf.blit(self._piece_surface(piece), self._piece_rect(piece))
        self._surf.set_clip(None)
        if dragged is not None:
            self._surf.blit(self._piece_surface(dragged), self._piece_rect(dragged))

        # header
        self._back_btn.draw(self._surf)
        self._blit_center(
            self._f_small.render(
                f"{state.placed_count} / {len(state)} placed     "
                "drag: left button     rotate: right button / R     scroll pile: wheel",
                True,
                COL_SUBTEXT,
            ),
            HEADER_H // 2 - 8,
        )

        # reference image
        ref = self._ref_rect()
        self._surf.blit(pygame.transform.smoothscale(self._final_surf, ref.size), ref)
        if self._zoomed:
            w, h = self._surf.get_size()
            shade = pygame.Surface((w, h), pygame.SRCALPHA)
            shade.fill(COL_SHADE)
            self._surf.blit(shade, (0, 0))
            big = _fit(self._puzzle.final_image.size, pygame.Rect(0, 0, w, h))
            self._surf.blit(pygame.transform.smoothscale(self._final_surf, big.size), big)

    def _draw_congrats(self) -> None:
        self._surf.fill(COL_BG)
        w, h = self._surf.get_size()
        # ease in from 10 % to full size over one second
        t = min(1.0, (pygame.time.get_ticks() - self._congrats_started) / 1000)
        scale = 0.1 + 0.9 * (t * t * (3 - 2 * t))
        full = _fit(self._puzzle.final_image.size, pygame.Rect(0, 0, w, h))
        sw, sh = max(1, int(full.width * scale)), max(1, int(full.height * scale))
        img = pygame.transform.smoothscale(self._final_surf, (sw, sh))
        self._surf.blit(img, ((w - sw) // 2, (h - sh) // 2))

        lbl = self._f_big.render("Great Job!", True, COL_WHITE)
        banner = pygame.Surface(
            (lbl.get_width() + 40, lbl.get_height() + 24), pygame.SRCALPHA
        )
        banner.fill((0, 0, 0, 128))
        banner.blit(lbl, (20, 12))
        self._surf.blit(
            banner,
            ((w - banner.get_width()) // 2, (h - banner.get_height()) // 2),
        )

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_menu(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in self._menu_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._play_btn.hit(ev.pos):
                self._screen = _Screen.CHOOSE
            elif self._exit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._screen = _Screen.CHOOSE
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    def _ev_choose(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._back_btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._back_btn.hit(ev.pos):
                self._screen = _Screen.MENU
            elif self._thumb_rect.collidepoint(ev.pos):
                self._start_game()
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_game()
            elif ev.key == pygame.K_ESCAPE:
                self._screen = _Screen.MENU
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        game = self._game
        assert game is not None
        if self._zoomed:
            if ev.type == pygame.MOUSEBUTTONDOWN or ev.type == pygame.KEYDOWN:
                self._zoomed = False
            return True

        if ev.type == pygame.MOUSEMOTION:
            self._back_btn.motion(ev.pos)
            if self._drag is not None:
                pid, dx, dy = self._drag
                game.update_drag_position(pid, Point(ev.pos[0] + dx, ev.pos[1] + dy))
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._back_btn.hit(ev.pos):
                self._leave_game(_Screen.CHOOSE)
                return True
            if self._ref_rect().collidepoint(ev.pos):
                self._zoomed = True
                return True
            piece = self._piece_under(ev.pos)
            if piece is not None and game.start_drag(piece.id):
                self._drag = (
                    piece.id,
                    piece.position.x - ev.pos[0],
                    piece.position.y - ev.pos[1],
                )
        elif ev.type == pygame.MOUSEBUTTONUP and ev.button == 1:
            if self._drag is not None:
                pid, dx, dy = self._drag
                self._drag = None
                game.end_drag(pid, Point(ev.pos[0] + dx, ev.pos[1] + dy))
                self._apply_geometry()
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 3:
            self._rotate_at(ev.pos)
        elif ev.type == pygame.MOUSEWHEEL:
            _, pile = self._regions()
            if self._drag is None and pile.collidepoint(pygame.mouse.get_pos()):
                self._pile_scroll -= ev.y * 40
                self._apply_geometry()
                # scrolling is a user action: move the pile now
                game.flush_layout()
                self._layout_due = None
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_r:
                self._rotate_at(pygame.mouse.get_pos())
            elif ev.key == pygame.K_ESCAPE:
                self._leave_game(_Screen.CHOOSE)
        return True

    def _ev_congrats(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEBUTTONDOWN or ev.type == pygame.KEYDOWN:
            self._screen = _Screen.MENU
        return True

    def _rotate_at(self, pos: tuple[int, int]) -> None:
        game = self._game
        assert game is not None
        if self._drag is not None:
            piece = game.piece(self._drag[0])
        else:
            piece = self._piece_under(pos)
        if piece is not None:
            game.rotate(piece.id, snap_rotation(piece.current_rotation, 90))

    # ── game state ──────────────────────────────────────────────────────────

    def _start_game(self) -> None:
        self._game = PuzzleGame(self._puzzle, rng=self._rng)
        self._unsubscribe = self._game.subscribe(self._on_state_event)
        self._completed = False
        self._zoomed = False
        self._drag = None
        self._pile_scroll = 0.0
        self._apply_geometry()
        self._game.flush_layout()
        self._screen = _Screen.PLAYING
        logger.info("New game started")

    def _leave_game(self, screen: _Screen) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._game = None
        self._drag = None
        self._screen = screen

    def _on_state_event(self, event: StateEvent, piece_id: str | None) -> None:
        if event is StateEvent.COMPLETED:
            self._completed = True

    def _check_win(self) -> None:
        if not self._completed:
            return
        self._leave_game(_Screen.CONGRATS)
        self._completed = False
        self._congrats_started = pygame.time.get_ticks()

    def _tick_layout(self) -> None:
        if self._layout_due is None or pygame.time.get_ticks() < self._layout_due:
            return
        self._layout_due = None
        if self._game is not None:
            self._game.flush_layout()

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _Screen.MENU: self._ev_menu,
            _Screen.CHOOSE: self._ev_choose,
            _Screen.PLAYING: self._ev_game,
            _Screen.CONGRATS: self._ev_congrats,
        }
        _draw = {
            _Screen.MENU: self._draw_menu,
            _Screen.CHOOSE: self._draw_choose,
            _Screen.PLAYING: self._draw_game,
            _Screen.CONGRATS: self._draw_congrats,
        }

        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                if ev.type == pygame.VIDEORESIZE:
                    self._surf = pygame.display.set_mode(
                        (max(640, ev.w), max(480, ev.h)), pygame.RESIZABLE
                    )
                    self._build_btns()
                    self._apply_geometry()
                    continue
                handler = _dispatch.get(self._screen)
                if handler and not handler(ev):
                    running = False
                    break

            if self._screen == _Screen.PLAYING:
                self._tick_layout()
                self._check_win()

            drawer = _draw.get(self._screen)
            if drawer:
                drawer()
            pygame.display.flip()
            self._clock.tick(FPS)

        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(puzzle: Puzzle, seed: int | None = None) -> None:
    """Launch the Pygame GUI (opens directly to the menu)."""
    app = PygameApp(puzzle, seed)
    app.run_loop()
