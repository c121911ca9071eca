"""
Two-paddle Pong simulation loop.

Holds the game state (ball, paddles, score, held keys, run state) for one game
instance and advances it one fixed tick at a time. Hosts plug in a drawing
surface, a score sink and a frame scheduler; see pong.py (pygame window) and
dashboard.py (streamlit panel).
"""
import enum
import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

# Key identifiers, as delivered by the host's key events
P1_UP = ("w", "W")
P1_DOWN = ("s", "S")
P2_UP = ("ArrowUp",)
P2_DOWN = ("ArrowDown",)
PAUSE_KEYS = ("Escape", "Esc", "p", "P")
RESET_KEYS = ("r", "R")
START_KEYS = ("Enter", " ")

CENTER_LINE_DASH = (5, 15)
TIME_EPSILON_MS = 1e-6


# -----------------------------
# Config dataclass
# -----------------------------
@dataclass
class GameConfig:
    width: int = 800
    height: int = 600
    ball_radius: float = 10
    ball_speed_x: float = 8
    ball_speed_y: float = 5
    paddle_width: float = 15
    paddle_height: float = 100
    paddle_speed: float = 8
    paddle_margin: float = 20
    # vertical speed after a paddle hit is (hit_offset - 0.5) * deflection
    deflection: float = 10.0
    tick_rate: float = 60
    max_catchup_steps: int = 5
    pause_mode: str = "paddles"  # "paddles" keeps paddles live while paused, "freeze" stops everything
    background: Color = BLACK
    foreground: Color = WHITE

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"playfield must be positive, got {self.width}x{self.height}")
        if self.paddle_width <= 0 or self.paddle_height <= 0:
            raise ValueError("paddle dimensions must be positive")
        if self.paddle_height > self.height:
            raise ValueError(f"paddle_height {self.paddle_height} exceeds playfield height {self.height}")
        if self.ball_radius <= 0:
            raise ValueError("ball_radius must be positive")
        if self.tick_rate <= 0:
            raise ValueError(f"tick_rate must be positive, got {self.tick_rate}")
        if self.max_catchup_steps < 1:
            raise ValueError("max_catchup_steps must be at least 1")
        if self.pause_mode not in ("paddles", "freeze"):
            raise ValueError(f"unknown pause_mode {self.pause_mode!r}")

    @property
    def frame_interval_ms(self) -> float:
        return 1000.0 / self.tick_rate


# -----------------------------
# Game objects
# -----------------------------
@dataclass
class Ball:
    x: float
    y: float
    radius: float
    speed_x: float
    speed_y: float
    color: Color = WHITE


@dataclass
class Paddle:
    x: float
    y: float
    width: float
    height: float
    speed: float
    color: Color = WHITE

    @property
    def bottom(self):
        return self.y + self.height

    def spans(self, y):
        return self.y <= y <= self.bottom


@dataclass
class Score:
    player1: int = 0
    player2: int = 0


class RunState(enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


class KeyState:
    """Held-key table. Written by key events, read once per tick."""

    def __init__(self):
        self._held: Dict[str, bool] = {}

    def press(self, key: str):
        self._held[key] = True

    def release(self, key: str):
        self._held[key] = False

    def held(self, *keys: str) -> bool:
        return any(self._held.get(k, False) for k in keys)

    def clear(self):
        self._held.clear()


# -----------------------------
# Frame pacing
# -----------------------------
class FrameClock:
    """Fixed-timestep accumulator.

    Each call to advance() adds the time elapsed since the previous timestamp
    and returns how many whole ticks are due. Leftover time carries over to
    the next frame; backlog beyond ``max_steps`` is dropped.
    """

    def __init__(self, tick_rate: float = 60, max_steps: int = 5):
        self.interval_ms = 1000.0 / tick_rate
        self.max_steps = max_steps
        self.accumulator = 0.0
        self.last_time: Optional[float] = None

    def reset(self):
        self.accumulator = 0.0
        self.last_time = None

    def advance(self, timestamp_ms: float) -> int:
        if self.last_time is None:
            # first frame after a (re)start draws immediately
            self.last_time = timestamp_ms
            return 1
        elapsed = timestamp_ms - self.last_time
        self.last_time = timestamp_ms
        if elapsed <= 0:
            return 0
        self.accumulator += elapsed
        # tolerance absorbs float drift when frames land exactly one interval apart
        steps = int((self.accumulator + TIME_EPSILON_MS) // self.interval_ms)
        self.accumulator = max(0.0, self.accumulator - steps * self.interval_ms)
        if steps > self.max_steps:
            steps = self.max_steps
            self.accumulator = 0.0
        return steps


class FrameScheduler:
    """Single-slot "next frame" callback queue, dispatched by the host once per display refresh."""

    def __init__(self):
        self._pending: Optional[Callable[[float], None]] = None
        self._handle = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request(self, callback: Callable[[float], None]) -> int:
        self._handle += 1
        self._pending = callback
        return self._handle

    def cancel(self, handle: Optional[int]):
        if handle is not None and handle == self._handle:
            self._pending = None

    def dispatch(self, timestamp_ms: float) -> bool:
        callback, self._pending = self._pending, None
        if callback is None:
            return False
        callback(timestamp_ms)
        return True


# -----------------------------
# Game
# -----------------------------
class PongGame:
    def __init__(self, cfg: Optional[GameConfig] = None, surface=None,
                 scheduler: Optional[FrameScheduler] = None,
                 on_score: Optional[Callable[[Score], None]] = None,
                 rng: Optional[random.Random] = None):
        self.cfg = cfg or GameConfig()
        self.surface = surface
        self.scheduler = scheduler or FrameScheduler()
        self.on_score = on_score
        self.rng = rng or random.Random()
        self.clock = FrameClock(self.cfg.tick_rate, self.cfg.max_catchup_steps)
        self.keys = KeyState()
        self.state = RunState.STOPPED
        self.frame_handle: Optional[int] = None
        self.ticks = 0

        c = self.cfg
        self.ball = Ball(c.width / 2, c.height / 2, c.ball_radius, c.ball_speed_x, c.ball_speed_y, c.foreground)
        self.paddle1 = Paddle(c.paddle_margin, self._paddle_home(), c.paddle_width, c.paddle_height,
                              c.paddle_speed, c.foreground)
        self.paddle2 = Paddle(c.width - c.paddle_margin - c.paddle_width, self._paddle_home(), c.paddle_width,
                              c.paddle_height, c.paddle_speed, c.foreground)
        self.score = Score()
        self._publish_score()

    @property
    def running(self) -> bool:
        return self.state is not RunState.STOPPED

    @property
    def paused(self) -> bool:
        return self.state is RunState.PAUSED

    def _paddle_home(self):
        return self.cfg.height / 2 - self.cfg.paddle_height / 2

    # --- controls ---
    def start(self):
        if self.state is not RunState.STOPPED:
            return
        logger.info("Starting game")
        self.state = RunState.RUNNING
        self.clock.reset()
        self.frame_handle = self.scheduler.request(self.frame)

    def pause(self):
        if self.state is not RunState.RUNNING:
            return
        logger.info("Pausing game")
        self.state = RunState.PAUSED

    def resume(self):
        if self.state is not RunState.PAUSED:
            return
        logger.info("Resuming game")
        self.state = RunState.RUNNING

    def toggle_pause(self):
        if self.paused:
            self.resume()
        else:
            self.pause()

    def reset(self):
        logger.info("Resetting game")
        self.scheduler.cancel(self.frame_handle)
        self.frame_handle = None
        self.state = RunState.STOPPED
        self.clock.reset()
        self.reset_ball()
        self.paddle1.y = self._paddle_home()
        self.paddle2.y = self._paddle_home()
        self.score.player1 = 0
        self.score.player2 = 0
        self.ticks = 0
        self._publish_score()
        self.render()

    # --- input ---
    def key_down(self, key: str):
        self.keys.press(key)
        # shortcuts react to the key just pressed, not to everything held
        if key in PAUSE_KEYS:
            self.toggle_pause()
        if key in RESET_KEYS:
            self.reset()
        if key in START_KEYS:
            if self.running:
                self.resume()
            else:
                self.start()

    def key_up(self, key: str):
        self.keys.release(key)

    # --- simulation ---
    def update_paddles(self):
        k = self.keys
        if k.held(*P1_UP):
            self.paddle1.y -= self.paddle1.speed
        if k.held(*P1_DOWN):
            self.paddle1.y += self.paddle1.speed
        if k.held(*P2_UP):
            self.paddle2.y -= self.paddle2.speed
        if k.held(*P2_DOWN):
            self.paddle2.y += self.paddle2.speed

        for p in (self.paddle1, self.paddle2):
            p.y = max(0, min(self.cfg.height - p.height, p.y))

    def update_ball(self):
        b, p1, p2 = self.ball, self.paddle1, self.paddle2
        b.x += b.speed_x
        b.y += b.speed_y

        # top/bottom walls, only when heading into the wall
        if (b.y - b.radius <= 0 and b.speed_y < 0) or (b.y + b.radius >= self.cfg.height and b.speed_y > 0):
            b.speed_y = -b.speed_y

        if b.x - b.radius <= p1.x + p1.width and p1.spans(b.y) and b.speed_x < 0:
            b.speed_x = -b.speed_x
            b.speed_y = self.deflect(b.y, p1)

        if b.x + b.radius >= p2.x and p2.spans(b.y) and b.speed_x > 0:
            b.speed_x = -b.speed_x
            b.speed_y = self.deflect(b.y, p2)

        if b.x < 0:
            self.score.player2 += 1
            logger.debug("Player 2 scores: %d-%d", self.score.player1, self.score.player2)
            self.reset_ball()
            self._publish_score()
        elif b.x > self.cfg.width:
            self.score.player1 += 1
            logger.debug("Player 1 scores: %d-%d", self.score.player1, self.score.player2)
            self.reset_ball()
            self._publish_score()

    def deflect(self, y, paddle: Paddle) -> float:
        hit = (y - paddle.y) / paddle.height
        return (hit - 0.5) * self.cfg.deflection

    def reset_ball(self):
        b = self.ball
        b.x = self.cfg.width / 2
        b.y = self.cfg.height / 2
        b.speed_x = self.cfg.ball_speed_x * self.rng.choice([-1, 1])
        b.speed_y = self.cfg.ball_speed_y * self.rng.choice([-1, 1])

    def step(self):
        if self.state is RunState.STOPPED:
            return
        if self.paused and self.cfg.pause_mode == "freeze":
            return
        self.update_paddles()
        if not self.paused:
            self.update_ball()
        self.ticks += 1

    def update(self):
        if self.state is RunState.STOPPED:
            return
        self.step()
        self.render()

    def frame(self, timestamp_ms: float):
        steps = self.clock.advance(timestamp_ms)
        for _ in range(steps):
            self.step()
        if steps:
            self.render()
        if self.running:
            self.frame_handle = self.scheduler.request(self.frame)

    # --- output ---
    def _publish_score(self):
        if self.on_score is not None:
            self.on_score(self.score)

    def render(self):
        if self.surface is not None:
            draw_game(self.surface, self)


def draw_game(surface, game: PongGame):
    c = game.cfg
    surface.fill_rect(0, 0, c.width, c.height, c.background)
    surface.dashed_line(c.width / 2, 0, c.width / 2, c.height, CENTER_LINE_DASH, c.foreground, 2)
    for p in (game.paddle1, game.paddle2):
        surface.fill_rect(p.x, p.y, p.width, p.height, p.color)
    b = game.ball
    surface.fill_circle(b.x, b.y, b.radius, b.color)
