# dashboard.py
import time
from typing import List

import matplotlib.pyplot as plt
import streamlit as st

from pong_raster import RasterSurface
from pong_sim import GameConfig, PongGame, P1_DOWN, P1_UP, P2_DOWN, P2_UP

MOVE_KEYS = {
    "Player 1 up (W)": P1_UP[0],
    "Player 1 down (S)": P1_DOWN[0],
    "Player 2 up (↑)": P2_UP[0],
    "Player 2 down (↓)": P2_DOWN[0],
}


# -----------------------------
# Score history sink
# -----------------------------
class ScoreLog:
    def __init__(self):
        self.ticks: List[int] = []
        self.player1: List[int] = []
        self.player2: List[int] = []
        self.game = None

    def __call__(self, score):
        self.ticks.append(self.game.ticks if self.game is not None else 0)
        self.player1.append(score.player1)
        self.player2.append(score.player2)

    def clear(self):
        self.ticks.clear()
        self.player1.clear()
        self.player2.clear()


# -----------------------------
# Session
# -----------------------------
class Session:
    def __init__(self, cfg: GameConfig):
        self.cfg = cfg
        self.surface = RasterSurface(cfg.width, cfg.height)
        self.scores = ScoreLog()
        self.game = PongGame(cfg, surface=self.surface, on_score=self.scores)
        self.scores.game = self.game
        self.now_ms = 0.0
        self.game.render()

    def hold(self, keys):
        for key in MOVE_KEYS.values():
            if key in keys:
                self.game.key_down(key)
            else:
                self.game.key_up(key)

    def advance(self, frames):
        # synthetic display clock, one frame per tick interval
        for _ in range(frames):
            self.now_ms += self.cfg.frame_interval_ms
            if not self.game.scheduler.dispatch(self.now_ms):
                break


def play_live(session, frames=600, fps=60):
    """
    Stream frames of the current game into the page. Uses the session's
    own game, so the rally continues where the view left off.
    """
    placeholder = st.empty()
    for i in range(frames):
        session.advance(1)
        g = session.game
        placeholder.image(session.surface.render_rgb(), channels="RGB",
                          caption=f"Live — frame {i} • {g.score.player1} : {g.score.player2}")
        if fps and fps > 0:
            time.sleep(1.0 / fps)
        if not g.running:
            break


# -----------------------------
# Streamlit App
# -----------------------------
st.set_page_config(layout="wide", page_title="Pong — Control Panel")
st.title("Pong — Control Panel")

st.sidebar.header("Playfield")
deflection = st.sidebar.slider("Deflection factor", 0.0, 30.0, value=10.0, step=0.5)
tick_rate = st.sidebar.select_slider("Tick rate (Hz)", options=[30, 60, 90, 120], value=60)
freeze = st.sidebar.checkbox("Freeze paddles while paused", value=False)
cfg = GameConfig(deflection=deflection, tick_rate=tick_rate, pause_mode="freeze" if freeze else "paddles")

# Session boot (rebuild when the playfield settings change)
if "session" not in st.session_state or st.session_state.session.cfg != cfg:
    st.session_state.session = Session(cfg)
session = st.session_state.session
game = session.game

# Sidebar controls
st.sidebar.header("Controls")
run_col1, run_col2, run_col3 = st.sidebar.columns(3)
start = run_col1.button("▶ Start")
pause = run_col2.button("⏸ Pause/Resume")
reset = run_col3.button("⟲ Reset")

held = st.sidebar.multiselect("Held keys", list(MOVE_KEYS.keys()))
session.hold({MOVE_KEYS[k] for k in held})

if start:
    game.start()
if pause:
    game.toggle_pause()
if reset:
    session.scores.clear()
    game.reset()

left, right = st.columns([1, 1])

with left:
    st.subheader("Game View")
    steps = st.slider("Game frames per refresh", 1, 60, 5, 1)
    session.advance(steps)
    st.image(session.surface.render_rgb(), channels="RGB", caption=f"State: {game.state.value}")

    live_fps = st.slider("Live FPS", 10, 60, 30, 1, key="live_fps")
    if st.button("▶ Play live (10 s)", key="play_live"):
        play_live(session, frames=live_fps * 10, fps=live_fps)

with right:
    st.subheader("Score")
    m1, m2, m3 = st.columns(3)
    m1.metric("Player 1", f"{game.score.player1}")
    m2.metric("Player 2", f"{game.score.player2}")
    m3.metric("Ticks", f"{game.ticks}")

    st.caption("Score timeline")
    fig, ax = plt.subplots()
    ax.step(session.scores.ticks, session.scores.player1, where="post", label="Player 1")
    ax.step(session.scores.ticks, session.scores.player2, where="post", label="Player 2")
    ax.set_xlabel("Tick"); ax.set_ylabel("Points")
    ax.legend()
    st.pyplot(fig, clear_figure=True)

st.caption("Press ▶ Start to serve. Pick held keys in the sidebar to move paddles.")
