from __future__ import annotations

import os
import random

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from pong_raster import RasterSurface  # noqa: E402
from pong_sim import FrameScheduler, GameConfig, PongGame  # noqa: E402


class ScoreSpy:
    def __init__(self) -> None:
        self.calls: list[tuple[int, int]] = []

    def __call__(self, score) -> None:
        self.calls.append((score.player1, score.player2))


@pytest.fixture()
def cfg() -> GameConfig:
    return GameConfig()


@pytest.fixture()
def scores() -> ScoreSpy:
    return ScoreSpy()


@pytest.fixture()
def game(cfg: GameConfig, scores: ScoreSpy) -> PongGame:
    return PongGame(cfg, surface=RasterSurface(cfg.width, cfg.height), scheduler=FrameScheduler(),
                    on_score=scores, rng=random.Random(1234))


@pytest.fixture(scope="session", autouse=True)
def _pygame_headless():
    import pygame

    pygame.init()
    yield
    pygame.quit()
