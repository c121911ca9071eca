from __future__ import annotations

import pygame
import pytest

import pong
from pong_sim import PongGame, RunState


def _key(kind: int, key: int, mod: int = 0) -> pygame.event.Event:
    return pygame.event.Event(kind, key=key, mod=mod, unicode="", scancode=0)


@pytest.mark.parametrize("key,mod,expected", [
    (pygame.K_w, 0, "w"),
    (pygame.K_w, pygame.KMOD_LSHIFT, "W"),
    (pygame.K_UP, 0, "ArrowUp"),
    (pygame.K_DOWN, 0, "ArrowDown"),
    (pygame.K_ESCAPE, 0, "Escape"),
    (pygame.K_RETURN, 0, "Enter"),
    (pygame.K_SPACE, 0, " "),
])
def test_key_name(key: int, mod: int, expected: str) -> None:
    assert pong.key_name(_key(pygame.KEYDOWN, key, mod)) == expected


def test_handle_event_drives_game() -> None:
    game = PongGame()
    assert pong.handle_event(game, _key(pygame.KEYDOWN, pygame.K_RETURN))
    assert game.state is RunState.RUNNING
    pong.handle_event(game, _key(pygame.KEYDOWN, pygame.K_w, pygame.KMOD_SHIFT))
    assert game.keys.held("W")
    # shift released before the letter
    pong.handle_event(game, _key(pygame.KEYUP, pygame.K_w))
    assert not game.keys.held("w", "W")


def test_focus_loss_releases_keys() -> None:
    game = PongGame()
    pong.handle_event(game, _key(pygame.KEYDOWN, pygame.K_UP))
    pong.handle_event(game, pygame.event.Event(pygame.WINDOWFOCUSLOST))
    assert not game.keys.held("ArrowUp")


def test_quit_event_closes() -> None:
    assert not pong.handle_event(PongGame(), pygame.event.Event(pygame.QUIT))


def test_cli_builds_config() -> None:
    args = pong.parse_args(["--width", "640", "--height", "480", "--tick-rate", "90",
                            "--deflection", "20", "--freeze-on-pause"])
    cfg = pong.build_config(args)
    assert (cfg.width, cfg.height) == (640, 480)
    assert cfg.tick_rate == 90
    assert cfg.deflection == 20
    assert cfg.pause_mode == "freeze"


def test_cli_defaults() -> None:
    cfg = pong.build_config(pong.parse_args([]))
    assert (cfg.width, cfg.height, cfg.deflection, cfg.pause_mode) == (800, 600, 10.0, "paddles")


def test_scoreboard_tracks_game() -> None:
    pygame.font.init()
    board = pong.ScoreBoard(pygame.font.Font(None, 24))
    game = PongGame(on_score=board)
    assert (board.player1, board.player2) == (0, 0)
    game.start()
    game.paddle2.y = 0
    game.ball.x, game.ball.y, game.ball.speed_x = 795, 300, 8
    game.step()
    assert (board.player1, board.player2) == (1, 0)
    screen = pygame.Surface((200, 100))
    board.draw(screen)
