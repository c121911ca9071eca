"""
Two-player Pong in a pygame window.

Usage:
- python pong.py                   # 800x600, press Enter or Space to serve
- python pong.py --autostart --tick-rate 90 --deflection 20

Player 1: W (up), S (down). Player 2: Arrow Up, Arrow Down.
P / Esc pause, R reset, Enter / Space start or resume.
"""
import argparse
import logging
import random

import pygame

from pong_sim import GameConfig, PongGame, RunState

logger = logging.getLogger(__name__)

DISPLAY_FPS = 120
FONT_NAME = "arial"

WHITE = (240, 240, 240)
DIM = (120, 120, 140)

SPECIAL_KEYS = {
    pygame.K_UP: "ArrowUp",
    pygame.K_DOWN: "ArrowDown",
    pygame.K_ESCAPE: "Escape",
    pygame.K_RETURN: "Enter",
    pygame.K_KP_ENTER: "Enter",
    pygame.K_SPACE: " ",
}

STATUS_TEXT = {
    RunState.STOPPED: "Enter: start | R: reset",
    RunState.RUNNING: "P: pause | R: reset",
    RunState.PAUSED: "PAUSED | P: resume | R: reset",
}


def key_name(event):
    """Translate a pygame key event into the identifier the game expects ("w", "W", "ArrowUp", ...)."""
    if event.key in SPECIAL_KEYS:
        return SPECIAL_KEYS[event.key]
    name = pygame.key.name(event.key)
    if len(name) == 1:
        name = name.upper() if event.mod & pygame.KMOD_SHIFT else name.lower()
    return name


class PygameCanvas:
    """Drawing surface backed by a pygame.Surface."""

    def __init__(self, surface):
        self.surface = surface

    def fill_rect(self, x, y, w, h, color):
        pygame.draw.rect(self.surface, color, pygame.Rect(round(x), round(y), round(w), round(h)))

    def dashed_line(self, x0, y0, x1, y1, dash, color, width=1):
        on, off = dash
        start, end = pygame.Vector2(x0, y0), pygame.Vector2(x1, y1)
        length = start.distance_to(end)
        if length == 0:
            return
        direction = (end - start) / length
        d = 0.0
        while d < length:
            a = start + direction * d
            b = start + direction * min(d + on, length)
            pygame.draw.line(self.surface, color, a, b, width)
            d += on + off

    def fill_circle(self, cx, cy, r, color):
        pygame.draw.circle(self.surface, color, (round(cx), round(cy)), round(r))


class ScoreBoard:
    """Score sink: re-renders the score text whenever the game reports a change."""

    def __init__(self, font):
        self.font = font
        self.text = None
        self.player1 = 0
        self.player2 = 0

    def __call__(self, score):
        self.player1, self.player2 = score.player1, score.player2
        self.text = self.font.render(f"{score.player1}   {score.player2}", True, WHITE)

    def draw(self, screen):
        if self.text is not None:
            screen.blit(self.text, (screen.get_width() // 2 - self.text.get_width() // 2, 20))


def build_config(args) -> GameConfig:
    return GameConfig(
        width=args.width,
        height=args.height,
        tick_rate=args.tick_rate,
        deflection=args.deflection,
        pause_mode="freeze" if args.freeze_on_pause else "paddles",
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Two-player Pong")
    parser.add_argument("--width", type=int, default=800)
    parser.add_argument("--height", type=int, default=600)
    parser.add_argument("--tick-rate", type=float, default=60, help="simulation ticks per second")
    parser.add_argument("--deflection", type=float, default=10.0, help="paddle deflection factor")
    parser.add_argument("--freeze-on-pause", action="store_true", help="stop paddles too while paused")
    parser.add_argument("--autostart", action="store_true")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def handle_event(game, event):
    """Route one pygame event to the game. Returns False when the window should close."""
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.KEYDOWN:
        game.key_down(key_name(event))
    elif event.type == pygame.KEYUP:
        name = key_name(event)
        game.key_up(name)
        if len(name) == 1:
            # shift may have been released first
            game.key_up(name.swapcase())
    elif event.type == pygame.WINDOWFOCUSLOST:
        game.keys.clear()
    return True


def run(cfg: GameConfig, autostart=False, seed=None):
    pygame.init()
    try:
        screen = pygame.display.set_mode((cfg.width, cfg.height))
        pygame.display.set_caption("Pong")
        clock = pygame.time.Clock()
        font_small = pygame.font.SysFont(FONT_NAME, 20)
        font_big = pygame.font.SysFont(FONT_NAME, 54, bold=True)

        court = pygame.Surface((cfg.width, cfg.height))
        scoreboard = ScoreBoard(font_big)
        game = PongGame(cfg, surface=PygameCanvas(court), on_score=scoreboard, rng=random.Random(seed))
        game.render()

        logger.info("Game Controls:")
        logger.info("Player 1: W (up), S (down)")
        logger.info("Player 2: Arrow Up, Arrow Down")
        logger.info("Enter/Space start, P/Esc pause, R reset")

        if autostart:
            game.start()

        running = True
        while running:
            for event in pygame.event.get():
                if not handle_event(game, event):
                    running = False
                    break

            game.scheduler.dispatch(pygame.time.get_ticks())

            screen.blit(court, (0, 0))
            scoreboard.draw(screen)
            info_text = font_small.render(STATUS_TEXT[game.state], True, DIM)
            screen.blit(info_text, (20, cfg.height - 28))

            pygame.display.flip()
            clock.tick(DISPLAY_FPS)
        logger.info("Final score %d-%d", game.score.player1, game.score.player2)
    finally:
        pygame.quit()


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    run(build_config(args), autostart=args.autostart, seed=args.seed)


if __name__ == "__main__":
    main()
