from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional

import pygame

from number_stack_rl.game import GameMode, GameSession, load_config
from .renderer import Renderer


KEY_TO_MODE: Dict[int, GameMode] = {
    pygame.K_1: GameMode.CLASSIC,
    pygame.K_KP1: GameMode.CLASSIC,
    pygame.K_c: GameMode.CLASSIC,
    pygame.K_2: GameMode.TIMED,
    pygame.K_KP2: GameMode.TIMED,
    pygame.K_t: GameMode.TIMED,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Number Stack")
    p.add_argument("--config", type=str, default=None, help="YAML game configuration")
    p.add_argument("--mode", choices=[m.value for m in GameMode], default=None,
                   help="Skip the menu and start in this mode")
    p.add_argument("--verbose", action="store_true")
    return p


def run(config_path: Optional[str] = None, mode: Optional[str] = None) -> None:
    config = load_config(config_path)
    pygame.init()
    try:
        renderer = Renderer(config.rows, config.cols)
        screen = pygame.display.set_mode(renderer.size)
        pygame.display.set_caption("Number Stack - Human Play")
        clock = pygame.time.Clock()

        session: Optional[GameSession] = GameSession(config, mode=mode) if mode else None

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif session is None:
                        chosen = KEY_TO_MODE.get(event.key)
                        if chosen is not None:
                            session = GameSession(config, mode=chosen)
                    elif event.key == pygame.K_p:
                        session.toggle_pause()
                    elif event.key == pygame.K_r:
                        session.reset()
                    elif event.key == pygame.K_m:
                        session.ticker.cancel()
                        session = None
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and session is not None:
                    cell = renderer.cell_at(event.pos)
                    if cell is not None:
                        session.select(cell)

            elapsed = clock.tick(60)
            if session is None:
                renderer.draw_menu(screen, config.tick_seconds)
                continue
            session.advance_clock(elapsed)
            renderer.draw(screen, session.state)
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run(args.config, args.mode)


if __name__ == "__main__":  # pragma: no cover
    main()
