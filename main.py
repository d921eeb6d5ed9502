"""
Live training view: a parity classifier learns, one train() pass at a time.

Run with ``--headless`` to log the probe/train/probe routine instead.
"""

from __future__ import annotations
import logging
import random
import sys
from dataclasses import dataclass
from typing import List, Sequence, Tuple
import pygame

import config
from dataset.parity import LABELS, encode_byte, parity_dataset, predicted_label
from neural.errors import NeuralNetError
from neural.example import Example
from neural.network import Network
from neural.topology import build_network, build_predesigned_network
from render.renderer import draw_network, draw_hud, draw_probes
from render import colors

logger = logging.getLogger("parity_net")


@dataclass
class TrainingSession:
    network: Network
    examples: List[Example]
    rng: random.Random
    iteration: int = 0
    cost: float = 0.0
    accuracy: float = 0.0
    step_size: float = config.STEP_SIZE

    @property
    def done(self) -> bool:
        return self.iteration >= config.TRAINING_ITERATIONS


def new_session(seed: int = config.TRAIN_SEED) -> TrainingSession:
    session = TrainingSession(
        network=build_network(config.LAYER_SIZES, seed=seed),
        examples=parity_dataset(),
        rng=random.Random(seed),
    )
    measure(session)
    return session


def accuracy(network: Network, examples: Sequence[Example]) -> float:
    if not examples:
        return 0.0
    hits = 0
    for ex in examples:
        guess = predicted_label(network.evaluate(ex.inputs))
        expected = predicted_label(ex.target)
        if guess == expected:
            hits += 1
    return hits / len(examples)


def measure(session: TrainingSession) -> None:
    result = session.network.evaluate_batch(session.examples)
    session.cost = result.cost
    session.accuracy = accuracy(session.network, session.examples)


def train_step(session: TrainingSession) -> None:
    if session.done:
        return
    try:
        report = session.network.train(session.examples, rng=session.rng)
    except NeuralNetError as exc:
        logger.error("training pass %d failed: %s", session.iteration + 1, exc)
        return
    session.iteration += 1
    session.step_size = report.final_step_size
    measure(session)
    logger.info(
        "pass %d/%d: cost=%.5f accuracy=%.3f",
        session.iteration,
        config.TRAINING_ITERATIONS,
        session.cost,
        session.accuracy,
    )


def probe(network: Network, values: Sequence[int] = config.PROBE_VALUES) -> List[Tuple[int, List[float], str]]:
    out = []
    for value in values:
        ex = encode_byte(value)
        out.append((value, network.evaluate(ex.inputs), predicted_label(ex.target)))
    return out


def log_probes(network: Network) -> None:
    for value, output, expected in probe(network):
        logger.info("%3d (%s): %s", value, expected, ", ".join(f"{LABELS[i]}={p:.4f}" for i, p in enumerate(output)))
        for n in network.last_layer:
            logger.info("    neuron %d output %.6f", n.id, n.output())


def run_headless() -> None:
    net = build_predesigned_network()
    logger.info("%s", net)
    log_probes(net)

    try:
        report = net.train(parity_dataset(), rng=random.Random(config.TRAIN_SEED))
    except NeuralNetError as exc:
        logger.error("training failed: %s", exc)
        return
    logger.info("trained on %d minibatches, final step size %.5f", report.minibatches, report.final_step_size)
    log_probes(net)


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if "--headless" in sys.argv[1:]:
        run_headless()
        return

    pygame.init()
    screen = pygame.display.set_mode((config.SCREEN_W, config.SCREEN_H))
    pygame.display.set_caption("parity_net (Live Training)")
    clock = pygame.time.Clock()

    session = new_session()
    logger.info("%s", session.network)

    frame = 0
    debug = False
    paused = False
    running = True

    while running:
        clock.tick(60)

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.KEYDOWN and e.key == pygame.K_TAB:
                debug = not debug
            elif e.type == pygame.KEYDOWN and e.key == pygame.K_SPACE:
                paused = not paused
            elif e.type == pygame.KEYDOWN and e.key == pygame.K_r:
                session = new_session(seed=random.randrange(1 << 30))
                logger.info("rebuilt %s", session.network)

        if not paused:
            frame += 1
            if frame % config.TRAIN_EVERY_FRAMES == 0:
                train_step(session)

        probes = probe(session.network)

        # Render
        screen.fill(colors.BG)
        draw_network(screen, session.network, debug=debug)
        draw_probes(screen, probes)
        stats = {
            "network": str(session.network),
            "iteration": session.iteration,
            "iterations": config.TRAINING_ITERATIONS,
            "cost": session.cost,
            "accuracy": session.accuracy,
            "step_size": session.step_size,
            "paused": paused,
        }
        draw_hud(screen, stats)

        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    main()
