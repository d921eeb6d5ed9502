"""
parity_net module: render/renderer.py

Pygame rendering of a layered network and its training stats.
"""

from __future__ import annotations
from typing import Dict, List, Sequence, Tuple
import pygame

import config
from dataset.parity import predicted_label
from neural.network import Network
from neural.neuron import Neuron, NeuronKind
from render import colors


def layout_positions(network: Network, width: int, height: int) -> Dict[int, Tuple[float, float]]:
    """Screen position for each neuron, keyed by id(neuron): one column per layer."""
    positions: Dict[int, Tuple[float, float]] = {}
    margin = config.LAYER_MARGIN_X
    n_layers = len(network.layers)
    span_x = (width - 2 * margin) / max(1, n_layers - 1)

    for li, layer in enumerate(network.layers):
        x = margin + li * span_x
        gap = height / (len(layer) + 1)
        for ni, n in enumerate(layer):
            positions[id(n)] = (x, gap * (ni + 1))
    return positions


def _shade(base: Tuple[int, int, int], amount: float) -> Tuple[int, int, int]:
    # amount in [0, 1] -> from dark to full colour
    t = 0.25 + 0.75 * max(0.0, min(1.0, amount))
    return (int(base[0] * t), int(base[1] * t), int(base[2] * t))


def _edge_width(weight: float) -> int:
    return max(1, min(5, int(abs(weight) * 3) + 1))


def draw_network(screen: pygame.Surface, network: Network, debug: bool = False) -> None:
    w, h = screen.get_size()
    pos = layout_positions(network, w, h)
    debug_font = pygame.font.Font(None, 16) if debug else None

    # edges first
    for n in network.weighted_neurons():
        dst = pos[id(n)]
        for s in n.synapses:
            src = pos[id(s.src)]
            col = colors.POS_WEIGHT if s.weight >= 0 else colors.NEG_WEIGHT
            pygame.draw.line(screen, col, src, dst, _edge_width(s.weight))

    # neurons
    r = config.NEURON_RADIUS
    for layer in network.layers:
        for n in layer:
            x, y = pos[id(n)]
            base = colors.CONSTANT if n.kind == NeuronKind.CONSTANT else colors.WEIGHTED
            pygame.draw.circle(screen, _shade(base, n.output()), (int(x), int(y)), r)
            pygame.draw.circle(screen, colors.OUTLINE, (int(x), int(y)), r, 2)

            if debug and debug_font is not None:
                _draw_neuron_label(screen, debug_font, n, x, y, r)


def _draw_neuron_label(screen: pygame.Surface, font: pygame.font.Font, n: Neuron, x: float, y: float, r: int) -> None:
    txt = font.render(f"{n.id}: out {n.output():.3f} err {n.error:+.4f}", True, colors.TEXT)
    screen.blit(txt, (x + r + 4, y - 6))


def draw_probes(screen: pygame.Surface, probes: Sequence[Tuple[int, List[float], str]]) -> None:
    """probes: (value, network output, expected label)."""
    font = pygame.font.Font(None, 24)
    x = screen.get_width() - 300
    y = 10
    for value, output, expected in probes:
        guess = predicted_label(output)
        col = colors.CORRECT if guess == expected else colors.WRONG
        line = f"{value:3d} -> odd {output[0]:.3f} even {output[1]:.3f}"
        screen.blit(font.render(line, True, col), (x, y))
        y += 22


def draw_hud(screen: pygame.Surface, stats: dict) -> None:
    font = pygame.font.Font(None, 26)

    lines = [
        f"{stats.get('network', '')}",
        f"Iteration: {stats.get('iteration', 0)}/{stats.get('iterations', 0)}",
        f"Cost: {stats.get('cost', 0.0):.5f}",
        f"Accuracy: {stats.get('accuracy', 0.0) * 100:.1f}%",
        f"Step size: {stats.get('step_size', 0.0):.5f}",
    ]
    if stats.get("paused"):
        lines.append("PAUSED")

    y = 10
    for line in lines:
        txt = font.render(line, True, colors.TEXT)
        screen.blit(txt, (12, y))
        y += 22

    hint = pygame.font.Font(None, 20).render("SPACE pause  R rebuild  TAB labels", True, colors.DIM_TEXT)
    screen.blit(hint, (12, screen.get_height() - 24))
