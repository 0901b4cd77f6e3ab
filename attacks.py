"""
Jamming attack controller

Each attack kind has its own small state object and its own evaluation
function. The kind set is closed, so dispatch is a plain table lookup.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from models import AttackKind, Node, Packet
from topology import distance

logger = logging.getLogger(__name__)


@dataclass
class NoState:
    """Kinds without memory across ticks"""


@dataclass
class RandomState:
    active: bool = False
    next_switch: float = 0.0


@dataclass
class IntelligentState:
    ticks: int = 0
    target_id: Optional[int] = None


@dataclass
class AttackOutcome:
    active: bool
    power: float
    state: Any


def initial_state(kind: AttackKind):
    """Fresh kind-specific state, used at start-up and on every switch"""
    if kind is AttackKind.RANDOM:
        return RandomState()
    if kind is AttackKind.INTELLIGENT:
        return IntelligentState()
    return NoState()


def footprint_radius(kind: AttackKind, cfg: Dict[str, Any]) -> float:
    if kind is AttackKind.SWEEP:
        return cfg["sweep_footprint_radius"]
    return cfg["footprint_radius"]


def clear_targets(nodes: List[Node]):
    for n in nodes:
        n.is_target = False


# -------- Per-kind policies --------

def _eval_none(state, nodes, packets, jammer, now, cfg, rng) -> AttackOutcome:
    clear_targets(nodes)
    return AttackOutcome(False, 0.0, state)


def _eval_constant(state, nodes, packets, jammer, now, cfg, rng) -> AttackOutcome:
    return AttackOutcome(True, 1.0, state)


def _eval_random(state: RandomState, nodes, packets, jammer, now, cfg, rng) -> AttackOutcome:
    if now > state.next_switch:
        lo, hi = cfg["random_hold_ms"]
        state.active = rng.random() > 0.5
        state.next_switch = now + lo + rng.random() * (hi - lo)
        logger.debug("random jammer %s until t=%.0f", "on" if state.active else "off", state.next_switch)
    return AttackOutcome(state.active, 1.0 if state.active else 0.0, state)


def _eval_reactive(state, nodes, packets, jammer, now, cfg, rng) -> AttackOutcome:
    radius = cfg["reactive_radius"]
    heard = any(p.in_flight and distance(p, jammer) < radius for p in packets)
    return AttackOutcome(heard, 1.0 if heard else 0.0, state)


def _eval_sweep(state, nodes, packets, jammer, now, cfg, rng) -> AttackOutcome:
    power = (math.sin(now / cfg["sweep_period_ms"]) + 1) / 2
    return AttackOutcome(True, power, state)


def _eval_intelligent(state: IntelligentState, nodes, packets, jammer, now, cfg, rng) -> AttackOutcome:
    if state.ticks % cfg["retarget_every_ticks"] == 0:
        victim = most_connected(nodes, cfg["comm_range"])
        for n in nodes:
            n.is_target = victim is not None and n.nid == victim.nid
        new_id = victim.nid if victim is not None else None
        if new_id != state.target_id:
            logger.debug("intelligent jammer retargeted %s -> %s", state.target_id, new_id)
        state.target_id = new_id
    state.ticks += 1
    return AttackOutcome(True, cfg["intelligent_power"], state)


_EVALUATORS: Dict[AttackKind, Callable[..., AttackOutcome]] = {
    AttackKind.NONE: _eval_none,
    AttackKind.CONSTANT: _eval_constant,
    AttackKind.RANDOM: _eval_random,
    AttackKind.REACTIVE: _eval_reactive,
    AttackKind.SWEEP: _eval_sweep,
    AttackKind.INTELLIGENT: _eval_intelligent,
}


def most_connected(nodes: List[Node], comm_range: float) -> Optional[Node]:
    """Non-jammer node with the most neighbours in range; first one wins ties"""
    best, best_count = None, -1
    for n in nodes:
        if n.is_jammer:
            continue
        count = sum(1 for other in nodes
                    if other.nid != n.nid and distance(n, other) < comm_range)
        if count > best_count:
            best, best_count = n, count
    return best


def evaluate(kind: AttackKind, state, nodes: List[Node], packets: List[Packet],
             jammer: Optional[Node], now: float, cfg: Dict[str, Any],
             rng: random.Random) -> AttackOutcome:
    """Decide whether the jammer transmits this tick and at what power.

    Target flags are written straight onto ``nodes``; the caller owns them.
    """
    if jammer is None:
        clear_targets(nodes)
        return AttackOutcome(False, 0.0, state)
    return _EVALUATORS[kind](state, nodes, packets, jammer, now, cfg, rng)
