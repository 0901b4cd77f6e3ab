"""
Node placement and mobility for the NetJam arena
"""

import math
import random
from typing import List, Tuple

from models import Node


def build_nodes(count: int, world_size: Tuple[float, float], max_speed: float,
                jammer_id: int, rng: random.Random) -> List[Node]:
    """Scatter nodes uniformly over the arena with small random velocities"""
    W, H = world_size
    nodes = []
    for nid in range(count):
        nodes.append(Node(
            nid=nid,
            x=rng.uniform(0, W),
            y=rng.uniform(0, H),
            vx=(rng.random() - 0.5) * 2 * max_speed,
            vy=(rng.random() - 0.5) * 2 * max_speed,
            is_jammer=(nid == jammer_id),
        ))
    return nodes


def advance(nodes: List[Node], width: float, height: float) -> List[Node]:
    """Move every node one tick, then bounce off the arena walls.

    The velocity flips after the move, so a node that crosses a wall sits
    outside the arena for one tick and comes back on the next.
    """
    for node in nodes:
        node.x += node.vx
        node.y += node.vy
        if node.x <= 0 or node.x >= width:
            node.vx = -node.vx
        if node.y <= 0 or node.y >= height:
            node.vy = -node.vy
    return nodes


def distance(a, b) -> float:
    """Euclidean distance between two objects with x/y attributes"""
    return math.hypot(b.x - a.x, b.y - a.y)
