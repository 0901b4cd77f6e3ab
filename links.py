"""
Pairwise link quality and jamming interference for NetJam
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from attacks import footprint_radius
from models import AttackKind, Link, Node
from topology import distance


@dataclass(frozen=True)
class JammingContext:
    """Everything the link model needs to know about the attack this tick"""
    kind: AttackKind
    active: bool
    power: float
    jammer: Optional[Node]


def link_quality(a: Node, b: Node, jamming: JammingContext, cfg: Dict[str, Any]) -> float:
    """Quality of the a-b link in [0, 1]; 0 when the pair is out of range"""
    comm_range = cfg["comm_range"]
    d = distance(a, b)
    if d >= comm_range:
        return 0.0
    quality = 1 - d / comm_range

    if jamming.active and jamming.jammer is not None:
        d_j = min(distance(a, jamming.jammer), distance(b, jamming.jammer))
        impact = max(0.0, 1 - d_j / footprint_radius(jamming.kind, cfg))
        targeted = (a.is_target or b.is_target) and jamming.kind is AttackKind.INTELLIGENT
        multiplier = cfg["target_multiplier"] if targeted else cfg["jamming_multiplier"]
        quality -= impact * jamming.power * multiplier

    return max(0.0, min(1.0, quality))


def compute_links(nodes: List[Node], jamming: JammingContext, cfg: Dict[str, Any]) -> List[Link]:
    """Rebuild every in-range link from scratch"""
    comm_range = cfg["comm_range"]
    links = []
    n = len(nodes)
    for i in range(n):
        for j in range(i + 1, n):
            a, b = nodes[i], nodes[j]
            if distance(a, b) >= comm_range:
                continue
            lo, hi = (a, b) if a.nid < b.nid else (b, a)
            links.append(Link(lo.nid, hi.nid, link_quality(a, b, jamming, cfg)))
    return links


def average_quality(links: List[Link]) -> float:
    if not links:
        return 0.0
    return sum(l.quality for l in links) / len(links)


def index_links(links: List[Link]) -> Dict[Tuple[int, int], Link]:
    """Lookup table keyed by the sorted id pair"""
    return {l.key: l for l in links}


def link_key(u: int, v: int) -> Tuple[int, int]:
    return (u, v) if u < v else (v, u)
