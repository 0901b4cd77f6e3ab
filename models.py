"""
Data types for the NetJam simulation
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class AttackKind(Enum):
    """The closed set of jamming strategies"""
    NONE = "None"
    CONSTANT = "Constant"
    REACTIVE = "Reactive"
    RANDOM = "Random"
    SWEEP = "Sweep"
    INTELLIGENT = "Intelligent"

    @classmethod
    def parse(cls, text: str) -> "AttackKind":
        """Accept either the value ("Sweep") or the member name ("SWEEP"), any case"""
        key = text.strip().lower()
        for kind in cls:
            if key in (kind.value.lower(), kind.name.lower()):
                return kind
        choices = ", ".join(k.value for k in cls)
        raise ValueError(f"unknown attack kind {text!r} (expected one of: {choices})")


@dataclass
class Node:
    """A sensor node; positions and the target flag change every tick"""
    nid: int
    x: float
    y: float
    vx: float
    vy: float
    is_jammer: bool = False
    is_target: bool = False
    battery: float = 100.0
    packet_queue: int = 0


@dataclass(frozen=True)
class Link:
    """Undirected link, source < target"""
    source: int
    target: int
    quality: float

    @property
    def key(self) -> Tuple[int, int]:
        return (self.source, self.target)


@dataclass
class Packet:
    """Single-hop data packet travelling from source to target"""
    pid: str
    source_id: int
    target_id: int
    x: float
    y: float
    created_at: float
    progress: float = 0.0
    delivered: bool = False
    lost: bool = False

    @property
    def in_flight(self) -> bool:
        return not (self.delivered or self.lost)


@dataclass(frozen=True)
class MetricsRecord:
    """One aggregation window worth of network performance"""
    timestamp: float
    attack_kind: AttackKind
    pdr: float
    plr: float
    throughput: float
    latency: float
    energy: float
    avg_link_quality: float
    jamming_intensity: float


@dataclass(frozen=True)
class RenderSnapshot:
    """Read-only view of one tick for renderers"""
    tick: int
    now: float
    attack_kind: AttackKind
    jamming_active: bool
    jamming_power: float
    footprint_radius: float
    nodes: Tuple[Node, ...]
    links: Tuple[Link, ...]
    packets: Tuple[Packet, ...]

    @property
    def jammer(self) -> Optional[Node]:
        return next((n for n in self.nodes if n.is_jammer), None)
