"""
Packet generation, forwarding and loss for NetJam
"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List

from links import index_links, link_key
from models import Link, Node, Packet
from topology import distance


@dataclass
class TrafficTick:
    """What happened to packets during one tick"""
    live: List[Packet] = field(default_factory=list)
    finished: List[Packet] = field(default_factory=list)
    sent: int = 0
    delivered: int = 0
    lost: int = 0
    latencies: List[float] = field(default_factory=list)


class TrafficEngine:
    """Spawns single-hop packets on good links and moves them along"""

    def __init__(self, rng: random.Random, cfg: Dict[str, Any]):
        self.rng = rng
        self.cfg = cfg
        self._pkt_seq = 0

    # -------- Generation --------

    def spawn(self, nodes: List[Node], links: List[Link], now: float):
        """Maybe create one packet from a random node to one of its neighbours"""
        if not nodes or self.rng.random() >= self.cfg["spawn_probability"]:
            return None
        source = self.rng.choice(nodes)
        if source.is_jammer:
            return None
        threshold = self.cfg["min_neighbor_quality"]
        neighbors = []
        for l in links:
            if l.quality <= threshold:
                continue
            if l.source == source.nid:
                neighbors.append(l.target)
            elif l.target == source.nid:
                neighbors.append(l.source)
        if not neighbors:
            return None
        self._pkt_seq += 1
        return Packet(
            pid=f"pkt-{self._pkt_seq}",
            source_id=source.nid,
            target_id=self.rng.choice(neighbors),
            x=source.x,
            y=source.y,
            created_at=now,
        )

    # -------- Forwarding --------

    def _advance(self, p: Packet, by_id: Dict[int, Node], link_index, now: float, out: TrafficTick):
        source = by_id.get(p.source_id)
        target = by_id.get(p.target_id)
        if source is None or target is None:
            p.lost = True
            out.lost += 1
            return

        link = link_index.get(link_key(p.source_id, p.target_id))
        if link is None or link.quality <= self.cfg["loss_quality_threshold"]:
            if self.rng.random() < self.cfg["loss_probability"]:
                p.lost = True
                out.lost += 1
                return

        total = distance(source, target)
        progress = 1.0 if total == 0 else p.progress + self.cfg["packet_speed"] / total
        if progress >= 1.0:
            p.progress = 1.0
            p.x, p.y = target.x, target.y
            p.delivered = True
            out.delivered += 1
            out.latencies.append(now - p.created_at)
            return

        p.progress = progress
        p.x = source.x + (target.x - source.x) * progress
        p.y = source.y + (target.y - source.y) * progress

    def step(self, nodes: List[Node], links: List[Link], packets: List[Packet], now: float) -> TrafficTick:
        """Spawn, advance and cull packets for one tick.

        ``packets`` is the live set from the previous tick; the returned
        ``live`` list replaces it.
        """
        out = TrafficTick()
        packets = list(packets)
        fresh = self.spawn(nodes, links, now)
        if fresh is not None:
            packets.append(fresh)
            out.sent += 1

        by_id = {n.nid: n for n in nodes}
        link_index = index_links(links)
        for p in packets:
            if p.in_flight:
                self._advance(p, by_id, link_index, now, out)
            if p.in_flight:
                out.live.append(p)
            else:
                out.finished.append(p)
        return out
