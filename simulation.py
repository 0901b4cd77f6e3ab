"""
Simulation coordinator for the NetJam jamming testbed
"""

import dataclasses
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import attacks
from links import JammingContext, average_quality, compute_links
from metrics import MetricsAggregator, MetricsLog
from models import AttackKind, Link, MetricsRecord, Node, Packet, RenderSnapshot
from topology import advance, build_nodes
from traffic import TrafficEngine

logger = logging.getLogger(__name__)


@dataclass
class SimulationState:
    """All state that survives from one tick to the next"""
    nodes: List[Node] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)
    packets: List[Packet] = field(default_factory=list)
    finished: List[Packet] = field(default_factory=list)
    attack_kind: AttackKind = AttackKind.NONE
    attack_state: Any = field(default_factory=attacks.NoState)
    jamming_active: bool = False
    jamming_power: float = 0.0
    avg_link_quality: float = 0.0
    tick: int = 0
    now: float = 0.0


class Simulation:
    """Runs the per-tick pipeline: move, attack, links, traffic, metrics"""

    def __init__(self, cfg: Dict[str, Any], attack: AttackKind = AttackKind.NONE):
        self.cfg = cfg
        self.rng = random.Random(cfg["seed"])
        self.state = SimulationState(attack_kind=attack, attack_state=attacks.initial_state(attack))
        self.traffic = TrafficEngine(self.rng, cfg)
        self.aggregator = MetricsAggregator(cfg)
        self.metrics = MetricsLog()
        self._running = True

    def build(self):
        """Create all nodes; node ``jammer_id`` is the attacker"""
        self.state.nodes = build_nodes(
            self.cfg["num_nodes"], self.cfg["world_size"], self.cfg["max_speed"],
            self.cfg["jammer_id"], self.rng,
        )
        return self

    @property
    def running(self) -> bool:
        return self._running

    @property
    def jammer(self) -> Optional[Node]:
        return next((n for n in self.state.nodes if n.is_jammer), None)

    # -------- Control --------

    def set_attack(self, kind: AttackKind):
        """Switch attack strategy; nodes, links and packets are left alone"""
        st = self.state
        if self.cfg["log_attack_changes"]:
            logger.info("attack %s -> %s at t=%.0fms", st.attack_kind.value, kind.value, st.now)
        st.attack_kind = kind
        st.attack_state = attacks.initial_state(kind)
        attacks.clear_targets(st.nodes)

    def stop(self):
        self._running = False

    def resume(self):
        self._running = True

    # -------- Tick --------

    def step(self) -> Optional[MetricsRecord]:
        """Run exactly one tick. Returns the metrics record if a window closed."""
        if not self._running:
            return None
        st = self.state
        cfg = self.cfg
        st.tick += 1
        st.now += cfg["tick_ms"]

        W, H = cfg["world_size"]
        advance(st.nodes, W, H)

        jammer = self.jammer
        outcome = attacks.evaluate(st.attack_kind, st.attack_state, st.nodes, st.packets,
                                   jammer, st.now, cfg, self.rng)
        st.attack_state = outcome.state
        st.jamming_active = outcome.active
        st.jamming_power = outcome.power

        jamming = JammingContext(st.attack_kind, outcome.active, outcome.power, jammer)
        st.links = compute_links(st.nodes, jamming, cfg)
        st.avg_link_quality = average_quality(st.links)

        result = self.traffic.step(st.nodes, st.links, st.packets, st.now)
        st.packets = result.live
        st.finished = result.finished

        self.aggregator.record_traffic(result)
        record = self.aggregator.record_tick(st.now, st.attack_kind, st.jamming_active,
                                             st.jamming_power, st.avg_link_quality)
        if record is not None:
            self.metrics.append(record)
            if cfg["log_records"]:
                logger.debug("record #%d: %s", len(self.metrics), record)
        return record

    def run(self, ticks: int) -> int:
        """Headless loop; returns how many records were emitted"""
        before = len(self.metrics)
        for _ in range(ticks):
            if not self._running:
                break
            self.step()
        return len(self.metrics) - before

    # -------- Views --------

    def snapshot(self) -> RenderSnapshot:
        """Copy of the current tick for renderers"""
        st = self.state
        return RenderSnapshot(
            tick=st.tick,
            now=st.now,
            attack_kind=st.attack_kind,
            jamming_active=st.jamming_active,
            jamming_power=st.jamming_power,
            footprint_radius=attacks.footprint_radius(st.attack_kind, self.cfg),
            nodes=tuple(dataclasses.replace(n) for n in st.nodes),
            links=tuple(st.links),
            packets=tuple(dataclasses.replace(p) for p in st.packets + st.finished),
        )

    def report(self):
        """Print simulation statistics and results"""
        records = self.metrics.history()
        print("\n=== Simulation Summary ===")
        print(f"Nodes: {len(self.state.nodes)}  Range: {self.cfg['comm_range']}  "
              f"Ticks: {self.state.tick}  Sim time: {self.state.now / 1000:.1f} s")
        print(f"Attack: {self.state.attack_kind.value}  Records: {len(records)}  "
              f"Packets in flight: {len(self.state.packets)}")
        if not records:
            return
        n = len(records)
        print(f"Mean PDR: {sum(r.pdr for r in records) / n:.3f}  "
              f"Mean PLR: {sum(r.plr for r in records) / n:.3f}")
        print(f"Mean throughput: {sum(r.throughput for r in records) / n:.2f} pkt/s  "
              f"Mean latency: {sum(r.latency for r in records) / n:.2f} ms")
        print(f"Mean link quality: {sum(r.avg_link_quality for r in records) / n:.3f}  "
              f"Energy: {records[-1].energy:.2f}")

        print("\nPer-attack quick view:")
        for kind in AttackKind:
            rows = [r for r in records if r.attack_kind is kind]
            if not rows:
                continue
            print(f"- {kind.value}: {len(rows)} records, "
                  f"pdr={sum(r.pdr for r in rows) / len(rows):.2f}, "
                  f"lq={sum(r.avg_link_quality for r in rows) / len(rows):.2f}, "
                  f"jam={sum(r.jamming_intensity for r in rows) / len(rows):.2f}")
