"""
Windowed metrics aggregation and the append-only metrics log
"""

from typing import Any, Dict, List, Optional, Tuple

from models import AttackKind, MetricsRecord
from traffic import TrafficTick


class MetricsAggregator:
    """Counts traffic over a fixed window and flushes it into one record.

    Energy is a running total for the whole run; every other counter is
    reset after each emitted record.
    """

    def __init__(self, cfg: Dict[str, Any]):
        self.cfg = cfg
        self.window_ms: float = cfg["log_interval_ms"]
        self.sent = 0
        self.delivered = 0
        self.lost = 0
        self.latencies: List[float] = []
        self.energy = 0.0
        self.last_emit = 0.0

    def record_sent(self, count: int = 1):
        self.sent += count

    def record_delivered(self, latency: float):
        self.delivered += 1
        self.latencies.append(latency)

    def record_lost(self, count: int = 1):
        self.lost += count

    def record_traffic(self, tick: TrafficTick):
        """Fold one tick of traffic into the window counters"""
        self.record_sent(tick.sent)
        self.record_lost(tick.lost)
        self.delivered += tick.delivered
        self.latencies.extend(tick.latencies)

    def record_tick(self, now: float, kind: AttackKind, jamming_active: bool,
                    jamming_power: float, avg_link_quality: float) -> Optional[MetricsRecord]:
        """Accrue energy; return a record once the window has elapsed"""
        if jamming_active:
            self.energy += self.cfg["energy_per_tick_jamming"]
        else:
            self.energy += self.cfg["energy_per_tick_idle"]

        if now - self.last_emit <= self.window_ms:
            return None

        record = self._summarize(now, kind, avg_link_quality, jamming_power)
        self.last_emit = now
        self.sent = 0
        self.delivered = 0
        self.lost = 0
        self.latencies = []
        return record

    def _summarize(self, now, kind, avg_link_quality, jamming_power) -> MetricsRecord:
        eps = self.cfg["epsilon"]
        if self.sent == 0:
            pdr, plr = 1.0, 0.0
        else:
            # packets sent in an earlier window can finish in this one
            pdr = min(1.0, self.delivered / (self.sent + eps))
            plr = min(1.0, self.lost / (self.sent + eps))
        throughput = self.delivered * (1000.0 / self.window_ms)
        latency = sum(self.latencies) / len(self.latencies) if self.latencies else 0.0
        return MetricsRecord(
            timestamp=now,
            attack_kind=kind,
            pdr=round(pdr, 3),
            plr=round(plr, 3),
            throughput=round(throughput, 2),
            latency=round(latency, 2),
            energy=round(self.energy, 2),
            avg_link_quality=round(avg_link_quality, 3),
            jamming_intensity=round(jamming_power, 2),
        )


class MetricsLog:
    """Ordered, append-only history of emitted records"""

    def __init__(self):
        self._records: List[MetricsRecord] = []

    def append(self, record: MetricsRecord):
        self._records.append(record)

    def history(self) -> Tuple[MetricsRecord, ...]:
        return tuple(self._records)

    def recent(self, n: int) -> Tuple[MetricsRecord, ...]:
        if n <= 0:
            return ()
        return tuple(self._records[-n:])

    def __len__(self) -> int:
        return len(self._records)
