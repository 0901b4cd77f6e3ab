"""
Live visualization for the NetJam simulation
"""

import logging
import time
from typing import Optional

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.collections import LineCollection
from matplotlib.patches import Circle

from analysis import AnalysisWorker
from export import default_filename, write_csv
from models import AttackKind, RenderSnapshot
from simulation import Simulation

logger = logging.getLogger(__name__)

ATTACK_KEYS = {str(i): kind for i, kind in enumerate(AttackKind)}

NODE_COLOR = "tab:blue"
JAMMER_COLOR = "tab:red"
TARGET_COLOR = "tab:orange"
PACKET_COLOR = "gold"


def _link_segments(snap: RenderSnapshot):
    """Line segments and qualities for every link in the snapshot"""
    pos = {n.nid: (n.x, n.y) for n in snap.nodes}
    segs = [(pos[l.source], pos[l.target]) for l in snap.links]
    return segs, [l.quality for l in snap.links]


def _node_colors(snap: RenderSnapshot):
    colors = []
    for n in snap.nodes:
        if n.is_jammer:
            colors.append(JAMMER_COLOR)
        elif n.is_target:
            colors.append(TARGET_COLOR)
        else:
            colors.append(NODE_COLOR)
    return colors


class LiveArtist:
    """Matplotlib view of the arena plus rolling metric charts.

    Every animation frame advances the simulation by one tick, so the
    animation timer is the frame clock that drives the run.
    """

    def __init__(self, sim: Simulation, worker: Optional[AnalysisWorker] = None):
        self.sim = sim
        self.worker = worker
        self.analysis_text = "Press 'a' to analyze the collected metrics."
        self.fig, (self.ax, self.chart, self.perf) = plt.subplots(
            3, 1, figsize=(9.0, 9.6), gridspec_kw={"height_ratios": [3, 1.2, 1.2]})
        W, H = sim.cfg["world_size"]
        self.ax.set_xlim(0, W)
        self.ax.set_ylim(0, H)
        self.ax.set_aspect("equal", adjustable="box")
        self.ax.set_title("NetJam - Live View")

        snap = sim.snapshot()

        # Links colored by quality
        segs, qualities = _link_segments(snap)
        self.lines = LineCollection(segs, cmap="RdYlGn", linewidths=0.9, alpha=0.7)
        self.lines.set_array(qualities)
        self.lines.set_clim(0.0, 1.0)
        self.ax.add_collection(self.lines)

        # Jammer footprint
        self.footprint = Circle((0, 0), snap.footprint_radius, color=JAMMER_COLOR,
                                alpha=0.0, linewidth=0)
        self.ax.add_patch(self.footprint)

        self.scatter = self.ax.scatter([n.x for n in snap.nodes], [n.y for n in snap.nodes],
                                       s=40, c=_node_colors(snap), zorder=3)
        self.packets = self.ax.scatter([], [], s=12, c=PACKET_COLOR, zorder=4)

        self.stats_txt = self.ax.text(0.01, 0.99, "", transform=self.ax.transAxes,
                                      va="top", fontsize=8, family="monospace")
        self.analysis_txt = self.fig.text(0.01, 0.005, "", fontsize=7, va="bottom", wrap=True)

        # Metric charts
        self.chart.set_ylim(0, 1.05)
        self.chart.set_xlabel("record")
        self.series = {
            "pdr": self.chart.plot([], [], label="PDR")[0],
            "plr": self.chart.plot([], [], label="PLR")[0],
            "avg_link_quality": self.chart.plot([], [], label="Link quality")[0],
            "jamming_intensity": self.chart.plot([], [], label="Jamming")[0],
        }
        self.chart.legend(loc="upper right", fontsize=7, ncol=4)

        # Latency (ms) on the left axis, throughput (pkt/s) on a twin axis
        self.perf.set_xlabel("record")
        self.perf.set_ylabel("latency (ms)", fontsize=8)
        self.perf_rate = self.perf.twinx()
        self.perf_rate.set_ylabel("throughput (pkt/s)", fontsize=8)
        self.perf_series = {
            "latency": self.perf.plot([], [], color="tab:purple", label="Latency")[0],
            "throughput": self.perf_rate.plot([], [], color="tab:green", label="Throughput")[0],
        }
        self.perf.legend(handles=list(self.perf_series.values()), loc="upper left", fontsize=7, ncol=2)

        self.fig.canvas.mpl_connect("key_press_event", self.on_key)

    # -------- Input --------

    def on_key(self, event):
        key = event.key
        if key in ATTACK_KEYS:
            self.sim.set_attack(ATTACK_KEYS[key])
        elif key == " ":
            if self.sim.running:
                self.sim.stop()
            else:
                self.sim.resume()
        elif key == "e":
            self.export()
        elif key == "a":
            self.request_analysis()

    def export(self):
        records = self.sim.metrics.history()
        if not records:
            self.analysis_text = "Nothing to export yet."
            return None
        name = default_filename(self.sim.state.attack_kind, int(time.time() * 1000))
        try:
            path = write_csv(records, name)
        except OSError:
            logger.exception("CSV export failed")
            self.analysis_text = "Export failed."
            return None
        self.analysis_text = f"Exported {len(records)} records to {path}"
        return path

    def request_analysis(self):
        if self.worker is None or len(self.sim.metrics) == 0:
            return None
        self.analysis_text = "Analyzing dataset..."

        def _done(text: str):
            self.analysis_text = text

        return self.worker.submit(self.sim.metrics.history(), self.sim.state.attack_kind, _done)

    # -------- Frame --------

    def update(self, _frame):
        """Advance one tick and redraw"""
        self.sim.step()
        snap = self.sim.snapshot()

        self.scatter.set_offsets([(n.x, n.y) for n in snap.nodes])
        self.scatter.set_color(_node_colors(snap))

        segs, qualities = _link_segments(snap)
        self.lines.set_segments(segs)
        self.lines.set_array(qualities)

        live = [(p.x, p.y) for p in snap.packets if p.in_flight]
        self.packets.set_offsets(live if live else [(float("nan"), float("nan"))])

        jammer = snap.jammer
        if jammer is not None:
            self.footprint.set_center((jammer.x, jammer.y))
            self.footprint.set_radius(snap.footprint_radius)
            self.footprint.set_alpha(0.25 * snap.jamming_power if snap.jamming_active else 0.0)

        recent = self.sim.metrics.recent(self.sim.cfg["chart_records"])
        xs = list(range(len(recent)))
        for name, line in self.series.items():
            line.set_data(xs, [getattr(r, name) for r in recent])
        self.chart.set_xlim(0, max(len(recent) - 1, 1))
        for name, line in self.perf_series.items():
            line.set_data(xs, [getattr(r, name) for r in recent])
        for ax, name in ((self.perf, "latency"), (self.perf_rate, "throughput")):
            top = max((getattr(r, name) for r in recent), default=0.0)
            ax.set_ylim(0, top * 1.1 if top > 0 else 1.0)
        self.perf.set_xlim(0, max(len(recent) - 1, 1))

        last = recent[-1] if recent else None
        state = "RUNNING" if self.sim.running else "PAUSED"
        self.stats_txt.set_text(
            f"[{state}] Attack: {snap.attack_kind.value}  t={snap.now / 1000:.1f}s  "
            f"Records: {len(self.sim.metrics)}\n"
            f"Jamming: {snap.jamming_power:.2f}  Links: {len(snap.links)}  Packets: {len(live)}\n"
            + (f"PDR: {last.pdr:.2f}  PLR: {last.plr:.2f}  Lat: {last.latency:.0f}ms  "
               f"Energy: {last.energy:.0f}" if last else "")
        )
        self.analysis_txt.set_text(self.analysis_text[:600])
        return self.scatter, self.lines, self.packets, self.footprint, self.stats_txt


def run_live_viz(sim: Simulation, worker: Optional[AnalysisWorker] = None):
    """Show the live view; the animation timer ticks the simulation"""
    artist = LiveArtist(sim, worker)
    anim = FuncAnimation(artist.fig, artist.update, interval=sim.cfg["tick_ms"],
                         blit=False, cache_frame_data=False)

    # Show blocking window; after close, print final report
    plt.show()
    sim.stop()
    sim.report()
    return anim
