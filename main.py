#!/usr/bin/env python3
"""
NetJam Simulator - Main Entry Point

Mobile wireless sensor network under radio-jamming attacks, producing
time-series metrics for jamming-detection datasets.

Features:
- Bouncing node mobility in a bounded arena
- Six jamming strategies: None, Constant, Reactive, Random, Sweep, Intelligent
- Distance and interference based link quality
- Single-hop packet traffic with quality-driven loss
- Windowed PDR/PLR/throughput/latency/energy records, CSV export
- Optional Gemini analysis of the collected records
- Live Matplotlib view with key bindings (0-5 attack, space pause, e export, a analyze)

Run:
    python main.py
    python main.py --headless --attack sweep --ticks 6000 --export out.csv
"""

import argparse
import asyncio
import logging
import sys

from analysis import AnalysisWorker, analyze, sample_records
from config import SIM_CONFIG
from export import write_csv
from models import AttackKind
from simulation import Simulation

logger = logging.getLogger("netjam")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="NetJam wireless jamming simulator")
    p.add_argument("--attack", type=AttackKind.parse, default=AttackKind.NONE,
                   help="attack kind: " + ", ".join(k.value for k in AttackKind))
    p.add_argument("--seed", type=int, default=SIM_CONFIG["seed"])
    p.add_argument("--headless", action="store_true", help="run without the live view")
    p.add_argument("--ticks", type=int, default=SIM_CONFIG["sim_ticks"],
                   help="ticks to run in headless mode")
    p.add_argument("--export", type=str, default=None, help="write records to this CSV file")
    p.add_argument("--analyze", action="store_true", help="ask the LLM analyst after a headless run")
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)


def run(args) -> Simulation:
    """Build and drive one simulation from parsed arguments"""
    cfg = dict(SIM_CONFIG, seed=args.seed)
    sim = Simulation(cfg, attack=args.attack).build()

    if args.headless:
        logger.info("Running %d ticks headless, attack=%s", args.ticks, args.attack.value)
        sim.run(args.ticks)
        sim.report()
        if args.export:
            write_csv(sim.metrics.history(), args.export)
        if args.analyze:
            sample = sample_records(sim.metrics.history(), cfg["analysis_sample"])
            print("\n=== Analysis ===")
            print(asyncio.run(analyze(sample, sim.state.attack_kind, cfg)))
        return sim

    from visualization import run_live_viz

    worker = AnalysisWorker(cfg)
    print("Starting simulation with live visualization...")
    try:
        run_live_viz(sim, worker)
    finally:
        worker.close()
    if args.export:
        write_csv(sim.metrics.history(), args.export)
    return sim


def main(argv=None) -> int:
    """Main entry point for the jamming simulation"""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    run(args)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
