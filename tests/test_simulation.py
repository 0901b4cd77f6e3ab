import pytest

from attacks import IntelligentState, RandomState, most_connected
from models import AttackKind
from simulation import Simulation
from topology import distance


def _sim(cfg, attack=AttackKind.NONE, **overrides):
    cfg = dict(cfg)
    cfg.update(overrides)
    return Simulation(cfg, attack=attack).build()


def test_build_has_one_jammer(cfg):
    sim = _sim(cfg)
    assert len(sim.state.nodes) == cfg["num_nodes"]
    assert sum(n.is_jammer for n in sim.state.nodes) == 1
    assert sim.jammer.nid == cfg["jammer_id"]


def test_no_attack_never_jams(cfg):
    sim = _sim(cfg)
    R = cfg["comm_range"]
    for _ in range(300):
        sim.step()
        assert not sim.state.jamming_active
        by_id = {n.nid: n for n in sim.state.nodes}
        for l in sim.state.links:
            d = distance(by_id[l.source], by_id[l.target])
            assert l.quality == pytest.approx(1 - d / R)


def test_constant_attack_always_full_power(cfg):
    sim = _sim(cfg, AttackKind.CONSTANT)
    for _ in range(200):
        sim.step()
        assert sim.state.jamming_active
        assert sim.state.jamming_power == 1.0


def test_reactive_without_traffic_stays_silent(cfg):
    sim = _sim(cfg, AttackKind.REACTIVE, spawn_probability=0.0)
    for _ in range(500):
        sim.step()
        assert not sim.state.jamming_active
    assert all(r.jamming_intensity == 0.0 for r in sim.metrics.history())


def test_intelligent_flags_exactly_one_victim(cfg):
    sim = _sim(cfg, AttackKind.INTELLIGENT)
    every = cfg["retarget_every_ticks"]
    for _ in range(200):
        sim.step()
        targets = [n for n in sim.state.nodes if n.is_target]
        assert len(targets) == 1
        assert not targets[0].is_jammer
        if (sim.state.attack_state.ticks - 1) % every == 0:
            expected = most_connected(sim.state.nodes, cfg["comm_range"])
            assert targets[0].nid == expected.nid


def test_silent_network_reports_perfect_windows(cfg):
    sim = _sim(cfg, spawn_probability=0.0)
    sim.run(200)
    records = sim.metrics.history()
    assert len(records) >= 5
    for r in records:
        assert (r.pdr, r.plr, r.throughput, r.latency) == (1.0, 0.0, 0.0, 0.0)


def test_packets_and_records_respect_invariants(cfg):
    sim = _sim(cfg, AttackKind.SWEEP)
    progress = {}
    W, H = cfg["world_size"]
    slack = cfg["max_speed"]
    for _ in range(1500):
        sim.step()
        for n in sim.state.nodes:
            assert -slack <= n.x <= W + slack and -slack <= n.y <= H + slack
        for p in sim.state.packets + sim.state.finished:
            assert not (p.delivered and p.lost)
            assert 0.0 <= p.progress <= 1.0
            assert p.progress >= progress.get(p.pid, 0.0)
            progress[p.pid] = p.progress
        assert all(p.in_flight for p in sim.state.packets)
    records = sim.metrics.history()
    assert records
    energies = [r.energy for r in records]
    assert energies == sorted(energies)
    for r in records:
        assert 0.0 <= r.pdr <= 1.0 and 0.0 <= r.plr <= 1.0
        assert r.attack_kind is AttackKind.SWEEP


def test_set_attack_resets_kind_state_only(cfg):
    sim = _sim(cfg, AttackKind.INTELLIGENT)
    sim.run(30)
    positions = [(n.x, n.y) for n in sim.state.nodes]
    packets = list(sim.state.packets)
    assert any(n.is_target for n in sim.state.nodes)

    sim.set_attack(AttackKind.RANDOM)
    assert isinstance(sim.state.attack_state, RandomState)
    assert sim.state.attack_state.next_switch == 0.0
    assert not any(n.is_target for n in sim.state.nodes)
    assert [(n.x, n.y) for n in sim.state.nodes] == positions
    assert sim.state.packets == packets

    sim.set_attack(AttackKind.INTELLIGENT)
    assert sim.state.attack_state == IntelligentState()


def test_stop_halts_ticks_and_keeps_log(cfg):
    sim = _sim(cfg, AttackKind.CONSTANT)
    sim.run(100)
    emitted = len(sim.metrics)
    tick = sim.state.tick
    sim.stop()
    assert sim.step() is None
    assert sim.run(100) == 0
    assert sim.state.tick == tick
    assert len(sim.metrics) == emitted
    sim.resume()
    sim.step()
    assert sim.state.tick == tick + 1


def test_snapshot_is_detached(cfg):
    sim = _sim(cfg, AttackKind.SWEEP)
    sim.run(50)
    snap = sim.snapshot()
    assert snap.attack_kind is AttackKind.SWEEP
    assert snap.footprint_radius == 150.0
    assert snap.jammer.nid == cfg["jammer_id"]
    snap.nodes[1].x = -999.0
    assert sim.state.nodes[1].x != -999.0


def test_same_seed_same_records(cfg):
    a = _sim(cfg, AttackKind.RANDOM)
    b = _sim(cfg, AttackKind.RANDOM)
    a.run(400)
    b.run(400)
    assert a.metrics.history() == b.metrics.history()


def test_report_prints_summary(cfg, capsys):
    sim = _sim(cfg, AttackKind.CONSTANT)
    sim.run(100)
    sim.report()
    out = capsys.readouterr().out
    assert "Simulation Summary" in out
    assert "Constant" in out
