"""
Configuration for NetJam Wireless Sensor Network Jamming Simulation
"""

SIM_CONFIG = {
    "num_nodes": 40,
    "world_size": (800.0, 500.0),   # arena (x_max, y_max)
    "comm_range": 120.0,            # radio range, links exist below this distance
    "max_speed": 0.25,              # |vx|, |vy| upper bound per tick
    "jammer_id": 0,                 # node that carries the jammer
    "tick_ms": 1000.0 / 60.0,       # simulated time per tick (60 Hz frame clock)
    "log_interval_ms": 500.0,       # metrics aggregation window
    "sim_ticks": 3600,              # headless run length

    # traffic
    "spawn_probability": 0.15,      # chance per tick that a source is picked
    "min_neighbor_quality": 0.1,    # destinations need a link better than this
    "loss_quality_threshold": 0.2,  # links at or below this may drop packets
    "loss_probability": 0.15,       # drop chance per tick on a bad link
    "packet_speed": 3.0,            # distance units per tick

    # attacks
    "reactive_radius": 100.0,       # listen radius around the jammer
    "footprint_radius": 120.0,      # jamming footprint for all kinds but sweep
    "sweep_footprint_radius": 150.0,
    "sweep_period_ms": 500.0,       # power = (sin(t / period) + 1) / 2
    "random_hold_ms": (500.0, 2000.0),
    "intelligent_power": 0.9,
    "retarget_every_ticks": 60,
    "jamming_multiplier": 2.0,
    "target_multiplier": 3.0,

    # metrics
    "energy_per_tick_jamming": 15.0,
    "energy_per_tick_idle": 2.0,
    "epsilon": 1e-4,

    # outer collaborators
    "chart_records": 50,            # records drawn by the live charts
    "analysis_sample": 100,         # records handed to the analyst
    "analysis_prompt_records": 30,  # records actually placed in the prompt
    "analysis_model": "gemini-2.5-flash",
    "analysis_key_env": ("GEMINI_API_KEY", "API_KEY"),

    "seed": 42,
    "log_attack_changes": True,
    "log_records": False,
}
