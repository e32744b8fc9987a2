"""
Run the reference HPA scenarios and print their summaries.
Also compares the sample behaviors and sweeps the scale-down window.
"""
import sys
import os

# Add project root to path
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, SCRIPT_DIR)

import pandas as pd

from hpasim.simulation import SimulatorConfig, run_simulation
from hpasim.analysis import compare_scenarios, run_sensitivity_analysis

pd.set_option('display.width', 160)
pd.set_option('display.max_columns', 20)

print("="*60)
print("           HPA QUEUE SIMULATOR - SCENARIOS")
print("="*60)

SCENARIOS = {
    'A. Demand above capacity': SimulatorConfig(),
    'B. Demand below capacity': SimulatorConfig(producing_rate_total=500),
    'C. Spike with 60s startup': SimulatorConfig(producing_rate_total=3000, pod_startup_delay=60),
    'D. Zero-length run': SimulatorConfig(simulation_seconds=0),
}

# ========== Reference scenarios ==========
print("\n1. Reference scenarios...")
for name, config in SCENARIOS.items():
    result = run_simulation(config)
    s = result.summary
    print(f"\n   {name}")
    print(f"   Points: {len(result.points)}, final pods: {s.final_pods}, "
          f"scale-ups: {s.total_scale_ups}, scale-downs: {s.total_scale_downs}")
    print(f"   Max metric: {s.max_metric_value:.2f}, max queue: {s.max_queue_jobs:.0f}, "
          f"final queue: {s.final_queue_jobs:.0f}")

# ========== Behavior comparison ==========
print("\n2. Comparing sample behaviors...")
comparison = compare_scenarios()
print(comparison[['scenario', 'max_metric_value', 'avg_pods', 'peak_pods',
                  'total_scale_events', 'direction_reversals', 'time_above_target_pct']])

# ========== Sensitivity ==========
print("\n3. Sweeping scale-down stabilization window...")
sweep = run_sensitivity_analysis(
    SimulatorConfig(),
    'scale_down.stabilization_window_seconds',
    show_progress=True
)
print(sweep[['scale_down.stabilization_window_seconds', 'max_metric_value',
             'total_scale_downs', 'direction_reversals', 'final_pods']])

print("\n" + "="*60)
print("           DONE")
print("="*60)
