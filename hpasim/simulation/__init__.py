"""
Simulation Module
=================
Engine mô phỏng HPA v2 điều khiển một workload xử lý queue.

Classes:
- SimulatorConfig, ScaleBehavior, ScalePolicy: Cấu hình đầu vào
- NormalizedConfig: Cấu hình đã validate mà engine sử dụng
- HPAController: Control step (tolerance, stabilization, policies)
- PodLifecycleTracker: Pending/ready pods với startup delay
- ReplicaHistory: History buffer có pre-fill
- SimulationEngine: Engine chạy từng giây
- SimulationResult, SimulationPoint, SimulationSummary: Output

Functions:
- run_simulation: Entry point của engine
- normalize_config: Input Normalizer

Enums:
- MetricType: QueueLatency, QueueLength
- SelectPolicy: Max, Min, Disabled
- PolicyType: Pods, Percent
- ScaleDirection: up, down, none
"""

from .config import (
    HPA_SYNC_PERIOD,
    MetricType,
    NormalizedConfig,
    PolicyType,
    ScaleBehavior,
    ScalePolicy,
    SelectPolicy,
    SimulatorConfig,
    default_config,
    normalize_config
)
from .engine import SimulationEngine, SimulationPoint, SimulationResult, run_simulation
from .history import ReplicaHistory
from .physics import LATENCY_SENTINEL
from .pods import PodLifecycleTracker
from .policy import HPAController, ScaleDirection, ScalingDecision
from .summary import SimulationSummary, summarize

__all__ = [
    'HPA_SYNC_PERIOD',
    'LATENCY_SENTINEL',
    'MetricType',
    'PolicyType',
    'SelectPolicy',
    'ScaleDirection',
    'ScalePolicy',
    'ScaleBehavior',
    'SimulatorConfig',
    'NormalizedConfig',
    'default_config',
    'normalize_config',
    'ReplicaHistory',
    'PodLifecycleTracker',
    'HPAController',
    'ScalingDecision',
    'SimulationEngine',
    'SimulationPoint',
    'SimulationResult',
    'SimulationSummary',
    'run_simulation',
    'summarize'
]
