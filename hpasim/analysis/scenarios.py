"""
Scenario Analysis
=================
So sánh nhiều cấu hình HPA và chạy sensitivity analysis trên một tham số.

Cho phép:
    - So sánh các behavior (aggressive / conservative / startup delay)
    - Đo độ ổn định: số lần đổi chiều scaling, thời gian vượt target
    - Xem một tham số ảnh hưởng thế nào tới kết quả

Usage:
    >>> df = compare_scenarios()
    >>> sweep = run_sensitivity_analysis(
    ...     default_config(), 'scale_down.stabilization_window_seconds', [0, 60, 300]
    ... )
"""

import copy
import logging
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from ..simulation.config import (
    HPA_SYNC_PERIOD,
    PolicyType,
    ScaleBehavior,
    ScalePolicy,
    SelectPolicy,
    SimulatorConfig,
    default_config
)
from ..simulation.engine import SimulationResult, run_simulation

logger = logging.getLogger(__name__)


# Giá trị mặc định cho sensitivity analysis
DEFAULT_SWEEPS = {
    'max_pods': [12, 15, 20, 25, 40],
    'tolerance_fraction': [0.0, 0.05, 0.1, 0.2, 0.3],
    'pod_startup_delay': [0, 15, 30, 60, 120],
    'target_metric_value': [15, 30, 60, 120],
    'producing_rate_total': [500, 1000, 1115, 1500, 2000],
    'scale_up.stabilization_window_seconds': [0, 30, 60, 120, 300],
    'scale_down.stabilization_window_seconds': [0, 60, 120, 300, 600],
}


def stability_metrics(result: SimulationResult) -> Dict:
    """
    Tính các metrics về độ ổn định từ kết quả simulation.

    Args:
        result: SimulationResult từ run_simulation()

    Returns:
        Dict với các metrics
    """
    summary = result.summary.to_dict()
    metrics = {
        'max_metric_value': summary['maxMetricValue'],
        'max_queue_jobs': summary['maxQueueJobs'],
        'final_pods': summary['finalPods'],
        'final_queue_jobs': summary['finalQueueJobs'],
        'total_scale_ups': summary['totalScaleUps'],
        'total_scale_downs': summary['totalScaleDowns'],
        'total_scale_events': summary['totalScaleUps'] + summary['totalScaleDowns'],
    }

    df = result.to_frame()
    if len(df) == 0:
        metrics.update({
            'avg_pods': float(result.config.starting_pods),
            'peak_pods': result.config.starting_pods,
            'min_pods': result.config.starting_pods,
            'pod_seconds': 0,
            'direction_reversals': 0,
            'time_above_target_pct': 0.0
        })
        return metrics

    # Đổi chiều scaling: up rồi down (hoặc ngược lại) là dấu hiệu flapping
    events = result.get_scaling_events()
    signs = np.sign(events['pod_change'].values)
    reversals = int((signs[1:] != signs[:-1]).sum()) if len(signs) > 1 else 0

    above_target = df['metric_value'] > result.config.target_metric_value

    metrics.update({
        'avg_pods': float(df['pods'].mean()),
        'peak_pods': int(df['pods'].max()),
        'min_pods': int(df['pods'].min()),
        'pod_seconds': int(df['pods'].sum()),
        'direction_reversals': reversals,
        'time_above_target_pct': float(above_target.mean() * 100)
    })
    return metrics


def default_scenarios() -> Dict[str, SimulatorConfig]:
    """Các scenarios mặc định để so sánh."""
    base = default_config()

    aggressive = copy.deepcopy(base)
    aggressive.scale_up = ScaleBehavior(
        stabilization_window_seconds=0,
        select_policy=SelectPolicy.MAX,
        policies=[ScalePolicy(PolicyType.PERCENT, 100, 15)]
    )
    aggressive.scale_down = ScaleBehavior(
        stabilization_window_seconds=0,
        select_policy=SelectPolicy.MAX,
        policies=[ScalePolicy(PolicyType.PERCENT, 100, 15)]
    )

    conservative = copy.deepcopy(base)
    conservative.tolerance_fraction = 0.2
    conservative.scale_up.stabilization_window_seconds = 60
    conservative.scale_up.select_policy = SelectPolicy.MIN
    conservative.scale_down.stabilization_window_seconds = 600

    slow_startup = copy.deepcopy(base)
    slow_startup.pod_startup_delay = 60

    return {
        'Default': base,
        'Aggressive': aggressive,
        'Conservative': conservative,
        'Slow Startup': slow_startup
    }


def compare_scenarios(
    scenarios: Optional[Dict[str, Any]] = None,
    sync_period: int = HPA_SYNC_PERIOD
) -> pd.DataFrame:
    """
    So sánh nhiều cấu hình khác nhau.

    Args:
        scenarios: Dict của {name: SimulatorConfig hoặc dict}
        sync_period: Chu kỳ control loop

    Returns:
        DataFrame so sánh, sort theo max_metric_value
    """
    if scenarios is None:
        scenarios = default_scenarios()

    results = []

    for name, config in scenarios.items():
        logger.info("Simulating: %s", name)

        result = run_simulation(config, sync_period=sync_period)
        metrics = stability_metrics(result)
        metrics['scenario'] = name
        results.append(metrics)

    df = pd.DataFrame(results)
    if len(df) == 0:
        return df

    # Reorder columns
    cols = ['scenario'] + [c for c in df.columns if c != 'scenario']
    df = df[cols]

    return df.sort_values('max_metric_value').reset_index(drop=True)


def _set_param(config: SimulatorConfig, param_name: str, value: Any):
    """Gán giá trị cho field (hỗ trợ dotted path như 'scale_up.select_policy')."""
    target = config
    parts = param_name.split('.')
    for part in parts[:-1]:
        if not hasattr(target, part):
            raise ValueError(f"Unknown parameter: {param_name}")
        target = getattr(target, part)

    if not hasattr(target, parts[-1]):
        raise ValueError(f"Unknown parameter: {param_name}")
    setattr(target, parts[-1], value)


def run_sensitivity_analysis(
    base_config: Any = None,
    param_name: str = 'max_pods',
    param_values: Optional[List] = None,
    sync_period: int = HPA_SYNC_PERIOD,
    show_progress: bool = False
) -> pd.DataFrame:
    """
    Chạy sensitivity analysis cho một parameter.

    Args:
        base_config: SimulatorConfig, dict hoặc None (default)
        param_name: Tên field, dotted path cho behavior
            (vd: 'scale_down.stabilization_window_seconds')
        param_values: Các giá trị để test
        sync_period: Chu kỳ control loop
        show_progress: Hiện progress bar

    Returns:
        DataFrame với results cho mỗi parameter value

    Raises:
        ValueError: Nếu param_name không tồn tại trong config
    """
    if base_config is None or isinstance(base_config, dict):
        base_config = SimulatorConfig.from_dict(base_config)

    if param_values is None:
        param_values = DEFAULT_SWEEPS.get(param_name, [0.5, 1.0, 1.5, 2.0])

    # Validate trước khi chạy
    _set_param(copy.deepcopy(base_config), param_name, param_values[0] if param_values else None)

    results = []
    iterator = tqdm(param_values, desc=f"Sweeping {param_name}") if show_progress else param_values

    for value in iterator:
        config = copy.deepcopy(base_config)
        _set_param(config, param_name, value)

        result = run_simulation(config, sync_period=sync_period)
        metrics = stability_metrics(result)
        metrics[param_name] = value
        results.append(metrics)

    df = pd.DataFrame(results)
    if len(df) == 0:
        return df

    cols = [param_name] + [c for c in df.columns if c != param_name]
    return df[cols]
