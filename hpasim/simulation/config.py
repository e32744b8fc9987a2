"""
Simulation Config Module
========================
Cấu hình cho HPA simulation và Input Normalizer.

Cấu hình gồm 3 nhóm:
    1. Workload: pods, tốc độ xử lý, tốc độ sinh jobs, startup delay
    2. Control: target metric, tolerance, thời gian simulate
    3. Behavior: scaleUp / scaleDown (stabilization window + policies)

Input Normalizer không bao giờ raise: giá trị thiếu, không phải số hoặc
nằm ngoài miền hợp lệ sẽ được thay bằng default.

Usage:
    >>> config = SimulatorConfig.from_dict({'minPods': 2, 'maxPods': 25})
    >>> params = normalize_config(config)
    >>> params.max_pods
    25
"""

import math
import numbers
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np


# HPA control loop chạy mỗi 15 giây
HPA_SYNC_PERIOD = 15


class MetricType(str, Enum):
    """Metric dùng cho HPA."""
    QUEUE_LATENCY = "QueueLatency"
    QUEUE_LENGTH = "QueueLength"


class SelectPolicy(str, Enum):
    """Cách kết hợp nhiều scale policies."""
    MAX = "Max"
    MIN = "Min"
    DISABLED = "Disabled"


class PolicyType(str, Enum):
    """Loại giới hạn của một scale policy."""
    PODS = "Pods"
    PERCENT = "Percent"


@dataclass
class ScalePolicy:
    """
    Rate limit cho một hướng scaling.

    Attributes:
        type: 'Pods' (số pods tuyệt đối) hoặc 'Percent' (% của reference pods)
        value: Giá trị giới hạn
        period_seconds: Khoảng nhìn lại để lấy reference pods
    """
    type: Any = PolicyType.PODS
    value: Any = 1
    period_seconds: Any = 60


@dataclass
class ScaleBehavior:
    """
    Behavior cho một hướng (scaleUp hoặc scaleDown).

    Attributes:
        stabilization_window_seconds: Độ dài cửa sổ stabilization
        select_policy: 'Max', 'Min' hoặc 'Disabled'
        policies: Danh sách ScalePolicy theo thứ tự
    """
    stabilization_window_seconds: Any = 0
    select_policy: Any = SelectPolicy.MAX
    policies: List[Any] = field(default_factory=list)


@dataclass
class SimulatorConfig:
    """
    Cấu hình đầu vào (chưa validate) cho một lần chạy simulation.

    Các field có thể chứa giá trị bất kỳ từ UI; engine tự validate lại
    bằng normalize_config().

    Attributes:
        metric_type: 'QueueLatency' hoặc 'QueueLength'
        min_pods: Số pods tối thiểu
        max_pods: Số pods tối đa
        starting_pods: Số pods ban đầu
        initial_queue_jobs: Số jobs có sẵn trong queue lúc t=0
        initial_metric_value: Giá trị metric ban đầu (dùng khi queue = 0)
        processing_rate_per_pod: Jobs/giây mỗi pod xử lý được
        producing_rate_total: Tổng jobs/giây được sinh ra
        pod_startup_delay: Số giây pod mới cần để sẵn sàng
        simulation_seconds: Thời gian simulate (giây)
        target_metric_value: Target của metric
        tolerance_fraction: Dead-band quanh target (0.1 = 10%)
        scale_up: ScaleBehavior cho scale-up
        scale_down: ScaleBehavior cho scale-down
        stabilization_includes_current: Window stabilization có tính cả
            giá trị raw vừa tính ở tick hiện tại hay không
    """
    metric_type: Any = MetricType.QUEUE_LATENCY
    min_pods: Any = 2
    max_pods: Any = 25
    starting_pods: Any = 10
    initial_queue_jobs: Any = 0
    initial_metric_value: Any = 0
    processing_rate_per_pod: Any = 100
    producing_rate_total: Any = 1115
    pod_startup_delay: Any = 0
    simulation_seconds: Any = 1800
    target_metric_value: Any = 60
    tolerance_fraction: Any = 0.1
    scale_up: Any = field(default_factory=lambda: ScaleBehavior(
        stabilization_window_seconds=0,
        select_policy=SelectPolicy.MAX,
        policies=[
            ScalePolicy(PolicyType.PODS, 2, 180),
            ScalePolicy(PolicyType.PERCENT, 100, 180),
        ]
    ))
    scale_down: Any = field(default_factory=lambda: ScaleBehavior(
        stabilization_window_seconds=300,
        select_policy=SelectPolicy.MAX,
        policies=[
            ScalePolicy(PolicyType.PERCENT, 20, 180),
        ]
    ))
    stabilization_includes_current: Any = True

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'SimulatorConfig':
        """
        Tạo config từ dict (camelCase như UI gửi, hoặc snake_case).

        Field không có trong dict sẽ giữ giá trị default.

        Args:
            data: Dict cấu hình

        Returns:
            SimulatorConfig instance
        """
        config = cls()
        if not data:
            return config

        values = {}
        for f in fields(cls):
            key = _find_key(data, f.name)
            if key is None:
                continue
            value = data[key]
            if f.name in ('scale_up', 'scale_down'):
                default_behavior = getattr(config, f.name)
                value = _behavior_from_dict(value, default_behavior)
            values[f.name] = value

        return replace(config, **values)

    def to_dict(self) -> Dict[str, Any]:
        """Chuyển config về dạng camelCase."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ScaleBehavior):
                value = _behavior_to_dict(value)
            elif isinstance(value, Enum):
                value = value.value
            result[camel_case(f.name)] = value
        return result


def default_config() -> SimulatorConfig:
    """Cấu hình mặc định (scenario tham chiếu)."""
    return SimulatorConfig()


# =============================================================================
# Normalized Config
# =============================================================================

@dataclass(frozen=True)
class NormalizedPolicy:
    """ScalePolicy đã validate."""
    type: PolicyType
    value: float
    period_seconds: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'value': self.value,
            'periodSeconds': self.period_seconds
        }


@dataclass(frozen=True)
class NormalizedBehavior:
    """ScaleBehavior đã validate."""
    stabilization_window_seconds: int
    select_policy: SelectPolicy
    policies: Tuple[NormalizedPolicy, ...]

    @property
    def max_lookback(self) -> int:
        """Lookback lớn nhất (giây) mà behavior này cần."""
        periods = [p.period_seconds for p in self.policies]
        return max([self.stabilization_window_seconds] + periods)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stabilizationWindowSeconds': self.stabilization_window_seconds,
            'selectPolicy': self.select_policy.value,
            'policies': [p.to_dict() for p in self.policies]
        }


@dataclass(frozen=True)
class NormalizedConfig:
    """
    Bộ tham số an toàn, đầy đủ mà engine thực sự sử dụng.

    Attributes:
        initial_queue_jobs: Queue ban đầu (đã suy ra từ initial metric nếu cần)
        history_horizon: Số giây pre-fill cho history buffers
    """
    metric_type: MetricType
    min_pods: int
    max_pods: int
    starting_pods: int
    initial_queue_jobs: float
    initial_metric_value: float
    processing_rate_per_pod: float
    producing_rate_total: float
    pod_startup_delay: int
    simulation_seconds: int
    target_metric_value: float
    tolerance_fraction: float
    scale_up: NormalizedBehavior
    scale_down: NormalizedBehavior
    stabilization_includes_current: bool
    history_horizon: int

    def to_dict(self) -> Dict[str, Any]:
        """Config hiệu lực dạng camelCase, để so sánh với config yêu cầu."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, NormalizedBehavior):
                value = value.to_dict()
            elif isinstance(value, Enum):
                value = value.value
            result[camel_case(f.name)] = value
        return result


# Default khi giá trị không hợp lệ
DEFAULTS = {
    'simulation_seconds': 600,
    'min_pods': 1,
    'max_pods': 20,
    'starting_pods': 1,
    'target_metric_value': 1.0,
    'processing_rate_per_pod': 1.0,
    'producing_rate_total': 0.0,
    'tolerance_fraction': 0.1,
    'pod_startup_delay': 0,
    'initial_queue_jobs': 0.0,
    'initial_metric_value': 0.0,
}

DEFAULT_WINDOWS = {
    'scale_up': 0,
    'scale_down': 300,
}


def is_number(value: Any) -> bool:
    """True nếu value là số hữu hạn (không tính bool)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def _non_negative(value: Any, default):
    if is_number(value) and value >= 0:
        return value
    return default


def _positive(value: Any, default):
    if is_number(value) and value > 0:
        return value
    return default


def _parse_enum(enum_cls, value: Any, default):
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return default


def _normalize_policy(policy: Any) -> Optional[NormalizedPolicy]:
    """Validate một policy; trả về None nếu policy không dùng được."""
    if isinstance(policy, Mapping):
        policy = _policy_from_dict(policy)
    if not isinstance(policy, ScalePolicy):
        return None

    try:
        policy_type = PolicyType(policy.type)
    except (ValueError, TypeError):
        return None

    if not (is_number(policy.value) and policy.value >= 0):
        return None
    if not (is_number(policy.period_seconds) and policy.period_seconds >= 0):
        return None

    return NormalizedPolicy(
        type=policy_type,
        value=float(policy.value),
        period_seconds=int(policy.period_seconds)
    )


def _normalize_behavior(behavior: Any, direction: str) -> NormalizedBehavior:
    if isinstance(behavior, Mapping):
        behavior = _behavior_from_dict(
            behavior, ScaleBehavior(stabilization_window_seconds=DEFAULT_WINDOWS[direction])
        )
    if not isinstance(behavior, ScaleBehavior):
        behavior = ScaleBehavior(stabilization_window_seconds=DEFAULT_WINDOWS[direction])

    window = int(_non_negative(behavior.stabilization_window_seconds, DEFAULT_WINDOWS[direction]))
    select = _parse_enum(SelectPolicy, behavior.select_policy, SelectPolicy.MAX)

    raw_policies = behavior.policies if isinstance(behavior.policies, (list, tuple)) else []
    policies = tuple(
        p for p in (_normalize_policy(item) for item in raw_policies) if p is not None
    )

    return NormalizedBehavior(
        stabilization_window_seconds=window,
        select_policy=select,
        policies=policies
    )


def derive_initial_queue(
    metric_type: MetricType,
    initial_metric_value: float,
    starting_pods: int,
    processing_rate_per_pod: float
) -> float:
    """
    Suy ra queue ban đầu từ initial metric value.

    QueueLatency: queue = ceil(latency × pods × rate)
    QueueLength: queue = ceil(value)
    """
    if initial_metric_value <= 0:
        return 0.0
    if metric_type == MetricType.QUEUE_LATENCY:
        return float(math.ceil(initial_metric_value * starting_pods * processing_rate_per_pod))
    return float(math.ceil(initial_metric_value))


def normalize_config(
    config: Any = None,
    sync_period: int = HPA_SYNC_PERIOD
) -> NormalizedConfig:
    """
    Input Normalizer: tạo bộ tham số an toàn từ config có thể thiếu/sai.

    Args:
        config: SimulatorConfig, dict (camelCase/snake_case) hoặc None
        sync_period: Chu kỳ control loop (dùng để tính history horizon)

    Returns:
        NormalizedConfig - không bao giờ raise
    """
    if config is None or isinstance(config, Mapping):
        config = SimulatorConfig.from_dict(config)
    elif not isinstance(config, SimulatorConfig):
        config = SimulatorConfig()

    metric_type = _parse_enum(MetricType, config.metric_type, MetricType.QUEUE_LATENCY)

    simulation_seconds = int(_non_negative(config.simulation_seconds, DEFAULTS['simulation_seconds']))
    min_pods = int(_non_negative(config.min_pods, DEFAULTS['min_pods']))
    max_pods = max(int(_non_negative(config.max_pods, DEFAULTS['max_pods'])), min_pods)
    starting_pods = int(_non_negative(config.starting_pods, DEFAULTS['starting_pods']))
    starting_pods = int(np.clip(starting_pods, min_pods, max_pods))

    target = float(_positive(config.target_metric_value, DEFAULTS['target_metric_value']))
    proc_rate = float(_non_negative(config.processing_rate_per_pod, DEFAULTS['processing_rate_per_pod']))
    prod_rate = float(_non_negative(config.producing_rate_total, DEFAULTS['producing_rate_total']))
    tolerance = float(_non_negative(config.tolerance_fraction, DEFAULTS['tolerance_fraction']))
    startup_delay = int(_non_negative(config.pod_startup_delay, DEFAULTS['pod_startup_delay']))
    initial_metric = float(_non_negative(config.initial_metric_value, DEFAULTS['initial_metric_value']))
    initial_queue = float(_non_negative(config.initial_queue_jobs, DEFAULTS['initial_queue_jobs']))

    if initial_queue == 0:
        initial_queue = derive_initial_queue(metric_type, initial_metric, starting_pods, proc_rate)

    scale_up = _normalize_behavior(config.scale_up, 'scale_up')
    scale_down = _normalize_behavior(config.scale_down, 'scale_down')

    includes_current = config.stabilization_includes_current
    if not isinstance(includes_current, bool):
        includes_current = True

    # Pre-fill (ảo) phủ mọi lookback đã cấu hình, không tốn bộ nhớ
    horizon = max(scale_up.max_lookback, scale_down.max_lookback, sync_period) + 1

    return NormalizedConfig(
        metric_type=metric_type,
        min_pods=min_pods,
        max_pods=max_pods,
        starting_pods=starting_pods,
        initial_queue_jobs=initial_queue,
        initial_metric_value=initial_metric,
        processing_rate_per_pod=proc_rate,
        producing_rate_total=prod_rate,
        pod_startup_delay=startup_delay,
        simulation_seconds=simulation_seconds,
        target_metric_value=target,
        tolerance_fraction=tolerance,
        scale_up=scale_up,
        scale_down=scale_down,
        stabilization_includes_current=includes_current,
        history_horizon=horizon
    )


# =============================================================================
# Dict helpers
# =============================================================================

def camel_case(name: str) -> str:
    """snake_case -> camelCase."""
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def _find_key(data: Mapping[str, Any], name: str) -> Optional[str]:
    for key in (camel_case(name), name):
        if key in data:
            return key
    return None


def _policy_from_dict(data: Mapping[str, Any]) -> ScalePolicy:
    policy = ScalePolicy(type=None, value=None, period_seconds=None)
    values = {}
    for f in fields(ScalePolicy):
        key = _find_key(data, f.name)
        if key is not None:
            values[f.name] = data[key]
    return replace(policy, **values)


def _behavior_from_dict(data: Any, default: ScaleBehavior) -> Any:
    if isinstance(data, ScaleBehavior) or not isinstance(data, Mapping):
        return data

    values = {}
    for f in fields(ScaleBehavior):
        key = _find_key(data, f.name)
        if key is None:
            continue
        value = data[key]
        if f.name == 'policies' and isinstance(value, (list, tuple)):
            value = [_policy_from_dict(p) if isinstance(p, Mapping) else p for p in value]
        values[f.name] = value
    return replace(default, **values)


def _behavior_to_dict(behavior: ScaleBehavior) -> Dict[str, Any]:
    policies = []
    for p in behavior.policies:
        if isinstance(p, ScalePolicy):
            p = {
                'type': p.type.value if isinstance(p.type, Enum) else p.type,
                'value': p.value,
                'periodSeconds': p.period_seconds
            }
        policies.append(p)
    select = behavior.select_policy
    return {
        'stabilizationWindowSeconds': behavior.stabilization_window_seconds,
        'selectPolicy': select.value if isinstance(select, Enum) else select,
        'policies': policies
    }
