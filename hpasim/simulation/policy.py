"""
HPA Control Step
================
Module mô phỏng thuật toán Horizontal Pod Autoscaler (HPA v2).

Mỗi sync period, controller:
    1. Đọc metric (QueueLatency hoặc QueueLength)
    2. Tính raw desired replicas: ceil(current × metric / target),
       bỏ qua nếu ratio nằm trong tolerance (dead-band)
    3. Stabilization: scale-up lấy min, scale-down lấy max trong window
    4. Rate limit bằng scale policies (Pods / Percent theo period)
    5. Clamp vào [min_pods, max_pods]

Anti-flapping mechanisms:
    - Tolerance: dead-band quanh target
    - Stabilization window: ưu tiên không scale khi metric dao động
    - Scale policies: giới hạn tốc độ thay đổi replicas

Usage:
    >>> params = normalize_config(SimulatorConfig())
    >>> controller = HPAController(params)
    >>> decision = controller.evaluate(t=0, current_pods=10, metric_value=72.0)
    >>> decision.direction
    <ScaleDirection.UP: 'up'>
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from .config import (
    MetricType,
    NormalizedBehavior,
    NormalizedConfig,
    NormalizedPolicy,
    PolicyType,
    SelectPolicy,
)
from .history import ReplicaHistory

logger = logging.getLogger(__name__)


class ScaleDirection(str, Enum):
    """Hướng scaling của một quyết định."""
    UP = "up"
    DOWN = "down"
    NONE = "none"


@dataclass(frozen=True)
class ScalingDecision:
    """
    Kết quả của một control step.

    Attributes:
        metric_value: Giá trị metric dùng để quyết định
        raw: Raw desired replicas (sau clamp)
        stabilized: Recommendation sau stabilization
        effective: Số replicas thực sự áp dụng
        direction: up / down / none
    """
    metric_value: float
    raw: int
    stabilized: int
    effective: int
    direction: ScaleDirection


def select_metric(metric_type: MetricType, latency: float, queue: float) -> float:
    """Lấy metric value theo loại metric đã cấu hình."""
    if metric_type == MetricType.QUEUE_LENGTH:
        return queue
    return latency


def compute_raw_replicas(
    current_pods: int,
    metric_value: float,
    target: float,
    tolerance: float,
    min_pods: int,
    max_pods: int
) -> int:
    """
    Core formula của HPA.

    Args:
        current_pods: Số replicas hiện tại
        metric_value: Metric hiện tại
        target: Target metric (> 0)
        tolerance: Dead-band fraction
        min_pods: Số pods tối thiểu
        max_pods: Số pods tối đa

    Returns:
        Raw desired replicas đã clamp vào [min_pods, max_pods]
    """
    raw = current_pods
    ratio = metric_value / target

    if abs(ratio - 1.0) > tolerance:
        raw = int(np.ceil(current_pods * ratio))

    return int(np.clip(raw, min_pods, max_pods))


def stabilize(
    raw: int,
    current_pods: int,
    history: ReplicaHistory,
    t: int,
    scale_up: NormalizedBehavior,
    scale_down: NormalizedBehavior,
    include_current: bool = True
) -> int:
    """
    Stabilization window cho cả hai hướng.

    Scale-up dùng min của window, scale-down dùng max, nên recommendation
    luôn nghiêng về phía không scale. Kết quả không bao giờ vượt qua
    current_pods theo hướng ngược lại.

    History phải đã record raw của giây t.
    """
    # Floor/cap tại current_pods như upstream HPA: stabilization chỉ làm chậm
    if raw > current_pods and scale_up.stabilization_window_seconds > 0:
        window = history.window(t, scale_up.stabilization_window_seconds, include_current)
        return max(current_pods, min(window))

    if raw < current_pods and scale_down.stabilization_window_seconds > 0:
        window = history.window(t, scale_down.stabilization_window_seconds, include_current)
        return min(current_pods, max(window))

    return raw


def limit_amount(policy: NormalizedPolicy, reference_pods: int) -> float:
    """Số pods được phép thay đổi theo policy."""
    if policy.type == PolicyType.PODS:
        return policy.value
    return int(np.ceil(reference_pods * policy.value / 100))


def policy_limit(
    behavior: NormalizedBehavior,
    direction: ScaleDirection,
    pod_history: ReplicaHistory,
    t: int
) -> Optional[float]:
    """
    Giới hạn kết hợp từ tất cả policies của behavior.

    Args:
        behavior: Behavior đang active
        direction: UP hoặc DOWN
        pod_history: History số pods
        t: Giây hiện tại

    Returns:
        Bound trên (scale-up) / bound dưới (scale-down), None nếu không có policy
    """
    bounds: List[float] = []
    for policy in behavior.policies:
        reference_pods = pod_history.at(t - policy.period_seconds)
        amount = limit_amount(policy, reference_pods)
        if direction == ScaleDirection.UP:
            bounds.append(reference_pods + amount)
        else:
            bounds.append(max(0, reference_pods - amount))

    if not bounds:
        return None

    # Max = bound dễ dãi nhất, Min = bound chặt nhất
    permissive = behavior.select_policy == SelectPolicy.MAX
    if direction == ScaleDirection.UP:
        return max(bounds) if permissive else min(bounds)
    return min(bounds) if permissive else max(bounds)


class HPAController:
    """
    Control loop của HPA.

    Giữ history của raw desired replicas và pod count; engine record một giá
    trị mỗi giây vào cả hai buffer.

    Attributes:
        params: NormalizedConfig
        desired_history: ReplicaHistory cho raw desired replicas
        pod_history: ReplicaHistory cho số pods
        last_raw: Raw desired replicas gần nhất
        last_effective: Effective replicas gần nhất

    Example:
        >>> controller = HPAController(params)
        >>> for t in range(0, 600, 15):
        ...     decision = controller.evaluate(t, pods, metric)
        ...     pods = decision.effective
    """

    def __init__(self, params: NormalizedConfig):
        self.params = params

        # History
        self.desired_history = ReplicaHistory(params.starting_pods, params.history_horizon)
        self.pod_history = ReplicaHistory(params.starting_pods, params.history_horizon)

        # State
        self.last_raw = params.starting_pods
        self.last_effective = params.starting_pods

    def _apply_policies(
        self,
        stabilized: int,
        current_pods: int,
        direction: ScaleDirection,
        t: int
    ) -> int:
        """
        Rate limit recommendation theo behavior của hướng đang scale.

        Disabled chặn hoàn toàn việc scale theo hướng đó.
        """
        if direction == ScaleDirection.NONE:
            return stabilized

        behavior = self.params.scale_up if direction == ScaleDirection.UP else self.params.scale_down

        if behavior.select_policy == SelectPolicy.DISABLED:
            return current_pods

        limit = policy_limit(behavior, direction, self.pod_history, t)
        if limit is None:
            return stabilized

        # Bound không kéo ngược chiều scale (như upstream HPA)
        if direction == ScaleDirection.UP:
            limit = max(limit, current_pods)
            return int(min(stabilized, limit))

        limit = min(limit, current_pods)
        return int(max(stabilized, limit))

    def evaluate(self, t: int, current_pods: int, metric_value: float) -> ScalingDecision:
        """
        Chạy một control step tại giây t.

        Raw desired replicas được record vào history ngay; engine record pod
        count sau khi áp dụng quyết định.

        Args:
            t: Giây hiện tại (sync tick)
            current_pods: Tổng số replicas hiện tại
            metric_value: Metric hiện tại

        Returns:
            ScalingDecision
        """
        params = self.params

        raw = compute_raw_replicas(
            current_pods,
            metric_value,
            params.target_metric_value,
            params.tolerance_fraction,
            params.min_pods,
            params.max_pods
        )
        self.last_raw = raw
        self.desired_history.record(raw)

        stabilized = stabilize(
            raw,
            current_pods,
            self.desired_history,
            t,
            params.scale_up,
            params.scale_down,
            include_current=params.stabilization_includes_current
        )

        if stabilized > current_pods:
            direction = ScaleDirection.UP
        elif stabilized < current_pods:
            direction = ScaleDirection.DOWN
        else:
            direction = ScaleDirection.NONE

        effective = self._apply_policies(stabilized, current_pods, direction, t)
        effective = int(np.clip(effective, params.min_pods, params.max_pods))
        self.last_effective = effective

        if effective != current_pods:
            logger.debug(
                "t=%d: %s %d -> %d (metric=%.2f, raw=%d, stabilized=%d)",
                t, direction.value, current_pods, effective, metric_value, raw, stabilized
            )

        return ScalingDecision(
            metric_value=metric_value,
            raw=raw,
            stabilized=stabilized,
            effective=effective,
            direction=direction
        )

    def hold(self):
        """Record history cho giây không phải sync tick."""
        self.desired_history.record(self.last_raw)

    def record_pods(self, pods: int):
        """Record số pods sau khi áp dụng quyết định của giây hiện tại."""
        self.pod_history.record(pods)
