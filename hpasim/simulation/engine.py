"""
Simulation Engine
=================
Module simulate HPA điều khiển một workload xử lý queue.

Mỗi giây t = 0..N:
    1. Pod lifecycle: pods pending đã khởi động xong chuyển sang ready
    2. Physics: cập nhật queue và latency theo capacity của ready pods
    3. Control step (chỉ khi t % sync_period == 0): HPA quyết định replicas
    4. Áp dụng thay đổi replicas qua PodLifecycleTracker
    5. Record history và SimulationPoint

Engine là pure function: cùng config luôn cho cùng kết quả, không có state
dùng chung giữa các lần chạy.

Usage:
    >>> result = run_simulation({'producingRateTotal': 1500})
    >>> df = result.to_frame()
    >>> events = result.get_scaling_events()
    >>> print(result.summary)
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Tuple

import pandas as pd

from .config import HPA_SYNC_PERIOD, NormalizedConfig, camel_case, normalize_config
from .physics import step_queue
from .pods import PodLifecycleTracker
from .policy import HPAController, ScaleDirection, select_metric
from .summary import SimulationSummary, summarize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationPoint:
    """
    Snapshot của một giây simulate.

    Mọi giá trị là trạng thái đầu giây, trước quyết định của control step;
    quyết định của giây đó nằm ở desired_replicas_effective và có hiệu lực
    từ điểm kế tiếp.
    """
    t: int
    pods: int
    ready_pods: int
    queue_jobs: float
    latency: float
    metric_value: float
    processed_jobs: float
    desired_replicas_raw: int
    desired_replicas_effective: int
    scale_direction: str

    def to_dict(self) -> Dict[str, Any]:
        return {camel_case(k): v for k, v in asdict(self).items()}


@dataclass(frozen=True)
class SimulationResult:
    """
    Kết quả một lần chạy simulation.

    Attributes:
        points: Tuple các SimulationPoint, mỗi giây một điểm
        summary: SimulationSummary
        config: NormalizedConfig engine đã thực sự dùng
    """
    points: Tuple[SimulationPoint, ...]
    summary: SimulationSummary
    config: NormalizedConfig

    def to_dict(self) -> Dict[str, Any]:
        """Kết quả dạng camelCase, serialize được sang JSON."""
        return {
            'points': [p.to_dict() for p in self.points],
            'summary': self.summary.to_dict(),
            'config': self.config.to_dict()
        }

    def to_frame(self) -> pd.DataFrame:
        """
        Time series dưới dạng DataFrame.

        Returns:
            DataFrame index theo 't', mỗi field của SimulationPoint một cột
        """
        columns = [
            'pods', 'ready_pods', 'queue_jobs', 'latency', 'metric_value',
            'processed_jobs', 'desired_replicas_raw',
            'desired_replicas_effective', 'scale_direction'
        ]
        if not self.points:
            return pd.DataFrame(columns=columns, index=pd.Index([], name='t'))

        return pd.DataFrame([asdict(p) for p in self.points]).set_index('t')

    def get_scaling_events(self) -> pd.DataFrame:
        """
        Chỉ lấy các giây mà control step thay đổi số pods.

        Returns:
            DataFrame với thêm cột 'pod_change' (effective - pods)
        """
        df = self.to_frame()
        change = (df['desired_replicas_effective'] - df['pods']).astype(int)
        events = df[change != 0].copy()
        events['pod_change'] = change[change != 0]
        return events


class SimulationEngine:
    """
    Engine chạy simulation cho một config.

    Mỗi instance sở hữu toàn bộ mutable state (queue, pods, history) của
    đúng một lần chạy.

    Attributes:
        params: NormalizedConfig
        sync_period: Số giây giữa hai lần HPA quyết định

    Example:
        >>> engine = SimulationEngine(SimulatorConfig(pod_startup_delay=60))
        >>> result = engine.run()
        >>> result.summary.total_scale_ups
    """

    def __init__(self, config: Any = None, sync_period: int = HPA_SYNC_PERIOD):
        """
        Khởi tạo engine.

        Args:
            config: SimulatorConfig, dict hoặc None (dùng default)
            sync_period: Chu kỳ control loop; 1 = quyết định mỗi giây
        """
        self.sync_period = max(int(sync_period), 1)
        self.params = normalize_config(config, sync_period=self.sync_period)

    def run(self) -> SimulationResult:
        """
        Chạy simulation từ t=0 đến t=simulation_seconds.

        Returns:
            SimulationResult
        """
        params = self.params
        controller = HPAController(params)
        tracker = PodLifecycleTracker(params.starting_pods)
        queue = params.initial_queue_jobs

        points: List[SimulationPoint] = []

        for t in range(params.simulation_seconds + 1):
            # Pods khởi động xong được tính capacity ngay giây này
            tracker.advance()
            current_pods = tracker.current_pods
            ready_pods = tracker.ready_pods

            physics = step_queue(
                queue,
                ready_pods,
                params.processing_rate_per_pod,
                params.producing_rate_total
            )
            metric_value = select_metric(params.metric_type, physics.latency, queue)

            if t % self.sync_period == 0:
                decision = controller.evaluate(t, current_pods, metric_value)
                direction = decision.direction
                tracker.apply(decision.effective - current_pods, params.pod_startup_delay)
            else:
                controller.hold()
                direction = ScaleDirection.NONE

            controller.record_pods(tracker.current_pods)

            points.append(SimulationPoint(
                t=t,
                pods=current_pods,
                ready_pods=ready_pods,
                queue_jobs=queue,
                latency=physics.latency,
                metric_value=metric_value,
                processed_jobs=physics.processed,
                desired_replicas_raw=controller.last_raw,
                desired_replicas_effective=controller.last_effective,
                scale_direction=direction.value
            ))

            queue = physics.next_queue

        summary = summarize(points, params.starting_pods)

        logger.info(
            "Simulation done: %d points, %d scale-ups, %d scale-downs, final pods=%d",
            len(points), summary.total_scale_ups, summary.total_scale_downs, summary.final_pods
        )

        return SimulationResult(
            points=tuple(points),
            summary=summary,
            config=params
        )


def run_simulation(config: Any = None, sync_period: int = HPA_SYNC_PERIOD) -> SimulationResult:
    """
    Entry point của engine: chạy một simulation độc lập.

    Args:
        config: SimulatorConfig, dict (camelCase/snake_case) hoặc None
        sync_period: Chu kỳ control loop (mặc định HPA_SYNC_PERIOD)

    Returns:
        SimulationResult - không raise với input số không hợp lệ
    """
    return SimulationEngine(config, sync_period=sync_period).run()


if __name__ == "__main__":
    # Demo
    result = run_simulation()

    print("Simulation Summary:")
    for k, v in result.summary.to_dict().items():
        if isinstance(v, float):
            print(f"  {k}: {v:.2f}")
        else:
            print(f"  {k}: {v}")

    events = result.get_scaling_events()
    print(f"\nScaling Events: {len(events)}")
    if len(events) > 0:
        print(events[['pods', 'ready_pods', 'metric_value', 'pod_change']].head(10))
