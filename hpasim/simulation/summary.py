"""
Summary Aggregator
==================
Tổng hợp time series của simulation thành các headline statistics.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Sequence

from .config import camel_case


@dataclass(frozen=True)
class SimulationSummary:
    """
    Headline statistics của một lần chạy.

    Attributes:
        max_metric_value: Metric cao nhất quan sát được
        max_queue_jobs: Queue dài nhất
        final_pods: Số pods cuối cùng
        final_queue_jobs: Queue cuối cùng
        total_scale_ups: Số lần scale-up
        total_scale_downs: Số lần scale-down
    """
    max_metric_value: float
    max_queue_jobs: float
    final_pods: int
    final_queue_jobs: float
    total_scale_ups: int
    total_scale_downs: int

    def to_dict(self) -> Dict:
        return {camel_case(k): v for k, v in asdict(self).items()}


def summarize(points: Sequence, starting_pods: int) -> SimulationSummary:
    """
    Reduce danh sách SimulationPoint thành SimulationSummary.

    Scale events được đếm từ các điểm mà control step đổi số pods
    (desired_replicas_effective khác pods), kể cả quyết định ở giây cuối.

    Args:
        points: Danh sách SimulationPoint theo thứ tự thời gian
        starting_pods: Số pods ban đầu

    Returns:
        SimulationSummary (toàn 0 với final_pods = starting_pods nếu rỗng)
    """
    if len(points) == 0:
        return SimulationSummary(
            max_metric_value=0.0,
            max_queue_jobs=0.0,
            final_pods=starting_pods,
            final_queue_jobs=0.0,
            total_scale_ups=0,
            total_scale_downs=0
        )

    scale_ups = 0
    scale_downs = 0
    for point in points:
        if point.desired_replicas_effective > point.pods:
            scale_ups += 1
        elif point.desired_replicas_effective < point.pods:
            scale_downs += 1

    final = points[-1]
    return SimulationSummary(
        max_metric_value=max(p.metric_value for p in points),
        max_queue_jobs=max(p.queue_jobs for p in points),
        final_pods=final.pods,
        final_queue_jobs=final.queue_jobs,
        total_scale_ups=scale_ups,
        total_scale_downs=scale_downs
    )
