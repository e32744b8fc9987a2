"""
Queue Physics
=============
Cập nhật queue mỗi giây dựa trên processing capacity của ready pods.

    capacity   = ready_pods × processing_rate_per_pod
    processed  = min(queue + arrivals, capacity)
    next_queue = max(0, queue + arrivals - processed)
    latency    = queue / capacity
"""

from dataclasses import dataclass


# Latency khi capacity = 0 mà queue vẫn còn jobs (backlog không giới hạn).
# Dùng số hữu hạn thay vì inf để output serialize được sang JSON.
LATENCY_SENTINEL = 9999.0


@dataclass(frozen=True)
class QueueStep:
    """Kết quả physics của một giây."""
    capacity: float
    latency: float
    processed: float
    next_queue: float


def compute_latency(queue: float, capacity: float) -> float:
    """Latency (giây) để xử lý hết queue với capacity hiện tại."""
    if capacity > 0:
        return queue / capacity
    if queue > 0:
        return LATENCY_SENTINEL
    return 0.0


def step_queue(
    queue: float,
    ready_pods: int,
    processing_rate_per_pod: float,
    producing_rate_total: float
) -> QueueStep:
    """
    Chạy physics cho một giây.

    Args:
        queue: Số jobs trong queue đầu giây
        ready_pods: Số pods đang xử lý được
        processing_rate_per_pod: Jobs/giây/pod
        producing_rate_total: Jobs/giây đến

    Returns:
        QueueStep
    """
    capacity = ready_pods * processing_rate_per_pod
    arrivals = producing_rate_total

    processed = min(queue + arrivals, capacity)
    next_queue = max(0.0, queue + arrivals - processed)

    return QueueStep(
        capacity=capacity,
        latency=compute_latency(queue, capacity),
        processed=processed,
        next_queue=next_queue
    )
