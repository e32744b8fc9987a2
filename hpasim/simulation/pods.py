"""
Pod Lifecycle Tracker
=====================
Theo dõi pods pending (đang khởi động) và ready.

Mỗi pod pending có một counter số giây còn lại. Đầu mỗi giây counter giảm 1,
counter <= 0 thì pod chuyển sang ready trước khi tính capacity.

Scale-down thu hồi pods pending trước (chưa từng xử lý job nào), hết pending
mới giảm ready pods.
"""

from typing import List


class PodLifecycleTracker:
    """
    Tracker cho ready và pending pods.

    Attributes:
        ready_pods: Số pods đang xử lý được
        pending: Counters số giây khởi động còn lại, theo thứ tự tạo

    Example:
        >>> tracker = PodLifecycleTracker(initial_pods=10)
        >>> tracker.scale_up(2, startup_delay=30)
        >>> tracker.current_pods, tracker.ready_pods
        (12, 10)
    """

    def __init__(self, initial_pods: int):
        self.ready_pods = initial_pods
        self.pending: List[int] = []

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    @property
    def current_pods(self) -> int:
        """Tổng số replicas đã request (ready + pending)."""
        return self.ready_pods + len(self.pending)

    def advance(self) -> int:
        """
        Đếm ngược một giây và chuyển pods đã sẵn sàng sang ready.

        Returns:
            Số pods vừa ready
        """
        if not self.pending:
            return 0

        self.pending = [remaining - 1 for remaining in self.pending]
        graduated = sum(1 for remaining in self.pending if remaining <= 0)
        if graduated:
            self.pending = [remaining for remaining in self.pending if remaining > 0]
            self.ready_pods += graduated
        return graduated

    def scale_up(self, delta: int, startup_delay: int):
        """Tạo delta pods pending với startup_delay giây khởi động."""
        self.pending.extend([startup_delay] * delta)

    def scale_down(self, delta: int) -> int:
        """
        Giảm delta pods: thu hồi pending trước, sau đó ready.

        Args:
            delta: Số pods cần giảm (> 0)

        Returns:
            Số pending pods đã bị thu hồi
        """
        revoked = min(delta, len(self.pending))
        if revoked:
            # Thu hồi pods mới tạo nhất trước
            self.pending = self.pending[:len(self.pending) - revoked]

        remainder = delta - revoked
        self.ready_pods = max(0, self.ready_pods - remainder)
        return revoked

    def apply(self, delta: int, startup_delay: int):
        """Áp dụng thay đổi replicas từ control step."""
        if delta > 0:
            self.scale_up(delta, startup_delay)
        elif delta < 0:
            self.scale_down(-delta)
