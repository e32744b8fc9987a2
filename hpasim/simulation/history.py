"""
Replica History
===============
History buffer theo từng giây cho raw desired replicas và pod count.

Các giây âm (pre-fill) luôn mang giá trị steady state, nên stabilization
window và scale policies có thể nhìn lại trước t=0. Pre-fill là ảo: chỉ các
giây đã record mới được lưu, horizon lớn tới đâu cũng không tốn bộ nhớ.
"""

from typing import List


class ReplicaHistory:
    """
    Append-only buffer, index theo giây simulate.

    Attributes:
        steady_value: Giá trị của mọi giây trước t=0
        horizon: Số giây pre-fill (logic) trước t=0
        values: Các giá trị đã record, values[t] là giây t

    Example:
        >>> history = ReplicaHistory(steady_value=10, horizon=300)
        >>> history.record(12)      # t = 0
        >>> history.at(-100), history.at(0)
        (10, 12)
    """

    def __init__(self, steady_value: int, horizon: int):
        self.steady_value = steady_value
        self.horizon = max(int(horizon), 1)
        self.values: List[int] = []

    def __len__(self) -> int:
        """Độ dài logic: pre-fill + số giây đã record."""
        return self.horizon + len(self.values)

    @property
    def recorded(self) -> int:
        """Số giây đã record (không tính pre-fill)."""
        return len(self.values)

    @property
    def latest(self) -> int:
        if not self.values:
            return self.steady_value
        return self.values[-1]

    def record(self, value: int):
        """Thêm giá trị cho giây tiếp theo."""
        self.values.append(value)

    def at(self, t: int) -> int:
        """
        Giá trị tại giây t.

        Giây âm trả về steady value; giây chưa record trả về sample mới nhất.
        """
        if t < 0:
            return self.steady_value
        if t >= len(self.values):
            return self.latest
        return self.values[t]

    def window(self, t: int, seconds: int, include_current: bool = True) -> List[int]:
        """
        Các giá trị trong trailing window kết thúc tại t.

        Chỉ quét các giây >= 0; nếu window chạm vào pre-fill thì steady value
        được thêm đúng một lần. Min/max của kết quả giống hệt việc quét từng
        offset, nhưng chi phí bị chặn bởi số giây đã simulate.

        include_current=False bỏ offset 0 và không seed bằng raw hiện tại:
        window chỉ gồm các recommendation trước đó (t-1 .. t-seconds).
        Biến thể seed bằng raw rồi quét từ offset 1 cho cùng kết quả với
        include_current=True, vì offset 0 chính là raw vừa record.

        Args:
            t: Giây hiện tại
            seconds: Độ dài window
            include_current: Tính cả giá trị tại t (offset 0)

        Returns:
            List giá trị từ t (hoặc t-1) lùi về t-seconds
        """
        newest = t if include_current else t - 1
        oldest = t - seconds
        if newest < oldest:
            return []

        samples = [self.at(s) for s in range(newest, max(oldest, 0) - 1, -1)]
        if oldest < 0:
            samples.append(self.steady_value)
        return samples
