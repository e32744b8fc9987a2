"""
Analysis Module
===============
So sánh scenarios và sensitivity analysis trên HPA simulation.

Functions:
- compare_scenarios: So sánh nhiều cấu hình
- run_sensitivity_analysis: Thay đổi một tham số và đo kết quả
- stability_metrics: Metrics về độ ổn định của một lần chạy
- default_scenarios: Các scenarios mẫu
"""

from .scenarios import (
    compare_scenarios,
    default_scenarios,
    run_sensitivity_analysis,
    stability_metrics
)

__all__ = [
    'compare_scenarios',
    'default_scenarios',
    'run_sensitivity_analysis',
    'stability_metrics'
]
