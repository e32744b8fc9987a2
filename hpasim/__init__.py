"""
HPA QUEUE SIMULATOR
===================
Mô phỏng Kubernetes Horizontal Pod Autoscaler (HPA v2) điều khiển một
workload xử lý queue, để thử các tham số scaling trước khi deploy.

Modules:
- simulation: Config, queue physics, HPA control step, pod lifecycle, engine
- analysis: So sánh scenarios và sensitivity analysis
"""

__version__ = "1.0.0"
__author__ = "Autoscaling Analysis Team"
