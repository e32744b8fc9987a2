"""
API Schemas
===========
Pydantic schemas cho FastAPI endpoints.

Field names trên wire là camelCase (giống shape UI sử dụng). Các field số
trong request được để lỏng (Optional[float]): engine tự validate và thay
default, vì engine là trust boundary.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any
from datetime import datetime


# =============================================================================
# Config Schemas
# =============================================================================

class ScalePolicySchema(BaseModel):
    """Một scale policy."""
    id: Optional[str] = Field(default=None, description="Id cho UI list, engine bỏ qua")
    type: Optional[str] = Field(default=None, description="'Pods' hoặc 'Percent'")
    value: Optional[float] = None
    period_seconds: Optional[float] = Field(default=None, alias="periodSeconds")

    class Config:
        populate_by_name = True


class ScaleBehaviorSchema(BaseModel):
    """Behavior cho scale-up hoặc scale-down."""
    stabilization_window_seconds: Optional[float] = Field(default=None, alias="stabilizationWindowSeconds")
    select_policy: Optional[str] = Field(default=None, alias="selectPolicy", description="Max, Min hoặc Disabled")
    policies: Optional[List[ScalePolicySchema]] = None

    class Config:
        populate_by_name = True


class SimulationRequest(BaseModel):
    """
    Request cho HPA simulation.

    Field bỏ trống sẽ lấy giá trị của cấu hình mặc định.
    """
    metric_type: Optional[str] = Field(default=None, alias="metricType", description="QueueLatency hoặc QueueLength")
    min_pods: Optional[float] = Field(default=None, alias="minPods")
    max_pods: Optional[float] = Field(default=None, alias="maxPods")
    starting_pods: Optional[float] = Field(default=None, alias="startingPods")
    initial_queue_jobs: Optional[float] = Field(default=None, alias="initialQueueJobs")
    initial_metric_value: Optional[float] = Field(default=None, alias="initialMetricValue")
    processing_rate_per_pod: Optional[float] = Field(default=None, alias="processingRatePerPod")
    producing_rate_total: Optional[float] = Field(default=None, alias="producingRateTotal")
    pod_startup_delay: Optional[float] = Field(default=None, alias="podStartupDelay")
    simulation_seconds: Optional[float] = Field(default=None, alias="simulationSeconds")
    target_metric_value: Optional[float] = Field(default=None, alias="targetMetricValue")
    tolerance_fraction: Optional[float] = Field(default=None, alias="toleranceFraction")
    scale_up: Optional[ScaleBehaviorSchema] = Field(default=None, alias="scaleUp")
    scale_down: Optional[ScaleBehaviorSchema] = Field(default=None, alias="scaleDown")
    stabilization_includes_current: Optional[bool] = Field(default=None, alias="stabilizationIncludesCurrent")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "metricType": "QueueLatency",
                "minPods": 2,
                "maxPods": 25,
                "startingPods": 10,
                "processingRatePerPod": 100,
                "producingRateTotal": 1115,
                "podStartupDelay": 0,
                "simulationSeconds": 1800,
                "targetMetricValue": 60,
                "toleranceFraction": 0.1,
                "scaleUp": {
                    "stabilizationWindowSeconds": 0,
                    "selectPolicy": "Max",
                    "policies": [
                        {"type": "Pods", "value": 2, "periodSeconds": 180},
                        {"type": "Percent", "value": 100, "periodSeconds": 180}
                    ]
                },
                "scaleDown": {
                    "stabilizationWindowSeconds": 300,
                    "selectPolicy": "Max",
                    "policies": [
                        {"type": "Percent", "value": 20, "periodSeconds": 180}
                    ]
                }
            }
        }

    def to_config_dict(self) -> Dict[str, Any]:
        """Dict camelCase cho SimulatorConfig.from_dict (bỏ field trống)."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Simulation Schemas
# =============================================================================

class SimulationPointSchema(BaseModel):
    """Snapshot một giây."""
    t: int
    pods: int
    ready_pods: int = Field(alias="readyPods")
    queue_jobs: float = Field(alias="queueJobs")
    latency: float
    metric_value: float = Field(alias="metricValue")
    processed_jobs: float = Field(alias="processedJobs")
    desired_replicas_raw: int = Field(alias="desiredReplicasRaw")
    desired_replicas_effective: int = Field(alias="desiredReplicasEffective")
    scale_direction: str = Field(alias="scaleDirection")


class SimulationSummarySchema(BaseModel):
    """Headline statistics."""
    max_metric_value: float = Field(alias="maxMetricValue")
    max_queue_jobs: float = Field(alias="maxQueueJobs")
    final_pods: int = Field(alias="finalPods")
    final_queue_jobs: float = Field(alias="finalQueueJobs")
    total_scale_ups: int = Field(alias="totalScaleUps")
    total_scale_downs: int = Field(alias="totalScaleDowns")


class SimulationResponse(BaseModel):
    """Response cho HPA simulation."""
    points: List[SimulationPointSchema]
    summary: SimulationSummarySchema
    effective_config: Dict[str, Any] = Field(
        alias="effectiveConfig",
        description="Cấu hình engine thực sự dùng (sau khi thay default)"
    )


# =============================================================================
# Sensitivity Schemas
# =============================================================================

class SensitivityRequest(BaseModel):
    """Request cho sensitivity analysis."""
    config: Optional[SimulationRequest] = None
    param_name: str = Field(
        alias="paramName",
        description="Field snake_case, dotted path cho behavior (vd: scale_down.stabilization_window_seconds)"
    )
    param_values: List[Any] = Field(alias="paramValues", min_length=1)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "paramName": "scale_down.stabilization_window_seconds",
                "paramValues": [0, 60, 300]
            }
        }


class SensitivityResponse(BaseModel):
    """Response cho sensitivity analysis."""
    param_name: str = Field(alias="paramName")
    rows: List[Dict[str, Any]]


# =============================================================================
# Health Schemas
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: datetime
    version: str
    sync_period: int = Field(alias="syncPeriod")
