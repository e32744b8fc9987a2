"""
FastAPI Application
===================
API endpoints cho HPA Queue Simulator.

Endpoints:
    - GET /health: Health check
    - GET /config/default: Cấu hình mặc định
    - POST /simulate: Chạy HPA simulation
    - POST /sensitivity: Sensitivity analysis trên một tham số

Mỗi request tạo một engine mới, không có state dùng chung giữa các request.

Run:
    uvicorn api.main:app --reload --port 8000
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime
import json
import logging
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from api.config import settings
from api.logging_config import setup_logging
from api.schemas import (
    SimulationRequest, SimulationResponse,
    SensitivityRequest, SensitivityResponse,
    HealthResponse
)
from hpasim import __version__
from hpasim.analysis import run_sensitivity_analysis
from hpasim.simulation import HPA_SYNC_PERIOD, SimulatorConfig, default_config, run_simulation
from hpasim.simulation.config import is_number

logger = logging.getLogger(__name__)

# =============================================================================
# App Configuration
# =============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    description="""
    API cho HPA Queue Simulator.

    ## Features
    - **Simulation**: Mô phỏng HPA v2 (tolerance, stabilization, scale policies, pod startup delay)
    - **Sensitivity Analysis**: Thay đổi một tham số và so sánh kết quả
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def check_simulation_seconds(value):
    """Chặn request có simulationSeconds vượt giới hạn của service."""
    if is_number(value) and value > settings.MAX_SIMULATION_SECONDS:
        raise HTTPException(
            status_code=422,
            detail=f"simulationSeconds must be <= {settings.MAX_SIMULATION_SECONDS}"
        )


# =============================================================================
# Startup Event
# =============================================================================

@app.on_event("startup")
async def startup_event():
    """Setup logging khi startup."""
    setup_logging()
    logger.info("Starting %s (sync period %ds)", settings.APP_NAME, HPA_SYNC_PERIOD)


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """
    Health check endpoint.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(),
        version=__version__,
        syncPeriod=HPA_SYNC_PERIOD
    )


@app.get("/config/default", tags=["Simulation"])
async def get_default_config():
    """
    Cấu hình mặc định (camelCase).
    """
    return default_config().to_dict()


# =============================================================================
# Simulation Endpoints
# =============================================================================

@app.post("/simulate", response_model=SimulationResponse, tags=["Simulation"])
def simulate(request: SimulationRequest):
    """
    Chạy HPA simulation với cấu hình cho trước.

    Response gồm time series, summary và cấu hình hiệu lực để caller so sánh
    với cấu hình đã gửi.
    """
    check_simulation_seconds(request.simulation_seconds)

    result = run_simulation(request.to_config_dict())

    logger.info(
        "Simulated %ds: max metric %.2f, final pods %d",
        result.config.simulation_seconds,
        result.summary.max_metric_value,
        result.summary.final_pods
    )

    data = result.to_dict()
    return SimulationResponse.model_validate({
        'points': data['points'],
        'summary': data['summary'],
        'effectiveConfig': data['config']
    })


@app.post("/sensitivity", response_model=SensitivityResponse, tags=["Analysis"])
def sensitivity(request: SensitivityRequest):
    """
    Sensitivity analysis: chạy một simulation cho mỗi giá trị của tham số.
    """
    if len(request.param_values) > settings.MAX_SENSITIVITY_VALUES:
        raise HTTPException(
            status_code=422,
            detail=f"paramValues must have at most {settings.MAX_SENSITIVITY_VALUES} entries"
        )

    base = request.config.to_config_dict() if request.config else {}
    check_simulation_seconds(base.get('simulationSeconds'))
    if request.param_name == 'simulation_seconds':
        for value in request.param_values:
            check_simulation_seconds(value)

    try:
        df = run_sensitivity_analysis(
            SimulatorConfig.from_dict(base),
            param_name=request.param_name,
            param_values=request.param_values
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    # to_json chuyển numpy types sang JSON types
    rows = json.loads(df.to_json(orient='records'))

    return SensitivityResponse(paramName=request.param_name, rows=rows)


# =============================================================================
# Main
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
