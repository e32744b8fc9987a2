"""
Test API
========
Tests cho FastAPI endpoints.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from api.config import settings
from api.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


class TestHealthEndpoints:
    """Test health và config endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data['status'] == 'healthy'
        assert data['syncPeriod'] == 15

    def test_default_config(self, client):
        response = client.get("/config/default")

        assert response.status_code == 200
        data = response.json()
        assert data['minPods'] == 2
        assert data['scaleDown']['stabilizationWindowSeconds'] == 300


class TestSimulateEndpoint:
    """Test POST /simulate."""

    def test_simulate(self, client):
        """Test response gồm points, summary và effectiveConfig."""
        response = client.post("/simulate", json={"simulationSeconds": 60})

        assert response.status_code == 200
        data = response.json()
        assert len(data['points']) == 61
        assert data['points'][0]['readyPods'] == 10
        assert data['points'][0]['scaleDirection'] == 'none'
        assert data['summary']['finalPods'] == 10
        assert data['effectiveConfig']['simulationSeconds'] == 60

    def test_effective_config_substitution(self, client):
        """Test giá trị không hợp lệ được thay và trả về trong effectiveConfig."""
        response = client.post("/simulate", json={
            "simulationSeconds": 10,
            "targetMetricValue": -5,
            "metricType": "CPU"
        })

        assert response.status_code == 200
        config = response.json()['effectiveConfig']
        assert config['targetMetricValue'] == 1.0
        assert config['metricType'] == 'QueueLatency'

    def test_too_long(self, client):
        """Test simulationSeconds vượt giới hạn -> 422."""
        response = client.post("/simulate", json={
            "simulationSeconds": settings.MAX_SIMULATION_SECONDS + 1
        })
        assert response.status_code == 422

    def test_wrong_type(self, client):
        """Test sai kiểu dữ liệu -> 422."""
        response = client.post("/simulate", json={"minPods": "abc"})
        assert response.status_code == 422

    def test_policies(self, client):
        """Test behavior với policies từ UI (có id)."""
        response = client.post("/simulate", json={
            "simulationSeconds": 30,
            "producingRateTotal": 3000,
            "scaleUp": {
                "selectPolicy": "Max",
                "policies": [{"id": "a1", "type": "Pods", "value": 1, "periodSeconds": 60}]
            }
        })

        assert response.status_code == 200
        data = response.json()
        assert data['effectiveConfig']['scaleUp']['policies'] == [
            {'type': 'Pods', 'value': 1.0, 'periodSeconds': 60}
        ]
        assert max(p['pods'] for p in data['points']) <= 11


class TestSensitivityEndpoint:
    """Test POST /sensitivity."""

    def test_sensitivity(self, client):
        response = client.post("/sensitivity", json={
            "config": {"simulationSeconds": 60},
            "paramName": "max_pods",
            "paramValues": [5, 10]
        })

        assert response.status_code == 200
        data = response.json()
        assert data['paramName'] == 'max_pods'
        assert len(data['rows']) == 2
        assert data['rows'][0]['max_pods'] == 5

    def test_unknown_param(self, client):
        response = client.post("/sensitivity", json={
            "paramName": "bogus",
            "paramValues": [1]
        })
        assert response.status_code == 400

    def test_empty_values(self, client):
        response = client.post("/sensitivity", json={
            "paramName": "max_pods",
            "paramValues": []
        })
        assert response.status_code == 422
