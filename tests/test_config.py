"""
Test Config Module
==================
Unit tests cho SimulatorConfig và Input Normalizer.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hpasim.simulation.config import (
    HPA_SYNC_PERIOD,
    MetricType,
    PolicyType,
    ScaleBehavior,
    ScalePolicy,
    SelectPolicy,
    SimulatorConfig,
    derive_initial_queue,
    normalize_config
)


class TestSimulatorConfig:
    """Test cases cho SimulatorConfig."""

    def test_default_config(self):
        """Test default configuration (scenario tham chiếu)."""
        config = SimulatorConfig()

        assert config.min_pods == 2
        assert config.max_pods == 25
        assert config.starting_pods == 10
        assert config.producing_rate_total == 1115
        assert config.target_metric_value == 60
        assert config.scale_down.stabilization_window_seconds == 300
        assert len(config.scale_up.policies) == 2

    def test_from_dict_camel_case(self):
        """Test đọc config camelCase từ UI."""
        config = SimulatorConfig.from_dict({
            'minPods': 3,
            'producingRateTotal': 500,
            'scaleDown': {'stabilizationWindowSeconds': 60}
        })

        assert config.min_pods == 3
        assert config.producing_rate_total == 500
        assert config.scale_down.stabilization_window_seconds == 60
        # Policies không gửi lên thì giữ default
        assert len(config.scale_down.policies) == 1

    def test_from_dict_snake_case(self):
        """Test đọc config snake_case."""
        config = SimulatorConfig.from_dict({'max_pods': 40, 'pod_startup_delay': 30})

        assert config.max_pods == 40
        assert config.pod_startup_delay == 30

    def test_from_dict_policies(self):
        """Test policies dạng dict được chuyển thành ScalePolicy."""
        config = SimulatorConfig.from_dict({
            'scaleUp': {
                'selectPolicy': 'Min',
                'policies': [{'id': 'p1', 'type': 'Pods', 'value': 4, 'periodSeconds': 60}]
            }
        })

        policy = config.scale_up.policies[0]
        assert isinstance(policy, ScalePolicy)
        assert policy.value == 4
        assert policy.period_seconds == 60
        assert config.scale_up.select_policy == 'Min'

    def test_to_dict(self):
        """Test chuyển config về camelCase."""
        data = SimulatorConfig().to_dict()

        assert data['metricType'] == 'QueueLatency'
        assert data['scaleUp']['policies'][0] == {'type': 'Pods', 'value': 2, 'periodSeconds': 180}
        assert data['scaleDown']['selectPolicy'] == 'Max'


class TestNormalizeConfig:
    """Test cases cho Input Normalizer."""

    def test_default_passthrough(self):
        """Test config hợp lệ được giữ nguyên."""
        params = normalize_config(SimulatorConfig())

        assert params.metric_type == MetricType.QUEUE_LATENCY
        assert params.min_pods == 2
        assert params.max_pods == 25
        assert params.starting_pods == 10
        assert params.target_metric_value == 60.0
        assert params.simulation_seconds == 1800
        assert params.scale_up.select_policy == SelectPolicy.MAX
        assert params.scale_up.policies[1].type == PolicyType.PERCENT

    def test_none_gives_defaults(self):
        """Test None -> cấu hình mặc định."""
        assert normalize_config(None) == normalize_config(SimulatorConfig())

    def test_unknown_type_gives_defaults(self):
        """Test input không phải config/dict."""
        assert normalize_config("garbage") == normalize_config(SimulatorConfig())

    def test_negative_values_substituted(self):
        """Test giá trị âm được thay bằng default."""
        params = normalize_config(SimulatorConfig(
            min_pods=-3,
            simulation_seconds=-5,
            producing_rate_total=-100,
            pod_startup_delay=-1
        ))

        assert params.min_pods == 1
        assert params.simulation_seconds == 600
        assert params.producing_rate_total == 0.0
        assert params.pod_startup_delay == 0

    @pytest.mark.parametrize('value', [0, -1, 'abc', None, float('nan'), float('inf')])
    def test_target_must_be_positive(self, value):
        """Test target <= 0 hoặc không phải số -> 1."""
        params = normalize_config(SimulatorConfig(target_metric_value=value))
        assert params.target_metric_value == 1.0

    def test_bool_is_not_numeric(self):
        """Test bool không được coi là số."""
        params = normalize_config(SimulatorConfig(max_pods=True))
        assert params.max_pods == 20

    def test_max_pods_at_least_min_pods(self):
        """Test max_pods = max(configured, min_pods)."""
        params = normalize_config(SimulatorConfig(min_pods=5, max_pods=3, starting_pods=10))

        assert params.min_pods == 5
        assert params.max_pods == 5
        assert params.starting_pods == 5

    def test_starting_pods_clamped(self):
        """Test starting_pods nằm trong [min_pods, max_pods]."""
        assert normalize_config(SimulatorConfig(starting_pods=1)).starting_pods == 2
        assert normalize_config(SimulatorConfig(starting_pods=100)).starting_pods == 25

    def test_pod_counts_truncated(self):
        """Test pod counts được chuyển về int."""
        params = normalize_config(SimulatorConfig(min_pods=2.7, max_pods=10.2))

        assert params.min_pods == 2
        assert params.max_pods == 10

    def test_invalid_enums(self):
        """Test metric type và select policy không hợp lệ."""
        params = normalize_config(SimulatorConfig(
            metric_type='CPU',
            scale_up=ScaleBehavior(0, 'Sometimes', [])
        ))

        assert params.metric_type == MetricType.QUEUE_LATENCY
        assert params.scale_up.select_policy == SelectPolicy.MAX

    def test_invalid_policies_dropped(self):
        """Test policy không hợp lệ bị bỏ, policy hợp lệ được giữ."""
        params = normalize_config({
            'scaleUp': {
                'policies': [
                    {'type': 'Pods', 'value': 2, 'periodSeconds': 60},
                    {'type': 'Bogus', 'value': 2, 'periodSeconds': 60},
                    {'type': 'Percent', 'value': -5, 'periodSeconds': 60},
                    {'type': 'Percent', 'value': 50},
                ]
            }
        })

        assert len(params.scale_up.policies) == 1
        assert params.scale_up.policies[0].type == PolicyType.PODS
        assert params.scale_up.policies[0].period_seconds == 60

    def test_behavior_not_a_behavior(self):
        """Test behavior sai kiểu -> default window, không có policies."""
        params = normalize_config(SimulatorConfig(scale_down="oops"))

        assert params.scale_down.stabilization_window_seconds == 300
        assert params.scale_down.policies == ()

    def test_history_horizon(self):
        """Test pre-fill horizon bao trùm lookback lớn nhất."""
        assert normalize_config(SimulatorConfig()).history_horizon == 301

        params = normalize_config({'scaleDown': {'stabilizationWindowSeconds': 7200}})
        assert params.history_horizon == 7201

        params = normalize_config({
            'scaleUp': {'policies': []},
            'scaleDown': {'stabilizationWindowSeconds': 0, 'policies': []}
        })
        assert params.history_horizon == HPA_SYNC_PERIOD + 1

    def test_to_dict(self):
        """Test effective config dạng camelCase."""
        data = normalize_config(SimulatorConfig(min_pods=-1)).to_dict()

        assert data['minPods'] == 1
        assert data['metricType'] == 'QueueLatency'
        assert data['scaleDown']['policies'][0]['type'] == 'Percent'
        assert data['historyHorizon'] == 301


class TestInitialQueue:
    """Test suy ra queue ban đầu từ initial metric value."""

    def test_latency_metric(self):
        """Test QueueLatency: ceil(latency × pods × rate)."""
        params = normalize_config(SimulatorConfig(initial_metric_value=30))
        assert params.initial_queue_jobs == 30000

    def test_length_metric(self):
        """Test QueueLength: ceil(value)."""
        params = normalize_config(SimulatorConfig(
            metric_type='QueueLength',
            initial_metric_value=42.3
        ))
        assert params.initial_queue_jobs == 43

    def test_explicit_queue_wins(self):
        """Test initial_queue_jobs > 0 thì không suy ra."""
        params = normalize_config(SimulatorConfig(initial_queue_jobs=500, initial_metric_value=30))
        assert params.initial_queue_jobs == 500

    def test_zero_metric(self):
        """Test không có initial metric -> queue = 0."""
        assert derive_initial_queue(MetricType.QUEUE_LATENCY, 0, 10, 100) == 0.0
