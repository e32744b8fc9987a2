"""
Test Analysis Module
====================
Tests cho scenario comparison và sensitivity analysis.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hpasim.analysis import (
    compare_scenarios,
    default_scenarios,
    run_sensitivity_analysis,
    stability_metrics
)
from hpasim.simulation import SimulatorConfig, run_simulation


@pytest.fixture
def low_demand():
    """Demand thấp hơn capacity, 600 giây."""
    return SimulatorConfig(producing_rate_total=500, simulation_seconds=600)


class TestStabilityMetrics:
    """Test cases cho stability_metrics."""

    def test_scale_down_only(self, low_demand):
        """Test chỉ scale-down: 10 -> 8 (t=300) -> 6 (t=480)."""
        metrics = stability_metrics(run_simulation(low_demand))

        assert metrics['total_scale_downs'] == 2
        assert metrics['total_scale_ups'] == 0
        assert metrics['total_scale_events'] == 2
        assert metrics['peak_pods'] == 10
        assert metrics['min_pods'] == 6
        assert metrics['pod_seconds'] == 301 * 10 + 180 * 8 + 120 * 6
        assert metrics['direction_reversals'] == 0
        assert metrics['time_above_target_pct'] == 0.0

    def test_reversals_detected(self):
        """Test down rồi up được đếm là đổi chiều."""
        metrics = stability_metrics(run_simulation(SimulatorConfig()))

        assert metrics['total_scale_downs'] > 0
        assert metrics['total_scale_ups'] > 0
        assert metrics['direction_reversals'] >= 1
        assert 0 < metrics['time_above_target_pct'] < 100

    def test_single_point(self):
        """Test simulation 0 giây."""
        metrics = stability_metrics(run_simulation(SimulatorConfig(simulation_seconds=0)))

        assert metrics['avg_pods'] == 10.0
        assert metrics['total_scale_events'] == 0
        assert metrics['direction_reversals'] == 0


class TestCompareScenarios:
    """Test cases cho compare_scenarios."""

    def test_default_scenarios(self):
        """Test các scenarios mẫu."""
        scenarios = default_scenarios()

        assert set(scenarios) == {'Default', 'Aggressive', 'Conservative', 'Slow Startup'}
        assert scenarios['Slow Startup'].pod_startup_delay == 60
        # deepcopy: sửa conservative không ảnh hưởng default
        assert scenarios['Default'].scale_down.stabilization_window_seconds == 300
        assert scenarios['Conservative'].scale_down.stabilization_window_seconds == 600

    def test_compare(self, low_demand):
        """Test DataFrame so sánh sort theo max_metric_value."""
        df = compare_scenarios({
            'low': low_demand,
            'high': {'producingRateTotal': 3000, 'simulationSeconds': 600},
        })

        assert len(df) == 2
        assert df.columns[0] == 'scenario'
        assert list(df['scenario']) == ['low', 'high']
        assert df['max_metric_value'].is_monotonic_increasing

    def test_empty(self):
        """Test không có scenario nào."""
        assert len(compare_scenarios({})) == 0


class TestSensitivityAnalysis:
    """Test cases cho run_sensitivity_analysis."""

    def test_sweep_scale_down_window(self, low_demand):
        """Test window ngắn hơn -> scale-down nhiều hơn."""
        df = run_sensitivity_analysis(
            low_demand,
            'scale_down.stabilization_window_seconds',
            [0, 300]
        )

        assert len(df) == 2
        assert df.columns[0] == 'scale_down.stabilization_window_seconds'
        assert df['total_scale_downs'].iloc[1] == 2
        assert df['total_scale_downs'].iloc[0] > df['total_scale_downs'].iloc[1]

    def test_base_config_not_mutated(self, low_demand):
        """Test sweep không sửa base config."""
        run_sensitivity_analysis(low_demand, 'max_pods', [5, 8])
        assert low_demand.max_pods == 25

    def test_dict_base_config(self):
        """Test base config dạng camelCase dict."""
        df = run_sensitivity_analysis(
            {'producingRateTotal': 5000, 'simulationSeconds': 600},
            'max_pods',
            [12, 25]
        )

        assert list(df['max_pods']) == [12, 25]
        assert df['peak_pods'].iloc[0] == 12

    def test_default_values(self):
        """Test không truyền param_values -> dùng DEFAULT_SWEEPS."""
        df = run_sensitivity_analysis(
            SimulatorConfig(simulation_seconds=60),
            'pod_startup_delay',
            show_progress=True
        )
        assert list(df['pod_startup_delay']) == [0, 15, 30, 60, 120]

    def test_disable_scale_up(self):
        """Test sweep select_policy."""
        df = run_sensitivity_analysis(
            SimulatorConfig(),
            'scale_up.select_policy',
            ['Max', 'Disabled']
        )

        assert df['total_scale_ups'].iloc[0] > 0
        assert df['total_scale_ups'].iloc[1] == 0

    @pytest.mark.parametrize('param', ['not_a_field', 'scale_up.nope', 'nope.value'])
    def test_unknown_param(self, param):
        """Test tham số không tồn tại -> ValueError."""
        with pytest.raises(ValueError, match="Unknown parameter"):
            run_sensitivity_analysis(SimulatorConfig(), param, [1])
