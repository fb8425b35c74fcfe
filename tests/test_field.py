"""
磁场模型的单元测试
"""

import math

import numpy as np
import pytest

from magnetic_lens.core import constants
from magnetic_lens.core.data_classes import FieldParameters
from magnetic_lens.core.field import (
    gaussian,
    radial_envelope,
    field_at,
    get_profile_set,
)


class TestGaussian:
    """测试高斯剖面"""

    @pytest.mark.parametrize("offset, spread", [
        (0.0, 1.0),
        (4.49, 0.135),
        (-3.0, 2.5),
        (13.7, -0.16),
        (1e6, 1e-6),
    ])
    def test_peak_is_one(self, offset, spread):
        """测试在中心处取值为 1"""
        assert gaussian(offset, offset, spread) == 1.0

    def test_symmetric_about_offset(self):
        """测试关于中心对称"""
        assert gaussian(1.3, 1.0, 0.2) == pytest.approx(gaussian(0.7, 1.0, 0.2))

    def test_one_sigma(self):
        """测试一个标准差处的取值"""
        assert gaussian(1.0, 0.0, 1.0) == pytest.approx(math.exp(-0.5))

    @pytest.mark.parametrize("spread", [0.0, -0.0, float("nan"), float("inf")])
    def test_degenerate_spread_returns_zero(self, spread):
        """测试退化标准差返回 0 且结果有限"""
        value = gaussian(2.0, 1.0, spread)
        assert value == 0.0
        assert math.isfinite(value)

    def test_degenerate_spread_reported_once(self, capsys):
        """测试退化标准差只报告一次"""
        constants.reset_diagnostic_stats()
        for _ in range(5):
            gaussian(1.0, 0.0, 0.0)

        out = capsys.readouterr().out
        assert out.count("[warning]") == 1
        assert constants.DIAGNOSTIC_STATS['degenerate_gaussian'] == 5

    def test_reset_rearms_warning(self, capsys):
        """测试重置后可以再次报告"""
        constants.reset_diagnostic_stats()
        gaussian(1.0, 0.0, 0.0)
        constants.reset_diagnostic_stats()
        gaussian(1.0, 0.0, 0.0)

        out = capsys.readouterr().out
        assert out.count("[warning]") == 2

    def test_nonfinite_input_returns_zero(self):
        """测试非有限输入返回 0"""
        assert gaussian(float("nan"), 0.0, 1.0) == 0.0


class TestDiagnostics:
    """测试诊断统计输出"""

    def test_nothing_recorded(self, capsys):
        constants.reset_diagnostic_stats()
        constants.print_diagnostic_stats()
        assert "No numeric diagnostics recorded." in capsys.readouterr().out

    def test_summary_after_degenerate_spread(self, capsys):
        constants.reset_diagnostic_stats()
        gaussian(0.0, 0.0, 0.0)
        constants.print_diagnostic_stats()
        out = capsys.readouterr().out
        assert "NUMERIC DIAGNOSTICS" in out
        assert "Degenerate Gaussian spreads:  1" in out


class TestProfileSets:
    """测试剖面函数组"""

    def test_bipolar_subtracts_reverse_lobe(self):
        """测试双极剖面减去反向波瓣"""
        params = FieldParameters(radial_offset=2.0, radial_spread=0.5, reverse_offset=3.0)
        _, radial = get_profile_set("bipolar")
        expected = gaussian(2.5, 2.0, 0.5) - gaussian(2.5, 3.0, 0.5)
        assert radial(2.5, params) == pytest.approx(expected)

    def test_bipolar_without_reverse_matches_unipolar(self):
        """测试无反向波瓣时双极剖面等同单极剖面"""
        params = FieldParameters(reverse_offset=None)
        _, bipolar = get_profile_set("bipolar")
        _, unipolar = get_profile_set("unipolar")
        for s in np.linspace(0.0, 10.0, 21):
            assert bipolar(s, params) == unipolar(s, params)

    def test_mirrored_reverse_lobe_position(self):
        """测试镜像剖面的反向波瓣位于 offset + 3σ"""
        params = FieldParameters(radial_offset=3.4, radial_spread=0.645)
        _, radial = get_profile_set("mirrored")
        reverse = 3.4 + 3 * 0.645
        assert radial(reverse, params) == pytest.approx(gaussian(reverse, 3.4, 0.645) - 1.0)

    def test_unknown_profile_set(self):
        """测试未知剖面名称"""
        with pytest.raises(ValueError):
            get_profile_set("quadrupole")


class TestFieldAt:
    """测试磁场求值"""

    def test_zero_below_envelope_cutoff(self):
        """测试包络低于阈值时返回精确零向量"""
        params = FieldParameters(envelope_offset=0.0, envelope_spread=0.01, strength_exp=0.0)
        assert radial_envelope(1.0, params) < constants.ENVELOPE_CUTOFF

        field = field_at(np.array([1.0, 0.0, 0.0]), params)
        np.testing.assert_array_equal(field, np.zeros(3))

    def test_on_axis_field_is_vertical(self):
        """测试轴上磁场只有竖直分量"""
        params = FieldParameters(envelope_offset=0.0, envelope_spread=0.01, strength_exp=0.0)
        y = params.axial_origin - params.down_offset
        field = field_at(np.array([0.0, y, 0.0]), params)

        assert field[0] == 0.0
        assert field[2] == 0.0
        # 包络在轴上为两个高斯之和 = 2，下向剖面在中心为 1
        assert field[1] == pytest.approx(-2.0)

    def test_default_envelope_suppresses_axis(self):
        """测试默认包络在轴上明显低于线圈半径处"""
        params = FieldParameters()
        ring = radial_envelope(params.envelope_offset, params)
        assert radial_envelope(0.0, params) < 0.01 * ring

    def test_default_envelope_falls_off_outside_ring(self):
        """测试默认包络在线圈外远处衰减"""
        params = FieldParameters()
        ring = radial_envelope(params.envelope_offset, params)
        assert radial_envelope(params.envelope_offset + 3.0, params) < 1e-3 * ring
        assert radial_envelope(params.envelope_offset + 0.5, params) < ring

    def test_strength_scaling(self):
        """测试强度指数的缩放"""
        position = np.array([0.7, 0.5, -0.3])
        weak = field_at(position, FieldParameters(strength_exp=-11.0))
        strong = field_at(position, FieldParameters(strength_exp=-9.0))
        np.testing.assert_allclose(strong, weak * 100.0, rtol=1e-12)

    def test_zero_strength(self):
        """测试强度趋于零时磁场为零"""
        params = FieldParameters(strength_exp=float("-inf"))
        field = field_at(np.array([0.5, -0.4, 0.0]), params)
        np.testing.assert_array_equal(field, np.zeros(3))

    @pytest.mark.parametrize("params", [
        FieldParameters(radial_offset=0.0, reverse_offset=0.0),
        FieldParameters(),
    ])
    def test_rotational_symmetry(self, params):
        """测试水平分量的旋转对称性"""
        r = 0.6
        y = params.axial_origin - params.radial_offset - 0.05
        reference = field_at(np.array([r, y, 0.0]), params)
        for angle in np.linspace(0.0, 2 * np.pi, 7):
            position = np.array([r * np.cos(angle), y, r * np.sin(angle)])
            field = field_at(position, params)
            assert np.hypot(field[0], field[2]) == pytest.approx(np.hypot(reference[0], reference[2]))
            assert field[1] == pytest.approx(reference[1])

    def test_radial_component_points_along_radius(self):
        """测试径向分量沿半径方向"""
        params = FieldParameters(reverse_offset=None)
        y = params.axial_origin - params.radial_offset
        field = field_at(np.array([0.3, y, 0.4]), params)
        horizontal = np.array([field[0], field[2]])
        np.testing.assert_allclose(horizontal / np.linalg.norm(horizontal), [0.6, 0.8])

    def test_nonfinite_position_gives_finite_field(self):
        """测试非有限位置不会产生非有限磁场"""
        field = field_at(np.array([np.nan, 0.0, 0.0]), FieldParameters())
        assert np.all(np.isfinite(field))
