"""
积分器与洛伦兹力约定的单元测试
"""

import numpy as np
import pytest

from magnetic_lens.core.data_classes import Body, FieldParameters
from magnetic_lens.core.field import field_at
from magnetic_lens.core.kinematics import (
    integrate_step,
    ForcePolicy,
    FORCE_POLICIES,
    get_force_policy,
    make_field_update,
)


class TestIntegrateStep:
    """测试显式积分步"""

    def test_zero_force_moves_by_velocity(self):
        """测试零力时位置移动 v*dt 且速度不变"""
        position = np.array([1.0, 2.0, 3.0])
        velocity = np.array([0.5, -10.0, 2.0])
        new_pos, new_vel = integrate_step(position, velocity, np.zeros(3), 9.1e-31, 0.01)

        np.testing.assert_allclose(new_pos, position + velocity * 0.01)
        np.testing.assert_array_equal(new_vel, velocity)

    def test_position_uses_old_velocity(self):
        """测试位置更新使用步前速度"""
        position = np.zeros(3)
        velocity = np.array([1.0, 0.0, 0.0])
        force = np.array([0.0, 2.0, 0.0])
        new_pos, new_vel = integrate_step(position, velocity, force, 1.0, 0.5)

        np.testing.assert_allclose(new_pos, [0.5, 0.0, 0.0])
        np.testing.assert_allclose(new_vel, [1.0, 1.0, 0.0])

    def test_negative_mass_reverses_acceleration(self):
        """测试负质量使加速度反向"""
        _, vel = integrate_step(np.zeros(3), np.zeros(3), np.array([1.0, 0.0, 0.0]), -2.0, 1.0)
        np.testing.assert_allclose(vel, [-0.5, 0.0, 0.0])

    def test_inputs_not_modified(self):
        """测试输入数组不被修改"""
        position = np.array([1.0, 1.0, 1.0])
        velocity = np.array([1.0, 0.0, 0.0])
        integrate_step(position, velocity, np.ones(3), 1.0, 0.1)

        np.testing.assert_array_equal(position, [1.0, 1.0, 1.0])
        np.testing.assert_array_equal(velocity, [1.0, 0.0, 0.0])


class TestBody:
    """测试粒子状态"""

    def test_step_advances_time(self):
        """测试单步推进时间和位置"""
        body = Body(
            position=np.zeros(3),
            velocity=np.array([0.0, -10.0, 0.0]),
            mass=1.0,
            charge=1.0,
        )
        body.step(0.01)
        body.step(0.01)

        assert body.time == pytest.approx(0.02)
        np.testing.assert_allclose(body.position, [0.0, -0.2, 0.0])

    def test_step_uses_stored_force(self):
        """测试单步使用已存储的力"""
        body = Body(position=np.zeros(3), velocity=np.zeros(3), mass=2.0, charge=1.0,
                    force=np.array([0.0, 0.0, 4.0]))
        body.step(1.0)
        np.testing.assert_allclose(body.velocity, [0.0, 0.0, 2.0])


class TestForcePolicy:
    """测试力的符号约定"""

    B = np.array([0.0, 1.0, 0.0])
    V = np.array([1.0, 0.0, 0.0])

    def test_field_cross_velocity(self):
        """测试 F = q (B x v)"""
        force = FORCE_POLICIES["field_cross_velocity"].force(1.0, self.B, self.V)
        np.testing.assert_allclose(force, [0.0, 0.0, -1.0])

    def test_velocity_cross_field(self):
        """测试 F = q (v x B)"""
        force = FORCE_POLICIES["velocity_cross_field"].force(1.0, self.B, self.V)
        np.testing.assert_allclose(force, [0.0, 0.0, 1.0])

    def test_charge_sign(self):
        """测试电荷符号翻转力的方向"""
        policy = get_force_policy("field_cross_velocity")
        positive = policy.force(2.0, self.B, self.V)
        negative = policy.force(-2.0, self.B, self.V)
        np.testing.assert_allclose(positive, -negative)

    def test_radial_boost_scales_horizontal_velocity(self):
        """测试径向增强只放大水平速度分量"""
        policy = get_force_policy("radial_boost")
        assert policy.velocity_scale == (10.0, 1.0, 10.0)

        field = np.array([0.0, 1.0, 0.0])
        velocity = np.array([1.0, 5.0, 0.0])
        boosted = policy.force(1.0, field, velocity)
        plain = get_force_policy("field_cross_velocity").force(1.0, field, velocity)
        np.testing.assert_allclose(boosted, 10.0 * plain)

    def test_force_perpendicular_to_velocity(self):
        """测试磁力垂直于速度"""
        field = np.array([0.3, -1.2, 0.7])
        velocity = np.array([-0.4, -10.0, 0.2])
        for name in ("field_cross_velocity", "velocity_cross_field"):
            force = get_force_policy(name).force(-1.6e-19, field, velocity)
            assert np.dot(force, velocity) == pytest.approx(0.0, abs=1e-30)

    def test_unknown_policy(self):
        """测试未知力约定"""
        with pytest.raises(ValueError):
            get_force_policy("electric")

    def test_unknown_cross_order(self):
        """测试未知叉乘顺序"""
        with pytest.raises(ValueError):
            ForcePolicy("sideways").force(1.0, self.B, self.V)


class TestFieldUpdate:
    """测试每步的场与力更新"""

    def test_sets_field_and_force(self):
        """测试更新后场和力与当前位置一致"""
        params = FieldParameters(strength_exp=-9.0)
        policy = get_force_policy("field_cross_velocity")
        update = make_field_update(params, policy)

        body = Body(
            position=np.array([0.6, -1.2, 0.1]),
            velocity=np.array([0.0, -10.0, 0.0]),
            mass=9.1e-31,
            charge=-1.6e-19,
        )
        update(body)

        expected_field = field_at(body.position, params)
        np.testing.assert_array_equal(body.field, expected_field)
        np.testing.assert_array_equal(
            body.force, policy.force(body.charge, expected_field, body.velocity)
        )
