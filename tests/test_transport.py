"""
单粒子路径采样的单元测试
"""

import numpy as np

from magnetic_lens.core import constants
from magnetic_lens.core.data_classes import Body, FieldParameters
from magnetic_lens.core.field import field_at
from magnetic_lens.core.kinematics import get_force_policy, make_field_update
from magnetic_lens.core.transport import generate_path


def make_body(position=(0.0, 0.0, 0.0), velocity=(0.0, -10.0, 0.0)):
    return Body(
        position=np.array(position, dtype=float),
        velocity=np.array(velocity, dtype=float),
        mass=9.1e-31,
        charge=-1.6e-19,
    )


def zero_field_update():
    params = FieldParameters(strength_exp=float("-inf"))
    return make_field_update(params, get_force_policy("field_cross_velocity"))


def infinite_force_update(body):
    body.field = np.zeros(3)
    body.force = np.array([np.inf, 0.0, 0.0])


class TestStepBudget:
    """测试步数预算"""

    def test_max_steps_length(self):
        """测试用尽步数时路径长度为 steps + 1"""
        path = generate_path(make_body(), zero_field_update(), max_steps=50, dt=0.01)

        assert path.status == "max_steps"
        assert len(path) == 51
        np.testing.assert_array_equal(path.initial_position, [0.0, 0.0, 0.0])

    def test_zero_steps(self):
        """测试零步预算只记录初始位置"""
        path = generate_path(make_body(), zero_field_update(), max_steps=0, dt=0.01,
                             detector_height=-10.0)

        assert len(path) == 1
        assert path.status == "max_steps"
        assert path.elapsed_time == 0.0

    def test_length_never_exceeds_budget(self):
        """测试路径长度不超过 steps + 1"""
        for steps in (1, 7, 120):
            path = generate_path(make_body(), zero_field_update(), max_steps=steps, dt=0.01,
                                 detector_height=-10.0)
            assert len(path) <= steps + 1


class TestDetector:
    """测试探测平面"""

    def test_free_flight_reaches_detector(self):
        """测试无场时粒子在约 1 秒后到达探测面"""
        dt = 0.01
        path = generate_path(make_body(), zero_field_update(), max_steps=1000, dt=dt,
                             detector_height=-10.0)

        assert path.status == "detector_hit"
        assert path.reached_detector
        assert abs(path.elapsed_time - 1.0) <= dt + 1e-9
        assert path.final_position[1] == -10.0
        assert path.final_position[0] == 0.0
        assert path.final_position[2] == 0.0

    def test_detector_hit_length(self):
        """测试在第 i 步命中时长度为 i + 1"""
        dt = 0.01
        path = generate_path(make_body(), zero_field_update(), max_steps=1000, dt=dt,
                             detector_height=-10.0)
        steps_taken = int(round(path.elapsed_time / dt))
        assert len(path) == steps_taken + 1

    def test_start_on_plane(self):
        """测试从探测面上出发立即命中"""
        path = generate_path(make_body(position=(0.2, -10.0, 0.0)), zero_field_update(),
                             max_steps=100, dt=0.01, detector_height=-10.0)

        assert path.status == "detector_hit"
        assert len(path) == 1
        np.testing.assert_array_equal(path.final_position, [0.2, -10.0, 0.0])

    def test_upward_crossing(self):
        """测试从下方向上穿越探测面"""
        path = generate_path(make_body(position=(0.0, -5.0, 0.0), velocity=(0.0, 10.0, 0.0)),
                             zero_field_update(), max_steps=1000, dt=0.01, detector_height=0.0)

        assert path.status == "detector_hit"
        assert path.final_position[1] == 0.0
        assert np.all(path.positions[:-1, 1] < 0.0)

    def test_no_detector(self):
        """测试不设探测面时运行完整预算"""
        path = generate_path(make_body(), zero_field_update(), max_steps=2000, dt=0.01)
        assert path.status == "max_steps"
        assert path.final_position[1] < -10.0


class TestDivergence:
    """测试发散路径"""

    def test_infinite_force_diverges(self, capsys):
        """测试无穷大力导致发散并截断路径"""
        path = generate_path(make_body(), infinite_force_update, max_steps=100, dt=0.01,
                             detector_height=-10.0)

        assert path.status == "diverged"
        assert len(path) == 2
        assert np.all(np.isfinite(path.positions))
        assert "Path diverged at step 2" in capsys.readouterr().out

    def test_nan_initial_position(self):
        """测试初始位置非有限时只保留初始点"""
        path = generate_path(make_body(position=(np.nan, 0.0, 0.0)), zero_field_update(),
                             max_steps=100, dt=0.01, detector_height=-10.0)

        assert path.status == "diverged"
        assert len(path) == 1

    def test_divergence_counted(self):
        """测试发散计数"""
        constants.reset_diagnostic_stats()
        generate_path(make_body(), infinite_force_update, max_steps=10, dt=0.01)
        generate_path(make_body(), infinite_force_update, max_steps=10, dt=0.01)
        assert constants.DIAGNOSTIC_STATS['diverged_paths'] == 2


class TestSampling:
    """测试辅助向量采样"""

    def test_sampling_cadence(self):
        """测试每 k 个点附带一次向量"""
        path = generate_path(make_body(), zero_field_update(), max_steps=10, dt=0.01,
                             sample_every=3)

        sampled = [i for i, point in enumerate(path.points) if point.has_vectors]
        assert sampled == [0, 3, 6, 9]

    def test_every_point_sampled(self):
        """测试 k = 1 时每个积分点都有向量"""
        path = generate_path(make_body(), zero_field_update(), max_steps=5, dt=0.01)
        assert all(point.has_vectors for point in path.points[:-1])
        assert not path.points[-1].has_vectors

    def test_vectors_colocated_with_position(self):
        """测试采样向量与所在位置的场一致"""
        params = FieldParameters(strength_exp=-11.0)
        policy = get_force_policy("field_cross_velocity")
        body = make_body(position=(0.5, 0.0, 0.0))
        path = generate_path(body, make_field_update(params, policy), max_steps=200,
                             dt=0.01, detector_height=-10.0, sample_every=7)

        checked = 0
        for point in path.points:
            if not point.has_vectors:
                continue
            np.testing.assert_array_equal(point.field, field_at(point.position, params))
            np.testing.assert_array_equal(
                point.force, policy.force(-1.6e-19, point.field, point.velocity)
            )
            checked += 1
        assert checked > 0

    def test_sampled_vectors_are_copies(self):
        """测试采样向量不随后续积分改变"""
        path = generate_path(make_body(), zero_field_update(), max_steps=3, dt=0.01)
        first = path.points[0]
        second = path.points[1]
        assert first.velocity is not second.velocity
        assert first.position is not second.position


class TestDebugOutput:
    """测试调试输出"""

    def test_debug_reports_status(self, monkeypatch, capsys):
        monkeypatch.setattr(constants, "DEBUG", True)
        generate_path(make_body(), zero_field_update(), max_steps=5, dt=0.01)
        assert "[debug] Path finished: max_steps, 6 points" in capsys.readouterr().out

    def test_quiet_by_default(self, capsys):
        generate_path(make_body(), zero_field_update(), max_steps=5, dt=0.01)
        assert "[debug]" not in capsys.readouterr().out


class TestDeterminism:
    """测试确定性"""

    def test_repeat_runs_identical(self):
        """测试相同输入得到相同路径"""
        params = FieldParameters(strength_exp=-11.0)
        policy = get_force_policy("field_cross_velocity")

        runs = [
            generate_path(make_body(position=(0.5, 3.0, 0.0)), make_field_update(params, policy),
                          max_steps=1000, dt=0.01, detector_height=-10.0, sample_every=25)
            for _ in range(2)
        ]
        np.testing.assert_array_equal(runs[0].positions, runs[1].positions)
        assert runs[0].status == runs[1].status
        assert runs[0].elapsed_time == runs[1].elapsed_time
