"""
planner 模块单元测试
"""

import numpy as np
import pytest

from ph_curves.core.hermite import BoundaryPoint
from ph_curves.core.quaternion_solver import cubic_from_hermite
from ph_curves.datasets import quarter_circle_join
from ph_curves.planner import PathPlanner

UNIT_X = [1.0, 0.0, 0.0]
UNIT_Y = [0.0, 1.0, 0.0]


def create_point(position, tangent):
    return BoundaryPoint(position, tangent, 0.0, UNIT_Y)


@pytest.fixture
def circle_planner():
    """两段四分之一圆弧组成的半圆路径"""
    p0, p1, p2 = quarter_circle_join()
    planner = PathPlanner()
    planner.add_segment(p0, p1)
    planner.add_segment(p1, p2)
    return planner


class TestPathPlanner:
    """路径规划器测试"""

    def test_build_path_returns_all_segments(self):
        """build_path 返回全部曲线段"""
        planner = PathPlanner()
        p0 = create_point(np.zeros(3), UNIT_X)
        p1 = create_point(np.zeros(3), UNIT_X)
        p2 = create_point(np.zeros(3), UNIT_X)

        planner.add_segment(p0, p1)
        planner.add_segment(p1, p2)
        path = planner.build_path()

        assert len(path) == 2
        assert len(planner) == 2

    def test_build_path_is_snapshot(self, circle_planner):
        """build_path 结果不随后续追加变化"""
        path = circle_planner.build_path()
        circle_planner.append(path[0])
        assert len(path) == 2
        assert len(circle_planner) == 3

    def test_continuous_path(self):
        """共享端点的路径 G² 连续"""
        planner = PathPlanner()
        p0 = create_point(np.zeros(3), UNIT_X)
        p1 = create_point(np.zeros(3), UNIT_X)
        p2 = create_point(np.zeros(3), UNIT_X)

        planner.add_segment(p0, p1)
        planner.add_segment(p1, p2)

        assert planner.validate_path_g2()

    def test_discontinuous_path(self):
        """拼接点切向不一致时不连续"""
        planner = PathPlanner()
        start = create_point(np.zeros(3), UNIT_X)
        junction_end = create_point(np.zeros(3), UNIT_X)
        junction_start = create_point(np.zeros(3), UNIT_Y)
        end = create_point(np.zeros(3), UNIT_Y)

        planner.add_segment(start, junction_end)
        planner.add_segment(junction_start, end)

        assert not planner.validate_path_g2()

    def test_empty_and_single_segment(self):
        """少于两段时恒为连续"""
        planner = PathPlanner()
        assert planner.validate_path_g2()
        assert planner.join_report() == []
        planner.add_segment(create_point(np.zeros(3), UNIT_X), create_point(UNIT_X, UNIT_X))
        assert planner.validate_path_g2()

    def test_join_report(self, circle_planner):
        """每个拼接点一条诊断"""
        report = circle_planner.join_report()
        assert len(report) == 1
        assert report[0].is_g2()
        assert report[0].position_gap < 1e-12

    def test_join_report_locates_failure(self, circle_planner):
        """诊断指出不连续的拼接点"""
        far = BoundaryPoint([-1.0, -1.0, 0.0], [1.0, 0.0, 0.0])
        circle_planner.add_segment(BoundaryPoint([5.0, 0.0, 0.0], [1.0, 0.0, 0.0]), far)

        report = circle_planner.join_report()
        assert [diag.is_g2() for diag in report] == [True, False]
        assert report[1].position_gap > 1.0
        assert not circle_planner.validate_path_g2()

    def test_total_length(self, circle_planner):
        """半圆路径总长约为 π"""
        assert np.isclose(circle_planner.total_length(), np.pi, rtol=3e-2)

    def test_sample_uniform(self, circle_planner):
        """采样点去掉重复的拼接点"""
        points = circle_planner.sample_uniform(11)
        assert points.shape == (21, 3)
        np.testing.assert_allclose(points[0], [1.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(points[-1], [-1.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(np.linalg.norm(points[:, :2], axis=1), 1.0, atol=5e-2)

    def test_append_cubic_segment(self):
        """追加四元数求解得到的曲线段"""
        p0, p1, p2 = quarter_circle_join()
        planner = PathPlanner()
        planner.append(cubic_from_hermite(p0, p1))
        planner.append(cubic_from_hermite(p1, p2))
        report = planner.join_report()
        assert report[0].tangent_misalignment < 1e-8

    def test_append_rejects_other_types(self):
        """append 只接受 PHCurve"""
        with pytest.raises(TypeError):
            PathPlanner().append("segment")

    def test_dict_round_trip(self, circle_planner):
        """序列化后恢复的路径与原路径一致"""
        restored = PathPlanner.from_dict(circle_planner.to_dict())
        assert len(restored) == len(circle_planner)
        for a, b in zip(restored.build_path(), circle_planner.build_path()):
            np.testing.assert_allclose(a.coefficients, b.coefficients)
            np.testing.assert_allclose(a.start, b.start)
        assert restored.validate_path_g2()

    def test_repr(self, circle_planner):
        assert repr(circle_planner) == "PathPlanner(segments=2)"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
