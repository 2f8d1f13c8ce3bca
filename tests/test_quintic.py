"""
quintic 模块单元测试
"""

import numpy as np
import pytest

from ph_curves.core.continuity import validate_g2
from ph_curves.core.hermite import BoundaryPoint
from ph_curves.core.quintic import QUINTIC_SYSTEM, quintic_from_hermite
from ph_curves.datasets import straight_line_pair
from ph_curves.errors import DegenerateInputError, InvalidInputError
from ph_curves.utils.geometry import normalize


@pytest.fixture
def endpoints():
    """一般位置的两个 Hermite 端点"""
    p0 = BoundaryPoint([0.0, 0.0, 0.0], [1.0, 0.5, 0.0], 0.8, [-0.5, 1.0, 0.0])
    p1 = BoundaryPoint([2.0, 1.0, 0.5], [0.5, 1.0, 0.2], 0.4, [-1.0, 0.5, 0.0])
    return p0, p1


@pytest.fixture
def curve(endpoints):
    return quintic_from_hermite(*endpoints)


class TestBoundaryConditions:
    """端点条件测试"""

    def test_system_is_regular(self):
        """3×3 系数矩阵非奇异"""
        assert abs(np.linalg.det(QUINTIC_SYSTEM)) > 1e-3

    def test_end_positions(self, endpoints, curve):
        """r(0) = p0, r(1) = p1"""
        p0, p1 = endpoints
        np.testing.assert_allclose(curve.position(0.0), p0.position, rtol=1e-5, atol=1e-12)
        np.testing.assert_allclose(curve.position(1.0), p1.position, rtol=1e-5)

    def test_end_tangents(self, endpoints, curve):
        """端点单位切向量等于输入切向量方向"""
        p0, p1 = endpoints
        np.testing.assert_allclose(curve.tangent_unit(0.0), normalize(p0.tangent), atol=1e-3)
        np.testing.assert_allclose(curve.tangent_unit(1.0), normalize(p1.tangent), atol=1e-3)
        np.testing.assert_allclose(curve.derivative(0.0), p0.tangent, atol=1e-12)
        np.testing.assert_allclose(curve.derivative(1.0), p1.tangent, atol=1e-12)

    def test_end_second_derivatives(self, endpoints, curve):
        """r''(0) = n̂0 κ0 |t0|², r''(1) - r''(0) = n̂1 κ1 |t1|²"""
        p0, p1 = endpoints
        expected0 = normalize(p0.normal) * p0.curvature * np.dot(p0.tangent, p0.tangent)
        expected1 = normalize(p1.normal) * p1.curvature * np.dot(p1.tangent, p1.tangent)
        delta = curve.second_derivative(1.0) - curve.second_derivative(0.0)
        np.testing.assert_allclose(curve.second_derivative(0.0), expected0, atol=1e-12)
        np.testing.assert_allclose(delta, expected1, atol=1e-10)

    def test_second_derivative_increment(self):
        """负曲率终点: 二阶导数增量等于终点曲率向量，而非终点二阶导数"""
        p0 = BoundaryPoint([0.0, 0.0, 0.0], [1.0, 0.0, 0.0], 0.5, [0.0, 1.0, 0.0])
        p1 = BoundaryPoint([1.0, 1.0, 0.0], [0.0, 1.0, 0.0], -0.25, [-1.0, 0.0, 0.0])
        curve = quintic_from_hermite(p0, p1)

        delta = curve.second_derivative(1.0) - curve.second_derivative(0.0)
        np.testing.assert_allclose(delta, [0.25, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(curve.second_derivative(1.0), [0.25, 0.5, 0.0], atol=1e-12)

    def test_frame_unit_orthogonal(self, curve):
        """内部采样点的 T、N 为正交单位向量"""
        t = np.linspace(0.05, 0.95, 10)
        T = curve.tangent_unit(t)
        N = curve.principal_normal(t)
        np.testing.assert_allclose(np.linalg.norm(T, axis=1), 1.0)
        np.testing.assert_allclose(np.linalg.norm(N, axis=1), 1.0)
        np.testing.assert_allclose(np.sum(T * N, axis=1), 0.0, atol=1e-10)

    def test_derivative_matches_finite_difference(self, curve):
        """导数与位置中心差分一致"""
        h = 1e-5
        for t in (0.2, 0.5, 0.8):
            fd = (curve.position(t + h) - curve.position(t - h)) / (2 * h)
            np.testing.assert_allclose(curve.derivative(t), fd, atol=1e-6)

    def test_offset_distance(self, curve):
        """偏移点距离为 d"""
        for t in (0.25, 0.5, 0.75):
            p = curve.offset_point(t, 0.1)
            assert np.isclose(np.linalg.norm(p - curve.position(t)), 0.1)


class TestSpecialCases:
    """特殊输入测试"""

    def test_straight_line(self):
        """直线段: 弧长等于长度，法向量为零"""
        p0, p1 = straight_line_pair(2.0)
        curve = quintic_from_hermite(p0, p1)
        assert np.isclose(curve.arc_length(), 2.0, rtol=1e-10)
        np.testing.assert_allclose(curve.coefficients[1:], 0.0, atol=1e-12)
        np.testing.assert_allclose(curve.principal_normal(0.5), 0.0)

    def test_speed_symmetry(self):
        """镜像对称的端点数据给出对称的速率分布

        终点曲率向量取 r''(1) - r''(0)，使 r''(1) 恰为 r''(0) 的镜像。
        """
        p0 = BoundaryPoint([0.0, 0.0, 0.0], [1.0, 1.0, 0.0], 0.5, [1.0, -1.0, 0.0])
        p1 = BoundaryPoint([2.0, 0.0, 0.0], [1.0, -1.0, 0.0], np.sqrt(0.5), [-1.0, 0.0, 0.0])
        curve = quintic_from_hermite(p0, p1)
        t = np.linspace(0.0, 1.0, 9)
        np.testing.assert_allclose(curve.speed(t), curve.speed(1.0 - t), atol=1e-10)

    def test_self_join_not_g2(self, curve):
        """同一段首尾不相接，不满足 G²"""
        assert not validate_g2(curve, curve)

    def test_zero_tangent_raises(self):
        """零切向量抛出 DegenerateInputError"""
        p0 = BoundaryPoint([0.0, 0.0, 0.0], [0.0, 0.0, 0.0])
        p1 = BoundaryPoint([1.0, 0.0, 0.0], [1.0, 0.0, 0.0])
        with pytest.raises(DegenerateInputError):
            quintic_from_hermite(p0, p1)
        with pytest.raises(InvalidInputError):
            quintic_from_hermite(p1, p0)

    def test_parallel_normal_raises(self):
        """曲率非零且法向量与切向平行时拒绝构造"""
        p0 = BoundaryPoint([0.0, 0.0, 0.0], [1.0, 0.0, 0.0], 1.0, [2.0, 0.0, 0.0])
        p1 = BoundaryPoint([1.0, 0.0, 0.0], [1.0, 0.0, 0.0])
        with pytest.raises(DegenerateInputError):
            quintic_from_hermite(p0, p1)

    def test_start_offset(self):
        """起点偏移为 p0.position"""
        p0 = BoundaryPoint([5.0, -1.0, 2.0], [1.0, 0.0, 0.0])
        p1 = BoundaryPoint([6.0, -1.0, 2.0], [1.0, 0.0, 0.0])
        curve = quintic_from_hermite(p0, p1)
        np.testing.assert_allclose(curve.start, p0.position)
        np.testing.assert_allclose(curve.position(1.0), p1.position)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
