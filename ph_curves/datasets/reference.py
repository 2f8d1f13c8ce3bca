"""
reference - 参考 Hermite 数据与采样轨迹

数据说明:
- quarter_circle_join: 单位圆上的三个点，相邻两点构成四分之一圆弧，
  拼接点处切向、曲率、法向完全一致（G² 拼接的标准算例）
- straight_line_pair: 沿 x 轴的直线段端点（曲率为零，弧长精确已知）
- helix_samples: 圆柱螺旋线上带时间戳的样本，Frenet 数据解析给出
"""

from dataclasses import dataclass

import numpy as np

from ..core.hermite import BoundaryPoint


def quarter_circle_join() -> tuple[BoundaryPoint, BoundaryPoint, BoundaryPoint]:
    """
    单位圆（圆心在原点，xy 平面）上逆时针排列的三个 Hermite 点。

    切向量模长取四分之一圆弧长 π/2，法向量指向圆心，曲率为 1。

    Returns:
        (p0, p1, p2) 分别位于 (1, 0, 0), (0, 1, 0), (-1, 0, 0)
    """
    speed = np.pi / 2.0
    points = []
    for angle in (0.0, np.pi / 2.0, np.pi):
        c, s = np.cos(angle), np.sin(angle)
        points.append(
            BoundaryPoint(
                position=[c, s, 0.0],
                tangent=[-s * speed, c * speed, 0.0],
                curvature=1.0,
                normal=[-c, -s, 0.0],
            )
        )
    return tuple(points)


def straight_line_pair(length: float = 2.0) -> tuple[BoundaryPoint, BoundaryPoint]:
    """
    沿 x 轴、长度为 length 的直线段端点，切向量模长等于 length。

    Returns:
        (p0, p1)
    """
    tangent = [length, 0.0, 0.0]
    p0 = BoundaryPoint([0.0, 0.0, 0.0], tangent, 0.0, [0.0, 1.0, 0.0])
    p1 = BoundaryPoint([length, 0.0, 0.0], tangent, 0.0, [0.0, 1.0, 0.0])
    return p0, p1


@dataclass
class HelixParameters:
    """圆柱螺旋线 r(T) = (a cos ωT, a sin ωT, b ωT) 的参数。"""

    radius: float = 1.0  # a
    pitch: float = 0.2  # b，每弧度上升高度
    angular_rate: float = 1.0  # ω (rad/s)
    start_time: float = 0.0
    duration: float = np.pi / 2.0

    @property
    def curvature(self) -> float:
        """κ = a / (a² + b²)，沿螺旋线为常数。"""
        return self.radius / (self.radius**2 + self.pitch**2)


def helix_samples(
    n: int = 5,
    params: HelixParameters | None = None,
    noise: float = 0.0,
    seed: int | None = None,
) -> list[BoundaryPoint]:
    """
    在螺旋线上等时间间隔采样。

    每个样本包含时间、位置、对归一化参数的导数（dr/dT 乘以时长）、
    曲率和主法向量 (-cos ωT, -sin ωT, 0)。

    Args:
        n: 样本数（≥ 2）
        params: 螺旋线参数
        noise: 位置高斯噪声标准差
        seed: 随机数种子

    Returns:
        按时间排列的样本列表
    """
    params = params or HelixParameters()
    a, b, w = params.radius, params.pitch, params.angular_rate

    times = params.start_time + np.linspace(0.0, params.duration, n)
    phase = w * times
    positions = np.column_stack([a * np.cos(phase), a * np.sin(phase), b * phase])
    velocities = np.column_stack([-a * w * np.sin(phase), a * w * np.cos(phase), np.full(n, b * w)])
    normals = np.column_stack([-np.cos(phase), -np.sin(phase), np.zeros(n)])

    if noise > 0.0:
        rng = np.random.default_rng(seed)
        positions = positions + rng.normal(scale=noise, size=positions.shape)

    return [
        BoundaryPoint(
            position=positions[i],
            tangent=velocities[i] * params.duration,
            curvature=params.curvature,
            normal=normals[i],
            time=times[i],
        )
        for i in range(n)
    ]
