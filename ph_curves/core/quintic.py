"""
quintic - 五次曲线 G² Hermite 闭式构造

给定两个端点的位置、切向量、曲率和主法向量，求速度端图系数 A..E 使得:
    r'(0) = T0,  r''(0) = K0,  r(1) - r(0) = ΔP,  r'(1) = T1,  r''(1) - r''(0) = K1
其中 K = N κ |T|²。末端条件约束的是二阶导数在整段上的增量，
而非 r''(1) 本身。

A、B 由起点数据直接确定，C、D、E 由固定 3×3 线性系统求得:

    | 1/3  1/4  1/5 | |C|   | ΔP - A - B/2 |
    |  1    1    1  | |D| = | T1 - A - B   |
    |  2    3    4  | |E|   | K1           |

该构造精确满足 Hermite 数据，但不保证速度端图严格为 Pythagorean，
因此 PHCurve.arc_length 会在必要时回退到数值积分。
"""

import logging

import numpy as np

from .curve import PHCurve
from .hermite import BoundaryPoint

logger = logging.getLogger(__name__)

QUINTIC_SYSTEM = np.array(
    [
        [1.0 / 3.0, 1.0 / 4.0, 1.0 / 5.0],
        [1.0, 1.0, 1.0],
        [2.0, 3.0, 4.0],
    ]
)


def quintic_coefficients(p0: BoundaryPoint, p1: BoundaryPoint) -> np.ndarray:
    """
    求解五次 G² Hermite 插值的速度端图系数。

    Args:
        p0: 起点 Hermite 数据
        p1: 终点 Hermite 数据

    Returns:
        (5, 3) 系数 [A, B, C, D, E]
    """
    A = p0.tangent
    B = p0.curvature_vector()
    K1 = p1.curvature_vector()

    delta_p = p1.position - p0.position
    rhs = np.array(
        [
            delta_p - A - 0.5 * B,  # 末端位置
            p1.tangent - A - B,  # 末端切向
            K1,  # 二阶导数增量 r''(1) - r''(0)
        ]
    )

    # 三个坐标轴共用同一系数矩阵，一次求解 3×3 右端
    CDE = np.linalg.solve(QUINTIC_SYSTEM, rhs)
    return np.vstack([A, B, CDE])


def quintic_from_hermite(p0: BoundaryPoint, p1: BoundaryPoint, settings=None) -> PHCurve:
    """
    由两个 Hermite 端点构造五次 G² 曲线段。

    返回曲线的起点偏移为 p0.position，因此 r(0) = p0.position, r(1) = p1.position。

    Args:
        p0: 起点
        p1: 终点
        settings: 曲线求值参数 (CurveSettings)

    Returns:
        PHCurve

    Raises:
        DegenerateInputError: 任一端切向量为零，或曲率非零时法向量与切向量平行
    """
    p0.check_frame("start point")
    p1.check_frame("end point")

    coeffs = quintic_coefficients(p0, p1)
    logger.debug("quintic segment %s -> %s", p0.position, p1.position)
    return PHCurve(coeffs, start=p0.position, settings=settings)


if __name__ == "__main__":
    p0 = BoundaryPoint([0, 0, 0], [1, 0, 0], 0.5, [0, 1, 0])
    p1 = BoundaryPoint([1, 1, 0], [0, 1, 0], -0.25, [-1, 0, 0])
    curve = quintic_from_hermite(p0, p1)

    print("=== 五次 Hermite 构造测试 ===")
    print(curve)
    print(f"r(0) = {curve.position(0.0)}, r(1) = {curve.position(1.0)}")
    print(f"r''(0) = {curve.second_derivative(0.0)}, 期望 {p0.curvature_vector()}")
    delta = curve.second_derivative(1.0) - curve.second_derivative(0.0)
    print(f"r''(1) - r''(0) = {delta}, 期望 {p1.curvature_vector()}")
