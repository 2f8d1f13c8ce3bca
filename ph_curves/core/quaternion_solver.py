"""
quaternion_solver - 四元数形式的 G² Hermite 曲线求解

速度端图写成四元数乘积 r'(t) = A(t) i A*(t)，A(t) = q0 + q1 t + q2 t²。
端点四元数 q0、q_end 由切向量与法向量确定（A(0) = q0, A(1) = q_end），
唯一的自由量是四元数 q1（q2 = q_end - q0 - q1）。

求解分三步:
    1. 曲率约束 r''(0) = K0, r''(1) = K1 对 q1 是线性的，构成 6×4 系统，
       用 lstsq 求最小二乘解；
    2. 末端位置约束是 q1 的二次函数，与曲率残差联合（3 + 6 行），
       以 Gauss-Newton 迭代修正，位置行带大权重；
    3. 由 (q0, q1, q2) 闭式展开得到速度端图系数。

自由度不足以同时精确满足位置、切向、曲率和法向，因此曲率残差一般不为零，
CubicSolveReport 同时报告位置残差与曲率残差。
"""

import logging
from dataclasses import dataclass

import numpy as np

from ..config import DEFAULT_SOLVER_SETTINGS, SolverSettings
from ..utils.quaternion import (
    hodograph_from_quaternions,
    i_product,
    quat_mul,
    quaternion_from_tangent,
    rotation_from_x,
    symmetric_product,
)
from .curve import PHCurve
from .hermite import BoundaryPoint

logger = logging.getLogger(__name__)

# 速度端图幂基系数积分权重 ∫ t^k dt, k = 0..4
_POSITION_WEIGHTS = np.array([1.0, 1.0 / 2.0, 1.0 / 3.0, 1.0 / 4.0, 1.0 / 5.0])

_MAX_BACKTRACK = 8


@dataclass(frozen=True)
class CubicSolveReport:
    """
    四元数求解结果报告。

    Attributes:
        converged: 迭代是否在预算内停止且末端位置误差在容差内
        iterations: Gauss-Newton 迭代次数
        position_residual: ‖r(1) - p1‖
        curvature_residual: 6 行曲率残差的范数
    """

    converged: bool
    iterations: int
    position_residual: float
    curvature_residual: float


def _end_quaternions(p0: BoundaryPoint, p1: BoundaryPoint) -> tuple[np.ndarray, np.ndarray]:
    q0 = quaternion_from_tangent(p0.tangent, p0.normal if p0.has_normal else None)
    q_end = quaternion_from_tangent(p1.tangent, p1.normal if p1.has_normal else None)
    # q 与 -q 生成相同切向量，取与 q0 同侧的一支
    if np.dot(q0, q_end) < 0.0:
        q_end = -q_end
    return q0, q_end


def curvature_system(
    q0: np.ndarray, q_end: np.ndarray, K0: np.ndarray, K1: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """
    构造曲率约束的 6×4 线性系统 M q1 = b。

    r''(0) = sym(q1, q0)
    r''(1) = sym(2(q_end - q0), q_end) - sym(q1, q_end)

    Returns:
        M: (6, 4)
        b: (6,)
    """
    M = np.zeros((6, 4))
    for j, e in enumerate(np.eye(4)):
        M[:3, j] = symmetric_product(e, q0)
        M[3:, j] = -symmetric_product(e, q_end)

    K = 2.0 * (q_end - q0)
    b = np.concatenate([K0, K1 - symmetric_product(K, q_end)])
    return M, b


def position_exact_seeds(
    q0: np.ndarray, q_end: np.ndarray, delta_p: np.ndarray, num_phases: int
) -> list[np.ndarray]:
    """
    末端位置精确的闭式 q1 族（Bernstein 形式的 PH Hermite 构造）。

    A(t) 写成 Bernstein 形式 A0 (1-t)² + 2 A1 t(1-t) + A2 t²，A0 = q0, A2 = q_end。
    ∫ r' dt = ΔP 化为 W i W* = c，其中 W = A1 + 3/4 (A0 + A2)，
        c = 15/2 ΔP - 15/16 (d0 + d1) + 5/16 sym(A0, A2)
    W 的解是一个单参数族（绕 i 轴的相位 φ），按 num_phases 等分采样。

    Returns:
        幂基形式的 q1 = 2 (A1 - A0) 列表
    """
    d0 = i_product(q0, q0)
    d1 = i_product(q_end, q_end)
    c = 7.5 * delta_p - (15.0 / 16.0) * (d0 + d1) + (5.0 / 16.0) * symmetric_product(q0, q_end)

    c_norm = np.linalg.norm(c)
    if c_norm < 1e-14:
        W_family = [np.zeros(4)]
    else:
        base = rotation_from_x(c) * np.sqrt(c_norm)
        phases = np.linspace(0.0, 2.0 * np.pi, max(num_phases, 1), endpoint=False)
        W_family = [quat_mul(base, np.array([np.cos(phi), np.sin(phi), 0.0, 0.0])) for phi in phases]

    seeds = []
    for W in W_family:
        A1 = W - 0.75 * (q0 + q_end)
        seeds.append(2.0 * (A1 - q0))
    return seeds


class _ResidualModel:
    """q1 -> 加权残差向量（3 行位置 + 6 行曲率）。"""

    def __init__(self, q0, q_end, delta_p, M, b, weight):
        self.q0 = q0
        self.q_end = q_end
        self.delta_p = delta_p
        self.M = M
        self.b = b
        self.weight = weight

    def coefficients(self, q1: np.ndarray) -> np.ndarray:
        q2 = self.q_end - self.q0 - q1
        return hodograph_from_quaternions(self.q0, q1, q2)

    def position_error(self, q1: np.ndarray) -> np.ndarray:
        return _POSITION_WEIGHTS @ self.coefficients(q1) - self.delta_p

    def curvature_error(self, q1: np.ndarray) -> np.ndarray:
        return self.M @ q1 - self.b

    def __call__(self, q1: np.ndarray) -> np.ndarray:
        return np.concatenate([self.weight * self.position_error(q1), self.curvature_error(q1)])

    def jacobian(self, q1: np.ndarray, h: float) -> np.ndarray:
        J = np.zeros((9, 4))
        for j in range(4):
            step = np.zeros(4)
            step[j] = h
            J[:, j] = (self(q1 + step) - self(q1 - step)) / (2.0 * h)
        return J


def _gauss_newton(model: _ResidualModel, q1: np.ndarray, settings: SolverSettings):
    residual = model(q1)
    norm = np.linalg.norm(residual)
    iterations = 0
    stalled = False

    while iterations < settings.max_iterations:
        iterations += 1
        J = model.jacobian(q1, settings.jacobian_step)
        step, *_ = np.linalg.lstsq(J, -residual, rcond=None)

        # 步长减半直到残差下降
        scale = 1.0
        for _ in range(_MAX_BACKTRACK):
            candidate = q1 + scale * step
            cand_residual = model(candidate)
            cand_norm = np.linalg.norm(cand_residual)
            if cand_norm < norm:
                break
            scale *= 0.5
        else:
            stalled = True
            break

        change = (norm - cand_norm) / max(norm, 1e-300)
        q1, residual, norm = candidate, cand_residual, cand_norm
        logger.debug("gauss-newton iter %d: |r| = %.3e (step scale %.3g)", iterations, norm, scale)
        if change <= settings.residual_tolerance:
            stalled = True
            break

    return q1, iterations, stalled


def solve_cubic(
    p0: BoundaryPoint,
    p1: BoundaryPoint,
    settings: SolverSettings | None = None,
    curve_settings=None,
    warn: bool = True,
) -> tuple[PHCurve, CubicSolveReport]:
    """
    四元数形式的 G² Hermite 求解，带末端位置 Gauss-Newton 修正。

    Args:
        p0: 起点（切向量必须非零）
        p1: 终点（切向量必须非零）
        settings: 求解参数 (SolverSettings)
        curve_settings: 返回曲线的求值参数 (CurveSettings)
        warn: 不收敛时是否记录 warning（拟合器内部反复调用时关闭）

    Returns:
        curve: 起点偏移为 p0.position 的 PHCurve
        report: CubicSolveReport

    Raises:
        DegenerateInputError: 切向量为零，或曲率非零时法向量与切向量平行
    """
    settings = settings or DEFAULT_SOLVER_SETTINGS
    p0.check_frame("start point")
    p1.check_frame("end point")

    q0, q_end = _end_quaternions(p0, p1)
    M, b = curvature_system(q0, q_end, p0.curvature_vector(), p1.curvature_vector())
    delta_p = p1.position - p0.position
    model = _ResidualModel(q0, q_end, delta_p, M, b, settings.position_weight)

    # 候选初值: 曲率最小二乘解 + 位置精确族
    q1_lstsq, *_ = np.linalg.lstsq(M, b, rcond=None)
    seeds = [q1_lstsq] + position_exact_seeds(q0, q_end, delta_p, settings.seed_phase_samples)
    seed_norms = [np.linalg.norm(model(s)) for s in seeds]
    best = int(np.argmin(seed_norms))
    logger.debug("selected seed %d of %d, |r| = %.3e", best, len(seeds), seed_norms[best])

    q1, iterations, stalled = _gauss_newton(model, seeds[best], settings)

    position_residual = float(np.linalg.norm(model.position_error(q1)))
    curvature_residual = float(np.linalg.norm(model.curvature_error(q1)))
    converged = stalled and position_residual <= settings.position_tolerance

    report = CubicSolveReport(
        converged=converged,
        iterations=iterations,
        position_residual=position_residual,
        curvature_residual=curvature_residual,
    )
    if not converged:
        log = logger.warning if warn else logger.debug
        log(
            "quaternion solve did not converge after %d iterations "
            "(position residual %.3e, curvature residual %.3e)",
            iterations,
            position_residual,
            curvature_residual,
        )

    curve = PHCurve(model.coefficients(q1), start=p0.position, settings=curve_settings)
    return curve, report


def cubic_from_hermite(p0: BoundaryPoint, p1: BoundaryPoint, settings: SolverSettings | None = None) -> PHCurve:
    """solve_cubic 的简化入口，只返回曲线。"""
    curve, _ = solve_cubic(p0, p1, settings)
    return curve


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    p0 = BoundaryPoint([0, 0, 0], [1.5, 0, 0], 1.0, [0, 1, 0])
    p1 = BoundaryPoint([1, 1, 0], [0, 1.5, 0], 1.0, [-1, 0, 0])
    curve, report = solve_cubic(p0, p1)

    print("=== 四元数求解测试 ===")
    print(curve)
    print(report)
    print(f"r(1) = {curve.position(1.0)}, 期望 {p1.position}")
    print(f"解析弧长 {curve.arc_length():.8f}, 数值弧长 {curve.arc_length_numeric():.8f}")
