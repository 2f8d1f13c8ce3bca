"""
continuity - 曲线段拼接处的 G² 连续性检验

两段曲线 a、b 在 a(1) 与 b(0) 处 G² 连续当且仅当:
    ‖a(1) - b(0)‖ ≤ tol
    ‖T_a(1) × T_b(0)‖ ≤ tol
    ‖N_a(1) × N_b(0)‖ ≤ tol

采用叉积模长而非点积，要求方向平行。注意反向（约 180°）的单位向量
叉积同样很小，会被判定为连续。
"""

from dataclasses import dataclass

import numpy as np

from ..config import G2_TOLERANCE
from ..utils.geometry import cross_norm


@dataclass(frozen=True)
class JoinDiagnostics:
    """单个拼接点的三项测量值。"""

    position_gap: float
    tangent_misalignment: float
    normal_misalignment: float

    def is_g2(self, tol: float = G2_TOLERANCE) -> bool:
        return (
            self.position_gap <= tol
            and self.tangent_misalignment <= tol
            and self.normal_misalignment <= tol
        )


def join_diagnostics(a, b) -> JoinDiagnostics:
    """
    测量 a 的终点与 b 的起点之间的位置、切向、法向偏差。

    退化点（速度为零或直线段）的主法向量为零向量，叉积为零，不计入偏差。
    """
    gap = np.linalg.norm(a.position(1.0) - b.position(0.0))
    tangent = cross_norm(a.tangent_unit(1.0), b.tangent_unit(0.0))
    normal = cross_norm(a.principal_normal(1.0), b.principal_normal(0.0))
    return JoinDiagnostics(float(gap), float(tangent), float(normal))


def validate_g2(a, b, tol: float = G2_TOLERANCE) -> bool:
    """a(1) 与 b(0) 是否 G² 连续。"""
    return join_diagnostics(a, b).is_g2(tol)
