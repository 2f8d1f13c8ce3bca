"""
core - 核心算法模块

包含:
- hermite: Hermite 边界点
- curve: PH 曲线表示与求值
- quintic: 五次 G² Hermite 闭式构造
- quaternion_solver: 四元数形式的 G² Hermite 求解
- continuity: G² 连续性检验
- fitter: 带时间戳样本的单段拟合
"""

from .hermite import BoundaryPoint
from .curve import PHCurve
from .quintic import quintic_from_hermite
from .quaternion_solver import CubicSolveReport, cubic_from_hermite, solve_cubic
from .continuity import JoinDiagnostics, join_diagnostics, validate_g2
from .fitter import FitResult, SegmentFitter, fit_segment

__all__ = [
    "BoundaryPoint",
    "PHCurve",
    "quintic_from_hermite",
    "CubicSolveReport",
    "cubic_from_hermite",
    "solve_cubic",
    "JoinDiagnostics",
    "join_diagnostics",
    "validate_g2",
    "FitResult",
    "SegmentFitter",
    "fit_segment",
]
