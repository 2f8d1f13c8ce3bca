"""
ph_curves - Pythagorean Hodograph 曲线构造与拟合库

曲线由四次速度端图 r'(t) = A + Bt + Ct² + Dt³ + Et⁴ 定义，PH 曲线的弧长可解析计算。
提供 G² Hermite 插值（五次闭式构造、四元数求解）、连续性检验、多段路径规划
以及带时间戳样本的单段拟合。
"""

from .core import (
    BoundaryPoint,
    CubicSolveReport,
    FitResult,
    JoinDiagnostics,
    PHCurve,
    SegmentFitter,
    cubic_from_hermite,
    fit_segment,
    join_diagnostics,
    quintic_from_hermite,
    solve_cubic,
    validate_g2,
)
from .errors import DegenerateInputError, InvalidInputError, PHCurveError
from .planner import PathPlanner

__version__ = "0.1.0"
__all__ = [
    "BoundaryPoint",
    "PHCurve",
    "quintic_from_hermite",
    "solve_cubic",
    "cubic_from_hermite",
    "CubicSolveReport",
    "validate_g2",
    "join_diagnostics",
    "JoinDiagnostics",
    "PathPlanner",
    "SegmentFitter",
    "fit_segment",
    "FitResult",
    "PHCurveError",
    "InvalidInputError",
    "DegenerateInputError",
]
