"""
config - 数值容差与迭代预算

集中定义曲线求值、四元数求解器和分段拟合器的默认参数。
各入口函数接受可选的 settings 参数覆盖这些默认值。
"""

from dataclasses import dataclass

# 速度低于该阈值时认为切向量/Frenet 标架退化
SPEED_EPSILON: float = 1e-8

# 速度多项式平方根校验的相对容差
PH_TOLERANCE: float = 1e-6

# 数值弧长回退使用的 Simpson 区间数（必须为偶数）
SIMPSON_STEPS: int = 100

# G² 连续性校验默认容差
G2_TOLERANCE: float = 1e-4


@dataclass(frozen=True)
class CurveSettings:
    """PHCurve 求值参数。"""

    speed_epsilon: float = SPEED_EPSILON
    ph_tolerance: float = PH_TOLERANCE
    simpson_steps: int = SIMPSON_STEPS


@dataclass(frozen=True)
class SolverSettings:
    """四元数求解器（含 Gauss-Newton 位置校正）参数。"""

    position_weight: float = 1e4  # 末端位置残差行的权重
    max_iterations: int = 50
    residual_tolerance: float = 1e-12  # 残差范数相对变化量
    jacobian_step: float = 1e-6  # 中心差分步长
    seed_phase_samples: int = 16  # 闭式位置精确族的相位采样数
    position_tolerance: float = 1e-6  # 判定收敛时允许的末端位置误差


@dataclass(frozen=True)
class FitSettings:
    """分段拟合器参数。"""

    max_nfev: int = 1000
    ftol: float = 1e-12
    xtol: float = 1e-12
    gtol: float = 1e-12
    min_tangent_magnitude: float = 1e-6
    orientation_weight: float = 1.0


DEFAULT_CURVE_SETTINGS = CurveSettings()
DEFAULT_SOLVER_SETTINGS = SolverSettings()
DEFAULT_FIT_SETTINGS = FitSettings()
