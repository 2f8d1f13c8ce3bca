"""
timing - 时间归一化工具

将样本的绝对时间 [T0, T1] 映射到曲线规范参数 t ∈ [0, 1]，
并据此把参数导数换算为物理速度:
    v(T) = r'(τ) / (T1 - T0),  τ = (T - T0) / (T1 - T0)
"""

import numpy as np

from ..errors import InvalidInputError


def normalize_times(times: np.ndarray) -> tuple[np.ndarray, float, float]:
    """
    以最小/最大时间为锚点将绝对时间归一化到 [0, 1]。

    Args:
        times: (N,) 绝对时间

    Returns:
        tau: (N,) 归一化时间
        t0: 最小时间
        t1: 最大时间
    """
    times = np.asarray(times, dtype=float)
    if times.size == 0:
        raise InvalidInputError("no time stamps given")
    t0 = float(np.min(times))
    t1 = float(np.max(times))
    if t1 - t0 <= 0.0:
        raise InvalidInputError(f"time span is empty (T0 = T1 = {t0})")
    return (times - t0) / (t1 - t0), t0, t1


def time_to_parameter(T: float | np.ndarray, T0: float, T1: float) -> float | np.ndarray:
    """绝对时间 T 对应的曲线参数 τ（不截断，允许外推）。"""
    duration = T1 - T0
    if duration == 0.0:
        raise InvalidInputError("time span is empty (T0 == T1)")
    return (np.asarray(T, dtype=float) - T0) / duration


def velocity_at_time(curve, T: float | np.ndarray, T0: float, T1: float) -> np.ndarray:
    """
    计算绝对时间 T 处的速度向量。

    Args:
        curve: PHCurve
        T: 绝对时间
        T0: 时间段起点
        T1: 时间段终点

    Returns:
        (3,) 或 (M, 3) 速度向量 dr/dT
    """
    tau = time_to_parameter(T, T0, T1)
    return curve.derivative(tau) / (T1 - T0)


def speed_at_time(curve, T: float | np.ndarray, T0: float, T1: float) -> float | np.ndarray:
    """绝对时间 T 处的速率 |dr/dT|。"""
    return np.linalg.norm(velocity_at_time(curve, T, T0, T1), axis=-1)
