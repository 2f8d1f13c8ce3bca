"""
integrals - 数值积分工具函数

提供 Simpson 积分，用于在速度多项式不可恢复时数值计算 PH 曲线弧长：
    s(t) = ∫_0^t ||r'(u)|| du
"""

from typing import Callable

import numpy as np


def composite_simpson(
    f: Callable[[np.ndarray], np.ndarray],
    a: float,
    b: float,
    steps: int = 100,
) -> float:
    """
    定步长复合 Simpson 积分。

    被积函数以向量化方式一次性求值所有节点。

    Args:
        f: 被积函数，接受 (steps+1,) 数组，返回同形状数组
        a: 积分下限
        b: 积分上限
        steps: 子区间数，奇数时自动加一

    Returns:
        积分值
    """
    if steps < 2:
        steps = 2
    if steps % 2:
        steps += 1

    nodes = np.linspace(a, b, steps + 1)
    values = np.asarray(f(nodes), dtype=float)
    h = (b - a) / steps

    weights = np.ones(steps + 1)
    weights[1:-1:2] = 4.0
    weights[2:-1:2] = 2.0

    return float(h / 3 * np.dot(weights, values))


def arc_length_integral(
    derivative_func: Callable[[np.ndarray], np.ndarray],
    a: float,
    b: float,
    steps: int = 100,
) -> float:
    """
    计算参数曲线的弧长积分。

        l(b) - l(a) = ∫_a^b ||P'(u)|| du

    Args:
        derivative_func: 曲线的导数函数，接受 (M,) 参数返回 (M, n) 向量
        a: 参数下限
        b: 参数上限
        steps: Simpson 子区间数

    Returns:
        弧长值
    """

    def integrand(u: np.ndarray) -> np.ndarray:
        return np.linalg.norm(derivative_func(u), axis=-1)

    return composite_simpson(integrand, a, b, steps)
