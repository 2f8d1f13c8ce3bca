"""
geometry - 几何计算工具函数

提供向量归一化、叉积模长、垂直向量构造等基础几何操作。
"""

import numpy as np

EPSILON = 1e-16


def normalize(vectors: np.ndarray) -> np.ndarray:
    """
    将向量归一化为单位向量。

    零向量归一化后仍为零向量（分母加 EPSILON，不会产生 NaN）。

    Args:
        vectors: 单个向量 (n,) 或向量数组 (m, n)

    Returns:
        归一化后的单位向量，与输入形状相同
    """
    vectors = np.asarray(vectors, dtype=float)
    if vectors.ndim == 1:
        norm = np.linalg.norm(vectors)
        return vectors / (norm + EPSILON)
    norm = np.linalg.norm(vectors, axis=-1, keepdims=True)
    return vectors / (norm + EPSILON)


def as_vector3(value, name: str = "vector") -> np.ndarray:
    """
    转换为只读的 (3,) float 数组。

    Args:
        value: 任意长度为 3 的序列，None 视为零向量
        name: 出错时报告的参数名

    Returns:
        (3,) 只读数组
    """
    if value is None:
        vec = np.zeros(3)
    else:
        vec = np.array(value, dtype=float).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"{name} must have exactly 3 components, got shape {vec.shape}")
    vec.setflags(write=False)
    return vec


def cross_norm(a: np.ndarray, b: np.ndarray) -> float | np.ndarray:
    """计算 ||a × b||，支持 (3,) 与 (M, 3) 输入。"""
    return np.linalg.norm(np.cross(a, b), axis=-1)


def is_parallel(a: np.ndarray, b: np.ndarray, tol: float = 1e-9) -> bool:
    """
    判断两个非零向量是否平行（同向或反向）。

    任一向量为零时返回 True，因为此时无法确定方向。
    """
    na = np.linalg.norm(a)
    nb = np.linalg.norm(b)
    if na < tol or nb < tol:
        return True
    return bool(cross_norm(a, b) / (na * nb) < tol)


def perpendicular(v: np.ndarray) -> np.ndarray:
    """
    返回与 v 垂直的单位向量。

    优先使用 y 轴在 v 法平面上的投影，v 与 y 轴近似平行时改用 z 轴。

    Args:
        v: (3,) 非零向量

    Returns:
        (3,) 单位向量
    """
    u = normalize(v)
    for axis in (np.array([0.0, 1.0, 0.0]), np.array([0.0, 0.0, 1.0])):
        w = axis - np.dot(axis, u) * u
        if np.linalg.norm(w) > 1e-6:
            return normalize(w)
    return np.array([1.0, 0.0, 0.0])


def orthogonal_component(v: np.ndarray, direction: np.ndarray) -> np.ndarray:
    """v 去掉沿 direction 方向的分量。"""
    u = normalize(direction)
    return v - np.dot(v, u) * u
