"""
quaternion - 四元数代数工具

四元数以 numpy 数组 [w, x, y, z] 表示（标量在前）。

空间 PH 曲线的四元数表示: 速度端图 r'(t) = A(t) i A*(t)，其中 A(t) 是
四元数多项式，i 为纯虚单位四元数。本模块提供构造与展开这种乘积所需的运算。
"""

import numpy as np
from scipy.spatial.transform import Rotation

from .geometry import normalize, perpendicular

QUAT_I = np.array([0.0, 1.0, 0.0, 0.0])


def quat_mul(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton 乘积 q1 * q2。"""
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2
    w = w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2
    x = w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2
    y = w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2
    z = w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2
    return np.array([w, x, y, z])


def quat_conj(q: np.ndarray) -> np.ndarray:
    """共轭四元数。"""
    return np.array([q[0], -q[1], -q[2], -q[3]])


def i_product(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    计算 a i b* 的向量部分。

    当 a = b 时结果为纯向量 |a|² R(a) e_x，标量部分恒为零。
    """
    return quat_mul(quat_mul(a, QUAT_I), quat_conj(b))[1:]


def symmetric_product(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    计算 a i b* + b i a* 的向量部分。

    该组合对 a、b 均为线性，是 PH 速度端图系数展开的基本单元。
    """
    return i_product(a, b) + i_product(b, a)


def rotation_from_x(direction: np.ndarray) -> np.ndarray:
    """
    构造把 x 轴旋转到 direction 方向的单位四元数（最短弧）。

    Args:
        direction: (3,) 非零向量

    Returns:
        (4,) 单位四元数
    """
    u = normalize(direction)
    if u[0] < -1.0 + 1e-12:
        # 反向时绕 z 轴转 π
        return np.array([0.0, 0.0, 0.0, 1.0])
    q = np.array([1.0 + u[0], 0.0, -u[2], u[1]])
    return q / np.linalg.norm(q)


def frame_quaternion(tangent: np.ndarray, normal: np.ndarray | None = None) -> np.ndarray:
    """
    由切向量和法向量构造标架四元数。

    标架 (T, N, B) 中 T 为单位切向，N 为法向量在 T 法平面上的正交化结果，
    B = T × N。返回的单位四元数 q 满足 R(q) e_x = T, R(q) e_y = N。

    Args:
        tangent: (3,) 非零切向量
        normal: (3,) 法向量；为空或与切向平行时自动选取垂直方向

    Returns:
        (4,) 单位四元数 [w, x, y, z]
    """
    T = normalize(tangent)
    if normal is None or np.linalg.norm(np.cross(T, normal)) < 1e-9:
        N = perpendicular(T)
    else:
        N = normalize(np.asarray(normal, dtype=float) - np.dot(normal, T) * T)
    B = np.cross(T, N)

    x, y, z, w = Rotation.from_matrix(np.column_stack([T, N, B])).as_quat()
    return np.array([w, x, y, z])


def quaternion_from_tangent(tangent: np.ndarray, normal: np.ndarray | None = None) -> np.ndarray:
    """
    PH 四元数参数化: 返回 q 使得 q i q* = tangent。

    标架四元数乘以 sqrt(|tangent|)，法向量只决定绕切向的自由相位。

    Args:
        tangent: (3,) 切向量（端点导数）
        normal: (3,) 可选法向量

    Returns:
        (4,) 四元数；切向量为零时返回零四元数
    """
    length = np.linalg.norm(tangent)
    if length < 1e-12:
        return np.zeros(4)
    return frame_quaternion(tangent, normal) * np.sqrt(length)


def hodograph_from_quaternions(q0: np.ndarray, q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """
    将四元数多项式 A(t) = q0 + q1 t + q2 t² 展开为速度端图系数。

    r'(t) = A(t) i A*(t) = A + Bt + Ct² + Dt³ + Et⁴，其中
        A = q0 i q0*
        B = q0 i q1* + q1 i q0*
        C = q0 i q2* + q1 i q1* + q2 i q0*
        D = q1 i q2* + q2 i q1*
        E = q2 i q2*

    Returns:
        (5, 3) 系数数组 [A, B, C, D, E]
    """
    return np.array(
        [
            i_product(q0, q0),
            symmetric_product(q0, q1),
            symmetric_product(q0, q2) + i_product(q1, q1),
            symmetric_product(q1, q2),
            i_product(q2, q2),
        ]
    )
