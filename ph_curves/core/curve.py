"""
curve - PH 曲线表示

曲线由速度端图（hodograph）的五个系数定义:
    r'(t) = A + Bt + Ct² + Dt³ + Et⁴,  t ∈ [0, 1]
位置为起点偏移加上速度端图的解析积分:
    r(t) = start + At + Bt²/2 + Ct³/3 + Dt⁴/4 + Et⁵/5

对真正的 Pythagorean Hodograph，|r'(t)|² 是某个多项式 σ(t) 的平方，
弧长可解析积分；否则回退到 Simpson 数值积分。
"""

import logging

import numpy as np

from ..config import DEFAULT_CURVE_SETTINGS, CurveSettings
from ..utils.geometry import as_vector3, normalize, orthogonal_component, perpendicular
from ..utils.integrals import arc_length_integral

logger = logging.getLogger(__name__)

# 位置积分的幂次分母 1..5
_INTEGRAL_DIVISORS = np.arange(1, 6, dtype=float)


class PHCurve:
    """
    不可变的 PH 曲线段。

    所有求值方法接受标量或数组参数 t（不截断到 [0, 1]，区间外为多项式外推），
    标量输入返回 (3,) 向量或标量，数组输入返回 (M, 3) 或 (M,)。

    Attributes:
        coefficients: (5, 3) 只读系数 [A, B, C, D, E]
        start: (3,) 起点偏移，r(0) = start
        settings: 求值容差
    """

    def __init__(
        self,
        coefficients: np.ndarray,
        start: np.ndarray | None = None,
        settings: CurveSettings | None = None,
    ):
        """
        Args:
            coefficients: (k, 3) 速度端图系数，k ≤ 5，不足部分补零
            start: (3,) 起点偏移，默认原点
            settings: 求值参数，默认 DEFAULT_CURVE_SETTINGS
        """
        coeffs = np.array(coefficients, dtype=float)
        if coeffs.ndim != 2 or coeffs.shape[1] != 3 or not 1 <= coeffs.shape[0] <= 5:
            raise ValueError(f"coefficients must have shape (k, 3) with k <= 5, got {coeffs.shape}")
        if coeffs.shape[0] < 5:
            coeffs = np.vstack([coeffs, np.zeros((5 - coeffs.shape[0], 3))])
        coeffs.setflags(write=False)

        self._coeffs = coeffs
        self._start = as_vector3(start, "start")
        self.settings = settings or DEFAULT_CURVE_SETTINGS

    @classmethod
    def from_coefficients(cls, A, B, C=None, D=None, E=None, start=None, settings=None) -> "PHCurve":
        """由单独给出的系数向量构造，缺省系数为零。"""
        coeffs = [as_vector3(v) for v in (A, B, C, D, E)]
        return cls(np.array(coeffs), start=start, settings=settings)

    @property
    def coefficients(self) -> np.ndarray:
        return self._coeffs

    @property
    def start(self) -> np.ndarray:
        return self._start

    A = property(lambda self: self._coeffs[0])
    B = property(lambda self: self._coeffs[1])
    C = property(lambda self: self._coeffs[2])
    D = property(lambda self: self._coeffs[3])
    E = property(lambda self: self._coeffs[4])

    @property
    def degree(self) -> int:
        """曲线次数（速度端图最高非零次幂 + 1）。"""
        nonzero = np.flatnonzero(np.any(self._coeffs != 0.0, axis=1))
        return int(nonzero[-1]) + 1 if nonzero.size else 0

    # ------------------------------------------------------------------
    # 多项式求值
    # ------------------------------------------------------------------

    def position(self, t: float | np.ndarray) -> np.ndarray:
        """位置 r(t) = start + ∫_0^t r'(u) du。"""
        t = np.asarray(t, dtype=float)
        powers = t[..., np.newaxis] ** _INTEGRAL_DIVISORS
        return self._start + (powers / _INTEGRAL_DIVISORS) @ self._coeffs

    def derivative(self, t: float | np.ndarray) -> np.ndarray:
        """一阶导数 r'(t)。"""
        t = np.asarray(t, dtype=float)
        powers = t[..., np.newaxis] ** np.arange(5)
        return powers @ self._coeffs

    def second_derivative(self, t: float | np.ndarray) -> np.ndarray:
        """二阶导数 r''(t) = B + 2Ct + 3Dt² + 4Et³。"""
        t = np.asarray(t, dtype=float)
        powers = t[..., np.newaxis] ** np.arange(4)
        return (powers * np.arange(1, 5)) @ self._coeffs[1:]

    def speed(self, t: float | np.ndarray) -> float | np.ndarray:
        """速率 |r'(t)|。"""
        return np.linalg.norm(self.derivative(t), axis=-1)

    # ------------------------------------------------------------------
    # Frenet 标架
    # ------------------------------------------------------------------

    def tangent_unit(self, t: float | np.ndarray) -> np.ndarray:
        """单位切向量 T = r'/|r'|；速率低于 speed_epsilon 时返回零向量。"""
        eps = self.settings.speed_epsilon
        d1 = self.derivative(t)
        s = np.linalg.norm(d1, axis=-1, keepdims=True)
        degenerate = s < eps
        return np.where(degenerate, 0.0, d1 / np.where(degenerate, 1.0, s))

    def principal_normal(self, t: float | np.ndarray) -> np.ndarray:
        """
        主法向量。

        N ∝ (r'' s - r' (r'·r'')/s) / s²，即 r'' 垂直于 r' 的分量除以 s。
        速率过小或曲线在该处为直线运动时返回零向量。
        """
        eps = self.settings.speed_epsilon
        d1 = self.derivative(t)
        d2 = self.second_derivative(t)
        s = np.linalg.norm(d1, axis=-1, keepdims=True)
        safe_s = np.where(s < eps, 1.0, s)

        numer = d2 * safe_s - d1 * np.sum(d1 * d2, axis=-1, keepdims=True) / safe_s
        n = numer / safe_s**2
        n_len = np.linalg.norm(n, axis=-1, keepdims=True)

        degenerate = (s < eps) | (n_len < eps)
        return np.where(degenerate, 0.0, n / np.where(degenerate, 1.0, n_len))

    def curvature(self, t: float | np.ndarray) -> float | np.ndarray:
        """曲率 κ = |r' × r''| / |r'|³；速率过小时为 0。"""
        d1 = self.derivative(t)
        d2 = self.second_derivative(t)
        s = np.linalg.norm(d1, axis=-1)
        cross = np.linalg.norm(np.cross(d1, d2), axis=-1)
        degenerate = s < self.settings.speed_epsilon
        return np.where(degenerate, 0.0, cross / np.where(degenerate, 1.0, s) ** 3)[()]

    def bitangent(self, t: float | np.ndarray) -> np.ndarray:
        """副切向量 B = T × N。"""
        return np.cross(self.tangent_unit(t), self.principal_normal(t))

    def offset_point(self, t: float | np.ndarray, distance: float) -> np.ndarray:
        """沿主法向量偏移 distance 的点 r(t) + d N(t)。"""
        return self.position(t) + distance * self.principal_normal(t)

    def frenet_frames(self, t_values: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        批量计算 Frenet 标架，退化样本沿用前一个样本的标架。

        开头的退化样本使用第一个有效标架；沿用的法向量会重新正交化到当前切向。

        Args:
            t_values: (M,) 参数值，按顺序排列

        Returns:
            tangents: (M, 3)
            normals: (M, 3)
            binormals: (M, 3)
        """
        t_values = np.atleast_1d(np.asarray(t_values, dtype=float))
        tangents = np.array(self.tangent_unit(t_values))
        normals = np.array(self.principal_normal(t_values))

        valid_t = np.linalg.norm(tangents, axis=1) > 0.0
        if not np.any(valid_t):
            logger.debug("all %d samples have a degenerate tangent", len(t_values))
            return tangents, normals, np.zeros_like(tangents)
        _hold(tangents, valid_t)

        valid_n = np.linalg.norm(normals, axis=1) > 0.0
        if np.any(valid_n):
            _hold(normals, valid_n)
        for k in range(len(t_values)):
            if valid_n[k]:
                continue
            n = orthogonal_component(normals[k], tangents[k])
            normals[k] = normalize(n) if np.linalg.norm(n) > 1e-12 else perpendicular(tangents[k])

        return tangents, normals, np.cross(tangents, normals)

    # ------------------------------------------------------------------
    # 弧长
    # ------------------------------------------------------------------

    def speed_polynomial(self) -> np.ndarray | None:
        """
        恢复速度多项式 σ(t)，使 σ(t)² = |r'(t)|²。

        |r'(t)|² 的系数为 m_k = Σ_{i+j=k} c_i · c_j，按卷积平方根递推:
            σ_0 = sqrt(m_0)
            σ_k = (m_k - Σ_{i=1}^{k-1} σ_i σ_{k-i}) / (2 σ_0)
        再用 σ * σ 回代校验全部 9 个系数。

        Returns:
            (5,) σ 的系数（升幂），校验失败（非 PH 曲线）或 r'(0) 为零时返回 None
        """
        gram = self._coeffs @ self._coeffs.T
        m = np.zeros(9)
        for i in range(5):
            for j in range(5):
                m[i + j] += gram[i, j]

        s0 = np.sqrt(m[0])
        if s0 < self.settings.speed_epsilon:
            return None

        sigma = np.zeros(5)
        sigma[0] = s0
        for k in range(1, 5):
            cross_terms = sum(sigma[i] * sigma[k - i] for i in range(1, k))
            sigma[k] = (m[k] - cross_terms) / (2.0 * s0)

        scale = max(1.0, float(np.max(np.abs(m))))
        if np.max(np.abs(np.convolve(sigma, sigma) - m)) > self.settings.ph_tolerance * scale:
            return None
        return sigma

    @property
    def is_pythagorean(self) -> bool:
        """速度端图的模是否为多项式。"""
        return self.speed_polynomial() is not None

    def arc_length(self, t: float | np.ndarray = 1.0) -> float | np.ndarray:
        """
        弧长 s(t) = ∫_0^t |r'(u)| du。

        PH 曲线使用速度多项式解析积分，否则回退到复合 Simpson 积分。
        """
        t = np.asarray(t, dtype=float)
        sigma = self.speed_polynomial()
        if sigma is not None:
            powers = t[..., np.newaxis] ** _INTEGRAL_DIVISORS
            return powers @ (sigma / _INTEGRAL_DIVISORS)

        logger.debug("hodograph is not Pythagorean, integrating speed numerically")
        if t.ndim == 0:
            return self.arc_length_numeric(float(t))
        return np.array([self.arc_length_numeric(float(u)) for u in t.reshape(-1)]).reshape(t.shape)

    def arc_length_numeric(self, t: float = 1.0, steps: int | None = None) -> float:
        """定步长 Simpson 积分的弧长。"""
        steps = steps or self.settings.simpson_steps
        return arc_length_integral(self.derivative, 0.0, t, steps)

    # ------------------------------------------------------------------
    # 采样与序列化
    # ------------------------------------------------------------------

    def sample_uniform(self, num_points: int) -> tuple[np.ndarray, np.ndarray]:
        """
        沿参数均匀采样。

        Returns:
            t_values: (M,) 参数值
            positions: (M, 3) 位置
        """
        t_values = np.linspace(0.0, 1.0, num_points)
        return t_values, self.position(t_values)

    def to_dict(self) -> dict:
        """序列化为五个速度端图系数加起点偏移。"""
        return {"coefficients": self._coeffs.tolist(), "start": self._start.tolist()}

    @classmethod
    def from_dict(cls, data: dict, settings: CurveSettings | None = None) -> "PHCurve":
        return cls(data["coefficients"], start=data.get("start"), settings=settings)

    def __repr__(self) -> str:
        start = np.array2string(self._start, precision=3)
        return f"PHCurve(degree={self.degree}, start={start}, length={float(self.arc_length(1.0)):.4f})"


def _hold(vectors: np.ndarray, valid: np.ndarray):
    """原地用前一个有效向量填充无效行，开头的无效行用第一个有效向量。"""
    first = int(np.argmax(valid))
    vectors[:first] = vectors[first]
    for k in range(first + 1, len(vectors)):
        if not valid[k]:
            vectors[k] = vectors[k - 1]


if __name__ == "__main__":
    # r'(t) = (1 - t², 2t, 0) 是平面 PH 速度端图，|r'| = 1 + t²
    curve = PHCurve.from_coefficients([1.0, 0.0, 0.0], [0.0, 2.0, 0.0], [-1.0, 0.0, 0.0])

    print("=== PH 曲线测试 ===")
    print(curve)
    print(f"PH 曲线: {curve.is_pythagorean}")
    print(f"解析弧长: {curve.arc_length(1.0):.10f}")
    print(f"数值弧长: {curve.arc_length_numeric(1.0):.10f}")
    print(f"精确值:   {4.0 / 3.0:.10f}")
