"""
fitter - 带时间戳样本的单段曲线拟合

给定按时间排列的样本（位置、主法向量，可选切向量与曲率），拟合一段
G² Hermite 曲线:
    1. 以最小/最大时间为锚点将时间归一化到 [0, 1]
    2. 两端切向方向取自样本切向量，缺省时由相邻样本差分推断
    3. 自由变量为两端切向量模长 (m0, m1)，初值取弦长
    4. 残差为每个样本的位置差（3 分量）与主法向量差（3 分量）
    5. scipy.optimize.least_squares (trf) 求解，模长有正下界

不收敛时返回 success=False 的 FitResult，不抛出异常。
"""

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np
from scipy.optimize import least_squares

from ..config import DEFAULT_FIT_SETTINGS, FitSettings
from ..errors import InvalidInputError
from ..utils.geometry import is_parallel, normalize
from ..utils.timing import normalize_times
from .curve import PHCurve
from .hermite import BoundaryPoint
from .quaternion_solver import solve_cubic
from .quintic import quintic_from_hermite

logger = logging.getLogger(__name__)

SegmentBuilder = Callable[[BoundaryPoint, BoundaryPoint], PHCurve]


def _cubic_builder(p0: BoundaryPoint, p1: BoundaryPoint) -> PHCurve:
    curve, _ = solve_cubic(p0, p1, warn=False)
    return curve


BUILDERS: dict[str, SegmentBuilder] = {
    "cubic": _cubic_builder,
    "quintic": quintic_from_hermite,
}


@dataclass(frozen=True)
class FitResult:
    """
    拟合结果。

    Attributes:
        curve: 最优模长下重建的曲线
        rms_position_error: 样本位置误差的均方根
        rms_orientation_error: 样本主法向量误差的均方根（只统计给出法向量的样本）
        t0: 映射到参数 0 的绝对时间
        t1: 映射到参数 1 的绝对时间
        success: 优化器是否正常收敛
        message: 优化器终止信息
        tangent_magnitudes: 最优 (m0, m1)
        iterations: 残差函数求值次数
    """

    curve: PHCurve
    rms_position_error: float
    rms_orientation_error: float
    t0: float
    t1: float
    success: bool
    message: str
    tangent_magnitudes: tuple[float, float]
    iterations: int


def _resolve_builder(builder: str | SegmentBuilder) -> SegmentBuilder:
    if callable(builder):
        return builder
    try:
        return BUILDERS[builder]
    except KeyError:
        raise InvalidInputError(
            f"unknown segment builder {builder!r}, expected one of {sorted(BUILDERS)} or a callable"
        ) from None


class SegmentFitter:
    """
    单段曲线拟合器。

    Example:
        >>> fitter = SegmentFitter(samples, builder="quintic")
        >>> result = fitter.fit()
        >>> result.curve.position(0.5)
    """

    def __init__(
        self,
        samples: Sequence[BoundaryPoint],
        builder: str | SegmentBuilder = "cubic",
        settings: FitSettings | None = None,
    ):
        if samples is None or len(samples) < 2:
            raise InvalidInputError("at least two samples are required")

        self.settings = settings or DEFAULT_FIT_SETTINGS
        self.builder = _resolve_builder(builder)
        self.samples = sorted(samples, key=lambda s: s.time)

        self.tau, self.t0, self.t1 = normalize_times([s.time for s in self.samples])
        self.positions = np.array([s.position for s in self.samples])
        self.normals = normalize(np.array([s.normal for s in self.samples]))
        self.normal_mask = np.array([s.has_normal for s in self.samples])

        self.start_direction = self._end_direction(0, 1)
        self.end_direction = self._end_direction(-1, -2)
        self.chord = float(np.linalg.norm(self.positions[-1] - self.positions[0]))

    def _end_direction(self, index: int, neighbour: int) -> np.ndarray:
        sample = self.samples[index]
        if sample.has_tangent:
            return normalize(sample.tangent)

        diff = self.positions[neighbour] - self.positions[index]
        if index < 0:
            diff = -diff
        if np.linalg.norm(diff) == 0.0:
            raise InvalidInputError(
                "cannot infer an end tangent: sample has no tangent and coincides with its neighbour"
            )
        return normalize(diff)

    def _boundary(self, index: int, direction: np.ndarray, magnitude: float) -> BoundaryPoint:
        sample = self.samples[index]
        curvature, normal = sample.curvature, sample.normal
        # 缺少法向量或法向量与切向平行时无法定义曲率方向，按直线处理
        if curvature != 0.0 and (not sample.has_normal or is_parallel(direction, normal)):
            curvature = 0.0
        return BoundaryPoint(
            position=sample.position,
            tangent=direction * magnitude,
            curvature=curvature,
            normal=normal if sample.has_normal else None,
        )

    def build(self, magnitudes: np.ndarray) -> PHCurve:
        """按给定两端切向模长构造曲线。"""
        m0, m1 = magnitudes
        p0 = self._boundary(0, self.start_direction, m0)
        p1 = self._boundary(-1, self.end_direction, m1)
        return self.builder(p0, p1)

    def _errors(self, curve: PHCurve) -> tuple[np.ndarray, np.ndarray]:
        pos_err = curve.position(self.tau) - self.positions
        nrm_err = curve.principal_normal(self.tau) - self.normals
        nrm_err[~self.normal_mask] = 0.0
        return pos_err, nrm_err

    def residuals(self, magnitudes: np.ndarray) -> np.ndarray:
        """(6N,) 残差向量: 每个样本 3 个位置分量 + 3 个法向量分量。"""
        pos_err, nrm_err = self._errors(self.build(magnitudes))
        return np.hstack([pos_err, self.settings.orientation_weight * nrm_err]).ravel()

    def initial_guess(self) -> np.ndarray:
        lower = self.settings.min_tangent_magnitude
        guess = self.chord if self.chord > lower else 1.0
        return np.array([guess, guess])

    def fit(self) -> FitResult:
        """执行非线性最小二乘拟合。"""
        cfg = self.settings
        x0 = self.initial_guess()
        logger.debug("fitting %d samples, initial magnitudes %s", len(self.samples), x0)

        result = least_squares(
            self.residuals,
            x0,
            bounds=([cfg.min_tangent_magnitude] * 2, [np.inf] * 2),
            method="trf",
            ftol=cfg.ftol,
            xtol=cfg.xtol,
            gtol=cfg.gtol,
            max_nfev=cfg.max_nfev,
        )

        curve = self.build(result.x)
        pos_err, nrm_err = self._errors(curve)
        rms_pos = float(np.sqrt(np.mean(np.sum(pos_err**2, axis=1))))
        if self.normal_mask.any():
            rms_nrm = float(np.sqrt(np.mean(np.sum(nrm_err[self.normal_mask] ** 2, axis=1))))
        else:
            rms_nrm = 0.0

        success = bool(result.success)
        if not success:
            logger.warning("segment fit did not converge: %s", result.message)
        else:
            logger.debug("segment fit: rms position %.3e, rms normal %.3e", rms_pos, rms_nrm)

        return FitResult(
            curve=curve,
            rms_position_error=rms_pos,
            rms_orientation_error=rms_nrm,
            t0=self.t0,
            t1=self.t1,
            success=success,
            message=str(result.message),
            tangent_magnitudes=(float(result.x[0]), float(result.x[1])),
            iterations=int(result.nfev),
        )


def fit_segment(
    samples: Sequence[BoundaryPoint],
    builder: str | SegmentBuilder = "cubic",
    settings: FitSettings | None = None,
) -> FitResult:
    """SegmentFitter(samples, builder, settings).fit() 的函数形式。"""
    return SegmentFitter(samples, builder, settings).fit()
