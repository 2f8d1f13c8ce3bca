"""
planner - 多段曲线路径规划

PathPlanner 维护一个只追加的曲线段列表:
    - add_segment 用五次闭式构造由两个 Hermite 端点生成曲线段
    - append 追加预先构造的曲线段（例如四元数求解结果）
    - validate_path_g2 / join_report 检查所有相邻拼接点的 G² 连续性
"""

import logging

import numpy as np

from .config import G2_TOLERANCE, CurveSettings
from .core.continuity import JoinDiagnostics, join_diagnostics
from .core.curve import PHCurve
from .core.hermite import BoundaryPoint
from .core.quintic import quintic_from_hermite

logger = logging.getLogger(__name__)


class PathPlanner:
    """
    G² 路径规划器。

    Attributes:
        settings: 新建曲线段使用的求值参数

    Example:
        >>> planner = PathPlanner()
        >>> planner.add_segment(p0, p1)
        >>> planner.add_segment(p1, p2)
        >>> planner.validate_path_g2()
        True
    """

    def __init__(self, settings: CurveSettings | None = None):
        self.settings = settings
        self._segments: list[PHCurve] = []

    def add_segment(self, start: BoundaryPoint, end: BoundaryPoint) -> PHCurve:
        """由两个端点构造五次曲线段并追加到路径末尾。"""
        curve = quintic_from_hermite(start, end, self.settings)
        self._segments.append(curve)
        logger.debug("segment %d added: %s", len(self._segments) - 1, curve)
        return curve

    def append(self, curve: PHCurve) -> PHCurve:
        """追加已有曲线段。"""
        if not isinstance(curve, PHCurve):
            raise TypeError(f"expected PHCurve, got {type(curve).__name__}")
        self._segments.append(curve)
        return curve

    def build_path(self) -> tuple[PHCurve, ...]:
        """当前曲线段的快照。"""
        return tuple(self._segments)

    def join_report(self, tol: float = G2_TOLERANCE) -> list[JoinDiagnostics]:
        """
        每个拼接点的连续性测量值。

        第 i 项对应第 i 段终点与第 i+1 段起点。
        """
        report = [join_diagnostics(a, b) for a, b in zip(self._segments, self._segments[1:])]
        for index, diag in enumerate(report):
            if not diag.is_g2(tol):
                logger.debug("join %d is not G2: %s", index, diag)
        return report

    def validate_path_g2(self, tol: float = G2_TOLERANCE) -> bool:
        """所有相邻拼接点是否都 G² 连续（少于两段时恒为真）。"""
        return all(diag.is_g2(tol) for diag in self.join_report(tol))

    def total_length(self) -> float:
        """路径总弧长。"""
        return float(sum(seg.arc_length() for seg in self._segments))

    def sample_uniform(self, points_per_segment: int = 50) -> np.ndarray:
        """
        按参数均匀采样整条路径。

        相邻段共享的拼接点只保留一次。

        Returns:
            (M, 3) 路径点
        """
        if not self._segments:
            return np.zeros((0, 3))

        chunks = []
        for index, seg in enumerate(self._segments):
            _, points = seg.sample_uniform(points_per_segment)
            chunks.append(points if index == 0 else points[1:])
        return np.vstack(chunks)

    def to_dict(self) -> dict:
        """序列化为 {"segments": [...]}，每段为 PHCurve.to_dict()。"""
        return {"segments": [seg.to_dict() for seg in self._segments]}

    @classmethod
    def from_dict(cls, data: dict, settings: CurveSettings | None = None) -> "PathPlanner":
        planner = cls(settings)
        for item in data.get("segments", []):
            planner.append(PHCurve.from_dict(item, settings))
        return planner

    def __len__(self) -> int:
        return len(self._segments)

    def __repr__(self) -> str:
        return f"PathPlanner(segments={len(self._segments)})"
