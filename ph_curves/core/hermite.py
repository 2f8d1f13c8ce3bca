"""
hermite - Hermite 边界数据

BoundaryPoint 描述曲线段端点的几何约束: 位置、切向量（导数）、带符号曲率、
主法向量。拟合器的时间戳样本复用同一类型（time 字段只在拟合时有意义）。
"""

from dataclasses import dataclass, replace

import numpy as np

from ..errors import DegenerateInputError
from ..utils.geometry import as_vector3, is_parallel, normalize


@dataclass(frozen=True, eq=False)
class BoundaryPoint:
    """
    Hermite 边界点（不可变）。

    Attributes:
        position: (3,) 位置
        tangent: (3,) 切向量，方向与模长均有意义；零向量表示未知
        curvature: 带符号曲率 κ
        normal: (3,) 主法向量方向，仅在 κ ≠ 0 时参与曲率约束；None 存为零向量
        time: 绝对时间，仅用于样本拟合
    """

    position: np.ndarray
    tangent: np.ndarray | None = None
    curvature: float = 0.0
    normal: np.ndarray | None = None
    time: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "position", as_vector3(self.position, "position"))
        object.__setattr__(self, "tangent", as_vector3(self.tangent, "tangent"))
        object.__setattr__(self, "normal", as_vector3(self.normal, "normal"))
        object.__setattr__(self, "curvature", float(self.curvature))
        object.__setattr__(self, "time", float(self.time))

    @property
    def has_tangent(self) -> bool:
        return bool(np.linalg.norm(self.tangent) > 0.0)

    @property
    def has_normal(self) -> bool:
        return bool(np.linalg.norm(self.normal) > 0.0)

    @property
    def tangent_magnitude(self) -> float:
        return float(np.linalg.norm(self.tangent))

    def curvature_vector(self) -> np.ndarray:
        """
        端点二阶导数的法向部分 κ |r'|² N。

        曲率为零或未给出法向量时返回零向量。
        """
        if self.curvature == 0.0 or not self.has_normal:
            return np.zeros(3)
        return normalize(self.normal) * (self.curvature * float(np.dot(self.tangent, self.tangent)))

    def with_tangent(self, tangent: np.ndarray) -> "BoundaryPoint":
        """返回替换切向量后的副本。"""
        return replace(self, tangent=tangent)

    def check_tangent(self, label: str = "boundary point"):
        """切向量为零时抛出 DegenerateInputError。"""
        if not self.has_tangent:
            raise DegenerateInputError(f"{label} has a zero tangent")

    def check_frame(self, label: str = "boundary point"):
        """
        校验切向量非零；曲率非零时法向量必须给出且不与切向量平行。

        Raises:
            DegenerateInputError: 几何退化
        """
        self.check_tangent(label)
        if self.curvature != 0.0 and not self.has_normal:
            raise DegenerateInputError(f"{label} has nonzero curvature but no normal")
        if self.curvature != 0.0 and is_parallel(self.tangent, self.normal):
            raise DegenerateInputError(f"{label} has a normal parallel to its tangent")
