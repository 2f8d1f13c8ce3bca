"""
utils - 工具函数模块

包含:
- geometry: 几何计算工具
- integrals: 数值积分工具
- quaternion: 四元数代数
- timing: 时间归一化
"""

from .geometry import normalize, cross_norm, perpendicular
from .integrals import composite_simpson, arc_length_integral
from .timing import normalize_times, time_to_parameter, velocity_at_time, speed_at_time

__all__ = [
    "normalize",
    "cross_norm",
    "perpendicular",
    "composite_simpson",
    "arc_length_integral",
    "normalize_times",
    "time_to_parameter",
    "velocity_at_time",
    "speed_at_time",
]
