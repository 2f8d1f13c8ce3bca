"""
datasets - 参考数据

包含:
- reference: 四分之一圆弧拼接、直线段、螺旋线采样
"""

from .reference import HelixParameters, helix_samples, quarter_circle_join, straight_line_pair

__all__ = [
    "quarter_circle_join",
    "straight_line_pair",
    "helix_samples",
    "HelixParameters",
]
