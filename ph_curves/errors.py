"""
errors - 异常类型

只覆盖前置条件失败（输入非法、几何退化）。连续性校验和迭代不收敛
通过返回值报告，不抛出异常。
"""


class PHCurveError(Exception):
    """ph_curves 所有异常的基类。"""


class InvalidInputError(PHCurveError, ValueError):
    """输入数据不满足前置条件（样本过少、时间跨度为零等）。"""

    def __init__(self, message: str):
        self.original_message = message
        super().__init__(f"Invalid input: {message}")

    def __str__(self):
        return f"Invalid input: {self.original_message}"


class DegenerateInputError(InvalidInputError):
    """几何退化输入：切向量为零，或切向量与法向量平行。"""
