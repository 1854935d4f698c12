import math
import re
from typing import Any, Optional

_DIGITS_RE = re.compile(r"[0-9]+")


def parse_non_negative_int(value: Any) -> Optional[int]:
    """0以上の整数として解釈する

    Args:
        value: 文字列または数値

    Returns:
        int: 解釈できた値
        None: 解釈できない場合（負数・小数・空文字列など）
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and _DIGITS_RE.fullmatch(value):
        return int(value)
    return None


def parse_positive_int(value: Any) -> Optional[int]:
    """1以上の整数として解釈する"""
    parsed = parse_non_negative_int(value)
    if parsed is None or parsed == 0:
        return None
    return parsed


def parse_float(value: Any) -> Optional[float]:
    """浮動小数点数として解釈する（解釈できない場合はNone）"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None
