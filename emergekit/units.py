"""Conversion of decimal amounts between Ether denominations.

Amounts are handled as decimal strings so that no precision is lost. The
decimal separator is supplied by the caller.
"""

from __future__ import annotations

from enum import IntEnum

__all__ = ["EtherUnit", "convert"]


class EtherUnit(IntEnum):
    """Ether denominations, each a factor of one thousand above the last."""

    WEI = 0
    KWEI = 1
    MWEI = 2
    GWEI = 3
    TWEI = 4
    PWEI = 5
    ETHER = 6
    KETHER = 7
    METHER = 8
    GETHER = 9
    TETHER = 10

    @property
    def power(self) -> int:
        """Power of ten of this unit expressed in wei."""
        return 3 * self.value


def _trim_rightmost_zeros(source: str) -> str:
    stripped = source.rstrip("0")
    return stripped if stripped else source


def _trim_leftmost_zeros(source: str) -> str:
    stripped = source.lstrip("0")
    return stripped if stripped else source


def _remove_trailing_decimals(source: str, separator: str) -> str:
    if separator not in source:
        return source
    stripped = source.rstrip("0")
    if not stripped:
        return source
    if stripped[-1] == separator[0]:
        stripped = stripped[:-1]
    return stripped


def _insert(text: str, index: int, fragment: str) -> str:
    return text[:index] + fragment + text[index:]


def _to_smaller_power(before: str, after: str, shift: int, separator: str) -> str:
    result = before + after
    if len(after) >= shift:
        split_at = shift + len(before)
        if len(result) > split_at:
            result = _insert(result, split_at, separator)
        return _trim_leftmost_zeros(result)
    result += "0" * (shift - len(after))
    return _trim_leftmost_zeros(result)


def _to_bigger_power(before: str, after: str, shift: int, separator: str) -> str:
    result = before + after
    if len(before) > -shift:
        split_at = shift + len(before)
        if len(result) > split_at:
            result = _insert(result, split_at, separator)
        return _trim_leftmost_zeros(result)
    padding = -(shift + len(before))
    return "0" + separator + "0" * padding + result


def convert(
    source: str,
    source_unit: EtherUnit,
    target_unit: EtherUnit,
    separator: str,
) -> str:
    """Convert the decimal string ``source`` from one unit to another.

    ``separator`` is the decimal separator used both to read ``source`` and
    to write the result.
    """
    if not separator:
        raise ValueError("decimal separator must not be empty")
    source_unit = EtherUnit(source_unit)
    target_unit = EtherUnit(target_unit)

    if source_unit == target_unit:
        return source

    shift = source_unit.power - target_unit.power

    before, found, after = source.partition(separator)
    if found:
        if shift > 0:
            converted = _to_smaller_power(before, after, shift, separator)
        else:
            converted = _to_bigger_power(before, after, shift, separator)
        return _remove_trailing_decimals(converted, separator)

    if shift > 0:
        return source + "0" * shift

    if len(source) > -shift:
        result = _insert(source, len(source) + shift, separator)
        return _remove_trailing_decimals(result, separator)

    padding = -(shift + len(source))
    result = "0" + separator + "0" * padding + _trim_rightmost_zeros(source)
    return _remove_trailing_decimals(result, separator)