#!/usr/bin/env python3
"""
분류기 설정 모듈
임계값, 타이밍, 모터 속도, 목표 색상, 색상 기준값을 하나의 설정으로 묶고 검증
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple

from . import constants
from ..core.color_match import TargetColor, is_valid_color


class SorterConfigError(ValueError):
    """잘못된 분류기 설정"""


def _default_colors() -> Dict[str, Tuple[float, float, float]]:
    return dict(constants.DEFAULT_COLOR_TARGETS)


@dataclass(frozen=True)
class SorterConfig:
    """분류기 설정 (생성 후 validate() 로 검증)"""
    proximity_threshold: int = constants.PROXIMITY_THRESHOLD
    confidence_threshold: float = constants.COLOR_CONFIDENCE_THRESHOLD
    sort_duration: float = constants.SORT_DURATION
    clear_duration: float = constants.CLEAR_DURATION
    target_color: TargetColor = TargetColor[constants.DEFAULT_TARGET_COLOR]

    intake_speed: float = constants.INTAKE_SPEED
    accept_speed: float = constants.ACCEPT_SPEED
    reject_speed: float = constants.REJECT_SPEED

    # 색상 이름 -> (r, g, b)
    colors: Dict[str, Tuple[float, float, float]] = field(default_factory=_default_colors)

    def validate(self) -> 'SorterConfig':
        """
        설정 검증

        값을 보정하지 않고 바로 실패시킴

        Returns:
            self (체이닝용)

        Raises:
            SorterConfigError: 범위를 벗어난 값
        """
        if not isinstance(self.target_color, TargetColor):
            raise SorterConfigError(f"target_color 타입 오류: {self.target_color!r}")

        if isinstance(self.proximity_threshold, bool) or not isinstance(self.proximity_threshold, int):
            raise SorterConfigError(
                f"proximity_threshold 는 정수여야 함: {self.proximity_threshold!r}"
            )
        if self.proximity_threshold < 0:
            raise SorterConfigError(
                f"proximity_threshold 는 0 이상이어야 함: {self.proximity_threshold}"
            )

        _check_range('confidence_threshold', self.confidence_threshold, 0.0, 1.0)

        for name in ('sort_duration', 'clear_duration'):
            value = getattr(self, name)
            if not _is_number(value) or not math.isfinite(value) or value < 0:
                raise SorterConfigError(f"{name} 는 0 이상의 유한한 값이어야 함: {value!r}")

        for name in ('intake_speed', 'accept_speed', 'reject_speed'):
            _check_range(name, getattr(self, name), -1.0, 1.0)

        for name, rgb in self.colors.items():
            if name not in TargetColor.__members__:
                raise SorterConfigError(f"알 수 없는 색상 프로파일: {name!r}")
            if not is_valid_color(rgb) or not all(0.0 <= float(c) <= 1.0 for c in rgb):
                raise SorterConfigError(f"{name} 기준값은 [0, 1] 범위의 RGB 3개여야 함: {rgb!r}")

        return self

    def color_reference(self, color: TargetColor) -> Tuple[float, float, float]:
        """색상 기준값 (설정에 없으면 기본값)"""
        rgb = self.colors.get(color.name, constants.DEFAULT_COLOR_TARGETS[color.name])
        return tuple(float(c) for c in rgb)

    def with_target(self, target) -> 'SorterConfig':
        """목표 색상만 바꾼 새 설정"""
        return replace(self, target_color=parse_target_color(target))

    def with_color(self, target, rgb) -> 'SorterConfig':
        """색상 기준값 하나만 바꾼 새 설정 (캘리브레이션)"""
        color = parse_target_color(target)
        if not isinstance(rgb, (list, tuple)):
            raise SorterConfigError(f"{color.name} 기준값은 RGB 3개여야 함: {rgb!r}")
        colors = dict(self.colors)
        colors[color.name] = tuple(rgb)
        return replace(self, colors=colors)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환 (settings.yaml 구조와 동일)"""
        return {
            'sorting': {
                'proximity_threshold': self.proximity_threshold,
                'confidence_threshold': self.confidence_threshold,
                'sort_duration': self.sort_duration,
                'clear_duration': self.clear_duration,
                'target_color': self.target_color.name,
            },
            'speeds': {
                'intake': self.intake_speed,
                'accept': self.accept_speed,
                'reject': self.reject_speed,
            },
            'colors': {name: list(rgb) for name, rgb in self.colors.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SorterConfig':
        """
        settings.yaml 딕셔너리에서 설정 생성

        누락된 키는 constants 기본값 사용

        Raises:
            SorterConfigError: 검증 실패
        """
        data = data or {}
        sorting = data.get('sorting') or {}
        speeds = data.get('speeds') or {}

        colors = _default_colors()
        for name, rgb in (data.get('colors') or {}).items():
            colors[str(name).upper()] = tuple(rgb) if isinstance(rgb, (list, tuple)) else rgb

        config = cls(
            proximity_threshold=sorting.get('proximity_threshold', constants.PROXIMITY_THRESHOLD),
            confidence_threshold=sorting.get('confidence_threshold', constants.COLOR_CONFIDENCE_THRESHOLD),
            sort_duration=sorting.get('sort_duration', constants.SORT_DURATION),
            clear_duration=sorting.get('clear_duration', constants.CLEAR_DURATION),
            target_color=parse_target_color(
                sorting.get('target_color', constants.DEFAULT_TARGET_COLOR)
            ),
            intake_speed=speeds.get('intake', constants.INTAKE_SPEED),
            accept_speed=speeds.get('accept', constants.ACCEPT_SPEED),
            reject_speed=speeds.get('reject', constants.REJECT_SPEED),
            colors=colors,
        )
        return config.validate()


def parse_target_color(value) -> TargetColor:
    """목표 색상 파싱 (실패 시 SorterConfigError)"""
    try:
        return TargetColor.parse(value)
    except ValueError as e:
        raise SorterConfigError(str(e)) from e


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_range(name: str, value, low: float, high: float):
    if not _is_number(value) or not math.isfinite(value) or not low <= value <= high:
        raise SorterConfigError(f"{name} 는 [{low}, {high}] 범위여야 함: {value!r}")
