#!/usr/bin/env python3
"""
색상 매칭 모듈
등록된 기준 색상 중 RGB 거리가 가장 가까운 색상을 찾고 신뢰도 계산
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config.constants import DEFAULT_COLOR_TARGETS


RGB = Tuple[float, float, float]


class TargetColor(Enum):
    """분류 대상 색상 (정의 순서 = 등록 순서)"""
    RED = 'Red'
    BLUE = 'Blue'
    GREEN = 'Green'
    YELLOW = 'Yellow'

    @property
    def label(self) -> str:
        """텔레메트리 표시용 이름"""
        return self.value

    @classmethod
    def parse(cls, value) -> 'TargetColor':
        """
        색상 이름 파싱

        Args:
            value: TargetColor, 'BLUE', 'blue', 'Blue' 등

        Raises:
            ValueError: 알 수 없는 색상
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
        raise ValueError(f"알 수 없는 색상: {value!r}")


def is_valid_color(rgb) -> bool:
    """RGB 샘플이 유한한 실수 3개인지 확인"""
    try:
        if len(rgb) != 3:
            return False
        return all(math.isfinite(float(c)) for c in rgb)
    except (TypeError, ValueError):
        return False


def color_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """RGB 공간 유클리드 거리"""
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


@dataclass(frozen=True)
class ColorProfile:
    """기준 색상 프로파일"""
    color: TargetColor
    reference: RGB

    @property
    def label(self) -> str:
        return self.color.label


@dataclass(frozen=True)
class MatchResult:
    """색상 매칭 결과"""
    color: TargetColor
    confidence: float
    distance: float

    @property
    def label(self) -> str:
        return self.color.label


def default_profiles() -> List[ColorProfile]:
    """기본 4색 프로파일 (RED, BLUE, GREEN, YELLOW 순)"""
    return [
        ColorProfile(color, DEFAULT_COLOR_TARGETS[color.name])
        for color in TargetColor
    ]


class ColorMatcher:
    """최근접 색상 매처"""

    def __init__(self, profiles: Optional[Iterable[ColorProfile]] = None):
        """
        Args:
            profiles: 등록할 프로파일 목록 (None이면 기본 4색)
        """
        self._profiles: List[ColorProfile] = []
        for profile in (default_profiles() if profiles is None else profiles):
            self.add_color_match(profile.color, profile.reference)

    @property
    def profiles(self) -> Tuple[ColorProfile, ...]:
        """등록된 프로파일 (등록 순서)"""
        return tuple(self._profiles)

    def add_color_match(self, color: TargetColor, reference: Sequence[float]):
        """
        기준 색상 등록

        이미 등록된 색상이면 기준값만 교체하고 등록 순서는 유지

        Raises:
            ValueError: 기준값이 유효한 RGB가 아님
        """
        if not is_valid_color(reference):
            raise ValueError(f"잘못된 기준 색상: {reference!r}")

        profile = ColorProfile(color, tuple(float(c) for c in reference))
        for i, existing in enumerate(self._profiles):
            if existing.color == color:
                self._profiles[i] = profile
                return
        self._profiles.append(profile)

    def get_reference(self, color: TargetColor) -> Optional[RGB]:
        """색상의 현재 기준값"""
        for profile in self._profiles:
            if profile.color == color:
                return profile.reference
        return None

    def match_closest_color(self, rgb: Sequence[float]) -> MatchResult:
        """
        가장 가까운 기준 색상 찾기

        거리가 같으면 먼저 등록된 프로파일이 선택됨

        Returns:
            MatchResult (confidence = max(0, 1 - distance))

        Raises:
            ValueError: 유효하지 않은 샘플이거나 등록된 프로파일 없음
        """
        if not is_valid_color(rgb):
            raise ValueError(f"잘못된 색상 샘플: {rgb!r}")
        if not self._profiles:
            raise ValueError("등록된 색상 프로파일 없음")

        sample = [float(c) for c in rgb]
        best = self._profiles[0]
        best_distance = color_distance(sample, best.reference)
        for profile in self._profiles[1:]:
            distance = color_distance(sample, profile.reference)
            # strict '<' keeps the earlier profile on ties
            if distance < best_distance:
                best = profile
                best_distance = distance

        confidence = max(0.0, 1.0 - best_distance)
        return MatchResult(best.color, confidence, best_distance)
