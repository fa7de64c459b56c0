#!/usr/bin/env python3
"""
볼 분류 컨트롤러 모듈
- 근접 센서로 볼 진입 감지 (상승 에지)
- 컬러 센서로 색상 분류 후 accept / reject 경로 결정
- intake / accept / reject 모터 명령 생성
- 매 tick 상태 스냅샷 반환 (텔레메트리용)

하드웨어 I/O는 호출자 책임. tick() 은 예외를 발생시키지 않음
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..config.constants import STOP_SPEED
from ..config.sorter_config import SorterConfig, parse_target_color
from .color_match import ColorMatcher, ColorProfile, MatchResult, TargetColor, is_valid_color


class SortingState(Enum):
    """분류 상태 머신 상태"""
    IDLE = 'IDLE'                            # 볼 대기, intake 동작
    BALL_DETECTED = 'BALL_DETECTED'          # 볼 감지, 색상 확인 중
    ROUTING_TO_ACCEPT = 'ROUTING_TO_ACCEPT'  # 목표 색상, accept 경로로 이송
    ROUTING_TO_REJECT = 'ROUTING_TO_REJECT'  # 다른 색상, 배출
    CLEARING = 'CLEARING'                    # 볼이 빠져나갈 때까지 대기


@dataclass(frozen=True)
class SensorReading:
    """센서 측정값 (매 tick 외부에서 전달)"""
    proximity: int
    color: Tuple[float, float, float]


@dataclass(frozen=True)
class ActuatorCommand:
    """모터 명령 (duty cycle, -1.0 ~ 1.0)"""
    intake: float = STOP_SPEED
    accept: float = STOP_SPEED
    reject: float = STOP_SPEED

    @classmethod
    def stop(cls) -> 'ActuatorCommand':
        """전체 정지 명령"""
        return cls()

    @property
    def is_stopped(self) -> bool:
        return self.intake == STOP_SPEED and self.accept == STOP_SPEED and self.reject == STOP_SPEED

    def as_list(self) -> List[float]:
        """[intake, accept, reject]"""
        return [float(self.intake), float(self.accept), float(self.reject)]


@dataclass(frozen=True)
class StatusSnapshot:
    """tick 단위 상태 스냅샷"""
    state: SortingState
    presence: bool
    last_color_label: Optional[str]
    enabled: bool
    proximity: int = 0
    color: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    confidence: float = 0.0
    target_color: Optional[TargetColor] = None
    sample_skipped: bool = False      # 이번 tick 분류 시도가 잘못된 샘플로 생략됨

    def to_dict(self) -> Dict[str, Any]:
        """JSON 변환용 딕셔너리"""
        return {
            'state': self.state.value,
            'presence': self.presence,
            'last_color_label': self.last_color_label,
            'enabled': self.enabled,
            'proximity': self.proximity,
            'color': list(self.color),
            'confidence': self.confidence,
            'target_color': self.target_color.name if self.target_color else None,
            'sample_skipped': self.sample_skipped,
        }


@dataclass
class ControllerState:
    """컨트롤러 내부 상태 (tick 에서만 변경)"""
    current_state: SortingState = SortingState.IDLE
    state_entered_at: float = 0.0
    last_presence: bool = False
    last_color_label: Optional[str] = None
    last_confidence: float = 0.0
    enabled: bool = False


class SortController:
    """볼 분류 상태 머신"""

    def __init__(self, config: Optional[SorterConfig] = None, node=None):
        """
        Args:
            config: 분류기 설정 (None이면 기본값)
            node: ROS2 노드 (로깅용, None이면 로그 생략)

        Raises:
            SorterConfigError: 설정 검증 실패
        """
        self.node = node
        self.config = (config or SorterConfig()).validate()
        self.matcher = self._build_matcher(self.config)
        self.state = ControllerState()
        self._lock = threading.Lock()
        self._sample_skipped = False

    def log(self, msg: str, level: str = 'info'):
        """로깅 헬퍼"""
        if self.node:
            if level == 'info':
                self.node.get_logger().info(msg)
            elif level == 'warn':
                self.node.get_logger().warn(msg)
            elif level == 'error':
                self.node.get_logger().error(msg)
            elif level == 'debug':
                self.node.get_logger().debug(msg)

    @staticmethod
    def _build_matcher(config: SorterConfig) -> ColorMatcher:
        return ColorMatcher(
            ColorProfile(color, config.color_reference(color)) for color in TargetColor
        )

    # =========================================
    # 운영자 입력 / 설정
    # =========================================
    def enable(self):
        """분류 시작 (intake 동작 허용)"""
        with self._lock:
            if self.state.enabled:
                return
            self.state.enabled = True
        self.log('▶️ [SortController] 분류 활성화')

    def disable(self):
        """분류 정지 - 즉시 IDLE, 다음 tick 부터 정지 명령"""
        with self._lock:
            was_enabled = self.state.enabled
            self.state.enabled = False
            self.state.current_state = SortingState.IDLE
        if was_enabled:
            self.log('🛑 [SortController] 분류 비활성화')

    @property
    def is_enabled(self) -> bool:
        return self.state.enabled

    @property
    def current_state(self) -> SortingState:
        return self.state.current_state

    @property
    def target_color(self) -> TargetColor:
        return self.config.target_color

    def reconfigure(self, config: SorterConfig):
        """
        설정 전체 교체

        검증 실패 시 기존 설정 유지

        Raises:
            SorterConfigError: 설정 검증 실패
        """
        with self._lock:
            self._apply_config(config)

    def _apply_config(self, config: SorterConfig):
        """검증 후 설정 교체 (_lock 보유 상태에서 호출)"""
        config = config.validate()
        self.matcher = self._build_matcher(config)
        self.config = config
        self.log(f'[SortController] 설정 변경 (목표 색상: {config.target_color.label})')

    def set_target_color(self, color):
        """목표 색상 변경 (TargetColor, 'BLUE', 'blue' 등)"""
        target = parse_target_color(color)
        with self._lock:
            self._apply_config(self.config.with_target(target))

    def calibrate(self, color, reference):
        """
        색상 기준값 교체 (캘리브레이션)

        Args:
            color: 대상 색상
            reference: 새 기준 (r, g, b)

        Raises:
            SorterConfigError: 잘못된 색상 또는 기준값
        """
        with self._lock:
            self._apply_config(self.config.with_color(color, reference))

    # =========================================
    # 주기 처리
    # =========================================
    def tick(self, reading: SensorReading, now: float) -> Tuple[ActuatorCommand, StatusSnapshot]:
        """
        주기 업데이트 (호스트 스케줄러에서 ~20ms 마다 호출)

        Args:
            reading: 이번 tick 센서 값
            now: 단조 증가 타임스탬프 (초)

        Returns:
            (모터 명령, 상태 스냅샷)
        """
        with self._lock:
            self._sample_skipped = False
            if not self.state.enabled:
                self.state.current_state = SortingState.IDLE
                return ActuatorCommand.stop(), self._snapshot(reading, self.state.last_presence)

            presence = self._is_present(reading)
            state = self.state.current_state

            if state == SortingState.IDLE:
                command = self._handle_idle(reading, presence, now)
            elif state == SortingState.BALL_DETECTED:
                command = self._handle_ball_detected(reading, now)
            elif state == SortingState.ROUTING_TO_ACCEPT:
                command = self._handle_routing(now, accept=True)
            elif state == SortingState.ROUTING_TO_REJECT:
                command = self._handle_routing(now, accept=False)
            else:
                command = self._handle_clearing(presence, now)

            self.state.last_presence = presence
            return command, self._snapshot(reading, presence)

    def _transition(self, next_state: SortingState, now: float):
        self.state.current_state = next_state
        self.state.state_entered_at = now

    def _elapsed(self, now: float) -> float:
        return now - self.state.state_entered_at

    def _is_present(self, reading: SensorReading) -> bool:
        proximity = reading.proximity
        if isinstance(proximity, bool) or not isinstance(proximity, (int, float)):
            self.log(f'[SortController] 잘못된 근접 값 무시: {proximity!r}', 'warn')
            return False
        return proximity > self.config.proximity_threshold

    def _classify(self,reading: SensorReading) -> Optional[MatchResult]:
        """유효한 샘플이면 분류, 아니면 None (이전 라벨 유지)"""
        if not is_valid_color(reading.color):
            self.log(f'[SortController] 잘못된 색상 샘플 무시: {reading.color!r}', 'warn')
            self._sample_skipped = True
            return None
        match = self.matcher.match_closest_color(reading.color)
        self.state.last_color_label = match.label
        self.state.last_confidence = match.confidence
        return match

    def _handle_idle(self, reading: SensorReading, presence: bool, now: float) -> ActuatorCommand:
        """IDLE - intake 동작, 볼 진입 대기"""
        command = ActuatorCommand(intake=self.config.intake_speed)

        # 상승 에지에서만 감지
        if presence and not self.state.last_presence:
            self._transition(SortingState.BALL_DETECTED, now)
            match = self._classify(reading)
            if match:
                self.log(
                    f'[SortController] 볼 감지! 색상: {match.label} | 신뢰도: {match.confidence:.2f}'
                )
            else:
                self.log('[SortController] 볼 감지! 색상 샘플 없음')
        return command

    def _handle_ball_detected(self, reading: SensorReading, now: float) -> ActuatorCommand:
        """BALL_DETECTED - intake 정지, 신뢰도 충족 시 경로 결정"""
        command = ActuatorCommand.stop()

        match = self._classify(reading)
        if match is None or match.confidence < self.config.confidence_threshold:
            return command

        if match.color == self.config.target_color:
            self._transition(SortingState.ROUTING_TO_ACCEPT, now)
            self.log(f'✓ [SortController] 목표 색상 ({match.label}) - ACCEPT 경로')
        else:
            self._transition(SortingState.ROUTING_TO_REJECT, now)
            self.log(f'✗ [SortController] 다른 색상 ({match.label}) - REJECT 경로')
        return command

    def _handle_routing(self, now: float, accept: bool) -> ActuatorCommand:
        """ROUTING_TO_ACCEPT / ROUTING_TO_REJECT - sort_duration 동안 해당 모터 구동"""
        if accept:
            command = ActuatorCommand(accept=self.config.accept_speed)
        else:
            command = ActuatorCommand(reject=self.config.reject_speed)

        if self._elapsed(now) >= self.config.sort_duration:
            self._transition(SortingState.CLEARING, now)
        return command

    def _handle_clearing(self, presence: bool, now: float) -> ActuatorCommand:
        """CLEARING - 분류 모터 정지, 볼이 완전히 빠질 때까지 대기"""
        command = ActuatorCommand.stop()

        if self._elapsed(now) >= self.config.clear_duration and not presence:
            self._transition(SortingState.IDLE, now)
            self.log('[SortController] 다음 볼 준비 완료')
        return command

    def _snapshot(self, reading: SensorReading, presence: bool) -> StatusSnapshot:
        color = tuple(reading.color) if is_valid_color(reading.color) else (0.0, 0.0, 0.0)
        return StatusSnapshot(
            state=self.state.current_state,
            presence=presence,
            last_color_label=self.state.last_color_label,
            enabled=self.state.enabled,
            proximity=reading.proximity,
            color=tuple(float(c) for c in color),
            confidence=self.state.last_confidence,
            target_color=self.config.target_color,
            sample_skipped=self._sample_skipped,
        )

    def get_status_dict(self) -> Dict[str, Any]:
        """현재 상태를 딕셔너리로 반환"""
        return {
            'state': self.state.current_state.value,
            'enabled': self.state.enabled,
            'last_presence': self.state.last_presence,
            'last_color_label': self.state.last_color_label,
            'last_confidence': self.state.last_confidence,
            'target_color': self.config.target_color.name,
        }
