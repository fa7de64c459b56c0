#!/usr/bin/env python3
"""
분류 텔레메트리 모듈
분류 통계 집계 및 대시보드 표시용 상태 딕셔너리 생성
"""

from dataclasses import dataclass, asdict
from typing import Optional

from ..core.sort_controller import SortingState, StatusSnapshot


@dataclass
class SortStatistics:
    """분류 작업 통계"""
    completed: int = 0
    accepted: int = 0
    rejected: int = 0
    invalid_samples: int = 0
    red: int = 0
    blue: int = 0
    green: int = 0
    yellow: int = 0

    def reset(self):
        """통계 초기화"""
        self.completed = 0
        self.accepted = 0
        self.rejected = 0
        self.invalid_samples = 0
        self.red = 0
        self.blue = 0
        self.green = 0
        self.yellow = 0

    def increment(self, accepted: bool, color_label: Optional[str] = None):
        """분류 완료 시 통계 업데이트"""
        self.completed += 1
        if accepted:
            self.accepted += 1
        else:
            self.rejected += 1

        key = (color_label or '').lower()
        if key in ('red', 'blue', 'green', 'yellow'):
            setattr(self, key, getattr(self, key) + 1)

    def add_invalid(self):
        """잘못된 색상 샘플 카운트 증가"""
        self.invalid_samples += 1

    def to_dict(self) -> dict:
        """딕셔너리로 변환"""
        return asdict(self)


class TelemetryRecorder:
    """tick 스냅샷 -> 대시보드 딕셔너리 변환 및 통계 관리"""

    def __init__(self, node=None):
        """
        Args:
            node: ROS2 노드 (로깅용)
        """
        self.node = node
        self.stats = SortStatistics()
        self._last_state: Optional[SortingState] = None
        self._last_status: dict = {}

    def log(self, msg: str, level: str = 'info'):
        """로깅 헬퍼"""
        if self.node:
            if level == 'info':
                self.node.get_logger().info(msg)
            elif level == 'warn':
                self.node.get_logger().warn(msg)
            elif level == 'error':
                self.node.get_logger().error(msg)

    def record(self, snapshot: StatusSnapshot) -> dict:
        """
        tick 결과 기록

        ROUTING 상태에 진입하는 순간 한 사이클 완료로 집계

        Returns:
            대시보드 표시용 딕셔너리
        """
        if snapshot.sample_skipped:
            self.stats.add_invalid()

        if snapshot.state != self._last_state:
            if snapshot.state == SortingState.ROUTING_TO_ACCEPT:
                self.stats.increment(True, snapshot.last_color_label)
            elif snapshot.state == SortingState.ROUTING_TO_REJECT:
                self.stats.increment(False, snapshot.last_color_label)
            self._last_state = snapshot.state

        self._last_status = self.to_dashboard(snapshot)
        return self._last_status

    def to_dashboard(self, snapshot: StatusSnapshot) -> dict:
        """스냅샷을 대시보드 키 형식으로 변환"""
        red, green, blue = snapshot.color
        return {
            'Sorting State': snapshot.state.value,
            'Ball Detected': snapshot.presence,
            'Last Color': snapshot.last_color_label or 'None',
            'Proximity': snapshot.proximity,
            'Red': red,
            'Green': green,
            'Blue': blue,
            'Confidence': snapshot.confidence,
            'Intake Enabled': snapshot.enabled,
            'Target Color': snapshot.target_color.name if snapshot.target_color else 'None',
            **self.stats.to_dict()
        }

    def get_status_dict(self) -> dict:
        """마지막 대시보드 딕셔너리"""
        return dict(self._last_status)

    def reset(self):
        """통계 초기화"""
        self.stats.reset()
        self._last_state = None
        self._last_status = {}
        self.log('[Telemetry] 통계 초기화')
