#!/usr/bin/env python3
"""
분류 런타임 모듈
- 센서 / 목표 색상 / 캘리브레이션 메시지 처리
- 센서 값 유효 시간 관리 (오래되면 정지)
- tick 결과를 모터 명령 + 상태 딕셔너리로 변환

ROS2 메시지는 .data 속성만 사용. 발행은 노드 책임
"""

import math
from typing import Optional, Tuple

from ..config.constants import SENSOR_TIMEOUT
from ..config.sorter_config import SorterConfigError
from .sort_controller import ActuatorCommand, SensorReading, SortController
from ..monitoring.telemetry import TelemetryRecorder


class SortRuntime:
    """노드 콜백 처리기"""

    def __init__(
        self,
        controller: SortController,
        telemetry: TelemetryRecorder,
        sensor_timeout: float = SENSOR_TIMEOUT,
        node=None
    ):
        """
        Args:
            controller: 분류 컨트롤러
            telemetry: 텔레메트리 기록기
            sensor_timeout: 센서 값 유효 시간 (초)
            node: ROS2 노드 (로깅용)
        """
        self.controller = controller
        self.telemetry = telemetry
        self.sensor_timeout = sensor_timeout
        self.node = node

        self.latest_reading: Optional[SensorReading] = None
        self.reading_stamp = 0.0
        self._stale = True

    def log(self, msg: str, level: str = 'info'):
        """로깅 헬퍼"""
        if self.node:
            if level == 'info':
                self.node.get_logger().info(msg)
            elif level == 'warn':
                self.node.get_logger().warn(msg)
            elif level == 'error':
                self.node.get_logger().error(msg)

    # =========================================
    # 메시지 처리
    # =========================================
    def sensor_callback(self, msg, now: float):
        """컬러 센서 수신 [proximity, r, g, b]"""
        data = list(msg.data)
        if len(data) != 4 or not math.isfinite(data[0]):
            self.log(f'[SENSOR] 잘못된 메시지 무시: {data}', 'warn')
            return
        self.latest_reading = SensorReading(
            proximity=int(data[0]),
            color=(data[1], data[2], data[3])
        )
        self.reading_stamp = now

    def target_color_callback(self, msg):
        """목표 색상 변경"""
        try:
            self.controller.set_target_color(msg.data)
        except SorterConfigError as e:
            self.log(f'[CONFIG] 목표 색상 변경 실패: {e}', 'warn')

    def calibrate_callback(self, msg, now: float):
        """현재 센서 색상을 msg.data 색상의 기준값으로 저장"""
        reading = self.latest_reading
        if reading is None or self.is_stale(now):
            self.log(f'[CALIBRATE] 센서 값 없음 - {msg.data} 캘리브레이션 무시', 'warn')
            return
        try:
            self.controller.calibrate(msg.data, reading.color)
        except SorterConfigError as e:
            self.log(f'[CALIBRATE] 캘리브레이션 실패: {e}', 'warn')
            return
        self.log(f'[CALIBRATE] {msg.data} 기준값 저장: {tuple(reading.color)}')

    # =========================================
    # 주기 처리
    # =========================================
    def is_stale(self, now: float) -> bool:
        """센서 값이 없거나 sensor_timeout 보다 오래됨"""
        if self.latest_reading is None:
            return True
        return now - self.reading_stamp > self.sensor_timeout

    def step(self, now: float) -> Tuple[ActuatorCommand, dict]:
        """
        tick 1회 처리

        Returns:
            (모터 명령, 대시보드 상태 딕셔너리)
        """
        if self.is_stale(now):
            if not self._stale:
                self.log(f'[SENSOR] 센서 값 {self.sensor_timeout}s 이상 없음 - 정지', 'warn')
            self._stale = True
            return ActuatorCommand.stop(), self._stale_status()

        if self._stale:
            self.log('[SENSOR] 센서 값 수신')
            self._stale = False

        command, snapshot = self.controller.tick(self.latest_reading, now)
        status = dict(self.telemetry.record(snapshot))
        status['Sensor Stale'] = False
        return command, status

    def _stale_status(self) -> dict:
        """센서 값 없을 때 상태 (마지막 대시보드 값 + 현재 컨트롤러 상태)"""
        status = self.telemetry.get_status_dict()
        status.update({
            'Sorting State': self.controller.current_state.value,
            'Intake Enabled': self.controller.is_enabled,
            'Target Color': self.controller.target_color.name,
            'Sensor Stale': True,
        })
        status.update(self.telemetry.stats.to_dict())
        return status
