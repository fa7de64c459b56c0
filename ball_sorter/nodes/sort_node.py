#!/usr/bin/env python3
"""
볼 분류 노드 (Ball Sort Node)
- 20ms 타이머로 SortController.tick() 호출
- 컬러 센서 토픽 수신 -> 모터 명령 / 상태 토픽 발행
- 운영자 enable/disable 서비스, 목표 색상 / 캘리브레이션 토픽
- YAML 설정 파일 기반 구성
"""

import json
import time
import rclpy
from rclpy.node import Node
from rclpy.callback_groups import MutuallyExclusiveCallbackGroup, ReentrantCallbackGroup
from rclpy.executors import MultiThreadedExecutor
from std_srvs.srv import SetBool
from std_msgs.msg import Float32MultiArray, String

from ..config.yaml_loader import get_config
from ..config.constants import (
    TOPIC_COLOR_SENSOR, TOPIC_TARGET_COLOR, TOPIC_CALIBRATE,
    TOPIC_ACTUATOR_CMD, TOPIC_STATUS, SERVICE_ENABLE,
)
from ..core.sort_controller import ActuatorCommand, SortController
from ..core.sort_runtime import SortRuntime
from ..monitoring.telemetry import TelemetryRecorder


class BallSortNode(Node):
    """볼 분류 ROS2 노드"""

    def __init__(self):
        super().__init__('ball_sort_node')
        self.get_logger().info('Ball Sort Node 시작 (YAML Config)')

        # tick 은 단독 그룹, 서비스/설정 콜백은 별도 그룹
        self.tick_callback_group = MutuallyExclusiveCallbackGroup()
        self.service_callback_group = ReentrantCallbackGroup()

        # YAML 설정 로드
        self.config = get_config()
        self.tick_period = self.config.get_tick_period()

        # 모듈 초기화
        self.controller = SortController(self.config.get_sorter_config(), node=self)
        self.telemetry = TelemetryRecorder(self)
        self.runtime = SortRuntime(
            self.controller, self.telemetry,
            sensor_timeout=self.config.get_sensor_timeout(),
            node=self
        )

        self._init_topics()
        self._create_services()

        self.tick_timer = self.create_timer(
            self.tick_period, self._tick_callback,
            callback_group=self.tick_callback_group
        )

        self.get_logger().info('Ball Sort Node 준비 완료')
        self.get_logger().info(f'  목표 색상: {self.controller.target_color.label}')
        self.get_logger().info(f'  서비스: {SERVICE_ENABLE}')

    def _init_topics(self):
        """토픽 초기화"""
        self.sub_sensor = self.create_subscription(
            Float32MultiArray, TOPIC_COLOR_SENSOR,
            self._sensor_callback, 10,
            callback_group=self.tick_callback_group
        )
        self.sub_target = self.create_subscription(
            String, TOPIC_TARGET_COLOR,
            self.runtime.target_color_callback, 10,
            callback_group=self.service_callback_group
        )
        self.sub_calibrate = self.create_subscription(
            String, TOPIC_CALIBRATE,
            self._calibrate_callback, 10,
            callback_group=self.service_callback_group
        )
        self.pub_cmd = self.create_publisher(Float32MultiArray, TOPIC_ACTUATOR_CMD, 10)
        self.pub_status = self.create_publisher(String, TOPIC_STATUS, 10)

    def _create_services(self):
        """ROS2 서비스 생성 - 서비스 전용 콜백 그룹 사용"""
        self.srv_enable = self.create_service(
            SetBool, SERVICE_ENABLE,
            self._enable_callback,
            callback_group=self.service_callback_group
        )

    # =========================================
    # 토픽 콜백
    # =========================================
    def _sensor_callback(self, msg):
        """컬러 센서 수신 [proximity, r, g, b]"""
        self.runtime.sensor_callback(msg, time.monotonic())

    def _calibrate_callback(self, msg):
        """현재 센서 색상으로 캘리브레이션 (msg.data = 색상 이름)"""
        self.runtime.calibrate_callback(msg, time.monotonic())

    # =========================================
    # 서비스 콜백
    # =========================================
    def _enable_callback(self, request, response):
        """분류 활성화/비활성화"""
        if request.data:
            self.controller.enable()
            response.message = '분류 활성화'
        else:
            self.controller.disable()
            response.message = '분류 비활성화'
        response.success = True
        return response

    # =========================================
    # 타이머 콜백
    # =========================================
    def _tick_callback(self):
        """주기 처리 - 센서 값이 없어도 정지 명령과 상태는 매번 발행"""
        command, status = self.runtime.step(time.monotonic())
        self._publish_command(command)

        msg = String()
        msg.data = json.dumps(status)
        self.pub_status.publish(msg)

    def _publish_command(self, command: ActuatorCommand):
        msg = Float32MultiArray()
        msg.data = command.as_list()
        self.pub_cmd.publish(msg)

    def shutdown(self):
        """종료 시 모터 정지"""
        self.controller.disable()
        self._publish_command(ActuatorCommand.stop())


def main(args=None):
    rclpy.init(args=args)
    node = BallSortNode()

    executor = MultiThreadedExecutor(num_threads=2)
    executor.add_node(node)

    try:
        executor.spin()
    except KeyboardInterrupt:
        pass
    finally:
        node.shutdown()
        executor.shutdown()
        node.destroy_node()
        rclpy.shutdown()


if __name__ == '__main__':
    main()
