#!/usr/bin/env python3
"""
볼 분류 상수 모듈
모터 속도, 타이밍, 센서 임계값, 색상 기준값 기본값 관리

※ settings.yaml 에 값이 없을 때 사용되는 기본값
"""

# =========================================
# 모터 속도 (-1.0 ~ 1.0 duty cycle)
# =========================================
INTAKE_SPEED = 0.7
ACCEPT_SPEED = 0.8
REJECT_SPEED = 0.75
STOP_SPEED = 0.0

# =========================================
# 타이밍 (초)
# =========================================
SORT_DURATION = 0.5         # accept/reject 모터 구동 시간
CLEAR_DURATION = 0.3        # 볼이 완전히 빠져나가기까지 대기 시간
TICK_PERIOD = 0.02          # 호스트 스케줄링 주기 (50Hz)
SENSOR_TIMEOUT = 0.1        # 이 시간 동안 센서 값이 없으면 정지

# =========================================
# 센서 임계값
# =========================================
PROXIMITY_THRESHOLD = 100           # 이 값을 초과하면 볼 감지
COLOR_CONFIDENCE_THRESHOLD = 0.8    # 색상 매칭 신뢰도 (0.0 ~ 1.0)

# =========================================
# 목표 색상 (accept 경로로 보낼 색)
# =========================================
DEFAULT_TARGET_COLOR = 'BLUE'

# =========================================
# 색상 기준값 (REV Color Sensor V3 측정값)
# 등록 순서 = 동일 거리일 때 우선순위
# =========================================
RED_TARGET = (0.561, 0.232, 0.114)
BLUE_TARGET = (0.143, 0.427, 0.429)
GREEN_TARGET = (0.197, 0.561, 0.240)
YELLOW_TARGET = (0.361, 0.524, 0.113)

DEFAULT_COLOR_TARGETS = {
    'RED': RED_TARGET,
    'BLUE': BLUE_TARGET,
    'GREEN': GREEN_TARGET,
    'YELLOW': YELLOW_TARGET,
}

# =========================================
# ROS2 토픽/서비스 이름
# =========================================
TOPIC_COLOR_SENSOR = '/sorter/color_sensor'
TOPIC_TARGET_COLOR = '/sorter/target_color'
TOPIC_ACTUATOR_CMD = '/sorter/actuator_cmd'
TOPIC_STATUS = '/sorter/status'
TOPIC_CALIBRATE = '/sorter/calibrate'
SERVICE_ENABLE = '/sorter/enable'
