"""
Ball Sorter - 색상 기반 볼 분류 시스템

근접/컬러 센서로 볼을 감지하고 목표 색상은 accept 경로, 나머지는 reject 경로로 보냄

Modules:
    sort_controller: 분류 상태 머신
    color_match: 최근접 색상 매칭
    sorter_config: 설정 검증
    yaml_loader: YAML 설정 로더
    telemetry: 통계/대시보드 상태
    sort_node: ROS2 노드
"""

__version__ = '1.0.0'
