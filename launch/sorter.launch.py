#!/usr/bin/env python3
"""
볼 분류 Launch 파일
- 분류 노드 실행
- 모터/센서 브릿지는 외부에서 실행 (토픽으로 연결)

사용법:
  ros2 launch ball_sorter sorter.launch.py

  # 로그 레벨 변경:
  ros2 launch ball_sorter sorter.launch.py log_level:=debug
"""

from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node


def generate_launch_description():
    # Launch 인자 선언
    log_level_arg = DeclareLaunchArgument(
        'log_level', default_value='info',
        description='Logging level for ball_sort_node'
    )

    sort_node = Node(
        package='ball_sorter',
        executable='sort_node',
        name='ball_sort_node',
        output='screen',
        emulate_tty=True,
        arguments=['--ros-args', '--log-level', LaunchConfiguration('log_level')],
    )

    return LaunchDescription([
        log_level_arg,
        sort_node,
    ])
