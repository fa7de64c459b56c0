"""
Nodes 모듈 - ROS2 노드
"""
