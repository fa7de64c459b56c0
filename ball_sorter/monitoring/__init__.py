"""
Monitoring 모듈 - 분류 통계 및 대시보드 상태
"""

from .telemetry import SortStatistics, TelemetryRecorder

__all__ = ['SortStatistics', 'TelemetryRecorder']
