#!/usr/bin/env python3
"""
YAML 설정 로더 모듈
settings.yaml 파일을 로드하여 분류기 설정값 제공
"""

import os
import yaml
from typing import Dict, Optional, Any

from . import constants
from .sorter_config import SorterConfig


class ConfigLoader:
    """YAML 설정 파일 로더"""

    def __init__(self, package_name: str = 'ball_sorter', config_dir: Optional[str] = None):
        """
        Args:
            package_name: ROS2 패키지 이름
            config_dir: 설정 디렉토리 (None이면 패키지 share 디렉토리)
        """
        self.package_name = package_name
        self._settings = None
        self._config_dir = config_dir

    @property
    def config_dir(self) -> str:
        """설정 파일 디렉토리 경로"""
        if self._config_dir is None:
            try:
                from ament_index_python.packages import get_package_share_directory
                share_dir = get_package_share_directory(self.package_name)
                self._config_dir = os.path.join(share_dir, 'config')
            except Exception:
                # 개발 환경에서는 소스 디렉토리 사용
                self._config_dir = os.path.join(
                    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
                    'config'
                )
        return self._config_dir

    def _load_yaml(self, filename: str) -> dict:
        """YAML 파일 로드"""
        filepath = os.path.join(self.config_dir, filename)

        if not os.path.exists(filepath):
            raise FileNotFoundError(f"설정 파일 없음: {filepath}")

        with open(filepath, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    @property
    def settings(self) -> dict:
        """분류기 설정 로드"""
        if self._settings is None:
            self._settings = self._load_yaml('settings.yaml')
        return self._settings

    def reload(self):
        """설정 다시 로드"""
        self._settings = None

    # =========================================
    # 설정 값 접근자
    # =========================================
    def get_sorter_config(self) -> SorterConfig:
        """검증된 분류기 설정"""
        return SorterConfig.from_dict(self.settings)

    def get_sorting_settings(self) -> Dict[str, Any]:
        """임계값/타이밍/목표 색상"""
        return self.settings.get('sorting', {})

    def get_color_targets(self) -> Dict[str, list]:
        """색상 기준값"""
        return self.settings.get('colors', {})

    def get_tick_period(self) -> float:
        """tick 주기 (초)"""
        node = self.settings.get('node') or {}
        return float(node.get('tick_period', constants.TICK_PERIOD))

    def get_sensor_timeout(self) -> float:
        """센서 값 유효 시간 (초)"""
        node = self.settings.get('node') or {}
        return float(node.get('sensor_timeout', constants.SENSOR_TIMEOUT))


# 싱글톤 인스턴스
_config_loader = None


def get_config() -> ConfigLoader:
    """설정 로더 싱글톤 반환"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
