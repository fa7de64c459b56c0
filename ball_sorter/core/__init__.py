"""
Core 모듈 - 분류 상태 머신 및 색상 매칭
"""
