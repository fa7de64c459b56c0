"""
Config 모듈 - 상수, 분류기 설정, YAML 로더
"""
