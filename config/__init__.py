"""Конфигурация проекта: константы (settings.py) и пресеты (presets.yaml)."""
