"""
Настройки проекта Yomeru (нормализация кадра + консолидация регионов).

Все "магические" пороги вынесены сюда, чтобы их можно было подстраивать
под конкретное развёртывание, не трогая сами алгоритмы.
"""

import os
from pathlib import Path

# =============================================================================
# ПУТИ ПРОЕКТА
# =============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = Path(__file__).parent

# Файл с пресетами сканирования (YAML)
PRESETS_FILE = Path(os.getenv("YOMERU_PRESETS_FILE", str(CONFIG_DIR / "presets.yaml")))
DEFAULT_PRESET = "default"

# =============================================================================
# ЛОГИРОВАНИЕ
# =============================================================================
LOG_LEVEL = os.getenv("YOMERU_LOG_LEVEL", "INFO")
LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)

# =============================================================================
# БИНАРИЗАЦИЯ (значения по умолчанию для BinarizationOptions)
# =============================================================================
ADAPTIVE_BLOCK_SIZE = 21   # Окно адаптивного порога (нечётное)
ADAPTIVE_C = 10            # Смещение от локального среднего
BLUR_ENABLED = True        # 3x3 сглаживание перед порогом
MEDIAN_ENABLED = False     # 3x3 медиана (импульсный шум)
DESPECKLE_ENABLED = False  # Удаление одиночных чёрных точек
UPSCALE_FACTOR = 1         # Целочисленный коэффициент увеличения
AUTO_TUNE = False          # Анализатор может поднимать median/despeckle/upscale

# Ядро сглаживания [1 2 1; 2 4 2; 1 2 1] / 16
BLUR_KERNEL_WEIGHTS = ((1, 2, 1), (2, 4, 2), (1, 2, 1))
BLUR_KERNEL_DIVISOR = 16

# Despeckle: чёрный пиксель выживает, если у него >= N чёрных соседей
DESPECKLE_MIN_BLACK_NEIGHBORS = 2

# =============================================================================
# АНАЛИЗАТОР ШУМА / МАСШТАБА
# =============================================================================
NOISE_OUTLIER_DELTA = 30        # |pixel - median| > delta → выброс
NOISE_LEVEL_THRESHOLD = 0.05    # Доля выбросов, выше которой кадр "шумный"
NOISE_SAMPLE_STEP = 2           # Шаг выборки (по обеим осям)
MIN_RELIABLE_DIMENSION = 400    # Минимальная короткая сторона для уверенного OCR
MAX_UPSCALE_FACTOR = 4          # Потолок рекомендованного увеличения

# =============================================================================
# ФИЛЬТРЫ РЕГИОНОВ
# =============================================================================
# Шкала 0-100 (Tesseract). Для распознавателей со шкалой 0-1 передавайте 0.6.
OCR_CONFIDENCE_THRESHOLD = 60

MIN_BBOX_WIDTH = 20
MIN_BBOX_HEIGHT = 10
MIN_BBOX_AREA = 300
MIN_ASPECT_RATIO = 0.03
MAX_ASPECT_RATIO = 30

# Пересечение / площадь МЕНЬШЕГО бокса (не IoU)
OVERLAP_THRESHOLD = 0.7

# Контент: минимум символов и минимум каны для "осмысленного" текста
MIN_CHARACTERS = 2
MIN_KANA_COUNT = 2

# =============================================================================
# СЛИЯНИЕ СТРОК
# =============================================================================
MERGE_MAX_GAP = 10                 # Максимальный вертикальный зазор (px)
MERGE_MIN_HORIZONTAL_OVERLAP = 0.5 # Доля ширины более узкого бокса
MERGE_SAME_LINE_RATIO = 0.5        # gap < -ratio * height → та же строка, не сливаем
MERGE_LINE_SEPARATOR = "\n"
MERGE_MAX_PASSES = 1               # 1 = один проход (без итерации до стабильности)

# =============================================================================
# ОРКЕСТРАТОР
# =============================================================================
SCAN_TIMEOUT_SECONDS = 90.0
