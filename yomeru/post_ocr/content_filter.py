"""
Post-OCR: проверка "осмысленности" текста региона.

Два уровня:
1. is_junk(): язык-независимый мусор (только пунктуация, символы,
   ASCII цифры, пробелы). Применяется всегда.
2. Предикат контента (подключаемый). По умолчанию JapaneseContentPredicate:
   хотя бы один иероглиф ИЛИ хотя бы две каны.

strip_non_japanese_text() вырезает из строки всё, кроме японского
письма и CJK пунктуации (латинские подписи на двуязычных табличках).
"""

import re
import unicodedata
from typing import Callable

from config.settings import MIN_KANA_COUNT

ContentPredicate = Callable[[str], bool]

# CJK Unified Ideographs + Extension A
KANJI_RE = re.compile(r"[\u4e00-\u9faf\u3400-\u4dbf]")
# Hiragana + Katakana (включая ー)
KANA_RE = re.compile(r"[\u3040-\u309f\u30a0-\u30ff]")
# Всё, что НЕ японское письмо и не CJK/полноширинная пунктуация
NON_JAPANESE_RE = re.compile(
    r"[^\u4e00-\u9faf\u3400-\u4dbf\u3040-\u309f\u30a0-\u30ff\u3000-\u303f\uff00-\uffef]"
)


def _is_junk_char(ch: str) -> bool:
    if ch.isspace():
        return True
    if "0" <= ch <= "9":
        return True
    return unicodedata.category(ch)[0] in ("P", "S")


def is_junk(text: str) -> bool:
    """Пустая строка или только пунктуация / символы / ASCII цифры / пробелы."""
    stripped = text.strip()
    if not stripped:
        return True
    return all(_is_junk_char(ch) for ch in stripped)


def has_japanese_content(text: str, min_kana: int = MIN_KANA_COUNT) -> bool:
    """Хотя бы один иероглиф или хотя бы min_kana символов каны."""
    if KANJI_RE.search(text):
        return True
    return len(KANA_RE.findall(text)) >= min_kana


class JapaneseContentPredicate:
    """Предикат по умолчанию для filter_by_content."""

    def __init__(self, min_kana: int = MIN_KANA_COUNT):
        self.min_kana = min_kana

    def __call__(self, text: str) -> bool:
        return has_japanese_content(text, self.min_kana)


def accept_any(text: str) -> bool:
    """Пропускает всё (используется при require_japanese=False)."""
    return True


def strip_non_japanese_text(text: str) -> str:
    """'Exit 非常口 Emergency' → '非常口'. Пробелы ASCII тоже удаляются."""
    return NON_JAPANESE_RE.sub("", text)
