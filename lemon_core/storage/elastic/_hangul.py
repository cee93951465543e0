"""
Hangul decomposition used by the autocomplete fields.
"""

from __future__ import annotations

__all__ = [
    "as_alphabet_key_strokes",
    "as_basic_jamo_sequence",
    "as_choseong_sequence",
    "as_jamo_sequence",
    "is_hangul",
]

import unicodedata

CHOSEONG = list("ㄱㄲㄴㄷㄸㄹㅁㅂㅃㅅㅆㅇㅈㅉㅊㅋㅌㅍㅎ")
JUNGSEONG = list("ㅏㅐㅑㅒㅓㅔㅕㅖㅗㅘㅙㅚㅛㅜㅝㅞㅟㅠㅡㅢㅣ")
JONGSEONG = list("ㄱㄲㄳㄴㄵㄶㄷㄹㄺㄻㄼㄽㄾㄿㅀㅁㅂㅄㅅㅆㅇㅈㅊㅋㅌㅍㅎ")

# composite jamo -> basic jamo
JAMO_DECOMPOSE_MAP = {
    "ㄲ": "ㄱㄱ",
    "ㄸ": "ㄷㄷ",
    "ㅃ": "ㅂㅂ",
    "ㅆ": "ㅅㅅ",
    "ㅉ": "ㅈㅈ",
    "ㄳ": "ㄱㅅ",
    "ㄵ": "ㄴㅈ",
    "ㄶ": "ㄴㅎ",
    "ㄺ": "ㄹㄱ",
    "ㄻ": "ㄹㅁ",
    "ㄼ": "ㄹㅂ",
    "ㄽ": "ㄹㅅ",
    "ㄾ": "ㄹㅌ",
    "ㄿ": "ㄹㅍ",
    "ㅀ": "ㄹㅎ",
    "ㅄ": "ㅂㅅ",
    "ㅐ": "ㅏㅣ",
    "ㅒ": "ㅑㅣ",
    "ㅔ": "ㅓㅣ",
    "ㅖ": "ㅕㅣ",
    "ㅘ": "ㅗㅏ",
    "ㅙ": "ㅗㅏㅣ",
    "ㅚ": "ㅗㅣ",
    "ㅝ": "ㅜㅓ",
    "ㅞ": "ㅜㅓㅣ",
    "ㅟ": "ㅜㅣ",
    "ㅢ": "ㅡㅣ",
}

# jamo -> key on the 2-set korean keyboard
QWERTY_MAP = {
    "ㄱ": "r",
    "ㄴ": "s",
    "ㄷ": "e",
    "ㄹ": "f",
    "ㅁ": "a",
    "ㅂ": "q",
    "ㅅ": "t",
    "ㅇ": "d",
    "ㅈ": "w",
    "ㅊ": "c",
    "ㅋ": "z",
    "ㅌ": "x",
    "ㅍ": "v",
    "ㅎ": "g",
    "ㅏ": "k",
    "ㅑ": "i",
    "ㅓ": "j",
    "ㅕ": "u",
    "ㅗ": "h",
    "ㅛ": "y",
    "ㅜ": "n",
    "ㅠ": "b",
    "ㅡ": "m",
    "ㅣ": "l",
    "ㄲ": "R",
    "ㄸ": "E",
    "ㅃ": "Q",
    "ㅆ": "T",
    "ㅉ": "W",
    "ㄳ": "rt",
    "ㄵ": "sw",
    "ㄶ": "sg",
    "ㄺ": "fr",
    "ㄻ": "fa",
    "ㄼ": "fq",
    "ㄽ": "ft",
    "ㄾ": "fx",
    "ㄿ": "fv",
    "ㅀ": "fg",
    "ㅄ": "qt",
    "ㅐ": "o",
    "ㅒ": "O",
    "ㅔ": "p",
    "ㅖ": "P",
    "ㅘ": "hk",
    "ㅙ": "ho",
    "ㅚ": "hl",
    "ㅝ": "nj",
    "ㅞ": "np",
    "ㅟ": "nl",
    "ㅢ": "ml",
}


def is_hangul_syllable(code: int) -> bool:
    return 0xAC00 <= code <= 0xD7A3


def is_hangul_char(code: int) -> bool:
    # jamo extended A/B are not included
    return (
        is_hangul_syllable(code)
        or 0x1100 <= code <= 0x11FF
        or 0x3130 <= code <= 0x318F
    )


def is_hangul(text: str | None, any_char: bool = False) -> bool:
    """Check the text is hangul.

    Args:
        text:
            Text to check.
        any_char:
            True when a single hangul letter is enough,
            otherwise every letter must be hangul.
    """
    if not text:
        return any_char
    checks = (is_hangul_char(ord(ch)) for ch in text)
    return any(checks) if any_char else all(checks)


def as_jamo_sequence(text: str) -> str:
    """Decompose syllables into compatibility jamo.

    '한글' becomes 'ㅎㅏㄴㄱㅡㄹ'.
    """
    result = []
    for ch in text:
        if not is_hangul_syllable(ord(ch)):
            result.append(ch)
            continue
        decomposed = unicodedata.normalize("NFD", ch)
        result.append(CHOSEONG[ord(decomposed[0]) - 0x1100])
        result.append(JUNGSEONG[ord(decomposed[1]) - 0x1161])
        if len(decomposed) > 2:
            result.append(JONGSEONG[ord(decomposed[2]) - 0x11A8])
    return "".join(result)


def as_basic_jamo_sequence(text: str) -> str:
    return "".join(
        JAMO_DECOMPOSE_MAP.get(ch, ch) for ch in as_jamo_sequence(text)
    )


def as_alphabet_key_strokes(text: str) -> str:
    """Key strokes typing the text on a 2-set keyboard.

    '한글' becomes 'gksrmf'.
    """
    return "".join(QWERTY_MAP.get(ch, ch) for ch in as_jamo_sequence(text))


def as_choseong_sequence(text: str) -> str:
    result = []
    for ch in text:
        jamo = as_jamo_sequence(ch)
        if not jamo or jamo[0] not in CHOSEONG:
            break
        result.append(jamo[0])
    return "".join(result)
