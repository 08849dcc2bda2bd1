_INT32 = 1 << 32
_INT32_MAX = (1 << 31) - 1


def fingerprint(text: str) -> str:
    """Отпечаток содержимого: полиномиальный хеш по кодам символов.

    Не криптографический, нужен только для поиска одинаковых версий.
    Хеш держится в знаковом 32-битном диапазоне, наружу отдается модуль.
    """
    value = 0
    for char in text:
        value = (value * 31 + ord(char)) % _INT32
        if value > _INT32_MAX:
            value -= _INT32
    return str(abs(value))
