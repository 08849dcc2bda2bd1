import random
import string

from writing_assistant.domains.analysis import fingerprint


def reference_hash(text):
    value = 0
    for char in text:
        value = (value << 5) - value + ord(char)
        value = (value + 2 ** 31) % 2 ** 32 - 2 ** 31
    return str(abs(value))


def test_empty_text():
    assert fingerprint("") == "0"


def test_known_values():
    assert fingerprint("a") == "97"
    assert fingerprint("ab") == str(97 * 31 + 98)


def test_matches_32_bit_wrapping_hash():
    texts = [
        "Hello, world!",
        "The quick brown fox jumps over the lazy dog." * 20,
        "Unicode: naïve café, 日本語",
    ]
    for text in texts:
        assert fingerprint(text) == reference_hash(text)


def test_fingerprint_is_idempotent():
    text = "Same text gives the same fingerprint."
    assert fingerprint(text) == fingerprint(text)


def test_mutations_change_fingerprint():
    rng = random.Random(1234)
    alphabet = string.ascii_letters + string.digits + " .,!?"

    for _ in range(200):
        base = "".join(rng.choice(alphabet) for _ in range(rng.randint(1, 200)))
        position = rng.randrange(len(base))
        replacement = rng.choice([c for c in alphabet if c != base[position]])
        mutated = base[:position] + replacement + base[position + 1:]

        assert fingerprint(base) != fingerprint(mutated)
        assert fingerprint(base) == fingerprint(base)
