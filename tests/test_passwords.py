import string

from shorturl.passwords import password_hash


def test_known_digest_of_empty_string():
    assert password_hash("") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_known_digest_of_abc():
    assert password_hash("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_digest_is_lowercase_hex_of_fixed_length():
    password = "password"
    digest = password_hash(password)
    assert len(digest) == 64
    assert set(digest) <= set(string.hexdigits.lower())


def test_digest_is_deterministic_and_distinct():
    password = "password"
    assert password_hash(password) == password_hash(password)
    assert password_hash(password) != password_hash(password + "1")