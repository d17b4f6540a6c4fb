import pytest

from quiz_portal.utils.access_code import ACCESS_CODE_ALPHABET, generate_access_code


class TestAccessCode:

    def test_default_length_is_ten(self):
        assert len(generate_access_code()) == 10

    def test_uses_url_safe_alphabet(self):
        code = generate_access_code(64)
        assert set(code) <= set(ACCESS_CODE_ALPHABET)

    def test_codes_are_not_repeated(self):
        codes = {generate_access_code() for _ in range(200)}
        assert len(codes) == 200

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            generate_access_code(0)
