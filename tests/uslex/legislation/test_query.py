import pytest

from uslex.legislation.query import QueryVariants, build_variants, quote_token, tokenize


class TestBuildVariants:
    def test_and_then_or(self):
        assert build_variants("breach notification") == QueryVariants(
            '"breach" AND "notification"', '"breach" OR "notification"'
        )

    def test_single_token(self):
        variants = build_variants("encryption")
        assert variants.primary == variants.fallback == '"encryption"'

    def test_operators_are_quoted(self):
        variants = build_variants("NOT near* OR")
        assert variants.primary == '"NOT" AND "near" AND "OR"'

    @pytest.mark.parametrize("query", ["", "   ", "!!! ... §", None])
    def test_no_tokens(self, query):
        assert build_variants(query) == QueryVariants(None, None)


class TestTokenize:
    def test_splits_on_punctuation(self):
        assert tokenize("data_breach: § 1798.82(a)") == ["data", "breach", "1798", "82", "a"]

    def test_unicode_letters(self):
        assert tokenize("protección de datos") == ["protección", "de", "datos"]

    def test_quote_token_escapes_quotes(self):
        assert quote_token('say"what') == '"say""what"'
