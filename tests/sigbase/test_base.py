import unittest

from sigbase import CaseInsensitiveDict, Error, Kind, Request, Result
from sigbase.base import SignatureBase, build_signature_base
from sigbase.component import query_param

CREATED = 1618884473


class TestSignatureBase(unittest.TestCase):
    def setUp(self):
        self.request = Request(
            method="POST",
            url="https://example.com/foo?bar=baz",
            headers=CaseInsensitiveDict({"Content-Type": "application/json"}),
        )

    def test_base(self):
        result = build_signature_base(
            ["@method", "@target-uri", "content-type"],
            {"keyid": "k", "created": CREATED},
            self.request,
        )
        self.assertEqual(
            result,
            Result.ok(
                SignatureBase(
                    signature_base="\n".join(
                        [
                            '"@method": POST',
                            '"@target-uri": https://example.com/foo?bar=baz',
                            '"content-type": application/json',
                            f'"@signature-params": ("@method" "@target-uri" "content-type");keyid="k";created={CREATED}',
                        ]
                    ),
                    signature_params=f'("@method" "@target-uri" "content-type");keyid="k";created={CREATED}',
                )
            ),
        )

    def test_deterministic(self):
        components = ["@method", "@authority", query_param("bar"), "content-type"]
        params = {"alg": "ed25519", "keyid": "k", "created": CREATED, "nonce": "n"}
        first = build_signature_base(components, params, self.request)
        second = build_signature_base(components, params, self.request)
        self.assertTrue(first.is_ok)
        self.assertEqual(first, second)

    def test_parameter_order_is_preserved(self):
        result = build_signature_base(
            ["@method"], {"created": CREATED, "keyid": "k"}, self.request
        )
        assert result.value is not None
        self.assertTrue(
            result.value.signature_base.endswith(
                f'"@signature-params": ("@method");created={CREATED};keyid="k"'
            )
        )

    def test_query_param_line(self):
        result = build_signature_base([query_param("bar")], {}, self.request)
        assert result.value is not None
        self.assertEqual(
            result.value.signature_base,
            '"@query-param";name="bar": baz\n'
            '"@signature-params": ("@query-param";name="bar")',
        )

    def test_no_trailing_newline(self):
        result = build_signature_base(["@method"], {}, self.request)
        assert result.value is not None
        self.assertFalse(result.value.signature_base.endswith("\n"))

    def test_missing_header_aborts(self):
        result = build_signature_base(
            ["@method", "x-missing", "@path"], {"created": CREATED}, self.request
        )
        self.assertEqual(
            result,
            Result.err(
                Error(
                    Kind.VALIDATION,
                    "Missing header: x-missing",
                    'Request is missing header "x-missing" required in signature input for field "x-missing"',
                )
            ),
        )

    def test_duplicate_component(self):
        result = build_signature_base(["@method", "@method"], {}, self.request)
        self.assertTrue(result.is_err)
        assert result.error is not None
        self.assertEqual(result.error.kind, Kind.VALIDATION)
        self.assertEqual(result.error.message, "Invalid signature input")

    def test_newline_in_value(self):
        self.request.headers["x-evil"] = "a\nb"
        result = build_signature_base(["x-evil"], {}, self.request)
        self.assertTrue(result.is_err)
        assert result.error is not None
        self.assertEqual(result.error.kind, Kind.VALIDATION)

    def test_unencodable_parameter(self):
        result = build_signature_base(["@method"], {"keyid": "clé"}, self.request)
        self.assertTrue(result.is_err)
        assert result.error is not None
        self.assertEqual(result.error.kind, Kind.ENCODING)
        self.assertEqual(result.error.message, "Failed to encode signature parameters")

    def test_invalid_component(self):
        result = build_signature_base([42], {}, self.request)  # type: ignore[list-item]
        self.assertTrue(result.is_err)
        assert result.error is not None
        self.assertEqual(result.error.kind, Kind.VALIDATION)

    def test_empty_parameter_key(self):
        result = build_signature_base(["@method"], {"": 1}, self.request)
        self.assertTrue(result.is_err)
        assert result.error is not None
        self.assertEqual(result.error.kind, Kind.ENCODING)
        self.assertEqual(result.error.message, "Failed to encode signature parameters")
