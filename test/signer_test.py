#!/usr/bin/env python
from base64 import b64decode
from itertools import permutations
from string import ascii_letters, digits
from unittest import TestCase
from urllib.parse import unquote_plus

import idcfsig.signer as signer
from idcfsig.exc import ParameterError

api_key = "AK123"
secret_key = "SECRET"

# Characters the current scheme leaves unescaped.
allowed_form = ascii_letters + digits + "-_."

class FormUrlEncodeTest(TestCase):
    def test_unreserved_passthrough(self):
        self.assertEqual(signer.form_url_encode(allowed_form), allowed_form)

    def test_space_becomes_plus(self):
        self.assertEqual(signer.form_url_encode("a b"), "a+b")

    def test_reserved_bytes_uppercase_hex(self):
        self.assertEqual(signer.form_url_encode("*[]+/=&~"),
                         "%2A%5B%5D%2B%2F%3D%26%7E")
        self.assertEqual(signer.form_url_encode("\n"), "%0A")

    def test_utf8_bytes(self):
        self.assertEqual(signer.form_url_encode("é"), "%C3%A9")
        self.assertEqual(signer.form_url_encode("東京"),
                         "%E6%9D%B1%E4%BA%AC")

    def test_legacy_escapes_dot(self):
        self.assertEqual(
            signer.form_url_encode("1.2", signer.SCHEME_LEGACY.unreserved),
            "1%2E2")
        self.assertEqual(
            signer.form_url_encode("1.2", signer.SCHEME_CURRENT.unreserved),
            "1.2")

    def test_empty(self):
        self.assertEqual(signer.form_url_encode(""), "")

    def test_decode_restores_original(self):
        for value in ("a b", "x=y&z", "tag:[1,2]", "café *", "~!@#$%^()"):
            self.assertEqual(unquote_plus(signer.form_url_encode(value)),
                             value)

class CanonicalQueryBuilderTest(TestCase):
    def builder(self, **kw):
        kw.setdefault("command", "listZones")
        kw.setdefault("api_key", api_key)
        return signer.CanonicalQueryBuilder(**kw)

    def test_fixed_fields_only(self):
        self.assertEqual(
            self.builder().build([]),
            "apikey=AK123&command=listZones&response=json")

    def test_parameters_sorted_and_encoded(self):
        self.assertEqual(
            self.builder(command="listVirtualMachines").build(
                [("zone", "tokyo"), ("name", "a b")]),
            "apikey=AK123&command=listVirtualMachines&name=a+b&"
            "response=json&zone=tokyo")

    def test_order_independent(self):
        parameters = [("zone", "tokyo"), ("name", "a b"), ("Size", "10"),
                      ("id", "x.y")]
        builder = self.builder()
        expected = builder.build(parameters)
        for permutation in permutations(parameters):
            self.assertEqual(builder.build(list(permutation)), expected)

    def test_deterministic(self):
        builder = self.builder()
        parameters = [("b", "2"), ("a", "1")]
        self.assertEqual(builder.build(parameters), builder.build(parameters))

    def test_codepoint_ordering(self):
        # Upper case sorts before lower case; this is not locale ordering.
        query = self.builder().build([("b", "1"), ("B", "2"), ("a_", "3")])
        self.assertEqual(
            query,
            "B=2&a_=3&apikey=AK123&b=1&command=listZones&response=json")

    def test_names_are_encoded(self):
        query = self.builder().build([("tags[0].key", "env")])
        self.assertIn("tags%5B0%5D.key=env", query)

    def test_xml_format(self):
        query = self.builder(
            response_format=signer.ResponseFormat.XML).build([])
        self.assertTrue(query.endswith("&response=xml"))

    def test_omitted_format(self):
        query = self.builder(
            response_format=signer.ResponseFormat.OMITTED).build([])
        self.assertEqual(query, "apikey=AK123&command=listZones")

    def test_legacy_scheme(self):
        query = self.builder(scheme=signer.SCHEME_LEGACY).build(
            [("ip", "10.0.0.1")])
        self.assertEqual(
            query, "apikey=AK123&command=listZones&ip=10%2E0%2E0%2E1")

    def test_duplicate_names_kept(self):
        builder = self.builder()
        with self.assertLogs("idcfsig.signer", level="WARNING"):
            query = builder.build([("id", "1"), ("id", "2")])
        self.assertIn("id=1&id=2", query)

    def test_invalid_properties(self):
        with self.assertRaises(ParameterError):
            self.builder(command="")
        with self.assertRaises(TypeError):
            self.builder(command=None)
        with self.assertRaises(TypeError):
            self.builder(api_key=123)
        with self.assertRaises(TypeError):
            self.builder(response_format="json")
        with self.assertRaises(TypeError):
            self.builder(scheme="legacy")

    def test_missing_command(self):
        builder = signer.CanonicalQueryBuilder(api_key=api_key)
        with self.assertRaises(ParameterError):
            builder.build([])

class SignatureTest(TestCase):
    def test_signature_input_substitutions(self):
        self.assertEqual(signer.get_signature_input("A+B%2Ac"), "a%20b*c")
        self.assertEqual(
            signer.get_signature_input("K=%5B1%5D%2E%2A"), "k=[1].*")

    def test_signature_input_lowercases_everything(self):
        self.assertEqual(
            signer.get_signature_input(
                "apikey=AK123&command=listZones&response=json"),
            "apikey=ak123&command=listzones&response=json")

    def test_plus_replaced_before_unescape(self):
        # An escaped '+' (%2B) must stay escaped; only literal '+' is a space.
        self.assertEqual(signer.get_signature_input("a=%2B+"), "a=%2b%20")

    def test_known_signature(self):
        self.assertEqual(
            signer.get_signature(
                "apikey=AK123&command=listZones&response=json", secret_key),
            "1VjcnlATgHpGgEtLUCmKn8iWCZ0%3D")

    def test_known_signature_with_escapes(self):
        query = ("apikey=AK123&command=listVirtualMachines&name=a+b&"
                 "response=json&zone=tokyo")
        self.assertEqual(signer.get_signature(query, secret_key),
                         "ZJf5CWa30Un%2BNJik%2B%2FcZLQvPBKQ%3D")

    def test_bytes_key(self):
        query = "apikey=AK123&command=listZones&response=json"
        self.assertEqual(signer.get_signature(query, secret_key.encode()),
                         signer.get_signature(query, secret_key))

    def test_empty_key(self):
        signature = signer.get_signature(
            "apikey=AK123&command=listZones&response=json", "")
        self.assertEqual(signature, "pIiPK2GTu99B3%2FpgznFFokFZVC8%3D")
        self.assertEqual(len(b64decode(unquote_plus(signature))), 20)

    def test_stability(self):
        query = "apikey=AK123&command=listZones&response=json"
        signature = signer.get_signature(query, secret_key)
        self.assertEqual(signer.get_signature(query, secret_key), signature)
        self.assertNotEqual(signer.get_signature(query, secret_key + "x"),
                            signature)
        self.assertNotEqual(signer.get_signature(query + "x", secret_key),
                            signature)

    def test_invalid_key_type(self):
        with self.assertRaises(TypeError):
            signer.get_signature("a=b", None)

    def test_sign_request(self):
        query, signature = signer.sign_request(
            [], command="listZones", api_key=api_key, secret_key=secret_key)
        self.assertEqual(query, "apikey=AK123&command=listZones&response=json")
        self.assertEqual(signature, "1VjcnlATgHpGgEtLUCmKn8iWCZ0%3D")

    def test_append_signature(self):
        self.assertEqual(signer.append_signature("a=b", "x%3D"),
                         "a=b&signature=x%3D")

    def test_schemes_by_name(self):
        self.assertIs(signer.SCHEMES["current"], signer.SCHEME_CURRENT)
        self.assertIs(signer.SCHEMES["legacy"], signer.SCHEME_LEGACY)

# Local variables:
# mode: Python
# tab-width: 8
# indent-tabs-mode: nil
# End:
# vi: set expandtab tabstop=8
