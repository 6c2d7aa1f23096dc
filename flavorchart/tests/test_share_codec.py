import base64
import unittest
from unittest import mock

from flavorchart.logic.sharing import share_codec
from flavorchart.logic.sharing.share_codec import (
    TOKEN_PATTERN, ShareTokenCharactersError, ShareTokenDecodeError,
    ShareTokenError, ShareTokenParseError, decode, encode, try_decode,
)


def _b64(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


class TestShareCodec(unittest.TestCase):

    def test_round_trip(self):
        payload = {
            "version": 1,
            "selection": ["Cotton Candy™", "Crème Brûlée", "Chocolate"],
            "ui": {"splitByCategory": False, "activeCategories": ["Cake"]},
        }
        self.assertEqual(decode(encode(payload)), payload)

    def test_token_alphabet(self):
        token = encode({"selection": ["?&=/+ ™ " * 5]})
        self.assertTrue(TOKEN_PATTERN.fullmatch(token))
        self.assertNotIn("=", token)

    def test_scalars(self):
        self.assertEqual(decode(encode([])), [])
        self.assertEqual(decode(encode("")), "")
        self.assertIsNone(decode(encode(None)))

    def test_invalid_characters_rejected_before_decoding(self):
        with mock.patch.object(share_codec.base64, "urlsafe_b64decode") as b64:
            trailing_newline = encode({"abc": 1}) + "\n"
            for bad in ("abc+def", "abc/def", "abc=", "has space", "!!", "abc\n", trailing_newline,
                        encode({"a": 1}) + "\n", "\nabc"):
                with self.assertRaises(ShareTokenCharactersError):
                    decode(bad)
            b64.assert_not_called()

    def test_trailing_newline_message(self):
        value, message = try_decode(encode({"abc": 1}) + "\n")
        self.assertIsNone(value)
        self.assertEqual(message, "Share link contains invalid characters.")

    def test_non_string_token(self):
        with self.assertRaises(ShareTokenCharactersError):
            decode(None)

    def test_bad_base64_length(self):
        with self.assertRaises(ShareTokenDecodeError) as ctx:
            decode("A")
        self.assertEqual(ctx.exception.kind, "decode")

    def test_bad_utf8(self):
        with self.assertRaises(ShareTokenDecodeError):
            decode(_b64(b"\xff\xfe"))

    def test_not_json(self):
        with self.assertRaises(ShareTokenParseError) as ctx:
            decode(_b64(b"not json"))
        self.assertEqual(ctx.exception.message, "Share link could not be parsed.")

    def test_errors_share_a_base(self):
        for cls in (ShareTokenCharactersError, ShareTokenDecodeError, ShareTokenParseError):
            self.assertTrue(issubclass(cls, ShareTokenError))
            self.assertTrue(issubclass(cls, ValueError))

    def test_try_decode(self):
        self.assertEqual(try_decode(encode({"a": 1})), ({"a": 1}, None))
        value, message = try_decode("bad!")
        self.assertIsNone(value)
        self.assertEqual(message, "Share link contains invalid characters.")


if __name__ == '__main__':
    unittest.main()
