import math
import unittest

from bufscan.errors import Errors, NumberFormatError
from bufscan.numeric import (
    int_range,
    parse_float,
    parse_int,
    strip_commas,
    valid_radix,
)


class ParseIntTest(unittest.TestCase):
    def assertFails(self, what, *args):
        with self.assertRaises(NumberFormatError) as ctx:
            parse_int(*args)
        self.assertEqual(ctx.exception.what, what)

    def test_decimal(self):
        self.assertEqual(parse_int("42"), 42)
        self.assertEqual(parse_int("-42"), -42)
        self.assertEqual(parse_int("+7"), 7)

    def test_bounds(self):
        self.assertEqual(parse_int("2147483647"), 2147483647)
        self.assertEqual(parse_int("-2147483648"), -2147483648)
        self.assertFails(Errors.OVERFLOW, "2147483648")
        self.assertFails(Errors.OVERFLOW, "-2147483649")

    def test_width(self):
        self.assertEqual(int_range(8), (-128, 127))
        self.assertEqual(parse_int("9223372036854775807", 10, 64),
                         2**63 - 1)
        self.assertFails(Errors.OVERFLOW, "128", 10, 8)
        self.assertEqual(parse_int("9" * 30, 10, None), int("9" * 30))

    def test_radix(self):
        self.assertEqual(parse_int("11010", 2), 26)
        self.assertEqual(parse_int("FF", 16), 255)
        self.assertEqual(parse_int("z", 36), 35)
        self.assertFails(Errors.INVALID_DIGIT, "2", 2)
        self.assertFails(Errors.INVALID_RADIX, "1", 1)
        self.assertFails(Errors.INVALID_RADIX, "1", 37)

    def test_lenient_forms_are_rejected(self):
        self.assertFails(Errors.INVALID_DIGIT, "0x1f", 16)
        self.assertFails(Errors.INVALID_DIGIT, "1_000")
        self.assertFails(Errors.INVALID_DIGIT, " 1")
        self.assertFails(Errors.INVALID_DIGIT, "1,000")
        self.assertFails(Errors.INVALID_DIGIT, "+")
        self.assertFails(Errors.INVALID_DIGIT, "--1")
        self.assertFails(Errors.INVALID_DIGIT, "٣")
        self.assertFails(Errors.INVALID_DIGIT, "\u212a", 36)
        self.assertFails(Errors.INVALID_DIGIT, "1\u212a", 36)

    def test_empty(self):
        self.assertFails(Errors.EMPTY, "")

    def test_error_message(self):
        with self.assertRaises(ValueError) as ctx:
            parse_int("abc")
        self.assertEqual(str(ctx.exception), "invalid-digit: 'abc'")


class ParseFloatTest(unittest.TestCase):
    def assertFails(self, what, *args):
        with self.assertRaises(NumberFormatError) as ctx:
            parse_float(*args)
        self.assertEqual(ctx.exception.what, what)

    def test_decimal(self):
        self.assertEqual(parse_float("2.5"), 2.5)
        self.assertEqual(parse_float("-.5"), -0.5)
        self.assertEqual(parse_float("1."), 1.0)
        self.assertEqual(parse_float("1e3"), 1000.0)
        self.assertEqual(parse_float("1E-2"), 0.01)
        self.assertEqual(parse_float("1e400"), math.inf)

    def test_special_values(self):
        self.assertEqual(parse_float("inf"), math.inf)
        self.assertEqual(parse_float("-Infinity"), -math.inf)
        self.assertTrue(math.isnan(parse_float("nan")))

    def test_invalid_decimal(self):
        self.assertFails(Errors.INVALID_DIGIT, "1.2.3")
        self.assertFails(Errors.INVALID_DIGIT, "1_0.5")
        self.assertFails(Errors.INVALID_DIGIT, ".")
        self.assertFails(Errors.INVALID_DIGIT, "e5")
        self.assertFails(Errors.EMPTY, "")

    def test_radix(self):
        self.assertEqual(parse_float("11010.1", 2), 26.5)
        self.assertEqual(parse_float("-ff.8", 16), -255.5)
        self.assertEqual(parse_float("z", 36), 35.0)
        self.assertEqual(parse_float(".1", 2), 0.5)

    def test_uppercase_digits(self):
        self.assertEqual(parse_float("FF.8", 16), 255.5)
        self.assertEqual(parse_float("1E2", 2), 4.0)
        self.assertFails(Errors.INVALID_DIGIT, "\u212a", 36)

    def test_radix_exponent(self):
        self.assertEqual(parse_float("1.1e2", 2), 6.0)
        self.assertEqual(parse_float("1e-1", 2), 0.5)
        self.assertEqual(parse_float("1^2", 16), 256.0)
        self.assertEqual(parse_float("e", 16), 14.0)

    def test_radix_out_of_range(self):
        self.assertEqual(parse_float("1e99999", 2), math.inf)
        self.assertEqual(parse_float("-1e99999", 2), -math.inf)
        self.assertEqual(parse_float("1e-99999", 2), 0.0)
        self.assertEqual(parse_float("1e2000", 2), math.inf)
        self.assertEqual(parse_float("0e999999999", 2), 0.0)

    def test_invalid_radix(self):
        self.assertFails(Errors.INVALID_RADIX, "11010.1", 1)
        self.assertFails(Errors.INVALID_DIGIT, "2.0", 2)
        self.assertFails(Errors.INVALID_DIGIT, "1e", 2)
        self.assertFails(Errors.INVALID_DIGIT, ".", 2)


class HelpersTest(unittest.TestCase):
    def test_strip_commas(self):
        self.assertEqual(strip_commas("2,147,483,647"), "2147483647")
        self.assertEqual(strip_commas(",,"), "")

    def test_valid_radix(self):
        self.assertTrue(valid_radix(2))
        self.assertTrue(valid_radix(36))
        self.assertFalse(valid_radix(1))
        self.assertFalse(valid_radix(37))


if __name__ == '__main__':
    unittest.main()
