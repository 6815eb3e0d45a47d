from decimal import Decimal

from django.test import SimpleTestCase

from policies.words import amount_in_words


class AmountInWordsTests(SimpleTestCase):
    def test_known_values(self):
        cases = {
            1: "One Only",
            0: "Zero Only",
            15: "Fifteen Only",
            100: "One Hundred Only",
            105: "One Hundred and Five Only",
            3500: "Three Thousand Five Hundred Only",
            4499: "Four Thousand Four Hundred and Ninety Nine Only",
            6499: "Six Thousand Four Hundred and Ninety Nine Only",
            100000: "One Lakh Only",
            2550000: "Twenty Five Lakh Fifty Thousand Only",
            10000000: "One Crore Only",
            999999999: "Ninety Nine Crore Ninety Nine Lakh Ninety Nine Thousand Nine Hundred and Ninety Nine Only",
        }
        for amount, words in cases.items():
            with self.subTest(amount=amount):
                self.assertEqual(amount_in_words(amount), words)

    def test_fraction_is_truncated(self):
        self.assertEqual(amount_in_words(4499.99), "Four Thousand Four Hundred and Ninety Nine Only")
        self.assertEqual(amount_in_words(Decimal("1.50")), "One Only")

    def test_invalid_input(self):
        for value in (-1, -0.5, None, True, "4499", float("nan"), float("inf"), Decimal("NaN")):
            with self.subTest(value=value):
                self.assertEqual(amount_in_words(value), "Invalid Amount")

    def test_overflow(self):
        self.assertEqual(amount_in_words(1_000_000_000), "Overflow")
