import hashlib
import unittest

from crawlsearch.core.budget import ERROR_CEILING, ITERATION_CEILING, budget_exhausted, should_continue
from crawlsearch.core.fingerprint import detect_change, fingerprint


class ChangeDetectorTests(unittest.TestCase):
    def test_fingerprint_is_sha256_hex(self):
        self.assertEqual(fingerprint(b"hello"), hashlib.sha256(b"hello").hexdigest())

    def test_missing_record_needs_extraction(self):
        needed, digest = detect_change(b"body", None)
        self.assertTrue(needed)
        self.assertEqual(digest, fingerprint(b"body"))

    def test_matching_hash_skips_extraction(self):
        stored = {"doc": "ex.com", "text": "body", "hash": fingerprint(b"body")}
        self.assertEqual(detect_change(b"body", stored), (False, fingerprint(b"body")))

    def test_changed_bytes_need_extraction(self):
        stored = {"doc": "ex.com", "text": "old", "hash": fingerprint(b"old")}
        needed, _ = detect_change(b"new", stored)
        self.assertTrue(needed)


class BudgetTests(unittest.TestCase):
    def test_ceilings(self):
        self.assertEqual(ITERATION_CEILING, 2500)
        self.assertEqual(ERROR_CEILING, 100)

    def test_guard(self):
        self.assertTrue(should_continue(1, 0, False))
        self.assertFalse(should_continue(1, 0, True))
        self.assertFalse(should_continue(ITERATION_CEILING, 0, False))
        self.assertFalse(should_continue(1, ERROR_CEILING, False))
        self.assertTrue(should_continue(ITERATION_CEILING - 1, ERROR_CEILING - 1, False))

    def test_exhaustion_ignores_visited_state(self):
        self.assertFalse(budget_exhausted(10, 3))
        self.assertTrue(budget_exhausted(ITERATION_CEILING, 0))
        self.assertTrue(budget_exhausted(0, ERROR_CEILING))
