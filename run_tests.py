#!/usr/bin/env python3
"""
Main test runner for unitpad.

Runs a smoke pass over a sample document, then the unittest suites under
tests/.

Author: xwest
"""

import sys
import os
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)

SAMPLE_DOCUMENT = [
    ("1 GB / 10 Mbps", "800 s"),
    ("100 GB/month to GB/week", "22.998 GB/week"),
    ("ram = 16 GiB", "16 GiB"),
    ("ram * 4", "64 GiB"),
    ("line3 + line4", "80 GiB"),
    ("20% of line5", "16 GiB"),
    ("$5/hr * 1 day", "120 $"),
]


def run_smoke_test() -> bool:
    """Evaluate the sample document and compare every line."""

    print("🚀 unitpad Test Suite")
    print("=" * 60)

    try:
        from unitpad import Document, tokenize
        print("✅ All unitpad modules imported successfully")
    except ImportError as e:
        print(f"❌ Failed to import unitpad: {e}")
        return False

    print("Evaluating sample document...")
    document = Document.from_lines([text for text, _ in SAMPLE_DOCUMENT])
    passed = True

    for index, (text, expected) in enumerate(SAMPLE_DOCUMENT):
        actual = document.results[index]
        tokens = tokenize(text) or []
        if actual == expected:
            print(f"  ✅ {text:<45} => {actual}  ({len(tokens)} tokens)")
        else:
            print(f"  ❌ {text:<45} => {actual} (expected {expected})")
            passed = False

    print()
    return passed


def run_unit_tests() -> bool:
    suite = unittest.defaultTestLoader.discover(os.path.join(project_root, "tests"))
    result = unittest.TextTestRunner(verbosity=1).run(suite)
    return result.wasSuccessful()


if __name__ == "__main__":
    success = run_smoke_test()
    success = run_unit_tests() and success

    print("=" * 60)
    print("🎉 All tests PASSED!" if success else "❌ Some tests FAILED")
    sys.exit(0 if success else 1)
