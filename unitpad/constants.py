"""
Shared numeric and lexical configuration for unitpad.

Author: xwest
"""

import sys

# Integral values below this magnitude print without a decimal point
MAX_INTEGER_FOR_FORMATTING = 1e15

# Divisors and results smaller than this are treated as zero
FLOAT_EPSILON = sys.float_info.epsilon

# Fractional digits kept when formatting non-integral results
DECIMAL_PLACES = 3

KNOWN_FUNCTIONS = frozenset({"sqrt", "sum_above"})

CURRENCY_SYMBOLS = "$€£¥₹₩"

# Treated as word separators so formulas can sit inside prose
SKIPPED_PUNCTUATION = frozenset(":;,!?.\"'`|&#@~[]{}<>")
