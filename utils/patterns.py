"""Pre-compiled regex patterns for the IPEDS comps tools.

All patterns are compiled once at module import; the CIP patterns in
particular run against every row of every completions file scanned.

Usage:
    from utils.patterns import CIP_CANONICAL, COMPLETIONS_FILE

    match = CIP_CANONICAL.match(code)
    ...
"""

import re

# Anything that is not a digit or a literal dot (strips quotes, "=", spaces)
CIP_STRIP_CHARS = re.compile(r'[^0-9.]')

# Canonicalizable CIP prefix: 2 digits, dot, 1-4 fractional digits
# Captures the series (group 1) and the fractional part (group 2)
CIP_CANONICAL = re.compile(r'^(\d{2})\.(\d{1,4})')

# Completions file names as published by NCES and as renamed locally
# Matches: "C_2019.csv", "c2019_a.csv", "C2021_A_RV.csv"
# Captures the four-digit year (group 1)
COMPLETIONS_FILE = re.compile(r'^c_?(\d{4})(?:_a)?(?:_rv)?\.csv$', re.IGNORECASE)

# Institutional characteristics (HD) file names: "HD_2023.csv", "hd2023.csv"
DIRECTORY_FILE = re.compile(r'^hd_?(\d{4})(?:_rv)?\.csv$', re.IGNORECASE)

# Plain signed integers: "1204", "-3" (separators stripped by the caller)
INTEGER = re.compile(r'^[+-]?\d+$')
