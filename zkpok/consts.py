"""
Library-wide defaults.

Every function that uses one of these accepts a keyword argument to override it.
"""

import hashlib

from petlib.ec import EcGroup

# NIST P-224, petlib's default curve.
DEFAULT_GROUP = EcGroup()

# Digest used for challenges and try-and-increment hashing. Must output at least as many bytes
# as the encoding of a scalar or a point x coordinate of the group in use.
DEFAULT_HASH = hashlib.sha512

# Separator between the input and the counter in try-and-increment hashing.
ATTEMPT_SEPARATOR = b"-attempt-"

# Upper bounds on retry loops. Reaching them is a fatal error, not a retry condition.
MAX_TRY_AND_INCR_ATTEMPTS = 1024
MAX_SAMPLING_ATTEMPTS = 128
