from __future__ import annotations

# Fixed-point scale: a stored raw integer is value * PRECISION
PRECISION: int = 10 ** 6

# Width of the unsigned integer domain every raw value must fit in
INT_BITS: int = 256
INT_LIMIT: int = 1 << INT_BITS

# Circle constants, pre-scaled (truncated) at PRECISION
PI_RAW: int = 3141592
TAU_RAW: int = 6283185

# Gravitational constant in km^3 / (kg s^2): 6.6743e-20 = G_RAW * 10^-G_EXPONENT.
# Too small for a PRECISION-scaled integer, so it is folded into G*M instead.
G_RAW: int = 66743
G_EXPONENT: int = 24

# Reference masses in kg
M_SUN_KG: int = 19885 * 10 ** 26
M_EARTH_KG: int = 5972 * 10 ** 21
M_MOON_KG: int = 7342 * 10 ** 19
