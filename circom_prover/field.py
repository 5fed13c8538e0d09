"""
Prime-field helpers built on the galois library.

The Circom verifier template only needs a handful of facts about the STARK
base field: its 2-adicity, the multiplicative generator used as the LDE coset
offset, and that every value written to the circuit input is a canonical
field element.
"""

from functools import lru_cache
from typing import Any, Dict, Optional, Type

import galois
import numpy as np

# Goldilocks prime: p = 2^64 - 2^32 + 1
GOLDILOCKS_PRIME = 0xFFFFFFFF00000001

# BN254 scalar field, the native field of circom circuits
BN254_PRIME = 21888242871839275222246405745257275088548364400416034343698204186575808495617

# Multiplicative generators of well-known STARK fields. galois would otherwise
# factor p - 1 to find one, which takes minutes for 254-bit primes.
KNOWN_PRIMITIVE_ELEMENTS: Dict[int, int] = {
    GOLDILOCKS_PRIME: 7,
    BN254_PRIME: 5,
}

# Base field GF(p)
GOLDILOCKS = galois.GF(GOLDILOCKS_PRIME, primitive_element=7, verify=False)


@lru_cache(maxsize=None)
def prime_field(modulus: int, primitive_element: Optional[int] = None) -> Type[galois.FieldArray]:
    """
    Construct (or fetch) the prime field GF(modulus).

    When ``primitive_element`` is given, or ``modulus`` is one of
    ``KNOWN_PRIMITIVE_ELEMENTS``, the generator is trusted as is. Only unknown
    moduli without an explicit generator make galois factor p - 1.
    """
    if modulus == GOLDILOCKS_PRIME and primitive_element in (None, 7):
        return GOLDILOCKS
    if primitive_element is None:
        primitive_element = KNOWN_PRIMITIVE_ELEMENTS.get(modulus)
    if primitive_element is None:
        return galois.GF(modulus)
    return galois.GF(modulus, primitive_element=primitive_element, verify=False)


def two_adicity(modulus: int) -> int:
    """Largest k such that 2^k divides p - 1, the multiplicative group order."""
    n = modulus - 1
    k = 0
    while n % 2 == 0:
        n //= 2
        k += 1
    return k


def domain_offset(field: Type[galois.FieldArray]) -> int:
    """Multiplicative generator of the field, used to shift the LDE domain."""
    return int(field.primitive_element)


def to_field_strings(field: Type[galois.FieldArray], values: Any) -> Any:
    """
    Convert (nested) field values to decimal strings for Circom input files.

    Accepts ints, decimal strings, nested lists/tuples and numpy or galois
    arrays. Raises ValueError if a value is not a canonical element of ``field``.
    """
    if isinstance(values, np.ndarray):
        return to_field_strings(field, values.tolist())
    if isinstance(values, (list, tuple)):
        return [to_field_strings(field, v) for v in values]
    if isinstance(values, bool):
        raise ValueError(f"Expected a field element, got {values!r}")
    value = int(values)
    if not 0 <= value < field.order:
        raise ValueError(f"{value} is not an element of GF({field.order})")
    return str(int(field(value)))
