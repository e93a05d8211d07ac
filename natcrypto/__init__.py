from .natural import NaturalNumber
from .crypto_utilities import (
    WITNESSES,
    WITNESS_EXACT_BOUND,
    generate_next_likely_prime,
    is_even,
    is_prime1,
    is_prime2,
    is_witness_to_compositeness,
    power_mod,
    random_likely_prime,
    random_number,
    reduce_to_gcd,
)
from .natural_root import root
__all__ = [
    "NaturalNumber", "WITNESSES", "WITNESS_EXACT_BOUND",
    "generate_next_likely_prime", "is_even", "is_prime1", "is_prime2",
    "is_witness_to_compositeness", "power_mod", "random_likely_prime",
    "random_number", "reduce_to_gcd", "root",
]
