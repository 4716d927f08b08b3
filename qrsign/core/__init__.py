# Signing core
from qrsign.core.context import CryptoContext as CryptoContext
from qrsign.core.context import default_context as default_context
from qrsign.core.csprng import CSPRNG as CSPRNG
from qrsign.core.entropy import EntropyPool as EntropyPool
from qrsign.core.keys import KeyManager as KeyManager
from qrsign.core.keys import SigningKeyHandle as SigningKeyHandle
from qrsign.core.keys import VerificationKey as VerificationKey
from qrsign.core.signing import SigningProtocol as SigningProtocol
from qrsign.core.verification import VerificationProtocol as VerificationProtocol

__all__ = [
    "CSPRNG",
    "CryptoContext",
    "EntropyPool",
    "KeyManager",
    "SigningKeyHandle",
    "SigningProtocol",
    "VerificationKey",
    "VerificationProtocol",
    "default_context",
]
