class SPNError(ValueError):
    """Base class for errors raised by the cipher and the attacks."""


class InvalidConfiguration(SPNError):
    """A parameter lies outside what the cipher supports (e.g. key schedule width overflow)."""


class InvalidKeySchedule(SPNError):
    """A round key schedule of the wrong length was passed to encrypt/decrypt."""


class EmptyPairSet(SPNError):
    """An attack was given no plaintext/ciphertext data at all."""


class NoSurvivingPairs(SPNError):
    """The right-pair filter of the differential attack removed every entry."""
