"""Fingerprint kinds.

A fingerprint kind names the package that generates it, the fingerprint type
and the folded width in bits. Its text form is ``<package>_<type>_<nbits>``,
e.g. ``ob_ecfp4_2048``.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from dividend_orchestrator.errors import FingerprintParseError


class FingerprintType(str, Enum):
    FP2 = "fp2"
    FP3 = "fp3"
    FP4 = "fp4"
    ECFP0 = "ecfp0"
    ECFP2 = "ecfp2"
    ECFP4 = "ecfp4"
    ECFP6 = "ecfp6"
    ECFP8 = "ecfp8"
    ECFP10 = "ecfp10"


class FingerprintKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    package: Literal["ob"] = "ob"
    fingerprint: FingerprintType = FingerprintType.ECFP4
    nbits: int = Field(default=2048, gt=0)

    @classmethod
    def openbabel(cls, fingerprint: FingerprintType, nbits: int) -> FingerprintKind:
        return cls(package="ob", fingerprint=fingerprint, nbits=nbits)

    @classmethod
    def parse(cls, text: str) -> FingerprintKind:
        """Parse ``ob_ecfp4_2048``-style text.

        Raises:
            FingerprintParseError: If the text is not three underscore separated
                parts, nbits is not an integer, or the package/type is unknown.
        """
        parts = text.split("_")
        if len(parts) != 3:
            raise FingerprintParseError(
                f"Input str {text} shall be in format (package)_(fingerprint)_(nbits), "
                "eg. ob_ecfp2_512"
            )

        package, fp_name, nbits_str = parts
        try:
            nbits = int(nbits_str)
        except ValueError as e:
            raise FingerprintParseError(
                f"str {nbits_str} cannot be integer for parameter nbits"
            ) from e

        known = {member.value for member in FingerprintType}
        if package != "ob" or fp_name not in known:
            raise FingerprintParseError(
                f"Cannot find package {package} or fingerprint {fp_name}"
            )
        if nbits <= 0:
            raise FingerprintParseError(f"nbits must be positive, got {nbits}")

        return cls.openbabel(FingerprintType(fp_name), nbits)

    def __str__(self) -> str:
        return f"{self.package}_{self.fingerprint.value}_{self.nbits}"
