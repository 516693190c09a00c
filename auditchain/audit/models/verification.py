"""Verification result models."""

from pydantic import BaseModel, ConfigDict, Field, computed_field

MALFORMED = "malformed"
PREV_HASH_MISMATCH = "prevHash mismatch"
HASH_MISMATCH = "hash mismatch"
UNSUPPORTED_ALGORITHM = "unsupported chain algorithm"


class VerificationIssue(BaseModel):
    """One discrepancy found while walking the chain."""

    model_config = ConfigDict(frozen=True)

    position: int = Field(..., ge=1, description="1-based storage position")
    description: str = Field(..., description="What is wrong with the record")

    def __str__(self) -> str:
        return f"record {self.position}: {self.description}"


class VerificationResult(BaseModel):
    """Outcome of a full-chain verification pass.

    Tampering is reported here as data; a verification pass never raises
    because of what it finds in the records.
    """

    model_config = ConfigDict(frozen=True)

    issues: list[VerificationIssue] = Field(default_factory=list)
    records_checked: int = Field(default=0, description="Complete records read")
    head_hash: str | None = Field(
        default=None, description="Recomputed hash of the last decodable record"
    )
    pending_tail: bool = Field(
        default=False, description="An incomplete trailing record was skipped"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ok(self) -> bool:
        """True iff no issues were found."""
        return not self.issues

    def messages(self) -> list[str]:
        """Issues rendered as 'record N: description'."""
        return [str(issue) for issue in self.issues]
