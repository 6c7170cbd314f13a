"""Daily quota view for one external API surface."""

from pydantic import BaseModel, ConfigDict

WARNING_THRESHOLD = 50.0
CRITICAL_THRESHOLD = 80.0


class QuotaView(BaseModel):
    """Usage of one API surface for the current day."""

    model_config = ConfigDict(frozen=True)

    used: int
    limit: int
    remaining: int
    percentage: float  # share of the limit already used
    exceeded: bool

    @classmethod
    def from_usage(cls, used: int, limit: int) -> "QuotaView":
        remaining = max(limit - used, 0)
        percentage = (used / limit) * 100 if limit > 0 else 100.0
        return cls(
            used=used,
            limit=limit,
            remaining=remaining,
            percentage=percentage,
            exceeded=remaining == 0,
        )

    @property
    def warning_level(self) -> str:
        """One of ``none``, ``warning``, ``critical`` or ``limit``."""
        if self.exceeded:
            return "limit"
        if self.percentage >= CRITICAL_THRESHOLD:
            return "critical"
        if self.percentage >= WARNING_THRESHOLD:
            return "warning"
        return "none"
