from booths.domain.models import (
    AttemptFailure,
    Booth,
    BoothOperation,
    CodeAttempt,
    DailyStat,
    OperatorSession,
    ParticipantTally,
)
from booths.domain.value_objects import BoothId, Duration, OperationId, OperatorInfo

__all__ = [
    "AttemptFailure",
    "Booth",
    "BoothOperation",
    "CodeAttempt",
    "DailyStat",
    "OperatorSession",
    "ParticipantTally",
    "BoothId",
    "OperationId",
    "OperatorInfo",
    "Duration",
]
