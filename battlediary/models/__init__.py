from battlediary.models.export import (
    CaptureState,
    ExportAction,
    ExportMode,
    ExportPlan,
    ExportPresentation,
    ShareAction,
    ShareCapability,
    ShareFile,
)
from battlediary.models.failure import (
    STANDARD_MESSAGES,
    STANDARD_SUGGESTIONS,
    ApiResponse,
    CaptureUnavailableError,
    FailureDetail,
    FailureKind,
    KnownError,
    OutcomeType,
    SaveFailedError,
    ShareCancelledOrFailedError,
    ShareUnsupportedError,
    create_known_failure,
    create_success,
    create_unknown_failure,
    finalize_response,
    is_finalized,
)
from battlediary.models.record import (
    ExportInput,
    Game,
    GameResult,
    Match,
    MatchResult,
    Record,
    as_record_list,
)

__all__ = [
    "ApiResponse",
    "CaptureState",
    "CaptureUnavailableError",
    "ExportAction",
    "ExportInput",
    "ExportMode",
    "ExportPlan",
    "ExportPresentation",
    "FailureDetail",
    "FailureKind",
    "Game",
    "GameResult",
    "KnownError",
    "Match",
    "MatchResult",
    "OutcomeType",
    "Record",
    "STANDARD_MESSAGES",
    "STANDARD_SUGGESTIONS",
    "SaveFailedError",
    "ShareAction",
    "ShareCancelledOrFailedError",
    "ShareCapability",
    "ShareFile",
    "ShareUnsupportedError",
    "as_record_list",
    "create_known_failure",
    "create_success",
    "create_unknown_failure",
    "finalize_response",
    "is_finalized",
]
