from .application import (
    TransitionOutcome,
    assign_rank,
    create_application,
    publish_showcase,
    reject,
    request_reupload,
    review_phase,
    set_total_score,
    submit_phase,
)
from .certificates import CertificateUrls, certificate_url, certificate_urls_for
from .config import CoreSettings, ReviewLimits
from .deadlines import FixedClock, SystemClock, parse_deadline
from .eligibility import Allow, Deny, can_apply
from .identity import BearerTokenIdentityResolver
from .notifications import LoggingNotificationSink, NotificationDispatcher, NotificationEvent
from .phases import PhaseMatch, resolve_phase
from .ranking import FinalizeResult, compute_total_score, finalize, sort_for_results
from .service import HackathonApplicationService
from .types import (
    Application,
    ApplicationStatus,
    Failure,
    Hackathon,
    Identity,
    Phase,
    PhaseSubmission,
    Role,
    ShowcaseContent,
    SubmissionStatus,
    TeamMember,
)
from .validation import (
    ApplyRequest,
    CertificateConfig,
    InputSanitizer,
    RankUpdate,
    RejectRequest,
    ReuploadRequest,
    ReviewRequest,
    ShowcaseRequest,
    SubmissionRequest,
)

__all__ = [
    "Allow",
    "Application",
    "ApplicationStatus",
    "ApplyRequest",
    "BearerTokenIdentityResolver",
    "CertificateConfig",
    "CertificateUrls",
    "CoreSettings",
    "Deny",
    "Failure",
    "FinalizeResult",
    "FixedClock",
    "Hackathon",
    "HackathonApplicationService",
    "Identity",
    "InputSanitizer",
    "LoggingNotificationSink",
    "NotificationDispatcher",
    "NotificationEvent",
    "Phase",
    "PhaseMatch",
    "PhaseSubmission",
    "RankUpdate",
    "RejectRequest",
    "ReuploadRequest",
    "ReviewLimits",
    "ReviewRequest",
    "Role",
    "ShowcaseContent",
    "ShowcaseRequest",
    "SubmissionRequest",
    "SubmissionStatus",
    "SystemClock",
    "TeamMember",
    "TransitionOutcome",
    "assign_rank",
    "can_apply",
    "certificate_url",
    "certificate_urls_for",
    "compute_total_score",
    "create_application",
    "finalize",
    "parse_deadline",
    "publish_showcase",
    "reject",
    "request_reupload",
    "resolve_phase",
    "review_phase",
    "set_total_score",
    "sort_for_results",
    "submit_phase",
]
