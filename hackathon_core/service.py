"""Operation contracts of the hackathon application workflow.

HackathonApplicationService glues the pure pieces together for each request:

    identity → access check → load documents → eligibility / transition
    → persist → notify (best effort)

Every public method returns either its success payload or a Failure. Expected
business conditions are never raised. Unexpected collaborator errors (store
down, bugs) are logged and returned as an ``internal`` Failure; nothing after
the failing call is written.
"""
from __future__ import annotations

import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, TypeVar

from pydantic import BaseModel, ValidationError

from . import access
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
from .config import CoreSettings, get_settings
from .deadlines import SystemClock
from .eligibility import Deny, can_apply
from .notifications import LoggingNotificationSink, NotificationDispatcher, NotificationEvent
from .ports import (
    ApplicationStore,
    Clock,
    HackathonDirectory,
    IdentityResolver,
    NotificationSink,
)
from .ranking import FinalizeResult, finalize, sort_for_results
from .types import Application, Failure, Hackathon, Identity, failure
from .validation import (
    ApplyRequest,
    CertificateConfig,
    RankUpdate,
    RejectRequest,
    ReuploadRequest,
    ReviewRequest,
    ShowcaseRequest,
    SubmissionRequest,
    describe_validation_error,
    parse_request,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

M = TypeVar("M", bound=BaseModel)


def operation(name: str) -> Callable[[F], F]:
    """Turn unexpected exceptions inside an operation into an internal Failure."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except Exception:
                logger.exception(
                    "Unexpected error in %s",
                    name,
                    extra={"event": "operation.internal_error", "operation": name},
                )
                return failure("internal", f"Internal error while processing {name}.")

        return wrapper  # type: ignore[return-value]

    return decorator


def _parse(model: type[M], payload: Any) -> M | Failure:
    try:
        return parse_request(model, payload)  # type: ignore[return-value]
    except ValidationError as e:
        return failure("validation", describe_validation_error(e))


class HackathonApplicationService:
    """Workflow operations over injected collaborators.

    Without an explicit ``dispatcher`` the service owns a one-thread
    notification executor, so sinks never run on the request path; call
    close() to flush it. Pass ``NotificationDispatcher(sink)`` for inline
    delivery.
    """

    def __init__(
        self,
        applications: ApplicationStore,
        hackathons: HackathonDirectory,
        *,
        identity_resolver: IdentityResolver | None = None,
        notification_sink: NotificationSink | None = None,
        dispatcher: NotificationDispatcher | None = None,
        clock: Clock | None = None,
        settings: CoreSettings | None = None,
    ):
        self.applications = applications
        self.hackathons = hackathons
        self.identity_resolver = identity_resolver
        self.clock = clock or SystemClock()
        self.settings = settings or get_settings()
        if dispatcher is None:
            # One worker keeps events in commit order.
            dispatcher = NotificationDispatcher(
                notification_sink if notification_sink is not None else LoggingNotificationSink(),
                ThreadPoolExecutor(max_workers=1, thread_name_prefix="notifications"),
            )
        self.dispatcher = dispatcher

    def close(self) -> None:
        """Flush pending notifications and stop the dispatcher's worker."""
        self.dispatcher.shutdown()

    # ---------------------------------------------------------------- helpers

    @property
    def _strict(self) -> bool:
        return self.settings.strict_phase_resolution

    def _notify(self, name: str, application: Application, **data: Any) -> None:
        self.dispatcher.dispatch(
            NotificationEvent.for_application(name, application, self.clock.now(), **data)
        )

    def _load_application(self, application_id: str) -> Application | Failure:
        app = self.applications.get(application_id)
        if app is None:
            return failure("not_found", "Application not found.")
        return app

    def _load_hackathon(self, hackathon_id: str) -> Hackathon | Failure:
        hackathon = self.hackathons.get(hackathon_id)
        if hackathon is None:
            return failure("not_found", "Hackathon not found.")
        return hackathon

    def _load_owned(
        self, identity: Identity, application_id: str, op: str
    ) -> tuple[Application, Hackathon] | Failure:
        """Load an application and its hackathon, requiring the caller to own the hackathon."""
        app = self._load_application(application_id)
        if isinstance(app, Failure):
            return app
        hackathon = self._load_hackathon(app.hackathon_id)
        if isinstance(hackathon, Failure):
            return hackathon
        denied = access.require_hackathon_owner(identity, hackathon, op)
        if denied is not None:
            return denied
        return app, hackathon

    def _commit(self, outcome: TransitionOutcome, **data: Any) -> Application:
        # Hackathon first so a stored rank always implies results_published.
        if outcome.hackathon is not None:
            self.hackathons.save(outcome.hackathon)
        self.applications.save(outcome.application)
        self._notify(outcome.event, outcome.application, **data)
        return outcome.application

    # ---------------------------------------------------------------- identity

    def resolve_identity(self, authorization: str | None) -> Identity | None:
        if self.identity_resolver is None:
            return None
        try:
            return self.identity_resolver.resolve(authorization)
        except Exception:
            logger.exception(
                "Identity resolver failed", extra={"event": "identity.resolver_error"}
            )
            return None

    # ---------------------------------------------------------------- applicant

    @operation("apply")
    def apply(
        self, identity: Identity | None, hackathon_id: str, request: ApplyRequest | dict | None
    ) -> Application | Failure:
        denied = access.require_role(identity, "apply")
        if denied is not None:
            return denied
        req = _parse(ApplyRequest, request)
        if isinstance(req, Failure):
            return req
        hackathon = self._load_hackathon(hackathon_id)
        if isinstance(hackathon, Failure):
            return hackathon

        prior = self.applications.find_by_hackathon_and_applicant(hackathon.id, identity.id)
        decision = can_apply(hackathon, identity.id, prior, req, self.clock.now())
        if isinstance(decision, Deny):
            return failure("conflict", decision.reason)

        outcome = create_application(
            self.applications.new_id(), hackathon, identity.id, req, decision, self.clock.now()
        )
        return self._commit(outcome)

    @operation("get_my_applications")
    def get_my_applications(self, identity: Identity | None) -> List[Application] | Failure:
        denied = access.require_role(identity, "get_my_applications")
        if denied is not None:
            return denied
        return list(self.applications.find_by_applicant(identity.id))

    @operation("submit_phase")
    def submit_phase(
        self,
        identity: Identity | None,
        application_id: str,
        phase_id: str,
        request: SubmissionRequest | dict | None,
    ) -> Application | Failure:
        denied = access.require_role(identity, "submit_phase")
        if denied is not None:
            return denied
        req = _parse(SubmissionRequest, request)
        if isinstance(req, Failure):
            return req
        app = self._load_application(application_id)
        if isinstance(app, Failure):
            return app
        denied = access.require_applicant_owner(identity, app, "submit_phase")
        if denied is not None:
            return denied
        hackathon = self._load_hackathon(app.hackathon_id)
        if isinstance(hackathon, Failure):
            return hackathon

        outcome = submit_phase(
            app, hackathon, phase_id, req, self.clock.now(), strict=self._strict
        )
        if isinstance(outcome, Failure):
            return outcome
        return self._commit(outcome, phase_id=outcome.application.current_phase_id)

    # ---------------------------------------------------------------- industry review

    @operation("review_phase")
    def review_phase(
        self,
        identity: Identity | None,
        application_id: str,
        phase_id: str,
        request: ReviewRequest | dict | None,
    ) -> Application | Failure:
        denied = access.require_role(identity, "review_phase")
        if denied is not None:
            return denied
        req = _parse(ReviewRequest, request)
        if isinstance(req, Failure):
            return req
        loaded = self._load_owned(identity, application_id, "review_phase")
        if isinstance(loaded, Failure):
            return loaded
        app, hackathon = loaded

        outcome = review_phase(app, hackathon, phase_id, req, strict=self._strict)
        if isinstance(outcome, Failure):
            return outcome
        return self._commit(outcome, phase_id=phase_id, review_status=req.status.value)

    @operation("request_reupload")
    def request_reupload(
        self,
        identity: Identity | None,
        application_id: str,
        phase_id: str,
        request: ReuploadRequest | dict | None = None,
    ) -> Application | Failure:
        denied = access.require_role(identity, "request_reupload")
        if denied is not None:
            return denied
        req = _parse(ReuploadRequest, request)
        if isinstance(req, Failure):
            return req
        loaded = self._load_owned(identity, application_id, "request_reupload")
        if isinstance(loaded, Failure):
            return loaded
        app, hackathon = loaded

        outcome = request_reupload(app, hackathon, phase_id, req.message, strict=self._strict)
        if isinstance(outcome, Failure):
            return outcome
        return self._commit(outcome, phase_id=phase_id, message=req.message)

    @operation("reject")
    def reject(
        self,
        identity: Identity | None,
        application_id: str,
        request: RejectRequest | dict | None = None,
    ) -> Application | Failure:
        denied = access.require_role(identity, "reject")
        if denied is not None:
            return denied
        req = _parse(RejectRequest, request)
        if isinstance(req, Failure):
            return req
        loaded = self._load_owned(identity, application_id, "reject")
        if isinstance(loaded, Failure):
            return loaded
        app, _ = loaded
        return self._commit(reject(app, req.rejection_message))

    @operation("get_applications_by_hackathon")
    def get_applications_by_hackathon(
        self, identity: Identity | None, hackathon_id: str
    ) -> List[Application] | Failure:
        denied = access.require_role(identity, "get_applications_by_hackathon")
        if denied is not None:
            return denied
        hackathon = self._load_hackathon(hackathon_id)
        if isinstance(hackathon, Failure):
            return hackathon
        denied = access.require_hackathon_owner(
            identity, hackathon, "get_applications_by_hackathon"
        )
        if denied is not None:
            return denied
        return list(self.applications.find_by_hackathon(hackathon.id))

    @operation("get_application_details")
    def get_application_details(
        self, identity: Identity | None, application_id: str
    ) -> Application | Failure:
        denied = access.require_identity(identity, "get_application_details")
        if denied is not None:
            return denied
        app = self._load_application(application_id)
        if isinstance(app, Failure):
            return app
        hackathon = self.hackathons.get(app.hackathon_id)
        denied = access.require_viewer(identity, app, hackathon, "get_application_details")
        if denied is not None:
            return denied
        return app

    # ---------------------------------------------------------------- results

    @operation("finalize_results")
    def finalize_results(
        self,
        identity: Identity | None,
        hackathon_id: str,
        config: CertificateConfig | dict | None = None,
    ) -> FinalizeResult | Failure:
        """Recompute totals and certificate data for the whole hackathon.

        Applications are saved one by one; if the store fails part-way the
        earlier ones stay updated. Re-running converges because finalize is
        idempotent.
        """
        denied = access.require_role(identity, "finalize_results")
        if denied is not None:
            return denied
        cfg = _parse(CertificateConfig, config)
        if isinstance(cfg, Failure):
            return cfg
        hackathon = self._load_hackathon(hackathon_id)
        if isinstance(hackathon, Failure):
            return hackathon
        denied = access.require_hackathon_owner(identity, hackathon, "finalize_results")
        if denied is not None:
            return denied

        applications = list(self.applications.find_by_hackathon(hackathon.id))
        result = finalize(hackathon, applications, cfg, self.settings.certificate_base_url)
        for app in result.applications:
            self.applications.save(app)
        self.dispatcher.dispatch(
            NotificationEvent(
                name="results.finalized",
                application_id=None,
                hackathon_id=hackathon.id,
                applicant_id=None,
                occurred_at=self.clock.now(),
                data={"count": len(result.applications)},
            )
        )
        return result

    @operation("publish_showcase")
    def publish_showcase(
        self,
        identity: Identity | None,
        application_id: str,
        request: ShowcaseRequest | dict | None,
    ) -> Application | Failure:
        denied = access.require_role(identity, "publish_showcase")
        if denied is not None:
            return denied
        req = _parse(ShowcaseRequest, request)
        if isinstance(req, Failure):
            return req
        loaded = self._load_owned(identity, application_id, "publish_showcase")
        if isinstance(loaded, Failure):
            return loaded
        app, _ = loaded

        outcome = publish_showcase(app, req, self.clock.now())
        if isinstance(outcome, Failure):
            return outcome
        return self._commit(outcome)

    @operation("get_results")
    def get_results(self, identity: Identity | None, application_id: str) -> Application | Failure:
        denied = access.require_identity(identity, "get_results")
        if denied is not None:
            return denied
        app = self._load_application(application_id)
        if isinstance(app, Failure):
            return app
        hackathon = self.hackathons.get(app.hackathon_id)
        denied = access.require_viewer(identity, app, hackathon, "get_results")
        if denied is not None:
            return denied
        return app

    @operation("get_hackathon_results")
    def get_hackathon_results(
        self, identity: Identity | None, hackathon_id: str
    ) -> List[Application] | Failure:
        denied = access.require_role(identity, "get_hackathon_results")
        if denied is not None:
            return denied
        hackathon = self._load_hackathon(hackathon_id)
        if isinstance(hackathon, Failure):
            return hackathon
        denied = access.require_hackathon_owner(identity, hackathon, "get_hackathon_results")
        if denied is not None:
            return denied
        return sort_for_results(self.applications.find_by_hackathon(hackathon.id))

    @operation("update_rank")
    def update_rank(
        self,
        identity: Identity | None,
        application_id: str,
        request: RankUpdate | dict | None,
    ) -> Application | Failure:
        denied = access.require_role(identity, "update_rank")
        if denied is not None:
            return denied
        req = _parse(RankUpdate, request)
        if isinstance(req, Failure):
            return req
        loaded = self._load_owned(identity, application_id, "update_rank")
        if isinstance(loaded, Failure):
            return loaded
        app, hackathon = loaded

        # Rank and score land in a single save.
        data: dict[str, Any] = {}
        event: str | None = None
        updated_hackathon: Hackathon | None = None
        if req.has_rank:
            ranked = assign_rank(app, hackathon, req.final_rank)
            if isinstance(ranked, Failure):
                return ranked
            app, event, updated_hackathon = ranked.application, ranked.event, ranked.hackathon
            data["final_rank"] = req.final_rank
        if req.has_total_score:
            scored = set_total_score(app, req.total_score)
            app = scored.application
            event = event or scored.event
            data["total_score"] = app.total_score
        return self._commit(
            TransitionOutcome(application=app, event=event, hackathon=updated_hackathon), **data
        )

    @operation("delete_application")
    def delete_application(
        self, identity: Identity | None, application_id: str
    ) -> Application | Failure:
        denied = access.require_role(identity, "delete_application")
        if denied is not None:
            return denied
        loaded = self._load_owned(identity, application_id, "delete_application")
        if isinstance(loaded, Failure):
            return loaded
        app, _ = loaded
        self.applications.delete(app.id)
        logger.info(
            "Application %s deleted",
            app.id,
            extra={"event": "application.deleted", "application_id": app.id},
        )
        self._notify("application.deleted", app)
        return app
