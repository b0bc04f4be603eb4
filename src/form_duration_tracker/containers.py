"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from supabase import create_client

from form_duration_tracker.adapters.memory_session_store import (
    InMemorySessionRegistry,
)
from form_duration_tracker.adapters.memory_submission_repository import (
    InMemorySubmissionRepository,
)
from form_duration_tracker.adapters.supabase_submission_repository import (
    SupabaseSubmissionRepository,
)
from form_duration_tracker.config import Settings, check_time_consistency
from form_duration_tracker.services.duration_policy import DurationPolicy
from form_duration_tracker.services.lifecycle import (
    ActionHooks,
    FormDurationTracker,
    track_form_duration,
)
from form_duration_tracker.services.session_timer import utc_now
from form_duration_tracker.services.submissions import (
    SubmissionRepository,
    SubmissionService,
)
from form_duration_tracker.services.validation import ValidationHooks


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_registry: InMemorySessionRegistry
    action_hooks: ActionHooks
    tracker: FormDurationTracker
    duration_policy: DurationPolicy
    submission_service: SubmissionService


def build_container(
    settings: Settings | None = None,
    *,
    repository: SubmissionRepository | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    if repository is None:
        repository = _build_repository(resolved_settings)

    action_hooks = ActionHooks()
    tracker = track_form_duration(
        resolved_settings.attribute,
        hooks=action_hooks,
        expirable=resolved_settings.expirable,
        expiry_time=resolved_settings.expiry_time,
        on=resolved_settings.on_actions,
        auto_params=resolved_settings.auto_params,
        param_key=resolved_settings.param_key,
        auto_cleanup=resolved_settings.auto_cleanup,
        clock=clock,
    )
    policy = DurationPolicy(
        attribute=resolved_settings.attribute,
        config=resolved_settings.policy_config(),
    )
    check_time_consistency(tracker.session_config(), policy.config)

    validation_hooks = ValidationHooks(clock=clock)
    policy.attach(validation_hooks)

    return AppContainer(
        settings=resolved_settings,
        session_registry=InMemorySessionRegistry(
            ttl=resolved_settings.session_ttl, clock=clock
        ),
        action_hooks=action_hooks,
        tracker=tracker,
        duration_policy=policy,
        submission_service=SubmissionService(repository, validation_hooks),
    )


def _build_repository(settings: Settings) -> SubmissionRepository:
    if settings.supabase_url and settings.supabase_service_key:
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseSubmissionRepository(client)
    return InMemorySubmissionRepository()
