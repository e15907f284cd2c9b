from __future__ import annotations

import logging
from typing import Optional

from reviewbot.app.config import Settings, get_settings
from reviewbot.app.cooldown import AsyncioScheduler, Scheduler
from reviewbot.app.editor import EditorBuffer
from reviewbot.app.feedback import Clipboard, FeedbackEffects, ShareTarget
from reviewbot.app.gateway import AnalysisGateway
from reviewbot.app.models import SessionState, VisitorIdentity
from reviewbot.app.notices import NoticeBoard
from reviewbot.app.schemas import NoticeView, ReportView, StateSnapshot
from reviewbot.app.session import Registrar, SessionController
from reviewbot.app.ux import audit_button_label, decide_ux_state, verdict_headline
from reviewbot.app.workflow import AnalysisService, WorkflowController

logger = logging.getLogger(__name__)


class ReviewBotService:
    """Wires the session gate, workflow, feedback effects and editor buffer."""

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        gateway: Optional[AnalysisGateway] = None,
        registrar: Optional[Registrar] = None,
        analysis: Optional[AnalysisService] = None,
        scheduler: Optional[Scheduler] = None,
        clipboard: Optional[Clipboard] = None,
        share_target: Optional[ShareTarget] = None,
        notices: Optional[NoticeBoard] = None,
    ) -> None:
        self.settings = settings or get_settings()
        if gateway is None and (registrar is None or analysis is None):
            gateway = AnalysisGateway(
                base_url=self.settings.api_base_url,
                timeout_seconds=self.settings.request_timeout_seconds,
                connect_timeout_seconds=self.settings.connect_timeout_seconds,
            )
        self._gateway = gateway
        scheduler = scheduler or AsyncioScheduler()

        self.notices = notices or NoticeBoard()
        self.editor = EditorBuffer()
        self.session = SessionController(registrar or gateway, notifier=self.notices)
        self.workflow = WorkflowController(
            analysis or gateway,
            self.session,
            scheduler=scheduler,
            notifier=self.notices,
            quota_cooldown_seconds=self.settings.quota_cooldown_seconds,
            surface_optimize_failures=self.settings.surface_optimize_failures,
        )
        self.feedback = FeedbackEffects(
            scheduler=scheduler,
            optimization_source=lambda: self.workflow.state.optimization,
            report_source=lambda: self.workflow.state.report,
            clipboard=clipboard,
            share_target=share_target,
            page_url=self.settings.page_url,
            notifier=self.notices,
            reset_seconds=self.settings.copy_feedback_seconds,
        )

    async def login(self, name: str, email: str) -> SessionState:
        return await self.session.submit_login(VisitorIdentity(name=name, email=email))

    def update_code(self, code: Optional[str]) -> None:
        self.editor.set(code)

    async def audit(self, code: Optional[str] = None) -> bool:
        if code is not None:
            self.editor.set(code)
        return await self.workflow.request_audit(self.editor.value)

    async def optimize(self, code: Optional[str] = None) -> bool:
        if code is not None:
            self.editor.set(code)
        return await self.workflow.request_optimize(self.editor.value)

    async def copy_optimized_code(self) -> bool:
        return await self.feedback.copy_optimized_code()

    async def share_report(self) -> bool:
        return await self.feedback.share_report()

    def snapshot(self) -> StateSnapshot:
        state = self.workflow.state
        report = state.report
        report_view = None
        if report is not None:
            report_view = ReportView(
                status=report.status.value,
                headline=verdict_headline(report) or "",
                complexity_estimate=report.complexity_estimate,
                hint=report.hint,
                issues=list(report.issues),
                synthetic=report.is_synthetic,
            )
        latest = self.notices.latest
        return StateSnapshot(
            session=state.session.value,
            ux_state=decide_ux_state(state).value,
            in_flight=state.in_flight.value,
            cooldown_active=state.cooldown.active,
            cooldown_remaining_seconds=state.cooldown.remaining_seconds,
            audit_button_label=audit_button_label(state),
            report=report_view,
            optimized_code=state.optimization.rewritten_code if state.optimization else None,
            copied=self.feedback.copied,
            last_notice=NoticeView(kind=latest.kind.value, message=latest.message) if latest else None,
        )

    async def aclose(self) -> None:
        self.workflow.reset_cooldown()
        if self._gateway is not None:
            await self._gateway.aclose()


__all__ = ["ReviewBotService"]
