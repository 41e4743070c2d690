"""Bridge page-visibility and connectivity signals to the scheduler.

The UI layer forwards platform events here; the controller pauses the
traversal while the page is hidden or the network is offline and resumes it
once neither condition holds any more.
"""

import logging

from .core.scheduler import TraversalScheduler

logger = logging.getLogger(__name__)

VISIBLE = "visible"
HIDDEN = "hidden"


class LifecycleController:
    """Pause/resume the scheduler in response to platform signals.

    The controller only mirrors the two platform conditions (hidden,
    offline). Whether a traversal is running, paused or idle is owned by
    the scheduler. A signal only resumes a pause that an earlier signal
    caused. Repeating a signal without a change in between is a no-op.
    """

    def __init__(self, scheduler: TraversalScheduler):
        self._scheduler = scheduler
        self._hidden = False
        self._offline = False
        self._paused_by_signal = False

    @property
    def suspended(self) -> bool:
        """True while any suspending condition is asserted."""
        return self._hidden or self._offline

    def on_visibility_change(self, state: str) -> None:
        """Handle a visibility change (``"hidden"`` or ``"visible"``).

        Raises:
            ValueError: For any other state string
        """
        if state == HIDDEN:
            self.set_visible(False)
        elif state == VISIBLE:
            self.set_visible(True)
        else:
            raise ValueError(f"Unknown visibility state: {state!r}")

    def on_online(self) -> None:
        self.set_online(True)

    def on_offline(self) -> None:
        self.set_online(False)

    def set_visible(self, visible: bool) -> None:
        if self._hidden == (not visible):
            return
        self._hidden = not visible
        self._apply("page hidden" if self._hidden else "page visible")

    def set_online(self, online: bool) -> None:
        if self._offline == (not online):
            return
        self._offline = not online
        self._apply("offline" if self._offline else "online")

    def _apply(self, reason: str) -> None:
        if self.suspended:
            if not self._scheduler.paused:
                logger.debug("Suspending background caching: %s", reason)
                self._scheduler.pause()
                self._paused_by_signal = True
        elif self._paused_by_signal:
            # Only lift a pause this controller made; manual pauses hold
            logger.debug("Lifting suspension: %s", reason)
            self._paused_by_signal = False
            self._scheduler.resume()
