import logging
from collections.abc import Callable

from cold_case_mcp.content.case_99_042 import BOOT_SEQUENCE, build_case_archive
from cold_case_mcp.models.archive import DirectoryNode
from cold_case_mcp.models.session import SessionState

logger = logging.getLogger(__name__)


def create_session(archive: DirectoryNode | None = None) -> SessionState:
    """Starts a fresh guest session with the boot banner in its transcript."""
    session = SessionState(archive=archive if archive is not None else build_case_archive())
    for kind, content in BOOT_SEQUENCE:
        session.log(kind, content)
    return session


class SessionManager:
    """Owns the single guest session of this process."""

    def __init__(self, archive_factory: Callable[[], DirectoryNode] = build_case_archive) -> None:
        self._archive_factory = archive_factory
        self._session: SessionState | None = None

    def get_session(self) -> SessionState:
        """Returns the current session, creating it on first use."""
        if self._session is None:
            self._session = create_session(self._archive_factory())
        return self._session

    def reset(self) -> SessionState:
        """Discards the current session and starts over with a freshly built archive."""
        logger.info("Resetting guest session")
        self._session = create_session(self._archive_factory())
        return self._session
