"""
Observational notices emitted during source selection.

A notice reports a non-fatal condition (loading from the local directory,
or falling back to the MEPS website). Notices travel through a ``notify``
callable and never influence control flow or the returned table.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from meps.logging_config import get_logger

log = get_logger(__name__)


class NoticeKind(str, Enum):
    """Severity of a notice."""
    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    message: str
    identifier: str

    @property
    def is_warning(self):
        return self.kind == NoticeKind.WARNING


def log_notice(notice: Notice) -> None:
    """Default notify callable: route notices to the package logger."""
    extra = {"identifier": notice.identifier}
    if notice.kind == NoticeKind.WARNING:
        log.warning(notice.message, extra=extra)
    else:
        log.info(notice.message, extra=extra)


@dataclass
class NoticeCollector:
    """Notify callable that records notices, optionally forwarding them.

    Usage::

        collector = NoticeCollector()
        read_meps("h171", directory="mydata", notify=collector)
        collector.warnings
    """

    forward: Optional[Callable[[Notice], None]] = None
    notices: list = field(default_factory=list)

    def __call__(self, notice: Notice) -> None:
        self.notices.append(notice)
        if self.forward is not None:
            self.forward(notice)

    @property
    def warnings(self):
        return [n for n in self.notices if n.kind == NoticeKind.WARNING]

    @property
    def infos(self):
        return [n for n in self.notices if n.kind == NoticeKind.INFO]
