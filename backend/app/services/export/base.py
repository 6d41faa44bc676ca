from __future__ import annotations

import abc

from app.models.feedback import FeedbackLog


class ExporterBase(abc.ABC):
    @property
    @abc.abstractmethod
    def format_name(self) -> str: ...

    @property
    @abc.abstractmethod
    def content_type(self) -> str: ...

    @property
    def file_extension(self) -> str:
        return self.format_name

    @abc.abstractmethod
    def export(self, log: FeedbackLog) -> str:
        """Render the feedback log, in append order, to the target format."""
