from typing import List, Optional, Protocol

from models import CourseTemplate, RoundState


class StorageAdapter(Protocol):
    """What the app needs from a round/template store."""

    def load_round(self) -> Optional[RoundState]:
        ...

    def save_round(self, round_state: RoundState) -> None:
        ...

    def clear_round(self) -> None:
        ...

    def load_templates(self) -> List[CourseTemplate]:
        ...

    def save_template(self, template: CourseTemplate) -> None:
        ...

    def delete_template(self, template_id: str) -> None:
        ...
