from app.core.enums import TaskStatus

_RANK = {s.value: i for i, s in enumerate(TaskStatus)}


class InvalidStatusTransition(ValueError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move task from '{current}' to '{target}'")
        self.current = current
        self.target = target


def can_transition(current: str, target: str) -> bool:
    # forward moves only; skipping ahead is fine, nothing leaves "graded"
    return _RANK[target] > _RANK[current]


def ensure_transition(current: str, target: str) -> str:
    if not can_transition(current, target):
        raise InvalidStatusTransition(current, target)
    return target
