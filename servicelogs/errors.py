"""Exceptions raised by the service log store."""


class NotFoundError(LookupError):
    """A log or draft id is no longer present in the state."""

    def __init__(self, kind: str, item_id: str):
        super().__init__(f"{kind} '{item_id}' not found")
        self.kind = kind
        self.item_id = item_id
