# app/game/errors.py
from __future__ import annotations


class UpgradeError(Exception):
    """
    Base class for client-visible failures raised by the game layer.

    status_code maps 1:1 to the HTTP response, `error` is the public message.
    """

    status_code: int = 400

    def __init__(self, error: str, **detail: object) -> None:
        super().__init__(error)
        self.error = error
        self._detail = detail

    def detail(self) -> dict:
        return dict(self._detail)


class NotFound(UpgradeError):
    status_code = 404

    def __init__(self, entity: str, **detail: object) -> None:
        super().__init__(f"{entity[:1].upper()}{entity[1:]} not found.", entity=entity, **detail)
        self.entity = entity


class CapacityExceeded(UpgradeError):
    status_code = 409

    def __init__(self, capacity: int, in_progress: int) -> None:
        super().__init__("All builders are busy.", builders_count=capacity, in_progress=in_progress)
        self.capacity = capacity
        self.in_progress = in_progress


class InsufficientResources(UpgradeError):
    status_code = 409

    def __init__(self, resource: str, need: int, have: int) -> None:
        super().__init__(f"Not enough {resource}.", resource=resource, need=need, have=have)
        self.resource = resource
        self.need = need
        self.have = have


class InstanceBusy(UpgradeError):
    status_code = 409

    def __init__(self, instance_name: str) -> None:
        super().__init__("Upgrade already in progress.", instance_name=instance_name)
        self.instance_name = instance_name


class InvalidUpgrade(UpgradeError):
    status_code = 400


class StorageError(UpgradeError):
    status_code = 500

    def __init__(self, operation: str) -> None:
        super().__init__("Internal server error.")
        self.operation = operation
