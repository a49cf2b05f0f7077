from typing import Optional

# -----------------------------
# Errors
# -----------------------------

class RouteFinderError(Exception):
    """Base class for every error raised by the route finder."""


class UnknownNodeError(RouteFinderError, KeyError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown location: {name!r}")

    # KeyError quotes its argument; keep the plain message
    def __str__(self) -> str:
        return self.args[0]


class DuplicateNodeError(RouteFinderError, ValueError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Location {name!r} already exists")


class InvalidWeightError(RouteFinderError, ValueError):
    def __init__(self, weight, from_name: Optional[str] = None, to_name: Optional[str] = None):
        self.weight = weight
        if from_name is not None and to_name is not None:
            msg = f"Invalid distance {weight!r} for route {from_name} - {to_name}: must be a non-negative integer"
        else:
            msg = f"Invalid distance {weight!r}: must be a non-negative integer"
        super().__init__(msg)


class BlankNameError(RouteFinderError, ValueError):
    def __init__(self):
        super().__init__("Please enter both start and end locations.")


class RouteConsistencyError(RouteFinderError, RuntimeError):
    def __init__(self, from_name: str, to_name: str):
        self.from_name = from_name
        self.to_name = to_name
        super().__init__(f"No route connects consecutive path locations {from_name} and {to_name}")
