from dataclasses import dataclass

@dataclass(slots=True)
class Board:
    width: int
    height: int
