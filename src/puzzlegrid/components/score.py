from dataclasses import dataclass

@dataclass(slots=True)
class ScoreState:
    score: int = 0
    moves_left: int = 0
    game_over: bool = False
