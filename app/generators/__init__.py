from app.generators.player_generator import PlayerGenerator
from app.generators.team_generator import TeamGenerator

__all__ = ["PlayerGenerator", "TeamGenerator"]
