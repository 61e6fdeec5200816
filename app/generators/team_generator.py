"""
Team Generator - Creates the default league franchises
"""
from app.models.team import Team
from app.database import get_session


DEFAULT_TEAMS = [
    {"name": "Royal Strikers", "owner": "Arjun Mehta", "mentor": "Suresh Rao", "icon_player": "Vikram Iyer"},
    {"name": "Thunder Kings", "owner": "Priya Nair", "mentor": "Rahul Desai", "icon_player": "Karan Shah"},
    {"name": "Coastal Warriors", "owner": "Nikhil Kamath", "mentor": "Anil Kumble", "icon_player": "Rohan Pai"},
    {"name": "Hill Titans", "owner": "Meera Joshi", "mentor": "Sandeep Patil", "icon_player": "Aditya Hegde"},
    {"name": "Valley Chargers", "owner": "Farhan Ali", "mentor": "Ravi Shastri", "icon_player": "Imran Sheikh"},
    {"name": "Desert Hawks", "owner": "Kavya Reddy", "mentor": "Venkatesh Prasad", "icon_player": "Manish Gowda"},
]


class TeamGenerator:
    """Generates the default franchise teams"""

    @classmethod
    def create_teams(cls, purse: int) -> list[Team]:
        """
        Create the default teams, each starting with the same purse.

        Returns:
            List of Team objects (not yet saved to DB)
        """
        return [
            Team(
                name=data["name"],
                owner=data["owner"],
                mentor=data["mentor"],
                icon_player=data["icon_player"],
                purse=purse,
            )
            for data in DEFAULT_TEAMS
        ]

    @classmethod
    def save_teams_to_db(cls, teams: list[Team]) -> list[Team]:
        """Save teams whose names are not taken yet; returns the ones added"""
        session = get_session()
        try:
            existing = {name for (name,) in session.query(Team.name).all()}
            added = [t for t in teams if t.name not in existing]
            session.add_all(added)
            session.commit()
            for team in added:
                session.refresh(team)
            session.expunge_all()
            return added
        finally:
            session.close()
